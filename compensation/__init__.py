"""
MLM Compensation Engine.

Standalone package for commission, bonus, rank and spillover
calculations.

Example:
    >>> from compensation import CompensationEngine, DEFAULT_CONFIG
    >>> from decimal import Decimal
    >>>
    >>> engine = CompensationEngine(DEFAULT_CONFIG)
    >>> engine.calculate_direct_commission(Decimal("500"))
    Decimal('100.00')
    >>> engine.determine_rank(personal_pv=300, group_pv=12000, direct_referrals=6)
    'gold'
"""

from compensation.constants import (
    BINARY_PLAN_WIDTH,
    DEFAULT_CONFIG,
    DEFAULT_RANK_REQUIREMENTS,
    get_rank_by_name,
    get_rank_ladder,
)
from compensation.core.engine import CompensationEngine
from compensation.core.models import (
    STARTER_RANK,
    CommissionBreakdown,
    CommissionLine,
    CommissionType,
    CompensationConfig,
    DownlineStats,
    NetworkNode,
    RankProgress,
    RankRequirement,
    SpilloverResult,
    TopPerformer,
)
from compensation.core.network import (
    apply_spillover,
    compress_levels,
    place_spillover,
    summarize_downline,
)
from compensation.exceptions import (
    CompensationError,
    ConfigurationError,
    InvalidAmountError,
)
from compensation.utils import (
    format_commission_breakdown,
    format_currency,
    format_downline_stats,
    format_percentage,
    format_rank_progress,
)


__version__ = "1.0.0"
__all__ = [
    # Core
    "CompensationEngine",
    # Models
    "CompensationConfig",
    "RankRequirement",
    "NetworkNode",
    "CommissionType",
    "CommissionLine",
    "CommissionBreakdown",
    "RankProgress",
    "SpilloverResult",
    "DownlineStats",
    "TopPerformer",
    # Tree operations
    "compress_levels",
    "apply_spillover",
    "place_spillover",
    "summarize_downline",
    # Constants
    "STARTER_RANK",
    "BINARY_PLAN_WIDTH",
    "DEFAULT_CONFIG",
    "DEFAULT_RANK_REQUIREMENTS",
    "get_rank_by_name",
    "get_rank_ladder",
    # Errors
    "CompensationError",
    "ConfigurationError",
    "InvalidAmountError",
    # Formatters
    "format_currency",
    "format_percentage",
    "format_commission_breakdown",
    "format_rank_progress",
    "format_downline_stats",
]
