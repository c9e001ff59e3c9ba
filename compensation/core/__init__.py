"""
Core compensation functionality.

Contains the compensation engine, tree operations and data models.
"""

from compensation.core.engine import CompensationEngine
from compensation.core.models import (
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

__all__ = [
    "CompensationEngine",
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
]
