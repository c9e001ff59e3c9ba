"""
Default constants for the compensation engine.

Contains the default plan: direct and level commission rates,
bonus rates and the rank ladder.
"""

from decimal import Decimal

from compensation.core.models import (
    STARTER_RANK,
    CompensationConfig,
    RankRequirement,
)


# Binary plan: two legs per member
BINARY_PLAN_WIDTH = 2

DEFAULT_DIRECT_COMMISSION_RATE = Decimal("0.20")

# Level 1-5 commissions
DEFAULT_LEVEL_COMMISSION_RATES: tuple[Decimal, ...] = (
    Decimal("0.10"),
    Decimal("0.07"),
    Decimal("0.05"),
    Decimal("0.03"),
    Decimal("0.02"),
)

DEFAULT_MATCHING_BONUS_RATE = Decimal("0.10")
DEFAULT_LEADERSHIP_BONUS_RATE = Decimal("0.02")

# Ascending by difficulty; evaluation walks this from the end
DEFAULT_RANK_REQUIREMENTS: tuple[RankRequirement, ...] = (
    RankRequirement(
        name="bronze",
        personal_pv=Decimal("100"),
        group_pv=Decimal("1000"),
        direct_referrals=2,
    ),
    RankRequirement(
        name="silver",
        personal_pv=Decimal("200"),
        group_pv=Decimal("5000"),
        direct_referrals=4,
    ),
    RankRequirement(
        name="gold",
        personal_pv=Decimal("300"),
        group_pv=Decimal("10000"),
        direct_referrals=6,
    ),
    RankRequirement(
        name="platinum",
        personal_pv=Decimal("500"),
        group_pv=Decimal("25000"),
        direct_referrals=8,
    ),
    RankRequirement(
        name="diamond",
        personal_pv=Decimal("1000"),
        group_pv=Decimal("50000"),
        direct_referrals=10,
    ),
)

DEFAULT_CONFIG = CompensationConfig(
    direct_commission_rate=DEFAULT_DIRECT_COMMISSION_RATE,
    level_commission_rates=DEFAULT_LEVEL_COMMISSION_RATES,
    matching_bonus_rate=DEFAULT_MATCHING_BONUS_RATE,
    leadership_bonus_rate=DEFAULT_LEADERSHIP_BONUS_RATE,
    rank_requirements=DEFAULT_RANK_REQUIREMENTS,
)


def get_rank_by_name(name: str) -> RankRequirement | None:
    """
    Get default rank requirement by name.

    Args:
        name: Rank name, e.g. "gold"

    Returns:
        RankRequirement or None if not found

    Example:
        >>> get_rank_by_name("gold").group_pv
        Decimal('10000')
    """
    return DEFAULT_CONFIG.get_rank(name)


def get_rank_ladder() -> list[str]:
    """
    Get all rank names, starter first, from easiest to hardest.

    Returns:
        List of rank names
    """
    return [STARTER_RANK, *DEFAULT_CONFIG.rank_names]
