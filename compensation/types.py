"""
Type definitions for the compensation package.

Structural types for caller-supplied inputs.
"""

from typing import Protocol

from typing_extensions import TypedDict


class LevelDescriptor(Protocol):
    """
    Anything compression can filter.

    Attributes:
        is_active: Member currently counts toward commissions
        has_active_downline: At least one descendant is active
    """
    is_active: bool
    has_active_downline: bool


class RankRequirementDict(TypedDict, total=False):
    """
    Rank thresholds as read from settings or JSON.

    Attributes:
        personalPV: Minimum personal PV
        groupPV: Minimum group PV
        directReferrals: Minimum direct referrals
    """
    personalPV: float | int | str
    groupPV: float | int | str
    directReferrals: int
