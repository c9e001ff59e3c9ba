"""
Pure business logic engine for MLM compensation.

This module contains standalone calculation logic without any
dependencies on database, ORM, or app-specific code. Monetary results
are Decimals rounded half up to 2 decimal places; PV values are never
rounded.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from loguru import logger

from compensation.core import network
from compensation.core.models import (
    STARTER_RANK,
    CommissionBreakdown,
    CommissionLine,
    CommissionType,
    CompensationConfig,
    NetworkNode,
    RankProgress,
    SpilloverResult,
)
from compensation.core.money import Numeric, quantize_money, to_decimal
from compensation.exceptions import InvalidAmountError


if TYPE_CHECKING:
    from compensation.core.models import DownlineStats
    from compensation.core.network import LevelT
    from compensation.settings import CompensationSettings


_HUNDRED = Decimal("100")


def _progress(current: Decimal, target: Decimal) -> Decimal:
    if target <= 0:
        return _HUNDRED
    return quantize_money(min(current / target * _HUNDRED, _HUNDRED))


class CompensationEngine:
    """
    Calculator for commissions, bonuses, ranks and tree placement.

    Holds no state besides the injected, immutable configuration, so a
    single instance can be shared between callers. Spillover mutates
    the tree it is given; concurrent spillovers on the same tree must
    be serialized by the caller.
    """

    def __init__(self, config: CompensationConfig) -> None:
        """Initialize engine with a validated plan configuration."""
        self.config = config
        logger.info(
            "Compensation engine initialized",
            extra={
                "levels": config.level_count,
                "ranks": config.rank_names,
            },
        )

    @classmethod
    def from_settings(
        cls, settings: "CompensationSettings | None" = None
    ) -> "CompensationEngine":
        """
        Build an engine from environment-backed settings.

        Args:
            settings: Settings instance (loaded from environment if omitted)

        Returns:
            CompensationEngine

        Raises:
            ConfigurationError: If the configured plan is invalid
        """
        from compensation.settings import get_settings

        if settings is None:
            settings = get_settings()
        return cls(settings.to_config())

    # === Commissions ===

    def calculate_direct_commission(self, order_amount: Numeric) -> Decimal:
        """
        Calculate commission for the distributor who referred the buyer.

        Formula: order_amount * direct_commission_rate

        Args:
            order_amount: Order value in base currency units

        Returns:
            Commission rounded to 2 decimal places

        Raises:
            InvalidAmountError: If order_amount is negative or not finite

        Example:
            >>> engine = CompensationEngine(DEFAULT_CONFIG)
            >>> engine.calculate_direct_commission(Decimal("1000.00"))
            Decimal('200.00')
        """
        amount = to_decimal("order_amount", order_amount)
        commission = quantize_money(amount * self.config.direct_commission_rate)

        logger.debug(
            "Direct commission calculated",
            extra={"order_amount": str(amount), "commission": str(commission)},
        )
        return commission

    def calculate_level_commission(self, order_amount: Numeric, level: int) -> Decimal:
        """
        Calculate commission for the upline at depth `level`.

        Levels outside 1..level_count pay nothing: commissions stop at
        the configured depth instead of failing.

        Args:
            order_amount: Order value in base currency units
            level: 1-based upline depth

        Returns:
            Commission rounded to 2 decimal places, 0.00 beyond the plan depth

        Raises:
            InvalidAmountError: If order_amount is negative or not finite
        """
        amount = to_decimal("order_amount", order_amount)

        if level <= 0 or level > self.config.level_count:
            return quantize_money(Decimal("0"))

        rate = self.config.level_commission_rates[level - 1]
        commission = quantize_money(amount * rate)

        logger.debug(
            "Level commission calculated",
            extra={"order_amount": str(amount), "level": level, "commission": str(commission)},
        )
        return commission

    def calculate_matching_bonus(self, downline_commission: Numeric) -> Decimal:
        """
        Calculate an upline's matching bonus on a downline's commission.

        The caller walks the tree and calls this once per qualifying
        downline commission.

        Args:
            downline_commission: Commission already earned by the downline

        Returns:
            Bonus rounded to 2 decimal places
        """
        amount = to_decimal("downline_commission", downline_commission)
        return quantize_money(amount * self.config.matching_bonus_rate)

    def calculate_leadership_bonus(self, group_volume: Numeric) -> Decimal:
        """
        Calculate leadership bonus on a leader's whole group volume.

        Args:
            group_volume: Aggregated sales volume of the leader's downline

        Returns:
            Bonus rounded to 2 decimal places
        """
        volume = to_decimal("group_volume", group_volume)
        return quantize_money(volume * self.config.leadership_bonus_rate)

    def calculate_order_commissions(
        self, order_amount: Numeric, upline_depth: int
    ) -> CommissionBreakdown:
        """
        Calculate every commission generated by one order.

        Produces the direct commission plus one level commission per
        upline member, up to the shorter of `upline_depth` and the
        configured number of levels.

        Args:
            order_amount: Order value in base currency units
            upline_depth: Number of upline members above the buyer's sponsor

        Returns:
            CommissionBreakdown

        Raises:
            InvalidAmountError: If order_amount is negative or not finite
            ValueError: If upline_depth is negative
        """
        if upline_depth < 0:
            raise ValueError(f"upline_depth must be >= 0, got {upline_depth}")

        amount = to_decimal("order_amount", order_amount)
        lines = [
            CommissionLine(
                type=CommissionType.DIRECT,
                amount=self.calculate_direct_commission(amount),
            )
        ]
        for level in range(1, min(upline_depth, self.config.level_count) + 1):
            lines.append(
                CommissionLine(
                    type=CommissionType.LEVEL,
                    amount=self.calculate_level_commission(amount, level),
                    level=level,
                )
            )

        return CommissionBreakdown(order_amount=amount, lines=tuple(lines))

    # === Ranks ===

    def _rank_inputs(
        self, personal_pv: Numeric, group_pv: Numeric, direct_referrals: int
    ) -> tuple[Decimal, Decimal, int]:
        if isinstance(direct_referrals, bool) or not isinstance(direct_referrals, int):
            raise InvalidAmountError(
                "direct_referrals", direct_referrals, "Referral count must be an integer"
            )
        if direct_referrals < 0:
            raise InvalidAmountError(
                "direct_referrals", direct_referrals, "Referral count must be >= 0"
            )
        return (
            to_decimal("personal_pv", personal_pv),
            to_decimal("group_pv", group_pv),
            direct_referrals,
        )

    def determine_rank(
        self, personal_pv: Numeric, group_pv: Numeric, direct_referrals: int
    ) -> str:
        """
        Determine the highest rank a member qualifies for.

        Ranks are checked from the last configured (hardest) to the first
        (easiest); the first one whose thresholds are all met wins. The
        configuration order is trusted as is.

        Args:
            personal_pv: Member's own PV
            group_pv: PV of the member's whole downline
            direct_referrals: Number of personally sponsored members

        Returns:
            Rank name, or "starter" when no rank is reached

        Example:
            >>> engine = CompensationEngine(DEFAULT_CONFIG)
            >>> engine.determine_rank(300, 12000, 6)
            'gold'
            >>> engine.determine_rank(0, 0, 0)
            'starter'
        """
        personal, group, referrals = self._rank_inputs(personal_pv, group_pv, direct_referrals)

        for requirement in reversed(self.config.rank_requirements):
            if requirement.is_met_by(personal, group, referrals):
                return requirement.name

        return STARTER_RANK

    def calculate_rank_progress(
        self, personal_pv: Numeric, group_pv: Numeric, direct_referrals: int
    ) -> RankProgress:
        """
        Calculate progress from the current rank towards the next one.

        Each metric's progress is min(current / target * 100, 100); the
        overall progress is the lowest of the three, since all thresholds
        must be met. At the top rank everything is 100.

        Args:
            personal_pv: Member's own PV
            group_pv: PV of the member's whole downline
            direct_referrals: Number of personally sponsored members

        Returns:
            RankProgress
        """
        personal, group, referrals = self._rank_inputs(personal_pv, group_pv, direct_referrals)
        current_rank = self.determine_rank(personal, group, referrals)
        target = self.config.next_rank(current_rank)

        if target is None:
            return RankProgress(
                current_rank=current_rank,
                next_rank=None,
                personal_pv_progress=_HUNDRED,
                group_pv_progress=_HUNDRED,
                direct_referrals_progress=_HUNDRED,
                progress=_HUNDRED,
                required_group_pv=None,
                current_group_pv=group,
            )

        personal_progress = _progress(personal, target.personal_pv)
        group_progress = _progress(group, target.group_pv)
        referrals_progress = _progress(Decimal(referrals), Decimal(target.direct_referrals))

        return RankProgress(
            current_rank=current_rank,
            next_rank=target.name,
            personal_pv_progress=personal_progress,
            group_pv_progress=group_progress,
            direct_referrals_progress=referrals_progress,
            progress=min(personal_progress, group_progress, referrals_progress),
            required_group_pv=target.group_pv,
            current_group_pv=group,
        )

    # === Network ===

    def compress_levels(self, levels: Iterable["LevelT"]) -> list["LevelT"]:
        """Drop inactive levels without active downline, keeping order."""
        return network.compress_levels(levels)

    def apply_spillover(
        self, node: NetworkNode, max_width: int, max_depth: int | None = None
    ) -> NetworkNode:
        """
        Spill children beyond `max_width` into free slots, breadth first.

        Mutates the tree in place and returns the same root. Nodes that
        find no free slot are dropped with a warning.
        """
        return network.apply_spillover(node, max_width, max_depth)

    def place_spillover(
        self, node: NetworkNode, max_width: int, max_depth: int | None = None
    ) -> SpilloverResult:
        """Same as apply_spillover, but return placements and unplaced nodes."""
        return network.place_spillover(node, max_width, max_depth)

    def summarize_downline(self, root: NetworkNode) -> "DownlineStats":
        """Aggregate member, activity and sales figures below `root`."""
        return network.summarize_downline(root)
