"""
Unit tests for rank determination and rank progress.

Tests cover:
- Highest qualifying rank wins
- Starter default
- Monotonicity with an ascending rank ladder
- Configuration order is trusted, not re-sorted
- Progress towards the next rank
"""

from decimal import Decimal

import pytest

from compensation import (
    STARTER_RANK,
    CompensationConfig,
    CompensationEngine,
    InvalidAmountError,
    RankProgress,
    get_rank_ladder,
)


class TestDetermineRank:
    """Tests for determine_rank."""

    def test_no_volume_is_starter(self, engine: CompensationEngine) -> None:
        """Test a member without volume holds the starter rank."""
        assert engine.determine_rank(0, 0, 0) == STARTER_RANK == "starter"

    def test_exact_thresholds_qualify(self, engine: CompensationEngine) -> None:
        """Test thresholds are inclusive."""
        assert engine.determine_rank(Decimal("100"), Decimal("1000"), 2) == "bronze"
        assert engine.determine_rank(Decimal("300"), Decimal("10000"), 6) == "gold"
        assert engine.determine_rank(Decimal("1000"), Decimal("50000"), 10) == "diamond"

    def test_highest_rank_wins(self, engine: CompensationEngine) -> None:
        """Test a member meeting several ranks gets the highest."""
        assert engine.determine_rank(5000, 1_000_000, 50) == "diamond"

    def test_all_thresholds_required(self, engine: CompensationEngine) -> None:
        """Test one missing metric holds the member back."""
        # Gold volume, silver-level referrals
        assert engine.determine_rank(300, 10000, 5) == "silver"
        # Everything but referrals for bronze
        assert engine.determine_rank(150, 6000, 1) == STARTER_RANK

    def test_just_below_threshold(self, engine: CompensationEngine) -> None:
        """Test fractional PV just under a threshold does not qualify."""
        assert engine.determine_rank(Decimal("99.99"), Decimal("1000"), 2) == STARTER_RANK

    def test_monotonic_in_each_metric(self, engine: CompensationEngine) -> None:
        """Test raising one metric never lowers the rank."""
        ladder = get_rank_ladder()
        base = {"personal_pv": 300, "group_pv": 10000, "direct_referrals": 6}
        steps = {
            "personal_pv": [300, 400, 500, 800, 1000, 5000],
            "group_pv": [10000, 20000, 25000, 50000, 90000],
            "direct_referrals": [6, 7, 8, 10, 20],
        }

        for metric, values in steps.items():
            previous = -1
            for value in values:
                kwargs = {**base, metric: value}
                position = ladder.index(engine.determine_rank(**kwargs))
                assert position >= previous
                previous = position

    def test_rank_order_is_trusted(self, captured_logs) -> None:
        """Test a descending ladder is kept as is, with a warning."""
        config = CompensationConfig(
            rank_requirements={
                "leader": {"personalPV": 1000, "groupPV": 50000, "directReferrals": 10},
                "member": {"personalPV": 10, "groupPV": 10, "directReferrals": 1},
            }
        )
        engine = CompensationEngine(config)

        # "member" is last, so it is checked first
        assert engine.determine_rank(5000, 100000, 20) == "member"
        assert any(
            record["level"].name == "WARNING"
            and record["message"] == "Rank requirements are not ascending"
            for record in captured_logs
        )

    def test_zero_threshold_rank_replaces_starter(self) -> None:
        """Test a rank without requirements is held by everyone."""
        config = CompensationConfig(rank_requirements={"member": {}})
        engine = CompensationEngine(config)

        assert engine.determine_rank(0, 0, 0) == "member"

    def test_negative_pv_rejected(self, engine: CompensationEngine) -> None:
        """Test negative PV is rejected."""
        with pytest.raises(InvalidAmountError) as exc_info:
            engine.determine_rank(-1, 0, 0)
        assert exc_info.value.field == "personal_pv"

    def test_negative_referrals_rejected(self, engine: CompensationEngine) -> None:
        """Test negative referral count is rejected."""
        with pytest.raises(InvalidAmountError) as exc_info:
            engine.determine_rank(0, 0, -1)
        assert exc_info.value.field == "direct_referrals"

    @pytest.mark.parametrize("referrals", ["3", 1.5, Decimal("2"), None, True])
    def test_non_integer_referrals_rejected(self, engine: CompensationEngine, referrals) -> None:
        """Test referral count must be a plain integer."""
        with pytest.raises(InvalidAmountError) as exc_info:
            engine.determine_rank(0, 0, referrals)
        assert exc_info.value.field == "direct_referrals"
        assert exc_info.value.reason == "Referral count must be an integer"

    def test_non_integer_referrals_rejected_in_progress(self, engine: CompensationEngine) -> None:
        """Test rank progress validates referrals the same way."""
        with pytest.raises(InvalidAmountError):
            engine.calculate_rank_progress(300, 12000, 6.0)


class TestRankProgress:
    """Tests for calculate_rank_progress."""

    def test_progress_towards_next_rank(self, engine: CompensationEngine) -> None:
        """Test per-metric and overall progress from gold to platinum."""
        progress = engine.calculate_rank_progress(300, 12000, 6)

        assert isinstance(progress, RankProgress)
        assert progress.current_rank == "gold"
        assert progress.next_rank == "platinum"
        assert progress.personal_pv_progress == Decimal("60.00")
        assert progress.group_pv_progress == Decimal("48.00")
        assert progress.direct_referrals_progress == Decimal("75.00")
        assert progress.progress == Decimal("48.00")
        assert progress.required_group_pv == Decimal("25000")
        assert progress.current_group_pv == Decimal("12000")

    def test_progress_from_starter(self, engine: CompensationEngine) -> None:
        """Test starter members progress towards the first rank."""
        progress = engine.calculate_rank_progress(0, 0, 0)

        assert progress.current_rank == STARTER_RANK
        assert progress.next_rank == "bronze"
        assert progress.progress == Decimal("0")

    def test_progress_capped_at_100(self, engine: CompensationEngine) -> None:
        """Test metrics already past the target count as 100%."""
        progress = engine.calculate_rank_progress(150, 6000, 1)

        assert progress.current_rank == STARTER_RANK
        assert progress.personal_pv_progress == Decimal("100")
        assert progress.group_pv_progress == Decimal("100")
        assert progress.direct_referrals_progress == Decimal("50.00")
        assert progress.progress == Decimal("50.00")

    def test_progress_at_top_rank(self, engine: CompensationEngine) -> None:
        """Test the top rank has no next rank and full progress."""
        progress = engine.calculate_rank_progress(1000, 50000, 10)

        assert progress.current_rank == "diamond"
        assert progress.next_rank is None
        assert progress.progress == Decimal("100")
        assert progress.required_group_pv is None

    def test_progress_rounded(self, engine: CompensationEngine) -> None:
        """Test progress is rounded to 2 places."""
        progress = engine.calculate_rank_progress(0, Decimal("333"), 0)

        assert progress.group_pv_progress == Decimal("33.30")
        assert progress.group_pv_progress.as_tuple().exponent == -2
