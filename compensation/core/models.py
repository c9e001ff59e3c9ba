"""Pydantic models for the compensation engine."""

from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    computed_field,
    field_validator,
    model_validator,
)

from compensation.core.money import parse_amount
from compensation.exceptions import ConfigurationError


# Rank every member holds when no configured rank is reached
STARTER_RANK = "starter"

_RATE_FIELDS = (
    "direct_commission_rate",
    "matching_bonus_rate",
    "leadership_bonus_rate",
)


def _coerce_decimal(field: str, value: Any) -> Decimal:
    is_valid, parsed, error = parse_amount(value)
    if not is_valid:
        raise ConfigurationError(f"{field}: {error} (got {value!r})")
    return parsed


class RankRequirement(BaseModel):
    """Thresholds a member must meet, all at once, to hold a rank."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    name: str = Field(..., description="Rank name, e.g. 'bronze'")
    personal_pv: Decimal = Field(
        default=Decimal("0"), alias="personalPV", description="Minimum personal PV"
    )
    group_pv: Decimal = Field(
        default=Decimal("0"), alias="groupPV", description="Minimum group PV"
    )
    direct_referrals: int = Field(
        default=0, alias="directReferrals", description="Minimum direct referrals"
    )

    def is_met_by(
        self, personal_pv: Decimal, group_pv: Decimal, direct_referrals: int
    ) -> bool:
        """Check whether all three thresholds are satisfied."""
        return (
            personal_pv >= self.personal_pv
            and group_pv >= self.group_pv
            and direct_referrals >= self.direct_referrals
        )


class CompensationConfig(BaseModel):
    """Immutable compensation plan configuration.

    Rank requirements are kept in the order given and are expected to be
    ascending by difficulty. They are never re-sorted: rank evaluation
    walks them from last to first.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    direct_commission_rate: Decimal = Field(
        default=Decimal("0"),
        alias="directCommissionRate",
        description="Share of an order paid to the referring distributor",
    )
    level_commission_rates: tuple[Decimal, ...] = Field(
        default=(),
        alias="levelCommissionRates",
        description="Rates by upline depth, index 0 = level 1",
    )
    matching_bonus_rate: Decimal = Field(
        default=Decimal("0"),
        alias="matchingBonusRate",
        description="Share of a downline's commission paid to its upline",
    )
    leadership_bonus_rate: Decimal = Field(
        default=Decimal("0"),
        alias="leadershipBonusRate",
        description="Share of group volume paid as leadership bonus",
    )
    rank_requirements: tuple[RankRequirement, ...] = Field(
        default=(),
        alias="rankRequirements",
        description="Ranks ordered from easiest to hardest",
    )

    @field_validator(*_RATE_FIELDS, mode="before")
    @classmethod
    def coerce_rate(cls, v: Any, info: ValidationInfo) -> Decimal:
        """Convert a rate to Decimal, rejecting negatives."""
        return _coerce_decimal(info.field_name, v)

    @field_validator("level_commission_rates", mode="before")
    @classmethod
    def coerce_level_rates(cls, v: Any) -> tuple[Decimal, ...]:
        """Convert level rates to a tuple of Decimals."""
        if isinstance(v, (str, bytes, Mapping)) or not hasattr(v, "__iter__"):
            raise ConfigurationError(
                f"level_commission_rates must be a sequence (got {v!r})"
            )
        return tuple(
            _coerce_decimal(f"level_commission_rates[{index}]", rate)
            for index, rate in enumerate(v)
        )

    @field_validator("rank_requirements", mode="before")
    @classmethod
    def coerce_rank_requirements(cls, v: Any) -> tuple[RankRequirement, ...]:
        """Accept a name -> thresholds mapping or a sequence of requirements.

        Mapping insertion order becomes rank order.
        """
        if isinstance(v, Mapping):
            items = []
            for name, req in v.items():
                if isinstance(req, RankRequirement):
                    if req.name != name:
                        raise ConfigurationError(
                            f"Rank key {name!r} does not match requirement name {req.name!r}"
                        )
                    items.append(req)
                elif isinstance(req, Mapping):
                    items.append({**req, "name": name})
                else:
                    raise ConfigurationError(f"Invalid requirement for rank {name!r}: {req!r}")
        elif isinstance(v, (list, tuple)):
            items = list(v)
        else:
            raise ConfigurationError(
                f"rank_requirements must be a mapping or a sequence (got {v!r})"
            )

        requirements = []
        for item in items:
            if isinstance(item, RankRequirement):
                requirements.append(item)
                continue
            if not isinstance(item, Mapping):
                raise ConfigurationError(f"Invalid rank requirement: {item!r}")
            data = dict(item)
            name = data.get("name")
            if not isinstance(name, str):
                raise ConfigurationError(f"Rank requirement without a name: {item!r}")
            for key, alias in (
                ("personal_pv", "personalPV"),
                ("group_pv", "groupPV"),
            ):
                raw = data.pop(alias, data.pop(key, 0))
                data[key] = _coerce_decimal(f"{name}.{key}", raw)
            raw_referrals = data.pop("directReferrals", data.pop("direct_referrals", 0))
            referrals = _coerce_decimal(f"{name}.direct_referrals", raw_referrals)
            if referrals != referrals.to_integral_value():
                raise ConfigurationError(
                    f"{name}.direct_referrals must be a whole number (got {raw_referrals!r})"
                )
            data["direct_referrals"] = int(referrals)
            requirements.append(RankRequirement(**data))
        return tuple(requirements)

    @model_validator(mode="after")
    def validate_plan(self) -> "CompensationConfig":
        """Validate rate bounds and rank table shape."""
        rates = {name: getattr(self, name) for name in _RATE_FIELDS}
        for index, rate in enumerate(self.level_commission_rates):
            rates[f"level_commission_rates[{index}]"] = rate
        for name, rate in rates.items():
            if not rate.is_finite() or rate < 0 or rate > 1:
                raise ConfigurationError(f"{name} must be within [0, 1] (got {rate})")

        if not self.rank_requirements:
            raise ConfigurationError("rank_requirements must not be empty")

        seen: set[str] = set()
        for req in self.rank_requirements:
            if not req.name or not req.name.strip():
                raise ConfigurationError("Rank name must not be empty")
            if req.name == STARTER_RANK:
                raise ConfigurationError(
                    f"'{STARTER_RANK}' is reserved for members without a rank"
                )
            if req.name in seen:
                raise ConfigurationError(f"Duplicate rank '{req.name}'")
            seen.add(req.name)
            if req.personal_pv < 0 or req.group_pv < 0 or req.direct_referrals < 0:
                raise ConfigurationError(
                    f"Rank '{req.name}' has a negative threshold"
                )

        # Not fatal: ranks are evaluated in the order given
        for easier, harder in zip(self.rank_requirements, self.rank_requirements[1:]):
            if (
                harder.personal_pv < easier.personal_pv
                or harder.group_pv < easier.group_pv
                or harder.direct_referrals < easier.direct_referrals
            ):
                logger.warning(
                    "Rank requirements are not ascending",
                    extra={"easier": easier.name, "harder": harder.name},
                )
        return self

    @property
    def level_count(self) -> int:
        """Number of configured commission levels."""
        return len(self.level_commission_rates)

    @property
    def rank_names(self) -> list[str]:
        """Rank names from easiest to hardest."""
        return [req.name for req in self.rank_requirements]

    def get_rank(self, name: str) -> RankRequirement | None:
        """Get rank requirement by name."""
        for req in self.rank_requirements:
            if req.name == name:
                return req
        return None

    def next_rank(self, name: str) -> RankRequirement | None:
        """
        Get the rank after `name` in configuration order.

        The starter rank is followed by the first configured rank.
        Returns None for the last rank or an unknown name.
        """
        if name == STARTER_RANK:
            return self.rank_requirements[0]
        names = self.rank_names
        if name not in names:
            return None
        index = names.index(name)
        if index + 1 >= len(names):
            return None
        return self.rank_requirements[index + 1]


class NetworkNode(BaseModel):
    """Member in a caller-owned downline tree.

    Children are ordered by join or placement time. Spillover mutates
    the `children` lists in place.
    """

    model_config = ConfigDict(
        frozen=False,
        populate_by_name=True,
    )

    id: str = Field(..., description="Member identifier")
    children: list["NetworkNode"] = Field(default_factory=list)
    is_active: bool = Field(default=False, alias="isActive")
    has_active_downline: bool = Field(default=False, alias="hasActiveDownline")
    username: str | None = Field(default=None, description="Display name")
    personal_pv: Decimal = Field(default=Decimal("0"), alias="personalPV")
    group_pv: Decimal = Field(default=Decimal("0"), alias="groupPV")
    total_sales: Decimal = Field(default=Decimal("0"), alias="totalSales")
    rank: str | None = Field(default=None, description="Current rank name")

    def __repr__(self) -> str:
        return f"NetworkNode(id={self.id!r}, children={[c.id for c in self.children]!r})"


class CommissionType(str, Enum):
    """Kinds of commission an order or volume can generate."""

    DIRECT = "direct"
    LEVEL = "level"
    MATCHING = "matching"
    LEADERSHIP = "leadership"


class CommissionLine(BaseModel):
    """One computed commission amount."""

    model_config = ConfigDict(frozen=True)

    type: CommissionType
    amount: Decimal = Field(..., ge=0)
    level: int | None = Field(default=None, ge=1, description="Upline depth for level commissions")


class CommissionBreakdown(BaseModel):
    """All commissions generated by a single order."""

    model_config = ConfigDict(frozen=True)

    order_amount: Decimal = Field(..., ge=0)
    lines: tuple[CommissionLine, ...] = Field(default=())

    @computed_field
    @property
    def total(self) -> Decimal:
        """Sum of all line amounts."""
        return sum((line.amount for line in self.lines), Decimal("0.00"))


class RankProgress(BaseModel):
    """Where a member stands between the current and next rank."""

    model_config = ConfigDict(frozen=True)

    current_rank: str
    next_rank: str | None = Field(default=None, description="None at the top rank")
    personal_pv_progress: Decimal = Field(..., ge=0, le=100)
    group_pv_progress: Decimal = Field(..., ge=0, le=100)
    direct_referrals_progress: Decimal = Field(..., ge=0, le=100)
    progress: Decimal = Field(..., ge=0, le=100, description="Lowest of the three metrics")
    required_group_pv: Decimal | None = None
    current_group_pv: Decimal


class SpilloverResult(BaseModel):
    """Outcome of a spillover placement."""

    node: NetworkNode
    placed: list[tuple[str, str]] = Field(
        default_factory=list, description="(parent_id, child_id) pairs in placement order"
    )
    unplaced: list[NetworkNode] = Field(
        default_factory=list, description="Detached nodes that found no free slot"
    )


class TopPerformer(BaseModel):
    """Downline member ranked by sales."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str | None = None
    sales: Decimal
    rank: str | None = None


class DownlineStats(BaseModel):
    """Aggregates over every descendant of a node."""

    model_config = ConfigDict(frozen=True)

    total_members: int = Field(default=0, ge=0)
    active_members: int = Field(default=0, ge=0)
    total_sales: Decimal = Field(default=Decimal("0"))
    level_distribution: dict[int, int] = Field(default_factory=dict)
    top_performers: tuple[TopPerformer, ...] = Field(default=())
