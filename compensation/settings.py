"""
Compensation plan settings.

Loads the plan configuration from environment variables using
pydantic-settings. Every variable is prefixed with COMPENSATION_, list
and mapping values are JSON:

    COMPENSATION_DIRECT_COMMISSION_RATE=0.20
    COMPENSATION_LEVEL_COMMISSION_RATES=[0.10, 0.07, 0.05]
    COMPENSATION_RANK_REQUIREMENTS={"bronze": {"personalPV": 100, "groupPV": 1000, "directReferrals": 2}}
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from compensation.constants import (
    DEFAULT_DIRECT_COMMISSION_RATE,
    DEFAULT_LEADERSHIP_BONUS_RATE,
    DEFAULT_LEVEL_COMMISSION_RATES,
    DEFAULT_MATCHING_BONUS_RATE,
    DEFAULT_RANK_REQUIREMENTS,
)
from compensation.core.models import CompensationConfig
from compensation.types import RankRequirementDict


def _default_rank_requirements() -> dict[str, RankRequirementDict]:
    return {
        req.name: {
            "personalPV": str(req.personal_pv),
            "groupPV": str(req.group_pv),
            "directReferrals": req.direct_referrals,
        }
        for req in DEFAULT_RANK_REQUIREMENTS
    }


class CompensationSettings(BaseSettings):
    """Compensation settings loaded from environment variables."""

    # Commission rates (fractions, 0.20 = 20%)
    direct_commission_rate: Decimal = Field(
        default=DEFAULT_DIRECT_COMMISSION_RATE,
        description="Direct commission rate",
    )
    level_commission_rates: list[Decimal] = Field(
        default_factory=lambda: list(DEFAULT_LEVEL_COMMISSION_RATES),
        description="Level commission rates, first entry = level 1",
    )

    # Bonuses
    matching_bonus_rate: Decimal = Field(
        default=DEFAULT_MATCHING_BONUS_RATE,
        description="Matching bonus rate on a downline's commission",
    )
    leadership_bonus_rate: Decimal = Field(
        default=DEFAULT_LEADERSHIP_BONUS_RATE,
        description="Leadership bonus rate on group volume",
    )

    # Ranks, easiest first (JSON object order is kept)
    rank_requirements: dict[str, RankRequirementDict] = Field(
        default_factory=_default_rank_requirements,
        description="Rank name -> personalPV / groupPV / directReferrals",
    )

    # Logging
    log_level: str = "INFO"
    log_file: str | None = Field(
        default=None,
        description="Optional log file path, rotated daily",
    )

    model_config = SettingsConfigDict(
        env_prefix="COMPENSATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def to_config(self) -> CompensationConfig:
        """
        Build the immutable plan configuration.

        Raises:
            ConfigurationError: If rates or ranks are invalid
        """
        return CompensationConfig(
            direct_commission_rate=self.direct_commission_rate,
            level_commission_rates=tuple(self.level_commission_rates),
            matching_bonus_rate=self.matching_bonus_rate,
            leadership_bonus_rate=self.leadership_bonus_rate,
            rank_requirements=self.rank_requirements,
        )


@lru_cache
def get_settings() -> CompensationSettings:
    """Get the process-wide settings instance."""
    return CompensationSettings()
