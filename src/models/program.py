from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.models.enums import ProgramType, TargetPopulation, WaitlistStatus

DEFAULT_MIN_HOUSEHOLD_SIZE = 1
DEFAULT_MAX_HOUSEHOLD_SIZE = 10
AMI_TABLE_MAX_HOUSEHOLD = 8


def _coerce_enum(value: Any, enum_cls: type[StrEnum], default: StrEnum) -> Any:
    """Map unrecognized enum strings to a permissive default."""
    if value is None:
        return default
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().upper())
        except ValueError:
            return default
    return value


class Program(BaseModel):
    """A housing program record, read-only reference data for the engine."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    id: str = Field(min_length=1)
    name: str
    provider: str
    type: ProgramType = ProgramType.OTHER
    description: str | None = None
    waitlist_status: WaitlistStatus = WaitlistStatus.UNKNOWN
    target_population: TargetPopulation = TargetPopulation.ALL
    income_limit_pct_ami: int | None = Field(default=None, ge=0)
    min_household_size: int = Field(default=DEFAULT_MIN_HOUSEHOLD_SIZE, ge=1)
    max_household_size: int = Field(default=DEFAULT_MAX_HOUSEHOLD_SIZE, ge=1)

    # -- Descriptive / contact fields (not used for scoring) ----------------
    website_url: str | None = None
    application_url: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    neighborhood: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    data_source: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, v: Any) -> Any:
        return _coerce_enum(v, ProgramType, ProgramType.OTHER)

    @field_validator("waitlist_status", mode="before")
    @classmethod
    def _known_waitlist(cls, v: Any) -> Any:
        return _coerce_enum(v, WaitlistStatus, WaitlistStatus.UNKNOWN)

    @field_validator("target_population", mode="before")
    @classmethod
    def _known_population(cls, v: Any) -> Any:
        return _coerce_enum(v, TargetPopulation, TargetPopulation.ALL)

    @model_validator(mode="after")
    def _size_bounds_ordered(self) -> Program:
        if self.min_household_size > self.max_household_size:
            raise ValueError(
                f"min_household_size ({self.min_household_size}) exceeds "
                f"max_household_size ({self.max_household_size})"
            )
        return self


class AmiLimit(BaseModel):
    """HUD income limits for one (year, household size) pair, in dollars."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    year: int
    household_size: int = Field(ge=1, le=AMI_TABLE_MAX_HOUSEHOLD)
    ami30: int = Field(ge=0)   # Extremely Low Income
    ami50: int = Field(ge=0)   # Very Low Income
    ami60: int = Field(ge=0)
    ami80: int = Field(ge=0)   # Low Income
    ami100: int = Field(ge=0)  # Median

    @model_validator(mode="after")
    def _tiers_non_decreasing(self) -> AmiLimit:
        tiers = [self.ami30, self.ami50, self.ami60, self.ami80, self.ami100]
        if any(lower > upper for lower, upper in zip(tiers, tiers[1:])):
            raise ValueError(
                f"AMI thresholds must not decrease with the tier "
                f"(year={self.year}, household_size={self.household_size})"
            )
        return self

    def threshold(self, pct_ami: int) -> int:
        """Return the dollar limit for an exact tier (30/50/60/80/100)."""
        return getattr(self, f"ami{pct_ami}")
