"""Request shapes accepted at the matching boundary.

A match request wraps the household profile together with optional
filters and pagination.  Older clients post the bare profile object; the
``MatchRequest`` validator detects that shape and wraps it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.models.enums import EligibilityFilter
from src.models.household import HouseholdProfile

_CAMEL = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class MatchFilters(BaseModel):
    """Optional AND-combined narrowing of the program catalog."""

    model_config = {**_CAMEL, "frozen": True}

    eligibility: EligibilityFilter = EligibilityFilter.ALL
    neighborhood: str | None = None
    program_type: str | None = None
    search: str | None = None

    @field_validator("neighborhood", "program_type", "search", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("eligibility", mode="before")
    @classmethod
    def _default_eligibility(cls, v: Any) -> Any:
        return EligibilityFilter.ALL if v in (None, "") else v


class PaginationParams(BaseModel):
    """Raw pagination request; the matcher normalizes out-of-range values."""

    model_config = {**_CAMEL, "frozen": True}

    page: int = 1
    page_size: int = 20


class MatchRequest(BaseModel):
    model_config = {**_CAMEL, "frozen": True}

    profile: HouseholdProfile
    filters: MatchFilters = Field(default_factory=MatchFilters)
    pagination: PaginationParams | None = None

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_profile(cls, data: Any) -> Any:
        if isinstance(data, dict) and "profile" not in data:
            return {"profile": data}
        return data

    @field_validator("filters", mode="before")
    @classmethod
    def _null_filters(cls, v: Any) -> Any:
        return {} if v is None else v
