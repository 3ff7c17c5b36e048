from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from src.models.eligibility import MatchResult

_CAMEL = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class PaginationInfo(BaseModel):
    model_config = _CAMEL

    page: int
    page_size: int
    total_pages: int
    total_count: int


class MatchSummary(BaseModel):
    """Counts over the filtered result set, before pagination."""

    model_config = _CAMEL

    total: int = 0
    eligible: int = 0
    open_waitlists: int = 0


class AvailableFilters(BaseModel):
    model_config = _CAMEL

    neighborhoods: list[str] = Field(default_factory=list)
    program_types: list[str] = Field(default_factory=list)


class MatchResponse(BaseModel):
    model_config = _CAMEL

    matches: list[MatchResult] = Field(default_factory=list)
    pagination: PaginationInfo
    summary: MatchSummary = Field(default_factory=MatchSummary)
    available_filters: AvailableFilters = Field(default_factory=AvailableFilters)


class CatalogStats(BaseModel):
    """Program counts across the whole catalog."""

    model_config = _CAMEL

    total: int = 0
    program_types: dict[str, int] = Field(default_factory=dict)
    waitlist_status: dict[str, int] = Field(default_factory=dict)
    open_waitlists: int = 0
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))
