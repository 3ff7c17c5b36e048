"""Housing eligibility service layer -- AMI lookup, rule checks, matching.

Everything except :class:`MatchService` is synchronous and pure; the
service only awaits the program repository.
"""

from __future__ import annotations

from src.services.ami import AmiLimitResolver
from src.services.catalog import (
    InMemoryProgramRepository,
    InvalidMatchRequestError,
    MatchService,
    ProgramRepository,
)
from src.services.documents import build_checklist
from src.services.eligibility import EligibilityChecker
from src.services.facets import compute_catalog_stats, extract_available_filters
from src.services.matching import ProgramMatcher

__all__ = [
    "AmiLimitResolver",
    "EligibilityChecker",
    "InMemoryProgramRepository",
    "InvalidMatchRequestError",
    "MatchService",
    "ProgramMatcher",
    "ProgramRepository",
    "build_checklist",
    "compute_catalog_stats",
    "extract_available_filters",
]
