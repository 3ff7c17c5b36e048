from src.models.document import DocumentChecklist, DocumentGroup, DocumentRequirement
from src.models.eligibility import EligibilityCheck, EligibilityResult, MatchResult
from src.models.enums import (
    AmiFallbackPolicy,
    CheckSeverity,
    DocumentCategory,
    EligibilityFilter,
    ProgramType,
    TargetPopulation,
    WaitlistStatus,
)
from src.models.household import HouseholdProfile
from src.models.program import AmiLimit, Program
from src.models.request import MatchFilters, MatchRequest, PaginationParams
from src.models.response import (
    AvailableFilters,
    CatalogStats,
    MatchResponse,
    MatchSummary,
    PaginationInfo,
)

__all__ = [
    "AmiFallbackPolicy",
    "AmiLimit",
    "AvailableFilters",
    "CatalogStats",
    "CheckSeverity",
    "DocumentCategory",
    "DocumentChecklist",
    "DocumentGroup",
    "DocumentRequirement",
    "EligibilityCheck",
    "EligibilityFilter",
    "EligibilityResult",
    "HouseholdProfile",
    "MatchFilters",
    "MatchRequest",
    "MatchResponse",
    "MatchResult",
    "MatchSummary",
    "PaginationInfo",
    "PaginationParams",
    "Program",
    "ProgramType",
    "TargetPopulation",
    "WaitlistStatus",
]
