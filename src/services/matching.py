"""Catalog filter and ranker.

Turns a household profile plus the full program catalog into one page of
ranked match results:

1. Structural filters (neighborhood, program type, free-text search)
   narrow the catalog before any eligibility work is done.
2. The remaining programs are put in catalog order -- waitlist status,
   then name -- and each one is evaluated by the
   :class:`~src.services.eligibility.EligibilityChecker`.
3. The eligibility filter (``all`` / ``eligible`` / ``open``) is applied
   to the evaluated set.
4. A stable sort puts eligible programs first and orders each group by
   descending score, so ties keep catalog order.
5. Summary counts are taken over the filtered set, then the page is cut.

Everything here is pure; the catalog is supplied by the caller.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Final

import structlog

from src.models.eligibility import MatchResult
from src.models.enums import EligibilityFilter, WaitlistStatus
from src.models.household import HouseholdProfile
from src.models.program import Program
from src.models.request import MatchFilters, PaginationParams
from src.models.response import MatchResponse, MatchSummary, PaginationInfo
from src.services.eligibility import EligibilityChecker
from src.services.facets import extract_available_filters

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE: Final[int] = 20
ALLOWED_PAGE_SIZES: Final[tuple[int, ...]] = (10, 20, 30)

# Waitlist buckets sort in declaration order: OPEN, CLOSED, LOTTERY, UNKNOWN.
_WAITLIST_ORDER: Final[dict[WaitlistStatus, int]] = {
    status: index for index, status in enumerate(WaitlistStatus)
}


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def _contains(haystack: str | None, needle: str) -> bool:
    return haystack is not None and needle in haystack.casefold()


def apply_structural_filters(programs: Iterable[Program], filters: MatchFilters) -> list[Program]:
    """Keep programs matching every structural filter that is set."""
    needle = filters.search.casefold() if filters.search else None
    kept: list[Program] = []
    for program in programs:
        if filters.neighborhood is not None and program.neighborhood != filters.neighborhood:
            continue
        if filters.program_type is not None and program.type.value != filters.program_type:
            continue
        if needle is not None and not (
            _contains(program.name, needle)
            or _contains(program.address, needle)
            or _contains(program.provider, needle)
        ):
            continue
        kept.append(program)
    return kept


def catalog_order(programs: Iterable[Program]) -> list[Program]:
    """Sort by waitlist status, then case-insensitive name, then id."""
    return sorted(
        programs,
        key=lambda p: (
            _WAITLIST_ORDER.get(p.waitlist_status, len(_WAITLIST_ORDER)),
            p.name.casefold(),
            p.name,
            p.id,
        ),
    )


def apply_eligibility_filter(
    matches: Iterable[MatchResult],
    eligibility: EligibilityFilter,
) -> list[MatchResult]:
    if eligibility == EligibilityFilter.ELIGIBLE:
        return [m for m in matches if m.eligibility.is_eligible]
    if eligibility == EligibilityFilter.OPEN:
        return [
            m
            for m in matches
            if m.eligibility.is_eligible and m.program.waitlist_status == WaitlistStatus.OPEN
        ]
    return list(matches)


# ---------------------------------------------------------------------------
# Ranking, summary, pagination
# ---------------------------------------------------------------------------


def rank_matches(matches: Iterable[MatchResult]) -> list[MatchResult]:
    """Eligible first, then by descending score; ties keep their input order."""
    return sorted(matches, key=lambda m: (not m.eligibility.is_eligible, -m.eligibility.score))


def summarize(matches: Sequence[MatchResult]) -> MatchSummary:
    eligible = [m for m in matches if m.eligibility.is_eligible]
    return MatchSummary(
        total=len(matches),
        eligible=len(eligible),
        open_waitlists=sum(1 for m in eligible if m.program.waitlist_status == WaitlistStatus.OPEN),
    )


def normalize_pagination(
    pagination: PaginationParams | None,
    *,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    allowed_page_sizes: Sequence[int] = ALLOWED_PAGE_SIZES,
) -> tuple[int, int]:
    """Return a valid ``(page, page_size)`` pair for the request."""
    if pagination is None:
        return 1, default_page_size
    page = max(pagination.page, 1)
    page_size = pagination.page_size if pagination.page_size in allowed_page_sizes else default_page_size
    return page, page_size


# ---------------------------------------------------------------------------
# Matcher
# ---------------------------------------------------------------------------


class ProgramMatcher:
    """Filters, evaluates, ranks and paginates a program catalog.

    Parameters
    ----------
    checker:
        Evaluates each program surviving the structural filters.
    default_page_size:
        Page size used when the request omits one or asks for a size
        outside *allowed_page_sizes*.
    allowed_page_sizes:
        The page sizes a client may request.
    """

    __slots__ = ("_allowed_page_sizes", "_checker", "_default_page_size")

    def __init__(
        self,
        checker: EligibilityChecker,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        allowed_page_sizes: Sequence[int] = ALLOWED_PAGE_SIZES,
    ) -> None:
        if default_page_size not in allowed_page_sizes:
            raise ValueError(
                f"default_page_size {default_page_size} is not one of {tuple(allowed_page_sizes)}"
            )
        self._checker = checker
        self._default_page_size = default_page_size
        self._allowed_page_sizes = tuple(allowed_page_sizes)

    @property
    def checker(self) -> EligibilityChecker:
        return self._checker

    def evaluate_all(
        self,
        profile: HouseholdProfile,
        programs: Sequence[Program],
        filters: MatchFilters | None = None,
    ) -> list[MatchResult]:
        """Return the full filtered, ranked result set (no pagination)."""
        filters = filters or MatchFilters()
        candidates = catalog_order(apply_structural_filters(programs, filters))
        evaluated = [self._checker.match(profile, program) for program in candidates]
        return rank_matches(apply_eligibility_filter(evaluated, filters.eligibility))

    def match(
        self,
        profile: HouseholdProfile,
        programs: Sequence[Program],
        filters: MatchFilters | None = None,
        pagination: PaginationParams | None = None,
    ) -> MatchResponse:
        """Match *profile* against *programs* and return one page of results."""
        ranked = self.evaluate_all(profile, programs, filters)
        page, page_size = normalize_pagination(
            pagination,
            default_page_size=self._default_page_size,
            allowed_page_sizes=self._allowed_page_sizes,
        )

        start = (page - 1) * page_size
        page_matches = ranked[start : start + page_size]
        total_pages = math.ceil(len(ranked) / page_size)

        response = MatchResponse(
            matches=page_matches,
            pagination=PaginationInfo(
                page=page,
                page_size=page_size,
                total_pages=total_pages,
                total_count=len(ranked),
            ),
            summary=summarize(ranked),
            available_filters=extract_available_filters(programs),
        )

        logger.info(
            "matching.complete",
            catalog_size=len(programs),
            filtered=len(ranked),
            eligible=response.summary.eligible,
            page=page,
            page_size=page_size,
            returned=len(page_matches),
        )
        return response
