"""Program catalog access and the match request boundary.

The matching core never reaches for a global data client.  A
:class:`ProgramRepository` is handed to :class:`MatchService`, which
validates incoming requests, fetches the catalog (possibly over async
I/O), and delegates the pure work to :class:`ProgramMatcher`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

import structlog
from pydantic import ValidationError

from src.models.document import DocumentChecklist, DocumentRequirement
from src.models.household import HouseholdProfile
from src.models.program import Program
from src.models.request import MatchRequest
from src.models.response import AvailableFilters, CatalogStats, MatchResponse
from src.services.documents import build_checklist, eligible_program_types
from src.services.facets import compute_catalog_stats, extract_available_filters
from src.services.matching import ProgramMatcher

logger = structlog.get_logger(__name__)


class InvalidMatchRequestError(ValueError):
    """A match request failed boundary validation."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


@runtime_checkable
class ProgramRepository(Protocol):
    async def list_programs(self) -> list[Program]: ...


class InMemoryProgramRepository:
    """Repository over a fixed list of programs; ids must be unique."""

    __slots__ = ("_programs",)

    def __init__(self, programs: Iterable[Program] = ()) -> None:
        self._programs: dict[str, Program] = {}
        for program in programs:
            if program.id in self._programs:
                raise ValueError(f"duplicate program id: {program.id}")
            self._programs[program.id] = program

    async def list_programs(self) -> list[Program]:
        return list(self._programs.values())

    async def get_program(self, program_id: str) -> Program | None:
        return self._programs.get(program_id)

    def __len__(self) -> int:
        return len(self._programs)


def _describe(exc: ValidationError) -> tuple[str, str | None]:
    first = exc.errors()[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "profile"]
    field = ".".join(loc) if loc else None
    return first.get("msg", "invalid request"), field


def parse_match_request(payload: MatchRequest | HouseholdProfile | dict[str, Any]) -> MatchRequest:
    """Validate a wrapped request, a bare legacy profile, or a model instance."""
    if isinstance(payload, MatchRequest):
        return payload
    if isinstance(payload, HouseholdProfile):
        return MatchRequest(profile=payload)
    if not isinstance(payload, dict):
        raise InvalidMatchRequestError(
            f"match request must be an object, got {type(payload).__name__}"
        )

    try:
        return MatchRequest.model_validate(payload)
    except ValidationError as exc:
        message, field = _describe(exc)
        if field in ("householdSize", "household_size"):
            message = "Invalid household size"
        elif field in ("annualIncome", "annual_income"):
            message = "Invalid annual income"
        raise InvalidMatchRequestError(message, field=field) from exc


class MatchService:
    """Async entry point used by outer layers (HTTP handlers, CLI).

    Parameters
    ----------
    repository:
        Supplies the program catalog for each request.
    matcher:
        The pure filter/rank/paginate engine.
    """

    __slots__ = ("_matcher", "_repository")

    def __init__(self, repository: ProgramRepository, matcher: ProgramMatcher) -> None:
        self._repository = repository
        self._matcher = matcher

    async def find_matches(
        self,
        payload: MatchRequest | HouseholdProfile | dict[str, Any],
    ) -> MatchResponse:
        request = parse_match_request(payload)
        programs = await self._repository.list_programs()
        return self._matcher.match(
            request.profile,
            programs,
            filters=request.filters,
            pagination=request.pagination,
        )

    async def document_checklist(
        self,
        payload: MatchRequest | HouseholdProfile | dict[str, Any],
        documents: Iterable[DocumentRequirement],
        checked_ids: Iterable[str] = (),
    ) -> DocumentChecklist:
        """Checklist for the program types the household is eligible for.

        Uses every filtered match, not just one page of results.
        """
        request = parse_match_request(payload)
        programs = await self._repository.list_programs()
        matches = self._matcher.evaluate_all(request.profile, programs, request.filters)
        return build_checklist(documents, eligible_program_types(matches), checked_ids)

    async def available_filters(self) -> AvailableFilters:
        return extract_available_filters(await self._repository.list_programs())

    async def catalog_stats(self) -> CatalogStats:
        stats = compute_catalog_stats(await self._repository.list_programs())
        logger.info("catalog.stats", total=stats.total, open_waitlists=stats.open_waitlists)
        return stats
