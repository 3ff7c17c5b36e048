"""Tests for the async match service, the program repository, and
boundary validation of match requests.

Runs against the bundled Chicago catalog (7 programs, 2024 AMI table).
"""

from __future__ import annotations

import asyncio

import pytest

from src.data.seed import load_ami_limits, load_document_requirements, load_programs
from src.models.document import DocumentRequirement
from src.models.enums import EligibilityFilter, ProgramType
from src.models.household import HouseholdProfile
from src.models.program import Program
from src.models.request import MatchRequest
from src.services.ami import AmiLimitResolver
from src.services.catalog import (
    InMemoryProgramRepository,
    InvalidMatchRequestError,
    MatchService,
    ProgramRepository,
    parse_match_request,
)
from src.services.eligibility import EligibilityChecker
from src.services.matching import ProgramMatcher


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def programs() -> list[Program]:
    return load_programs()


@pytest.fixture(scope="module")
def documents() -> list[DocumentRequirement]:
    return load_document_requirements()


@pytest.fixture(scope="module")
def matcher() -> ProgramMatcher:
    return ProgramMatcher(EligibilityChecker(AmiLimitResolver(load_ami_limits())))


@pytest.fixture
def service(programs: list[Program], matcher: ProgramMatcher) -> MatchService:
    return MatchService(InMemoryProgramRepository(programs), matcher)


@pytest.fixture
def family_of_four() -> dict:
    return {
        "householdSize": 4,
        "numAdults": 2,
        "numChildren": 2,
        "hasSenior": False,
        "hasDisabled": False,
        "annualIncome": 50000,
        "hasChaDebt": False,
    }


class SlowRepository:
    """Repository that yields to the event loop before answering."""

    def __init__(self, programs: list[Program]) -> None:
        self._programs = programs
        self.calls = 0

    async def list_programs(self) -> list[Program]:
        self.calls += 1
        await asyncio.sleep(0)
        return list(self._programs)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TestInMemoryProgramRepository:
    async def test_lists_programs_in_insertion_order(self, programs: list[Program]) -> None:
        repo = InMemoryProgramRepository(programs)
        listed = await repo.list_programs()
        assert [p.id for p in listed] == [p.id for p in programs]
        assert len(repo) == 7

    async def test_get_program(self, programs: list[Program]) -> None:
        repo = InMemoryProgramRepository(programs)
        program = await repo.get_program("affordable-requirements-ordinance-aro-units")
        assert program is not None
        assert program.type == ProgramType.ARO
        assert await repo.get_program("missing") is None

    def test_duplicate_ids_rejected(self) -> None:
        program = Program(id="dup", name="Dup", provider="P")
        with pytest.raises(ValueError, match="duplicate program id"):
            InMemoryProgramRepository([program, program])

    def test_satisfies_protocol(self, programs: list[Program]) -> None:
        assert isinstance(InMemoryProgramRepository(programs), ProgramRepository)
        assert isinstance(SlowRepository(programs), ProgramRepository)


# ---------------------------------------------------------------------------
# Boundary validation
# ---------------------------------------------------------------------------


class TestParseMatchRequest:
    def test_bare_profile_dict(self, family_of_four: dict) -> None:
        request = parse_match_request(family_of_four)
        assert request.profile.household_size == 4
        assert request.filters.eligibility == EligibilityFilter.ALL

    def test_model_instances_pass_through(self) -> None:
        profile = HouseholdProfile(household_size=1, annual_income=0)
        assert parse_match_request(profile).profile is profile
        request = MatchRequest(profile=profile)
        assert parse_match_request(request) is request

    @pytest.mark.parametrize("size", [0, -2, "four", None])
    def test_invalid_household_size(self, family_of_four: dict, size: object) -> None:
        payload = {k: v for k, v in family_of_four.items() if k not in ("numAdults", "numChildren")}
        payload["householdSize"] = size
        with pytest.raises(InvalidMatchRequestError, match="Invalid household size") as exc_info:
            parse_match_request(payload)
        assert exc_info.value.field == "householdSize"

    @pytest.mark.parametrize("size", [3.0, "3"])
    def test_integral_household_size_accepted(self, size: object) -> None:
        request = parse_match_request({"householdSize": size, "annualIncome": 1000})
        assert request.profile.household_size == 3
        assert request.profile.num_adults == 3

    def test_missing_household_size(self) -> None:
        with pytest.raises(InvalidMatchRequestError, match="Invalid household size"):
            parse_match_request({"annualIncome": 1000})

    @pytest.mark.parametrize("income", [-1, "lots", None])
    def test_invalid_annual_income(self, family_of_four: dict, income: object) -> None:
        payload = {**family_of_four, "annualIncome": income}
        with pytest.raises(InvalidMatchRequestError, match="Invalid annual income") as exc_info:
            parse_match_request({"profile": payload})
        assert exc_info.value.field == "annualIncome"

    def test_inconsistent_member_counts(self, family_of_four: dict) -> None:
        payload = {**family_of_four, "numChildren": 5}
        with pytest.raises(InvalidMatchRequestError, match="household_size"):
            parse_match_request(payload)

    def test_non_object_payload(self) -> None:
        with pytest.raises(InvalidMatchRequestError, match="must be an object"):
            parse_match_request(["not", "a", "dict"])  # type: ignore[arg-type]

    def test_is_a_value_error(self) -> None:
        assert issubclass(InvalidMatchRequestError, ValueError)


# ---------------------------------------------------------------------------
# MatchService
# ---------------------------------------------------------------------------


class TestFindMatches:
    async def test_family_of_four_against_bundled_catalog(
        self, service: MatchService, family_of_four: dict
    ) -> None:
        response = await service.find_matches(family_of_four)

        assert response.summary.total == 7
        assert response.summary.eligible == 6, "only the senior building is out of reach"
        assert response.summary.open_waitlists == 5
        assert response.matches[-1].program.id == "public-housing-senior-properties"
        assert response.matches[-1].eligibility.is_eligible is False

        aro = next(m for m in response.matches if m.program.type == ProgramType.ARO)
        income = next(c for c in aro.eligibility.checks if c.name == "Income")
        assert "$67,260" in income.message

    async def test_cha_debt_excludes_cha_programs(
        self, service: MatchService, family_of_four: dict
    ) -> None:
        payload = {
            "profile": {**family_of_four, "hasChaDebt": True},
            "filters": {"eligibility": "eligible"},
        }
        response = await service.find_matches(payload)

        providers = {m.program.provider for m in response.matches}
        assert "Chicago Housing Authority" not in providers
        assert response.summary.eligible == 4

    async def test_filters_and_pagination_from_wrapped_request(
        self, service: MatchService, family_of_four: dict
    ) -> None:
        payload = {
            "profile": family_of_four,
            "filters": {"eligibility": "open", "neighborhood": "Pilsen"},
            "pagination": {"page": 1, "pageSize": 10},
        }
        response = await service.find_matches(payload)

        assert [m.program.id for m in response.matches] == ["the-resurrection-project-family-housing"]
        assert response.pagination.page_size == 10
        assert response.available_filters.neighborhoods == ["Humboldt Park", "Pilsen"]

    async def test_serialized_response_shape(self, service: MatchService, family_of_four: dict) -> None:
        response = await service.find_matches(family_of_four)
        data = response.model_dump(mode="json", by_alias=True)

        assert set(data) == {"matches", "pagination", "summary", "availableFilters"}
        assert set(data["pagination"]) == {"page", "pageSize", "totalPages", "totalCount"}
        assert set(data["summary"]) == {"total", "eligible", "openWaitlists"}
        first = data["matches"][0]
        assert first["program"]["waitlistStatus"] == "OPEN"
        assert first["eligibility"]["isEligible"] is True
        assert first["eligibility"]["score"] == 100

    async def test_invalid_request_raises_before_fetch(self, programs: list[Program], matcher: ProgramMatcher) -> None:
        repo = SlowRepository(programs)
        service = MatchService(repo, matcher)
        with pytest.raises(InvalidMatchRequestError):
            await service.find_matches({"householdSize": 0, "annualIncome": 1})
        assert repo.calls == 0

    async def test_async_repository(self, programs: list[Program], matcher: ProgramMatcher) -> None:
        repo = SlowRepository(programs)
        service = MatchService(repo, matcher)
        response = await service.find_matches({"householdSize": 1, "annualIncome": 10000})
        assert repo.calls == 1
        assert response.summary.total == 7

    async def test_concurrent_requests_are_independent(
        self, service: MatchService, family_of_four: dict
    ) -> None:
        single = {"householdSize": 1, "annualIncome": 90000}
        family, solo = await asyncio.gather(
            service.find_matches(family_of_four),
            service.find_matches(single),
        )
        assert family.summary.eligible == 6
        assert solo.summary.eligible < family.summary.eligible


class TestCatalogQueries:
    async def test_available_filters(self, service: MatchService) -> None:
        filters = await service.available_filters()
        assert filters.neighborhoods == ["Humboldt Park", "Pilsen"]
        assert filters.program_types == ["ARO", "HCV", "OTHER", "PUBLIC_HOUSING"]

    async def test_catalog_stats(self, service: MatchService) -> None:
        stats = await service.catalog_stats()
        assert stats.total == 7
        assert stats.program_types == {"ARO": 1, "HCV": 1, "OTHER": 3, "PUBLIC_HOUSING": 2}
        assert stats.open_waitlists == 6


class TestDocumentChecklist:
    async def test_checklist_for_eligible_types(
        self, service: MatchService, family_of_four: dict, documents: list[DocumentRequirement]
    ) -> None:
        checklist = await service.document_checklist(family_of_four, documents)

        assert checklist.matched_program_types == [
            ProgramType.ARO,
            ProgramType.OTHER,
            ProgramType.PUBLIC_HOUSING,
            ProgramType.HCV,
        ]
        assert len(checklist.documents) == 10
        assert checklist.total_required == 8

    async def test_checklist_narrows_with_cha_debt(
        self, service: MatchService, family_of_four: dict, documents: list[DocumentRequirement]
    ) -> None:
        payload = {**family_of_four, "hasChaDebt": True}
        checklist = await service.document_checklist(payload, documents, checked_ids=["pay-stubs"])

        assert checklist.matched_program_types == [ProgramType.ARO, ProgramType.OTHER]
        assert {d.id for d in checklist.documents} == {
            "pay-stubs",
            "bank-statements",
            "benefit-letters",
            "photo-id",
            "utility-bills",
        }
        assert checklist.progress_percent == 33
