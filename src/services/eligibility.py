"""Eligibility checker -- scores one household against one housing program.

Pure and deterministic: no I/O, no shared state.  Every evaluation runs
the same five rule checks in a fixed order and records one itemized
:class:`~src.models.eligibility.EligibilityCheck` per applicable rule:

1. Income            -- only when the program sets an AMI percentage
2. Household size    -- always
3. Target population -- always
4. CHA debt          -- only when the household owes CHA and the program
                        is run by CHA or is a voucher (HCV)
5. Waitlist status   -- omitted when the status is UNKNOWN

A failed ``blocker`` check disqualifies the program.  Failed checks also
carry a penalty deducted from a base score of 100, which only ranks
programs inside the eligible and ineligible groups.
"""

from __future__ import annotations

from typing import Final

import structlog

from src.models.eligibility import EligibilityCheck, EligibilityResult, MatchResult
from src.models.enums import CheckSeverity, ProgramType, TargetPopulation, WaitlistStatus
from src.models.household import HouseholdProfile
from src.models.program import Program
from src.services.ami import AmiLimitResolver

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Rule constants
# ---------------------------------------------------------------------------

DEFAULT_CHA_PROVIDER: Final[str] = "Chicago Housing Authority"

INCOME_PENALTY: Final[int] = 40
HOUSEHOLD_SIZE_PENALTY: Final[int] = 30
SENIOR_PENALTY: Final[int] = 50
DISABLED_PENALTY: Final[int] = 50
FAMILY_PENALTY: Final[int] = 20
CHA_DEBT_PENALTY: Final[int] = 30
CLOSED_WAITLIST_PENALTY: Final[int] = 10

CHECK_INCOME: Final[str] = "Income"
CHECK_HOUSEHOLD_SIZE: Final[str] = "Household Size"
CHECK_TARGET_POPULATION: Final[str] = "Target Population"
CHECK_CHA_DEBT: Final[str] = "CHA Debt"
CHECK_WAITLIST: Final[str] = "Waitlist Status"

# status -> (passed, severity, penalty, message)
_WAITLIST_RULES: Final[dict[WaitlistStatus, tuple[bool, CheckSeverity, int, str]]] = {
    WaitlistStatus.OPEN: (
        True,
        CheckSeverity.INFO,
        0,
        "The waitlist for this program is currently open",
    ),
    WaitlistStatus.LOTTERY: (
        True,
        CheckSeverity.INFO,
        0,
        "This program uses a lottery system for applications",
    ),
    WaitlistStatus.CLOSED: (
        False,
        CheckSeverity.WARNING,
        CLOSED_WAITLIST_PENALTY,
        "The waitlist for this program is currently closed",
    ),
}


def _dollars(amount: float) -> str:
    # Whole-dollar amounts print without cents.
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def _passed(name: str, message: str) -> EligibilityCheck:
    return EligibilityCheck(name=name, passed=True, message=message, severity=CheckSeverity.INFO)


def _failed(name: str, message: str, severity: CheckSeverity, penalty: int) -> EligibilityCheck:
    return EligibilityCheck(
        name=name,
        passed=False,
        message=message,
        severity=severity,
        penalty=penalty,
    )


class EligibilityChecker:
    """Evaluates household profiles against program rules.

    Parameters
    ----------
    resolver:
        AMI table lookup used by the income check.
    cha_provider:
        Provider name whose programs are closed to households that owe
        the housing authority money.
    """

    __slots__ = ("_cha_provider", "_resolver")

    def __init__(
        self,
        resolver: AmiLimitResolver,
        *,
        cha_provider: str = DEFAULT_CHA_PROVIDER,
    ) -> None:
        self._resolver = resolver
        self._cha_provider = cha_provider

    @property
    def resolver(self) -> AmiLimitResolver:
        return self._resolver

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def evaluate(self, profile: HouseholdProfile, program: Program) -> EligibilityResult:
        """Run every applicable check, in order, for one profile/program pair."""
        candidates = (
            self._check_income(profile, program),
            self._check_household_size(profile, program),
            self._check_target_population(profile, program),
            self._check_cha_debt(profile, program),
            self._check_waitlist(program),
        )
        result = EligibilityResult(checks=[c for c in candidates if c is not None])

        logger.debug(
            "eligibility.evaluated",
            program_id=program.id,
            eligible=result.is_eligible,
            score=result.score,
            checks=len(result.checks),
        )
        return result

    def match(self, profile: HouseholdProfile, program: Program) -> MatchResult:
        return MatchResult(program=program, eligibility=self.evaluate(profile, program))

    # ------------------------------------------------------------------
    # Rule checks
    # ------------------------------------------------------------------

    def _check_income(self, profile: HouseholdProfile, program: Program) -> EligibilityCheck | None:
        pct = program.income_limit_pct_ami
        if not pct:
            return None

        limit = self._resolver.income_limit(profile.household_size, pct)
        income = _dollars(profile.annual_income)

        if limit <= 0:
            # No AMI data for this household: report it, do not penalize.
            return EligibilityCheck(
                name=CHECK_INCOME,
                passed=True,
                message=(
                    f"Income limit data for the {pct}% AMI tier is not available for a "
                    f"household of {profile.household_size}, so your income ({income}) "
                    "could not be checked"
                ),
                severity=CheckSeverity.WARNING,
            )

        if profile.annual_income <= limit:
            return _passed(
                CHECK_INCOME,
                f"Your income ({income}) is under the {pct}% AMI limit of {_dollars(limit)}",
            )
        return _failed(
            CHECK_INCOME,
            f"Your income ({income}) exceeds the {pct}% AMI limit of {_dollars(limit)}",
            CheckSeverity.BLOCKER,
            INCOME_PENALTY,
        )

    @staticmethod
    def _check_household_size(profile: HouseholdProfile, program: Program) -> EligibilityCheck:
        size = profile.household_size
        if program.min_household_size <= size <= program.max_household_size:
            return _passed(
                CHECK_HOUSEHOLD_SIZE,
                f"Your household of {size} fits the program's unit sizes",
            )
        return _failed(
            CHECK_HOUSEHOLD_SIZE,
            (
                f"This program requires {program.min_household_size}-"
                f"{program.max_household_size} people, but your household has {size}"
            ),
            CheckSeverity.BLOCKER,
            HOUSEHOLD_SIZE_PENALTY,
        )

    @staticmethod
    def _check_target_population(profile: HouseholdProfile, program: Program) -> EligibilityCheck:
        population = program.target_population

        if population == TargetPopulation.SENIOR:
            if profile.has_senior:
                return _passed(
                    CHECK_TARGET_POPULATION,
                    "This program is for seniors, and you have a senior in your household",
                )
            return _failed(
                CHECK_TARGET_POPULATION,
                "This program is specifically for seniors (62+)",
                CheckSeverity.BLOCKER,
                SENIOR_PENALTY,
            )

        if population == TargetPopulation.DISABLED:
            if profile.has_disabled:
                return _passed(
                    CHECK_TARGET_POPULATION,
                    "This program is for people with disabilities, and you qualify",
                )
            return _failed(
                CHECK_TARGET_POPULATION,
                "This program is specifically for people with disabilities",
                CheckSeverity.BLOCKER,
                DISABLED_PENALTY,
            )

        if population == TargetPopulation.FAMILY:
            if profile.num_children > 0 or profile.household_size >= 2:
                return _passed(
                    CHECK_TARGET_POPULATION,
                    "This program is for families, and you qualify",
                )
            # A single adult is discouraged, not excluded.
            return _failed(
                CHECK_TARGET_POPULATION,
                "This program is for families (typically 2+ people or with children)",
                CheckSeverity.WARNING,
                FAMILY_PENALTY,
            )

        # ALL, and anything unrecognized
        return _passed(
            CHECK_TARGET_POPULATION,
            "This program is open to all eligible households",
        )

    def _check_cha_debt(self, profile: HouseholdProfile, program: Program) -> EligibilityCheck | None:
        if not profile.has_cha_debt:
            return None
        if program.provider != self._cha_provider and program.type != ProgramType.HCV:
            return None
        return _failed(
            CHECK_CHA_DEBT,
            "Outstanding debt to CHA must be paid before qualifying for CHA programs",
            CheckSeverity.BLOCKER,
            CHA_DEBT_PENALTY,
        )

    @staticmethod
    def _check_waitlist(program: Program) -> EligibilityCheck | None:
        rule = _WAITLIST_RULES.get(program.waitlist_status)
        if rule is None:
            return None
        passed, severity, penalty, message = rule
        return EligibilityCheck(
            name=CHECK_WAITLIST,
            passed=passed,
            message=message,
            severity=severity,
            penalty=penalty,
        )
