from __future__ import annotations

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel

from src.models.enums import CheckSeverity
from src.models.program import Program

BASE_SCORE = 100


class EligibilityCheck(BaseModel):
    """One itemized rule evaluation shown to the resident."""

    model_config = {"frozen": True}

    name: str
    passed: bool
    message: str
    severity: CheckSeverity
    penalty: int = Field(default=0, ge=0)  # deducted from the score when the check fails

    @property
    def is_blocking(self) -> bool:
        return not self.passed and self.severity == CheckSeverity.BLOCKER


class EligibilityResult(BaseModel):
    """Outcome of evaluating one profile against one program.

    ``checks`` keeps evaluation order.  Eligibility and score are both
    derived from the checks: a single failed blocker disqualifies, and
    the score only ranks programs within the eligible / ineligible groups.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    checks: list[EligibilityCheck] = Field(default_factory=list)

    @computed_field(alias="isEligible")  # type: ignore[prop-decorator]
    @property
    def is_eligible(self) -> bool:
        return not any(c.is_blocking for c in self.checks)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score(self) -> int:
        deducted = sum(c.penalty for c in self.checks if not c.passed)
        return max(0, BASE_SCORE - deducted)

    @property
    def blockers(self) -> list[EligibilityCheck]:
        return [c for c in self.checks if c.is_blocking]


class MatchResult(BaseModel):
    """A program paired with its eligibility result for one profile."""

    model_config = {"frozen": True}

    program: Program
    eligibility: EligibilityResult
