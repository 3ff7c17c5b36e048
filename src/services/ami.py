"""Area Median Income (AMI) limit lookup.

HUD publishes income limits per household size (1-8) at several AMI
tiers.  Programs state their limit as a percentage of AMI; the resolver
turns that percentage into a dollar figure for a household.

Lookup rules:

* Household sizes are clamped to [1, 8]; larger households use the
  8-person limit (HUD convention).
* The most recent year in the table wins unless a year is requested.
* A percentage that is not one of the published tiers resolves against
  the numerically closest tier; ties go to the lower tier.
* When no row covers the household the configured fallback policy
  decides the result (see :class:`~src.models.enums.AmiFallbackPolicy`).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

import structlog

from src.models.enums import AmiFallbackPolicy
from src.models.program import AMI_TABLE_MAX_HOUSEHOLD, AmiLimit

logger = structlog.get_logger(__name__)

AMI_TIERS: Final[tuple[int, ...]] = (30, 50, 60, 80, 100)

# Rough 100% AMI estimate used when the table has no row for a household.
_ESTIMATE_BASE: Final[int] = 80_000
_ESTIMATE_PER_EXTRA_PERSON: Final[int] = 10_000


def closest_tier(pct_ami: int | float) -> int:
    """Return the published tier nearest to *pct_ami* (lower tier on ties)."""
    best = AMI_TIERS[0]
    for tier in AMI_TIERS[1:]:
        if abs(tier - pct_ami) < abs(best - pct_ami):
            best = tier
    return best


def clamp_household_size(household_size: int) -> int:
    if household_size < 1:
        raise ValueError(f"household_size must be at least 1, got {household_size}")
    return min(household_size, AMI_TABLE_MAX_HOUSEHOLD)


def estimate_ami100(household_size: int) -> int:
    """Linear 100% AMI estimate: $80,000 plus $10,000 per additional person."""
    return _ESTIMATE_BASE + (household_size - 1) * _ESTIMATE_PER_EXTRA_PERSON


class AmiLimitResolver:
    """Pure lookup over an in-memory AMI limit table.

    Parameters
    ----------
    limits:
        AMI rows for any number of years.  One row per (year, size) is
        expected; if duplicates exist the first one wins.
    fallback_policy:
        What :meth:`income_limit` returns for a household size with no row.
    """

    __slots__ = ("_fallback_policy", "_rows")

    def __init__(
        self,
        limits: Iterable[AmiLimit],
        fallback_policy: AmiFallbackPolicy = AmiFallbackPolicy.ZERO,
    ) -> None:
        self._fallback_policy = fallback_policy
        self._rows: dict[tuple[int, int], AmiLimit] = {}
        for row in limits:
            self._rows.setdefault((row.year, row.household_size), row)

    @property
    def fallback_policy(self) -> AmiFallbackPolicy:
        return self._fallback_policy

    @property
    def latest_year(self) -> int | None:
        if not self._rows:
            return None
        return max(year for year, _ in self._rows)

    def find_row(self, household_size: int, *, year: int | None = None) -> AmiLimit | None:
        """Return the table row used for *household_size*, or *None*."""
        size = clamp_household_size(household_size)
        if year is not None:
            return self._rows.get((year, size))
        years = sorted((y for y, s in self._rows if s == size), reverse=True)
        if not years:
            return None
        return self._rows[(years[0], size)]

    def income_limit(
        self,
        household_size: int,
        pct_ami: int | float,
        *,
        year: int | None = None,
    ) -> int:
        """Return the dollar income limit for a household at *pct_ami*.

        Returns ``0`` when no row exists and the policy is ``ZERO``; the
        caller must read that as "no limit data", not as a failed check.
        """
        tier = closest_tier(pct_ami)
        row = self.find_row(household_size, year=year)
        if row is not None:
            return row.threshold(tier)

        logger.warning(
            "ami.no_limit_row",
            household_size=household_size,
            year=year,
            policy=self._fallback_policy.value,
        )
        if self._fallback_policy == AmiFallbackPolicy.ESTIMATE:
            return round(estimate_ami100(household_size) * tier / 100)
        return 0

    def ami_percentage(self, household_size: int, annual_income: float) -> int:
        """Express *annual_income* as a whole-number percentage of 100% AMI.

        Uses the latest 100% AMI row for the household size, falling back
        to the linear estimate when the table has none.
        """
        row = self.find_row(household_size)
        ami100 = row.ami100 if row is not None else estimate_ami100(household_size)
        if ami100 <= 0:
            return 0
        return round(annual_income / ami100 * 100)
