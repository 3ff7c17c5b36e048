"""Catalog-wide facets and counts.

Both functions look at the full, unfiltered catalog; they do not depend
on a household profile or on the filters a resident has selected.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from src.models.enums import WaitlistStatus
from src.models.program import Program
from src.models.response import AvailableFilters, CatalogStats


def extract_available_filters(programs: Iterable[Program]) -> AvailableFilters:
    """Distinct neighborhoods and program types present in *programs*, sorted."""
    neighborhoods: set[str] = set()
    program_types: set[str] = set()
    for program in programs:
        if program.neighborhood is not None:
            neighborhoods.add(program.neighborhood)
        program_types.add(program.type.value)
    return AvailableFilters(
        neighborhoods=sorted(neighborhoods),
        program_types=sorted(program_types),
    )


def compute_catalog_stats(programs: Iterable[Program]) -> CatalogStats:
    by_type: Counter[str] = Counter()
    by_status: Counter[str] = Counter()
    for program in programs:
        by_type[program.type.value] += 1
        by_status[program.waitlist_status.value] += 1

    return CatalogStats(
        total=sum(by_type.values()),
        program_types=dict(sorted(by_type.items())),
        waitlist_status=dict(sorted(by_status.items())),
        open_waitlists=by_status.get(WaitlistStatus.OPEN.value, 0),
    )
