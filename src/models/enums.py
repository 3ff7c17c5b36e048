from __future__ import annotations

from enum import StrEnum


class ProgramType(StrEnum):
    __slots__ = ()

    HCV = "HCV"                          # Housing Choice Voucher (Section 8)
    PUBLIC_HOUSING = "PUBLIC_HOUSING"
    PBV = "PBV"                          # Project-Based Voucher
    PBRA = "PBRA"                        # Project-Based Rental Assistance
    ARO = "ARO"                          # Affordable Requirements Ordinance
    LIHTC = "LIHTC"                      # Low-Income Housing Tax Credit
    OTHER = "OTHER"


class WaitlistStatus(StrEnum):
    __slots__ = ()

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    LOTTERY = "LOTTERY"
    UNKNOWN = "UNKNOWN"


class TargetPopulation(StrEnum):
    __slots__ = ()

    ALL = "ALL"
    SENIOR = "SENIOR"
    DISABLED = "DISABLED"
    FAMILY = "FAMILY"


class CheckSeverity(StrEnum):
    __slots__ = ()

    BLOCKER = "blocker"
    WARNING = "warning"
    INFO = "info"


class EligibilityFilter(StrEnum):
    __slots__ = ()

    ALL = "all"
    ELIGIBLE = "eligible"
    OPEN = "open"


class DocumentCategory(StrEnum):
    """Checklist groups, declared in display order."""

    __slots__ = ()

    INCOME = "INCOME"
    IDENTITY = "IDENTITY"
    HOUSING_HISTORY = "HOUSING_HISTORY"
    OTHER = "OTHER"


class AmiFallbackPolicy(StrEnum):
    """What the AMI resolver returns when no table row covers a household."""

    __slots__ = ()

    ZERO = "zero"          # 0 -> income cannot be evaluated
    ESTIMATE = "estimate"  # linear $80k + $10k per extra person at 100% AMI
