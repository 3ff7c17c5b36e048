"""Household profile model fed into the eligibility engine.

A profile is created once per session from the onboarding answers and is
never mutated by the engine.  ``household_size`` always equals
``num_adults + num_children``; :meth:`HouseholdProfile.with_members` is
the only way the onboarding flow changes the member counts.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, model_validator
from pydantic.alias_generators import to_camel


def _pick(data: dict[str, Any], name: str) -> Any:
    """Read a field by its Python name or its camelCase wire name."""
    if name in data:
        return data[name]
    return data.get(to_camel(name))


_INT: TypeAdapter[int] = TypeAdapter(int)


def _as_int(value: Any) -> int | None:
    """Coerce *value* the way an ``int`` field would, or *None* if it cannot be."""
    if value is None:
        return None
    try:
        return _INT.validate_python(value)
    except ValidationError:
        return None


def _replace(data: dict[str, Any], **values: Any) -> dict[str, Any]:
    replaced = set(values) | {to_camel(name) for name in values}
    out = {k: v for k, v in data.items() if k not in replaced}
    out.update(values)
    return out


class HouseholdProfile(BaseModel):
    """Household attributes relevant to subsidized-housing eligibility."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    household_size: int = Field(ge=1)
    num_adults: int = Field(default=0, ge=0)
    num_children: int = Field(default=0, ge=0)
    has_senior: bool = False
    has_disabled: bool = False
    annual_income: float = Field(ge=0, strict=True, allow_inf_nan=False)
    has_cha_debt: bool = False

    @model_validator(mode="before")
    @classmethod
    def _fill_member_counts(cls, data: Any) -> Any:
        # Callers that only know the total are treated as an all-adult household.
        if not isinstance(data, dict):
            return data
        size = _as_int(_pick(data, "household_size"))
        adults = _pick(data, "num_adults")
        children = _pick(data, "num_children")
        if size is None:
            return data
        if adults is None and children is None:
            return _replace(data, num_adults=size, num_children=0)
        if adults is None and (known := _as_int(children)) is not None:
            return _replace(data, num_adults=max(size - known, 0))
        if children is None and (known := _as_int(adults)) is not None:
            return _replace(data, num_children=max(size - known, 0))
        return data

    @model_validator(mode="after")
    def _size_matches_members(self) -> HouseholdProfile:
        if self.num_adults + self.num_children != self.household_size:
            raise ValueError(
                f"household_size ({self.household_size}) must equal "
                f"num_adults + num_children ({self.num_adults} + {self.num_children})"
            )
        return self

    def with_members(
        self,
        *,
        num_adults: int | None = None,
        num_children: int | None = None,
    ) -> HouseholdProfile:
        """Return a copy with new member counts and a recomputed household size."""
        adults = self.num_adults if num_adults is None else num_adults
        children = self.num_children if num_children is None else num_children
        data = self.model_dump()
        data.update(
            num_adults=adults,
            num_children=children,
            household_size=adults + children,
        )
        return HouseholdProfile.model_validate(data)
