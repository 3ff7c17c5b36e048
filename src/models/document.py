"""Document checklist models.

Residents prepare these documents before applying.  Each requirement
lists the program types that ask for it, so the checklist can be
narrowed to the programs a household actually qualifies for.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel

from src.models.enums import DocumentCategory, ProgramType

_CAMEL = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class DocumentRequirement(BaseModel):
    model_config = {**_CAMEL, "frozen": True}

    id: str
    name: str
    description: str | None = None
    category: DocumentCategory = DocumentCategory.OTHER
    validity_days: int | None = None  # None = does not expire
    is_required: bool = True
    sort_order: int = 0
    program_types: list[ProgramType] = Field(default_factory=list)


class DocumentGroup(BaseModel):
    model_config = _CAMEL

    category: DocumentCategory
    documents: list[DocumentRequirement] = Field(default_factory=list)


class DocumentChecklist(BaseModel):
    model_config = _CAMEL

    matched_program_types: list[ProgramType] = Field(default_factory=list)
    groups: list[DocumentGroup] = Field(default_factory=list)
    checked_ids: list[str] = Field(default_factory=list)
    total_required: int = 0
    checked_required: int = 0

    @computed_field(alias="progressPercent")  # type: ignore[prop-decorator]
    @property
    def progress_percent(self) -> int:
        if self.total_required == 0:
            return 0
        return round(self.checked_required / self.total_required * 100)

    @property
    def documents(self) -> list[DocumentRequirement]:
        return [doc for group in self.groups for doc in group.documents]
