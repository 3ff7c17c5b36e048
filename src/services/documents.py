"""Document checklist built from a household's eligible programs.

Only documents requested by at least one program type the household
qualifies for are listed; when nothing matched, every document is shown
so the resident can still prepare.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.models.document import DocumentChecklist, DocumentGroup, DocumentRequirement
from src.models.eligibility import MatchResult
from src.models.enums import DocumentCategory, ProgramType


def eligible_program_types(matches: Iterable[MatchResult]) -> list[ProgramType]:
    """Distinct program types among eligible matches, in first-seen order."""
    seen: dict[ProgramType, None] = {}
    for match in matches:
        if match.eligibility.is_eligible:
            seen.setdefault(match.program.type, None)
    return list(seen)


def relevant_documents(
    documents: Iterable[DocumentRequirement],
    matched_types: Iterable[ProgramType],
) -> list[DocumentRequirement]:
    wanted = set(matched_types)
    docs = list(documents)
    if not wanted:
        return docs
    return [doc for doc in docs if wanted.intersection(doc.program_types)]


def build_checklist(
    documents: Iterable[DocumentRequirement],
    matched_types: Iterable[ProgramType],
    checked_ids: Iterable[str] = (),
) -> DocumentChecklist:
    """Group relevant documents by category and count required progress."""
    matched = list(dict.fromkeys(matched_types))
    relevant = relevant_documents(documents, matched)
    checked = set(checked_ids)

    groups: list[DocumentGroup] = []
    for category in DocumentCategory:
        in_category = sorted(
            (doc for doc in relevant if doc.category == category),
            key=lambda doc: (doc.sort_order, doc.id),
        )
        if in_category:
            groups.append(DocumentGroup(category=category, documents=in_category))

    required = [doc for doc in relevant if doc.is_required]
    return DocumentChecklist(
        matched_program_types=matched,
        groups=groups,
        checked_ids=sorted(checked),
        total_required=len(required),
        checked_required=sum(1 for doc in required if doc.id in checked),
    )
