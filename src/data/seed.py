"""Loading of bundled reference data.

Reads program records, HUD AMI income limits, and document requirements
from the JSON files under ``src/data/catalog``.  These stand in for the
external data store: the ingestion jobs that keep the real catalog fresh
live outside this package.

Records that fail validation are logged and skipped so a single bad row
does not take down the whole catalog.
"""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar

import orjson
import structlog
from pydantic import BaseModel, ValidationError

from src.models.document import DocumentRequirement
from src.models.program import AmiLimit, Program

logger = structlog.get_logger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

_DATA_DIR: Path = Path(__file__).resolve().parent / "catalog"
PROGRAMS_PATH: Path = _DATA_DIR / "programs.json"
AMI_LIMITS_PATH: Path = _DATA_DIR / "ami_limits.json"
DOCUMENTS_PATH: Path = _DATA_DIR / "documents.json"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _load_records(path: Path, model: type[_ModelT], kind: str) -> list[_ModelT]:
    """Parse a JSON array of records into validated *model* instances.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    orjson.JSONDecodeError
        If the file is not valid JSON.
    ValueError
        If the top-level JSON value is not an array.
    """
    if not path.exists():
        raise FileNotFoundError(f"{kind} data file not found: {path}")

    raw_records = orjson.loads(path.read_bytes())
    if not isinstance(raw_records, list):
        raise ValueError(f"{kind} data file must contain a JSON array: {path}")

    records: list[_ModelT] = []
    for raw in raw_records:
        try:
            records.append(model.model_validate(raw))
        except ValidationError:
            record_id = raw.get("id", "unknown") if isinstance(raw, dict) else "unknown"
            logger.warning("seed.parse_error", kind=kind, record_id=record_id, exc_info=True)

    logger.info("seed.loaded", kind=kind, count=len(records), source=str(path))
    return records


def load_programs(path: Path | None = None) -> list[Program]:
    """Load program records; later duplicates of an id are dropped."""
    programs: list[Program] = []
    seen: set[str] = set()
    for program in _load_records(path or PROGRAMS_PATH, Program, "programs"):
        if program.id in seen:
            logger.warning("seed.duplicate_program", program_id=program.id)
            continue
        seen.add(program.id)
        programs.append(program)
    return programs


def load_ami_limits(path: Path | None = None) -> list[AmiLimit]:
    return _load_records(path or AMI_LIMITS_PATH, AmiLimit, "ami_limits")


def load_document_requirements(path: Path | None = None) -> list[DocumentRequirement]:
    return _load_records(path or DOCUMENTS_PATH, DocumentRequirement, "documents")
