"""Housing eligibility engine entry point.

Configures structured logging, wires the matching services from
settings and bundled reference data, and exposes a small command line:

    python -m src.main profile.json --eligibility open --page-size 10

The profile file holds either a full match request
(``{"profile": ..., "filters": ..., "pagination": ...}``) or a bare
household profile object.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import orjson
import structlog

from config.settings import Settings, settings
from src.data.seed import load_ami_limits, load_document_requirements, load_programs
from src.models.document import DocumentRequirement
from src.models.enums import EligibilityFilter
from src.services.ami import AmiLimitResolver
from src.services.catalog import InMemoryProgramRepository, InvalidMatchRequestError, MatchService
from src.services.eligibility import EligibilityChecker
from src.services.matching import ProgramMatcher

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def configure_logging(config: Settings = settings) -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[config.log_level],
        ),
        context_class=dict,
        # Logs go to stderr so stdout carries only the JSON response.
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Outside production the configuration may be replaced at runtime.
        cache_logger_on_first_use=config.is_production,
    )


# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Services:
    match_service: MatchService
    matcher: ProgramMatcher
    documents: list[DocumentRequirement]


def build_services(config: Settings = settings) -> Services:
    """Load reference data and construct the matching stack."""
    resolver = AmiLimitResolver(
        load_ami_limits(config.ami_limits_path),
        fallback_policy=config.ami_fallback_policy,
    )
    checker = EligibilityChecker(resolver, cha_provider=config.cha_provider_name)
    matcher = ProgramMatcher(
        checker,
        default_page_size=config.default_page_size,
        allowed_page_sizes=config.allowed_page_sizes,
    )
    repository = InMemoryProgramRepository(load_programs(config.programs_path))

    logger.info(
        "app.services_ready",
        programs=len(repository),
        ami_year=resolver.latest_year,
        fallback_policy=config.ami_fallback_policy.value,
    )
    return Services(
        match_service=MatchService(repository, matcher),
        matcher=matcher,
        documents=load_document_requirements(config.documents_path),
    )


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="housing-match",
        description="Match a household profile against the housing program catalog",
    )
    parser.add_argument("profile", type=Path, help="JSON file with a match request or bare profile")
    parser.add_argument("--page", type=int, help="1-indexed page number")
    parser.add_argument("--page-size", type=int, help="Results per page (10, 20 or 30)")
    parser.add_argument(
        "--eligibility",
        choices=[f.value for f in EligibilityFilter],
        help="Keep all programs, only eligible ones, or eligible with open waitlists",
    )
    parser.add_argument("--neighborhood", help="Exact neighborhood name")
    parser.add_argument("--type", dest="program_type", help="Program type, e.g. HCV or LIHTC")
    parser.add_argument("--search", help="Case-insensitive text in name, address or provider")
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--checklist",
        action="store_true",
        help="Print the document checklist for the eligible program types instead of matches",
    )
    output.add_argument(
        "--stats",
        action="store_true",
        help="Print catalog-wide program counts instead of matches",
    )
    return parser


def _request_from_args(args: argparse.Namespace) -> dict:
    payload = orjson.loads(args.profile.read_bytes())
    if not isinstance(payload, dict):
        raise InvalidMatchRequestError("profile file must contain a JSON object")
    if "profile" not in payload:
        payload = {"profile": payload}

    filters = dict(payload.get("filters") or {})
    for key, value in (
        ("eligibility", args.eligibility),
        ("neighborhood", args.neighborhood),
        ("programType", args.program_type),
        ("search", args.search),
    ):
        if value is not None:
            filters[key] = value
    payload["filters"] = filters

    if args.page is not None or args.page_size is not None:
        pagination = dict(payload.get("pagination") or {})
        if args.page is not None:
            pagination["page"] = args.page
        if args.page_size is not None:
            pagination["pageSize"] = args.page_size
        payload["pagination"] = pagination
    return payload


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()

    try:
        payload = _request_from_args(args)
    except (OSError, orjson.JSONDecodeError) as exc:
        print(f"error: cannot read {args.profile}: {exc}", file=sys.stderr)
        return 2
    except InvalidMatchRequestError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    services = build_services()
    service = services.match_service
    try:
        if args.stats:
            result = asyncio.run(service.catalog_stats())
        elif args.checklist:
            result = asyncio.run(service.document_checklist(payload, services.documents))
        else:
            result = asyncio.run(service.find_matches(payload))
    except InvalidMatchRequestError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    sys.stdout.buffer.write(
        orjson.dumps(result.model_dump(mode="json", by_alias=True), option=orjson.OPT_INDENT_2)
    )
    sys.stdout.buffer.write(b"\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
