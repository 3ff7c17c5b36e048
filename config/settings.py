"""Application settings loaded from environment variables.

Uses pydantic-settings for validation and type coercion.  All keys use
the ``HOUSING_`` prefix (e.g. ``HOUSING_LOG_LEVEL``) and may also be
supplied through a ``.env`` file in the working directory.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.enums import AmiFallbackPolicy


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Central configuration for the housing eligibility engine.

    The matching core receives these values through constructor
    arguments; the module-level :data:`settings` instance only supplies
    the defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOUSING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── App ────────────────────────────────────────────────────────────
    env: Literal["development", "production"] = "development"

    # ── Logging ────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    # ── Pagination ─────────────────────────────────────────────────────
    default_page_size: int = 20
    allowed_page_sizes: tuple[int, ...] = (10, 20, 30)

    # ── Eligibility rules ──────────────────────────────────────────────
    ami_fallback_policy: AmiFallbackPolicy = AmiFallbackPolicy.ZERO
    cha_provider_name: str = "Chicago Housing Authority"

    # ── Reference data (bundled JSON used when unset) ──────────────────
    programs_path: Path | None = None
    ami_limits_path: Path | None = None
    documents_path: Path | None = None

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {v!r}")
        return level

    @field_validator("allowed_page_sizes")
    @classmethod
    def _sizes_positive(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if not v or any(size < 1 for size in v):
            raise ValueError("allowed_page_sizes must be a non-empty set of positive integers")
        return tuple(sorted(set(v)))

    @model_validator(mode="after")
    def _default_size_allowed(self) -> Settings:
        if self.default_page_size not in self.allowed_page_sizes:
            raise ValueError(
                f"default_page_size {self.default_page_size} is not one of {self.allowed_page_sizes}"
            )
        return self

    # ── Derived Properties ─────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PRODUCTION


# Module-level singleton; import ``settings`` everywhere.
settings = Settings()
