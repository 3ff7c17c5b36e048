"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from config.settings import Settings
from src.models.enums import AmiFallbackPolicy


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("HOUSING_DEFAULT_PAGE_SIZE", "HOUSING_AMI_FALLBACK_POLICY", "HOUSING_ENV"):
            monkeypatch.delenv(key, raising=False)
        config = Settings(_env_file=None)

        assert config.default_page_size == 20
        assert config.allowed_page_sizes == (10, 20, 30)
        assert config.ami_fallback_policy == AmiFallbackPolicy.ZERO
        assert config.cha_provider_name == "Chicago Housing Authority"
        assert config.programs_path is None
        assert config.is_production is False

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOUSING_AMI_FALLBACK_POLICY", "estimate")
        monkeypatch.setenv("HOUSING_DEFAULT_PAGE_SIZE", "30")
        monkeypatch.setenv("HOUSING_ENV", "production")
        config = Settings(_env_file=None)

        assert config.ami_fallback_policy == AmiFallbackPolicy.ESTIMATE
        assert config.default_page_size == 30
        assert config.is_production is True

    def test_allowed_sizes_sorted_and_unique(self) -> None:
        config = Settings(_env_file=None, allowed_page_sizes=(50, 25, 25), default_page_size=25)
        assert config.allowed_page_sizes == (25, 50)

    def test_default_size_must_be_allowed(self) -> None:
        with pytest.raises(ValidationError, match="default_page_size"):
            Settings(_env_file=None, default_page_size=15)

    def test_page_sizes_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="positive"):
            Settings(_env_file=None, allowed_page_sizes=(0, 20))

    def test_log_level_normalized(self) -> None:
        assert Settings(_env_file=None, log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError, match="unknown log level"):
            Settings(_env_file=None, log_level="verbose")

    def test_unknown_log_format_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")
