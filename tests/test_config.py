"""Tests for settings loading and logging setup."""

import logging
from datetime import time
from decimal import Decimal

from motorph_payroll.config import Settings
from motorph_payroll.logging_config import configure_logging

from tests.conftest import make_settings


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("STANDARD_START", "LATE_THRESHOLD", "STANDARD_END", "HOURS_PER_DAY", "COMPANY_NAME"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.standard_start == time(8, 0)
        assert settings.late_threshold == time(8, 15)
        assert settings.standard_end == time(17, 0)
        assert settings.hours_per_day == Decimal("8")

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("LATE_THRESHOLD", "08:10")
        monkeypatch.setenv("HOURS_PER_DAY", "7.5")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("PORT", "9000")

        settings = Settings.from_env()

        assert settings.late_threshold == time(8, 10)
        assert settings.hours_per_day == Decimal("7.5")
        assert settings.log_level == "DEBUG"
        assert settings.port == 9000

    def test_create_schema_flag(self, monkeypatch):
        monkeypatch.delenv("CREATE_SCHEMA", raising=False)
        assert Settings.from_env().create_schema is False

        monkeypatch.setenv("CREATE_SCHEMA", "TRUE")
        assert Settings.from_env().create_schema is True


class TestLogging:
    """Logging configuration."""

    def test_configure_logging_is_safe_to_repeat(self):
        configure_logging(make_settings(log_level="WARNING"))
        configure_logging(make_settings(log_level="WARNING"))

        assert logging.getLogger().handlers
