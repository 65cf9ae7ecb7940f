"""
Tests for utility modules: formatting, configuration, logging.
"""

from __future__ import annotations

import logging

from utils.config import Config
from utils.formatting import format_area, format_currency, format_number, format_percent
from utils.logging import JsonFormatter, setup_logging


class TestFormatting:
    def test_format_number_drops_trailing_zero(self):
        assert format_number(60000.0) == "60000"
        assert format_number(12.5) == "12.5"

    def test_format_currency(self):
        assert format_currency(1250) == "1250€"
        assert format_currency(99.5, "USD") == "99.5$"

    def test_format_percent(self):
        assert format_percent(120, decimals=2) == "120.00%"
        assert format_percent(33.333) == "33.3%"

    def test_format_area(self):
        assert format_area(85) == "85 m²"


class TestConfig:
    def test_defaults(self, monkeypatch):
        for name in ("HOST", "PORT", "DEBUG", "LOG_LEVEL", "SEED_DATA", "ALLOWED_ORIGINS"):
            monkeypatch.delenv(name, raising=False)
        config = Config.load()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.log_level == "INFO"
        assert config.seed_data is True

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("SEED_DATA", "false")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
        config = Config.load()
        assert config.port == 9000
        assert config.seed_data is False
        assert config.log_level == "DEBUG"
        assert config.allowed_origins == ["https://a.example", "https://b.example"]

    def test_to_dict(self):
        data = Config(seed_data=False).to_dict()
        assert data["seed_data"] is False
        assert set(data) >= {"host", "port", "debug", "log_level", "allowed_origins"}


class TestLogging:
    def test_setup_sets_level(self):
        setup_logging("WARNING")
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("core").level == logging.WARNING
        setup_logging("INFO")

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.INFO

    def test_json_formatter(self):
        record = logging.LogRecord("core", logging.INFO, __file__, 1, "saved %s", ("x",), None)
        line = JsonFormatter().format(record)
        assert '"message": "saved x"' in line
        assert '"level": "INFO"' in line
