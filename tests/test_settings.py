"""
Tests for configuration and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError

from blockmerkle.core.settings import Settings, get_settings
from blockmerkle.utils.logging import ROOT_LOGGER, configure_logging, get_logger


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.hash_algorithm == "sha256"
        assert settings.log_level == "WARNING"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("BLOCKMERKLE_HASH_ALGORITHM", "SHA3_256")
        monkeypatch.setenv("BLOCKMERKLE_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.hash_algorithm == "sha3-256"
        assert settings.log_level == "DEBUG"

    def test_unknown_algorithm_rejected(self, monkeypatch):
        monkeypatch.setenv("BLOCKMERKLE_HASH_ALGORITHM", "crc32")

        with pytest.raises(ValidationError):
            Settings()

    @pytest.mark.parametrize("value,expected", [("warn", "WARNING"), ("nonsense", "WARNING"), ("error", "ERROR")])
    def test_log_level_normalized(self, monkeypatch, value, expected):
        monkeypatch.setenv("BLOCKMERKLE_LOG_LEVEL", value)

        assert Settings().log_level == expected

    def test_get_settings_is_cached(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("BLOCKMERKLE_HASH_ALGORITHM", "sha512")

        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings().hash_algorithm == "sha512"


class TestLogging:
    """Tests for logging helpers."""

    def test_get_logger_namespacing(self):
        assert get_logger().name == ROOT_LOGGER
        assert get_logger("cli").name == "blockmerkle.cli"
        assert get_logger("blockmerkle.merkle.tree").name == "blockmerkle.merkle.tree"

    def test_configure_logging_is_idempotent(self):
        logger = logging.getLogger(ROOT_LOGGER)
        before = list(logger.handlers)
        try:
            configure_logging("INFO")
            configure_logging("DEBUG")

            added = [h for h in logger.handlers if h not in before]
            assert len(added) <= 1
            assert logger.level == logging.DEBUG
        finally:
            for handler in [h for h in logger.handlers if h not in before]:
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
