"""
Unit Tests for Centralized Logging.

Tests the logging configuration and source handling.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from modules.backend.core import logging as logging_module
from modules.backend.core.logging import VALID_SOURCES, get_logger, log_with_source, setup_logging

TEST_CONFIG = {
    "level": "INFO",
    "format": "json",
    "handlers": {
        "console": {"enabled": True},
        "file": {
            "enabled": False,
            "path": "logs/system.jsonl",
            "max_bytes": 1024,
            "backup_count": 1,
        },
    },
}


@pytest.fixture
def logging_config():
    with patch.object(logging_module, "_load_logging_config", return_value=TEST_CONFIG):
        yield
    logging.getLogger().handlers.clear()


class TestValidSources:
    def test_contains_expected_values(self):
        assert VALID_SOURCES == frozenset({"web", "api", "cli", "internal", "unknown"})


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_uses_yaml_level(self, logging_config):
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_level_argument_overrides_yaml(self, logging_config):
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_console_handler_toggle(self, logging_config):
        setup_logging(enable_console=False)
        assert logging.getLogger().handlers == []

        setup_logging(enable_console=True)
        assert len(logging.getLogger().handlers) == 1

    def test_file_handler_writes_under_project_root(self, logging_config, tmp_path):
        with patch.object(logging_module, "_resolve_log_path", return_value=tmp_path / "logs" / "x.jsonl"):
            setup_logging(enable_console=False, enable_file_logging=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert (tmp_path / "logs").is_dir()

    def test_setup_is_repeatable(self, logging_config):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1


class TestLogWithSource:
    def test_passes_source(self):
        logger = MagicMock()

        log_with_source(logger, "cli", "info", "Tables created", tables=3)

        logger.info.assert_called_once_with("Tables created", source="cli", tables=3)

    def test_invalid_level_raises(self):
        with pytest.raises(AttributeError):
            log_with_source(object(), "cli", "loud", "nope")


class TestGetLogger:
    def test_returns_bound_logger(self):
        logger = get_logger("modules.backend.test")
        assert hasattr(logger, "info")
