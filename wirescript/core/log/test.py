"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from wirescript.core.log.lib import LOGGER_NAME, get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation under the package namespace."""
        logger = get_logger("test")
        assert logger.name == "wirescript.test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == LOGGER_NAME

    @pytest.mark.unit
    def test_get_logger_keeps_qualified_name(self) -> None:
        """Already-qualified names are not prefixed twice."""
        logger = get_logger("wirescript.parser")
        assert logger.name == "wirescript.parser"

    @pytest.mark.unit
    def test_child_loggers_propagate_to_package_logger(self) -> None:
        """Module loggers are children of the package logger."""
        assert get_logger("lexer").parent is get_logger()

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup."""
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op when logging was already configured, so
        # only the API contract is checked here.
        assert logger.level == logging.NOTSET

    @pytest.mark.unit
    def test_setup_logging_accepts_level_name(self, monkeypatch) -> None:
        """String levels and the environment fallback are accepted."""
        monkeypatch.setenv("WIRESCRIPT_LOG_LEVEL", "debug")
        setup_logging(stream=StringIO())
        setup_logging(level="warning", stream=StringIO())
