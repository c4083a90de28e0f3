"""Logging micro API for wirescript."""

from wirescript.core.log.lib import LOGGER_NAME, get_logger, setup_logging

__all__ = ["LOGGER_NAME", "get_logger", "setup_logging"]
