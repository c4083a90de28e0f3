"""Core logging implementation for wirescript.

The compiler modules only ever obtain loggers through `get_logger`; handler
configuration is left to the embedding application via `setup_logging`.
"""

import logging
import sys
from typing import Optional

__all__ = ["LOGGER_NAME", "get_logger", "setup_logging"]

LOGGER_NAME = "wirescript"


def setup_logging(level: Optional[int | str] = None, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level. Falls back to WIRESCRIPT_LOG_LEVEL when None.
        stream: Output stream.
    """
    if level is None:
        from wirescript.config import EnvVar, get_environment

        level = get_environment(EnvVar.WIRESCRIPT_LOG_LEVEL)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Names are nested under the package logger, so `get_logger("parser")`
    returns the `wirescript.parser` logger.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
