"""Core utilities shared by the WireScript compiler modules."""

from wirescript.core.log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
