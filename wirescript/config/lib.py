"""Centralized environment configuration management for wirescript.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from wirescript.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> width = get_environment(EnvVar.WIRESCRIPT_MAX_LINE_LENGTH)  # Returns int
    >>>
    >>> # Override at runtime
    >>> width = get_environment(EnvVar.WIRESCRIPT_MAX_LINE_LENGTH, override=80)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "WIRESCRIPT_INDENT").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by wirescript.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - format: Formatter defaults
        - compile: Parser and include resolution limits
        - logging: Log output configuration
    """

    # -------------------------------------------------------------------------
    # Formatter
    # -------------------------------------------------------------------------
    WIRESCRIPT_INDENT = EnvConfig(
        name="WIRESCRIPT_INDENT",
        default="  ",
        var_type=str,
        description="Indentation string used by the formatter",
        category="format",
    )
    WIRESCRIPT_MAX_LINE_LENGTH = EnvConfig(
        name="WIRESCRIPT_MAX_LINE_LENGTH",
        default=100,
        var_type=int,
        description="Line width before the formatter wraps inline properties",
        category="format",
    )

    # -------------------------------------------------------------------------
    # Compilation limits
    # -------------------------------------------------------------------------
    WIRESCRIPT_MAX_INCLUDE_DEPTH = EnvConfig(
        name="WIRESCRIPT_MAX_INCLUDE_DEPTH",
        default=100,
        var_type=int,
        description="Maximum nesting of include directives",
        category="compile",
    )
    WIRESCRIPT_MAX_NESTING_DEPTH = EnvConfig(
        name="WIRESCRIPT_MAX_NESTING_DEPTH",
        default=200,
        var_type=int,
        description="Maximum parenthesis nesting accepted by the parser",
        category="compile",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    WIRESCRIPT_LOG_LEVEL = EnvConfig(
        name="WIRESCRIPT_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Default level applied by setup_logging()",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        # Escapes let indentation such as "\t" be configured from a .env file
        return value.replace("\\t", "\t")

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, or bool).

    Example:
        >>> get_environment(EnvVar.WIRESCRIPT_MAX_INCLUDE_DEPTH)
        100
        >>> get_environment(EnvVar.WIRESCRIPT_MAX_INCLUDE_DEPTH, override=5)
        5
    """
    config: EnvConfig = env_var.value

    # Override takes highest priority
    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_format_defaults(
    indent: str | None = None, max_line_length: int | None = None
) -> tuple[str, int]:
    """Get formatter indent and line width.

    Resolution: explicit argument > environment > default.

    Returns:
        Tuple of (indent, max_line_length).
    """
    resolved_indent = get_environment(EnvVar.WIRESCRIPT_INDENT, override=indent)
    resolved_width = get_environment(
        EnvVar.WIRESCRIPT_MAX_LINE_LENGTH, override=max_line_length
    )
    return resolved_indent, resolved_width


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (format, compile, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_format_defaults",
    # Introspection
    "list_environment_variables",
]
