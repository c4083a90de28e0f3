"""Centralized configuration management for wirescript.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from wirescript.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> depth = get_environment(EnvVar.WIRESCRIPT_MAX_INCLUDE_DEPTH)  # int: 100
    >>>
    >>> # Override at runtime
    >>> indent = get_environment(EnvVar.WIRESCRIPT_INDENT, override="    ")
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("format"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    format: Formatter indentation and line width
    compile: Parser nesting and include depth limits
    logging: Default log level
"""

from wirescript.config.lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_environment,
    get_environment_info,
    get_format_defaults,
    # Introspection
    list_environment_variables,
)

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
