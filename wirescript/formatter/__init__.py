"""Formatter module - canonical layout and paren repair for WireScript source.

Example usage:
    >>> from wirescript.formatter import format
    >>> format("(wire (screen home (box)))))")
    '(wire\\n  (screen home\\n    (box)))\\n'
"""

from wirescript.formatter.lib import (
    Comment,
    FormatOptions,
    balance_tokens,
    escape_string,
    extract_comments,
    format,
    format_tokens,
    render_token,
)

__all__ = [
    "Comment",
    "FormatOptions",
    "balance_tokens",
    "escape_string",
    "extract_comments",
    "format",
    "format_tokens",
    "render_token",
]
