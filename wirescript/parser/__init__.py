"""Parser module - builds a Document from WireScript source or tokens.

Example usage:
    >>> from wirescript.parser import parse
    >>> result = parse('(wire (screen home (box :gap "16")))')
    >>> result.document.screens[0].root.props["gap"]
    16
"""

from wirescript.parser.lib import (
    URL_PROTOCOLS,
    Parser,
    ParseResult,
    ParserError,
    is_url,
    parse,
    parse_tokens,
)

__all__ = [
    "URL_PROTOCOLS",
    "ParseResult",
    "Parser",
    "ParserError",
    "is_url",
    "parse",
    "parse_tokens",
]
