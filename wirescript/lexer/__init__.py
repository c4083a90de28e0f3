"""Lexer module - converts WireScript source text into tokens."""

from wirescript.lexer.lib import (
    VALUE_KINDS,
    Lexer,
    LexError,
    Token,
    TokenKind,
    is_symbol_char,
    is_symbol_start,
    tokenize,
)

__all__ = [
    "VALUE_KINDS",
    "LexError",
    "Lexer",
    "Token",
    "TokenKind",
    "is_symbol_char",
    "is_symbol_start",
    "tokenize",
]
