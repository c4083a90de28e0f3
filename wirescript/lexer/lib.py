"""Lexer for WireScript source text.

Converts source text into a flat list of immutable tokens. Whitespace and
``;`` comments never produce tokens; the formatter recovers comments from the
raw text separately.

Example:
    >>> from wirescript.lexer import tokenize
    >>> [t.kind.value for t in tokenize("(text :high)")]
    ['LPAREN', 'SYMBOL', 'KEYWORD', 'RPAREN', 'EOF']
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wirescript.core.log import get_logger

logger = get_logger("lexer")


class TokenKind(str, Enum):
    """Kinds of lexical token."""

    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    STRING = "STRING"
    NUMBER = "NUMBER"
    SYMBOL = "SYMBOL"
    KEYWORD = "KEYWORD"
    PARAM_REF = "PARAM_REF"
    HASH_REF = "HASH_REF"
    EOF = "EOF"


# Token kinds that can stand as a property value
VALUE_KINDS = frozenset(
    {
        TokenKind.STRING,
        TokenKind.NUMBER,
        TokenKind.SYMBOL,
        TokenKind.PARAM_REF,
        TokenKind.HASH_REF,
    }
)


@dataclass(frozen=True)
class Token:
    """A lexical token with its source span.

    Attributes:
        kind: Token kind.
        value: Token text. Strings are unescaped. Keyword, parameter and hash
            references exclude their ``:``, ``$`` or ``#`` prefix.
        line: 1-based start line.
        column: 1-based start column.
        end_line: Line just after the last character.
        end_column: Column just after the last character.
    """

    kind: TokenKind
    value: str
    line: int
    column: int
    end_line: int
    end_column: int

    @property
    def text(self) -> str:
        """Source spelling of the token (strings are not re-escaped)."""
        if self.kind == TokenKind.KEYWORD:
            return f":{self.value}"
        if self.kind == TokenKind.PARAM_REF:
            return f"${self.value}"
        if self.kind == TokenKind.HASH_REF:
            return f"#{self.value}"
        return self.value


class LexError(Exception):
    """Raised when source text cannot be tokenized.

    Attributes:
        message: Description without position.
        line: 1-based line of the offending character.
        column: 1-based column of the offending character.
    """

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at line {line}, column {column}")
        self.message = message
        self.line = line
        self.column = column


# =============================================================================
# Character classes
# =============================================================================

WHITESPACE = frozenset(" \t\r\n")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
MAX_CODE_POINT = 0x10FFFF
SURROGATE_START = 0xD800
LOW_SURROGATE_START = 0xDC00
SURROGATE_END = 0xDFFF

SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def is_symbol_start(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def is_symbol_char(char: str) -> bool:
    return is_symbol_start(char) or _is_digit(char) or char == "-"


# =============================================================================
# Lexer
# =============================================================================


class Lexer:
    """Single-use tokenizer over one source string."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source.

        Returns:
            Tokens in source order, always ending with an EOF token.

        Raises:
            LexError: On the first lexical problem.
        """
        tokens: list[Token] = []
        while True:
            self._skip_trivia()
            if self._at_end():
                break
            tokens.append(self._read_token())

        tokens.append(
            Token(TokenKind.EOF, "", self.line, self.column, self.line, self.column)
        )
        logger.debug(f"Tokenized {len(tokens)} tokens over {self.line} lines")
        return tokens

    # -------------------------------------------------------------------------
    # Cursor helpers
    # -------------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.source[index] if index < len(self.source) else ""

    def _advance(self) -> str:
        char = self.source[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _make(self, kind: TokenKind, value: str, line: int, column: int) -> Token:
        return Token(kind, value, line, column, self.line, self.column)

    def _skip_trivia(self) -> None:
        while not self._at_end():
            char = self._peek()
            if char in WHITESPACE:
                self._advance()
            elif char == ";":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
            else:
                break

    # -------------------------------------------------------------------------
    # Token readers
    # -------------------------------------------------------------------------

    def _read_token(self) -> Token:
        char = self._peek()
        line, column = self.line, self.column

        if char == "(":
            self._advance()
            return self._make(TokenKind.LPAREN, "(", line, column)
        if char == ")":
            self._advance()
            return self._make(TokenKind.RPAREN, ")", line, column)
        if char == '"':
            return self._read_string()
        if char == "$":
            return self._read_prefixed(
                TokenKind.PARAM_REF, "Expected parameter name after $"
            )
        if char == "#":
            return self._read_prefixed(
                TokenKind.HASH_REF, "Expected identifier after #"
            )
        if char == ":":
            return self._read_prefixed(TokenKind.KEYWORD, "Expected keyword after :")
        if _is_digit(char) or (char == "-" and _is_digit(self._peek(1))):
            return self._read_number()
        if is_symbol_start(char):
            value = self._read_name()
            return self._make(TokenKind.SYMBOL, value, line, column)

        raise LexError(f"Unexpected character: {char}", line, column)

    def _read_name(self) -> str:
        start = self.pos
        while not self._at_end() and is_symbol_char(self._peek()):
            self._advance()
        return self.source[start : self.pos]

    def _read_prefixed(self, kind: TokenKind, empty_message: str) -> Token:
        line, column = self.line, self.column
        self._advance()
        name = self._read_name()
        if not name:
            raise LexError(empty_message, line, column)
        return self._make(kind, name, line, column)

    def _read_number(self) -> Token:
        line, column = self.line, self.column
        start = self.pos
        if self._peek() == "-":
            self._advance()
        while _is_digit(self._peek()):
            self._advance()
        # Decimal point only when a digit follows
        if self._peek() == "." and _is_digit(self._peek(1)):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()
        return self._make(TokenKind.NUMBER, self.source[start : self.pos], line, column)

    def _read_string(self) -> Token:
        line, column = self.line, self.column
        self._advance()
        parts: list[str] = []

        while not self._at_end() and self._peek() != '"':
            if self._peek() != "\\":
                parts.append(self._advance())
                continue

            escape_line, escape_column = self.line, self.column
            self._advance()
            if self._at_end():
                raise LexError("Unterminated escape sequence", self.line, self.column)
            escaped = self._advance()
            if escaped in SIMPLE_ESCAPES:
                parts.append(SIMPLE_ESCAPES[escaped])
            elif escaped == "x":
                parts.append(self._read_hex_escape(2))
            elif escaped == "u" and self._peek() == "{":
                parts.append(self._read_braced_unicode())
            elif escaped == "u":
                parts.append(self._read_utf16_escape(escape_line, escape_column))
            else:
                # Unknown escapes keep the escaped character
                parts.append(escaped)

        if self._at_end():
            raise LexError("Unterminated string", line, column)

        self._advance()
        return self._make(TokenKind.STRING, "".join(parts), line, column)

    def _read_hex_escape(self, digits: int) -> str:
        line, column = self.line, self.column
        hex_text = ""
        for _ in range(digits):
            if self._at_end():
                raise LexError(
                    f"Expected {digits} hex digits in escape sequence", line, column
                )
            char = self._peek()
            if char not in HEX_DIGITS:
                raise LexError(
                    f"Invalid hex digit '{char}' in escape sequence",
                    self.line,
                    self.column,
                )
            hex_text += self._advance()
        return chr(int(hex_text, 16))

    def _read_utf16_escape(self, line: int, column: int) -> str:
        """Read the digits of a ``\\uHHHH`` escape.

        A high surrogate followed by a ``\\uHHHH`` low surrogate is joined into
        one code point. Any other surrogate is rejected so strings stay
        encodable as UTF-8.
        """
        unit = ord(self._read_hex_escape(4))
        if not SURROGATE_START <= unit <= SURROGATE_END:
            return chr(unit)

        pair_follows = (
            self._peek() == "\\" and self._peek(1) == "u" and self._peek(2) != "{"
        )
        if unit < LOW_SURROGATE_START and pair_follows:
            self._advance()
            self._advance()
            low = ord(self._read_hex_escape(4))
            if LOW_SURROGATE_START <= low <= SURROGATE_END:
                offset = ((unit - SURROGATE_START) << 10) + (low - LOW_SURROGATE_START)
                return chr(0x10000 + offset)

        raise LexError("Unpaired surrogate in unicode escape", line, column)

    def _read_braced_unicode(self) -> str:
        line, column = self.line, self.column
        self._advance()
        hex_text = ""
        while not self._at_end() and self._peek() != "}":
            char = self._peek()
            if char not in HEX_DIGITS:
                raise LexError(
                    f"Invalid hex digit '{char}' in unicode escape",
                    self.line,
                    self.column,
                )
            hex_text += self._advance()

        if self._at_end():
            raise LexError("Unterminated unicode escape sequence", line, column)
        self._advance()

        if not 1 <= len(hex_text) <= 6:
            raise LexError("Unicode escape must have 1-6 hex digits", line, column)
        code_point = int(hex_text, 16)
        if code_point > MAX_CODE_POINT:
            raise LexError(f"Unicode code point {hex_text} out of range", line, column)
        if SURROGATE_START <= code_point <= SURROGATE_END:
            raise LexError("Unpaired surrogate in unicode escape", line, column)
        return chr(code_point)


def tokenize(source: str) -> list[Token]:
    """Tokenize WireScript source text.

    Args:
        source: Source text.

    Returns:
        Tokens in source order, ending with EOF.

    Raises:
        LexError: On unterminated strings or escapes, bad hex or unicode
            escapes, empty ``:``/``$``/``#`` references and unexpected
            characters.
    """
    return Lexer(source).tokenize()


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
