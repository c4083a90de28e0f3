"""Literal values and the coercion table.

Every literal written in a WireScript source is one of three shapes: a bare
symbol (``primary``, ``t``), a quoted string (``"16"``) or a number
(``-1.5``). This module wraps each shape in a small immutable value object
exposing the same conversion surface, so the parser can coerce the text the
author actually wrote into whatever type a property declares:

    >>> StringValue("16").as_float()
    16.0
    >>> SymbolValue("nil").as_bool()
    False
    >>> coerce_literal(StringValue("1"), "boolean")
    True

Boolean aliases are deliberately asymmetric. Bare symbols follow the Lisp
convention (``t``/``nil``) and are case-sensitive, quoted strings accept
``true``/``false`` in any case plus ``"1"``/``"0"``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

# =============================================================================
# Errors
# =============================================================================


class ValueCoercionError(ValueError):
    """Raised when a strict conversion cannot be applied to a literal."""


# =============================================================================
# Numeric text parsing
# =============================================================================

# Leading integer prefix: "12px" -> 12, "-3.9" -> -3
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")

# Leading float prefix with optional fraction and exponent
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_INFINITY_PREFIX = re.compile(r"\s*([+-]?)Infinity")

SYMBOL_TRUE = frozenset({"true", "t"})
SYMBOL_FALSE = frozenset({"false", "nil"})
STRING_TRUE = frozenset({"true", "1"})
STRING_FALSE = frozenset({"false", "0"})


def parse_int_prefix(text: str) -> int | None:
    """Parse the leading integer of ``text``.

    Mirrors the lenient parsing used for attribute text: leading whitespace is
    skipped and trailing garbage ignored.

    Args:
        text: Text to parse.

    Returns:
        The parsed integer, or None when no digits lead the text.
    """
    match = _INT_PREFIX.match(text)
    if match is None:
        return None
    return int(match.group(1))


def parse_float_prefix(text: str) -> float | None:
    """Parse the leading decimal number of ``text``.

    Args:
        text: Text to parse.

    Returns:
        The parsed float, or None when no number leads the text.
    """
    match = _FLOAT_PREFIX.match(text)
    if match is not None:
        return float(match.group(1))
    match = _INFINITY_PREFIX.match(text)
    if match is not None:
        return -math.inf if match.group(1) == "-" else math.inf
    return None


def normalize_number(number: float) -> int | float:
    """Return ``number`` as an int when it has no fractional part."""
    if isinstance(number, int):
        return number
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def format_number(number: int | float) -> str:
    """Render a number the way it would be written in source."""
    if isinstance(number, float):
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "-Infinity" if number < 0 else "Infinity"
        if number.is_integer():
            return str(int(number))
    return repr(number)


# =============================================================================
# Literal Values
# =============================================================================


@dataclass(frozen=True)
class SymbolValue:
    """A bare word such as ``primary``, ``t`` or ``nil``."""

    text: str

    def is_bool(self) -> bool:
        return self.text in SYMBOL_TRUE or self.text in SYMBOL_FALSE

    def try_bool(self) -> bool | None:
        if self.text in SYMBOL_TRUE:
            return True
        if self.text in SYMBOL_FALSE:
            return False
        return None

    def as_bool(self) -> bool:
        result = self.try_bool()
        if result is None:
            raise ValueCoercionError(f"Symbol '{self.text}' is not a boolean literal")
        return result

    def try_int(self) -> int | None:
        return parse_int_prefix(self.text)

    def as_int(self) -> int:
        result = self.try_int()
        if result is None:
            raise ValueCoercionError(f"Symbol '{self.text}' is not an integer")
        return result

    def try_float(self) -> float | None:
        return parse_float_prefix(self.text)

    def as_float(self) -> float:
        result = self.try_float()
        if result is None:
            raise ValueCoercionError(f"Symbol '{self.text}' is not a number")
        return result

    def as_string(self) -> str:
        return self.text

    def natural(self) -> bool | str:
        """Value of the symbol when no property type applies."""
        result = self.try_bool()
        return self.text if result is None else result


@dataclass(frozen=True)
class StringValue:
    """A quoted string literal, already unescaped by the lexer."""

    text: str

    def is_bool(self) -> bool:
        lowered = self.text.lower()
        return lowered in STRING_TRUE or lowered in STRING_FALSE

    def try_bool(self) -> bool | None:
        lowered = self.text.lower()
        if lowered in STRING_TRUE:
            return True
        if lowered in STRING_FALSE:
            return False
        return None

    def as_bool(self) -> bool:
        result = self.try_bool()
        if result is None:
            raise ValueCoercionError(f"String '{self.text}' is not a boolean")
        return result

    def try_int(self) -> int | None:
        return parse_int_prefix(self.text)

    def as_int(self) -> int:
        result = self.try_int()
        if result is None:
            raise ValueCoercionError(f"String '{self.text}' is not an integer")
        return result

    def try_float(self) -> float | None:
        return parse_float_prefix(self.text)

    def as_float(self) -> float:
        result = self.try_float()
        if result is None:
            raise ValueCoercionError(f"String '{self.text}' is not a number")
        return result

    def as_string(self) -> str:
        return self.text

    def natural(self) -> str:
        return self.text


@dataclass(frozen=True)
class NumberValue:
    """A numeric literal. Integral values are held as ``int``."""

    number: int | float

    @classmethod
    def from_text(cls, text: str) -> NumberValue:
        """Build from the raw text of a number token (``"-1.5"``, ``"16"``)."""
        return cls(normalize_number(float(text)))

    def is_bool(self) -> bool:
        return True

    def try_bool(self) -> bool:
        return self.number != 0

    def as_bool(self) -> bool:
        return self.number != 0

    def is_int(self) -> bool:
        return float(self.number).is_integer()

    def try_int(self) -> int | None:
        if not math.isfinite(self.number):
            return None
        return math.trunc(self.number)

    def as_int(self) -> int:
        result = self.try_int()
        if result is None:
            raise ValueCoercionError(f"Number {self.as_string()} is not an integer")
        return result

    def try_float(self) -> float:
        return float(self.number)

    def as_float(self) -> float:
        return float(self.number)

    def as_string(self) -> str:
        return format_number(self.number)

    def natural(self) -> int | float:
        return self.number


LiteralValue = Union[SymbolValue, StringValue, NumberValue]


# =============================================================================
# Coercion Table
# =============================================================================


def coerce_literal(literal: LiteralValue, prop_type: str) -> bool | int | float | str:
    """Coerce a literal to a declared property type.

    Conversions that do not apply leave the literal's natural value untouched,
    so a malformed value (``:gap "wide"``) is preserved rather than dropped.

    Args:
        literal: The literal as written.
        prop_type: Declared type name (``boolean``, ``number``, ``string``,
            ``symbol``); anything else returns the natural value.

    Returns:
        The coerced Python value.
    """
    if prop_type == "boolean":
        result = literal.try_bool()
        return literal.natural() if result is None else result

    if prop_type == "number":
        if isinstance(literal, NumberValue):
            return literal.number
        if isinstance(literal, SymbolValue) and literal.is_bool():
            return 1 if literal.as_bool() else 0
        number = literal.try_float()
        return literal.natural() if number is None else normalize_number(number)

    if prop_type in ("string", "symbol"):
        return literal.as_string()

    return literal.natural()


__all__ = [
    # Errors
    "ValueCoercionError",
    # Values
    "LiteralValue",
    "NumberValue",
    "StringValue",
    "SymbolValue",
    # Coercion
    "coerce_literal",
    "format_number",
    "normalize_number",
    "parse_float_prefix",
    "parse_int_prefix",
]
