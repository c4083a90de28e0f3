"""Literal value objects and the property coercion table.

Example:
    >>> from wirescript.value import StringValue, coerce_literal
    >>> coerce_literal(StringValue("16"), "number")
    16
"""

from wirescript.value.lib import (
    # Values
    LiteralValue,
    NumberValue,
    StringValue,
    SymbolValue,
    # Errors
    ValueCoercionError,
    # Coercion
    coerce_literal,
    format_number,
    normalize_number,
    parse_float_prefix,
    parse_int_prefix,
)

__all__ = [
    # Values
    "LiteralValue",
    "NumberValue",
    "StringValue",
    "SymbolValue",
    # Errors
    "ValueCoercionError",
    # Coercion
    "coerce_literal",
    "format_number",
    "normalize_number",
    "parse_float_prefix",
    "parse_int_prefix",
]
