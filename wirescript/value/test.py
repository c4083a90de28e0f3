"""Tests for literal values and coercion."""

import math

import pytest

from wirescript.value.lib import (
    NumberValue,
    StringValue,
    SymbolValue,
    ValueCoercionError,
    coerce_literal,
    format_number,
    parse_float_prefix,
    parse_int_prefix,
)


class TestSymbolValue:
    """Tests for bare-word literals."""

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["true", "t"])
    def test_true_aliases(self, text):
        """Lisp-style true aliases."""
        value = SymbolValue(text)
        assert value.is_bool()
        assert value.as_bool() is True

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["false", "nil"])
    def test_false_aliases(self, text):
        """Lisp-style false aliases."""
        assert SymbolValue(text).as_bool() is False

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["TRUE", "True", "NIL", "yes"])
    def test_symbols_are_case_sensitive(self, text):
        """Bare symbols only match lowercase aliases."""
        value = SymbolValue(text)
        assert not value.is_bool()
        assert value.try_bool() is None
        with pytest.raises(ValueCoercionError, match="is not a boolean literal"):
            value.as_bool()

    @pytest.mark.unit
    def test_numeric_conversions(self):
        """Symbols parse leading digits leniently."""
        assert SymbolValue("12px").as_int() == 12
        with pytest.raises(ValueCoercionError, match="is not an integer"):
            SymbolValue("wide").as_int()
        with pytest.raises(ValueCoercionError, match="is not a number"):
            SymbolValue("wide").as_float()

    @pytest.mark.unit
    def test_natural_value(self):
        """Boolean aliases become bools, other words stay strings."""
        assert SymbolValue("t").natural() is True
        assert SymbolValue("primary").natural() == "primary"


class TestStringValue:
    """Tests for quoted-string literals."""

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["true", "TRUE", "True", "1"])
    def test_true_forms(self, text):
        """Quoted true is case-insensitive and includes "1"."""
        assert StringValue(text).as_bool() is True

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["false", "FALSE", "0"])
    def test_false_forms(self, text):
        """Quoted false is case-insensitive and includes "0"."""
        assert StringValue(text).as_bool() is False

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["t", "nil", "yes", ""])
    def test_lisp_aliases_not_accepted(self, text):
        """Lisp aliases only apply to bare symbols."""
        assert StringValue(text).try_bool() is None
        with pytest.raises(ValueCoercionError, match="is not a boolean"):
            StringValue(text).as_bool()

    @pytest.mark.unit
    def test_numbers(self):
        """Strings parse as numbers."""
        assert StringValue("16").as_int() == 16
        assert StringValue("1.5rem").as_float() == 1.5
        assert StringValue("-3.9").as_int() == -3
        assert StringValue("abc").try_float() is None


class TestNumberValue:
    """Tests for numeric literals."""

    @pytest.mark.unit
    def test_from_text_normalizes_integers(self):
        """Integral literals are held as int."""
        assert NumberValue.from_text("16").number == 16
        assert isinstance(NumberValue.from_text("16").number, int)
        assert NumberValue.from_text("-1.5").number == -1.5

    @pytest.mark.unit
    def test_truthiness(self):
        """Zero is false, anything else is true."""
        assert NumberValue(0).as_bool() is False
        assert NumberValue(-2).as_bool() is True
        assert NumberValue(0.5).as_bool() is True

    @pytest.mark.unit
    def test_as_int_truncates_toward_zero(self):
        """Integer conversion truncates."""
        assert NumberValue(3.7).as_int() == 3
        assert NumberValue(-3.7).as_int() == -3

    @pytest.mark.unit
    def test_as_string(self):
        """Numbers format without a trailing .0."""
        assert NumberValue(16).as_string() == "16"
        assert NumberValue(2.0).as_string() == "2"
        assert NumberValue(-0.25).as_string() == "-0.25"

    @pytest.mark.unit
    def test_is_int(self):
        """Integral detection."""
        assert NumberValue(4).is_int()
        assert not NumberValue(4.5).is_int()


class TestCoercion:
    """Tests for the property coercion table."""

    @pytest.mark.unit
    def test_string_to_number(self):
        """Quoted numbers become numbers."""
        assert coerce_literal(StringValue("16"), "number") == 16
        assert coerce_literal(StringValue("1.5"), "number") == 1.5

    @pytest.mark.unit
    def test_number_stays_number(self):
        """Numbers are untouched by number coercion."""
        assert coerce_literal(NumberValue(16), "number") == 16

    @pytest.mark.unit
    def test_boolean_to_number(self):
        """Boolean symbols map to 1 and 0."""
        assert coerce_literal(SymbolValue("true"), "number") == 1
        assert coerce_literal(SymbolValue("nil"), "number") == 0

    @pytest.mark.unit
    def test_unconvertible_number_is_preserved(self):
        """Text that is not numeric keeps its natural value."""
        assert coerce_literal(StringValue("wide"), "number") == "wide"

    @pytest.mark.unit
    def test_boolean_forms_agree(self):
        """:checked 1, :checked true and :checked "1" agree."""
        assert coerce_literal(NumberValue(1), "boolean") is True
        assert coerce_literal(SymbolValue("true"), "boolean") is True
        assert coerce_literal(StringValue("1"), "boolean") is True
        assert coerce_literal(StringValue("FALSE"), "boolean") is False
        assert coerce_literal(NumberValue(0), "boolean") is False

    @pytest.mark.unit
    def test_boolean_unrecognized_is_preserved(self):
        """Non-boolean text keeps its value."""
        assert coerce_literal(StringValue("maybe"), "boolean") == "maybe"

    @pytest.mark.unit
    def test_string_and_symbol_types(self):
        """Numbers and symbols render to text for string types."""
        assert coerce_literal(NumberValue(42), "string") == "42"
        assert coerce_literal(NumberValue(1.5), "symbol") == "1.5"
        assert coerce_literal(SymbolValue("true"), "string") == "true"

    @pytest.mark.unit
    def test_any_keeps_natural_value(self):
        """Untyped properties keep the natural value."""
        assert coerce_literal(StringValue("16"), "any") == "16"
        assert coerce_literal(SymbolValue("t"), "any") is True
        assert coerce_literal(NumberValue(2.5), "any") == 2.5


class TestNumericParsing:
    """Tests for prefix parsing helpers."""

    @pytest.mark.unit
    def test_int_prefix(self):
        assert parse_int_prefix("  42abc") == 42
        assert parse_int_prefix("-7") == -7
        assert parse_int_prefix("x1") is None

    @pytest.mark.unit
    def test_float_prefix(self):
        assert parse_float_prefix("1e3") == 1000.0
        assert parse_float_prefix(".5") == 0.5
        assert parse_float_prefix("Infinity") == math.inf
        assert parse_float_prefix(".") is None

    @pytest.mark.unit
    def test_format_number(self):
        assert format_number(3.0) == "3"
        assert format_number(math.inf) == "Infinity"
