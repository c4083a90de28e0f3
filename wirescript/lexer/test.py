"""Tests for the lexer."""

import pytest

from wirescript.lexer.lib import LexError, Token, TokenKind, tokenize


def kinds(source: str) -> list[TokenKind]:
    return [token.kind for token in tokenize(source)]


def values(source: str) -> list[str]:
    return [token.value for token in tokenize(source)[:-1]]


class TestBasicTokens:
    """Tests for token recognition."""

    @pytest.mark.unit
    def test_empty_source(self):
        """Empty input yields only EOF at 1:1."""
        tokens = tokenize("")
        assert tokens == [Token(TokenKind.EOF, "", 1, 1, 1, 1)]

    @pytest.mark.unit
    def test_parens_and_symbols(self):
        assert kinds("(wire)") == [
            TokenKind.LPAREN,
            TokenKind.SYMBOL,
            TokenKind.RPAREN,
            TokenKind.EOF,
        ]

    @pytest.mark.unit
    def test_symbol_characters(self):
        """Symbols allow digits, dashes and underscores after the first char."""
        assert values("user-card_2 _x") == ["user-card_2", "_x"]

    @pytest.mark.unit
    def test_prefixed_references_drop_prefix(self):
        """Keyword, param and hash values exclude their prefix."""
        tokens = tokenize(":gap $title #confirm")
        assert [(t.kind, t.value) for t in tokens[:-1]] == [
            (TokenKind.KEYWORD, "gap"),
            (TokenKind.PARAM_REF, "title"),
            (TokenKind.HASH_REF, "confirm"),
        ]
        assert [t.text for t in tokens[:-1]] == [":gap", "$title", "#confirm"]

    @pytest.mark.unit
    def test_numbers(self):
        """Integers, decimals and negatives."""
        tokens = tokenize("16 -3 1.5 -0.25")
        assert all(t.kind == TokenKind.NUMBER for t in tokens[:-1])
        assert values("16 -3 1.5 -0.25") == ["16", "-3", "1.5", "-0.25"]

    @pytest.mark.unit
    def test_dash_without_digit_is_error(self):
        """A lone dash is not a number."""
        with pytest.raises(LexError, match="Unexpected character: -"):
            tokenize("- 1")

    @pytest.mark.unit
    def test_trailing_dot_is_error(self):
        """A decimal point must be followed by a digit."""
        with pytest.raises(LexError) as exc_info:
            tokenize("1.")
        assert exc_info.value.message == "Unexpected character: ."
        assert exc_info.value.column == 2

    @pytest.mark.unit
    def test_comments_and_whitespace_skipped(self):
        source = "; header\n(box ; trailing\n\t:gap 4)\r\n"
        assert values(source) == ["(", "box", "gap", "4", ")"]


class TestPositions:
    """Tests for token spans."""

    @pytest.mark.unit
    def test_start_and_end_columns(self):
        tokens = tokenize('(text "Hi")')
        string = tokens[2]
        assert (string.line, string.column) == (1, 7)
        assert (string.end_line, string.end_column) == (1, 11)

    @pytest.mark.unit
    def test_multiline_string_span(self):
        """Strings spanning lines end on the later line."""
        tokens = tokenize('"a\nbc" x')
        string, symbol = tokens[0], tokens[1]
        assert string.value == "a\nbc"
        assert (string.end_line, string.end_column) == (2, 4)
        assert (symbol.line, symbol.column) == (2, 5)

    @pytest.mark.unit
    def test_eof_position(self):
        tokens = tokenize("(a)\n")
        assert (tokens[-1].line, tokens[-1].column) == (2, 1)


class TestStrings:
    """Tests for string escapes."""

    @pytest.mark.unit
    def test_simple_escapes(self):
        assert values(r'"a\nb\tc\rd\"e\\f"') == ['a\nb\tc\rd"e\\f']

    @pytest.mark.unit
    def test_unknown_escape_keeps_character(self):
        assert values(r'"\q"') == ["q"]

    @pytest.mark.unit
    def test_hex_escape(self):
        assert values(r'"\x41\x7a"') == ["Az"]

    @pytest.mark.unit
    def test_unicode_escapes(self):
        assert values(r'"\u00e9 \u{1F600}"') == ["\u00e9 \U0001f600"]

    @pytest.mark.unit
    def test_surrogate_pair_joined(self):
        """A UTF-16 surrogate pair decodes to a single code point."""
        (value,) = values(r'"\uD83D\uDE00!"')

        assert value == "\U0001f600!"
        assert value.encode("utf-8") == b"\xf0\x9f\x98\x80!"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "source",
        [r'"\uD83D"', r'"\uDE00"', r'"\uD83Dx"', r'"\uD83D\u0041"'],
    )
    def test_unpaired_surrogate(self, source):
        """Lone surrogates are rejected at the escape's backslash."""
        with pytest.raises(LexError) as exc_info:
            tokenize(source)
        error = exc_info.value
        assert error.message == "Unpaired surrogate in unicode escape"
        assert (error.line, error.column) == (1, 2)

    @pytest.mark.unit
    def test_incomplete_hex_escape(self):
        """An incomplete hex escape reports the offending column."""
        with pytest.raises(LexError) as exc_info:
            tokenize(r'"\x4"')
        error = exc_info.value
        assert "Invalid hex digit" in error.message
        assert (error.line, error.column) == (1, 5)
        assert str(error) == (
            "Invalid hex digit '\"' in escape sequence at line 1, column 5"
        )

    @pytest.mark.unit
    def test_hex_escape_at_end_of_input(self):
        with pytest.raises(LexError, match="Expected 4 hex digits"):
            tokenize(r'"\u12')

    @pytest.mark.unit
    def test_unterminated_string(self):
        """Unterminated strings report the opening quote."""
        with pytest.raises(LexError) as exc_info:
            tokenize('(text "oops')
        assert exc_info.value.message == "Unterminated string"
        assert exc_info.value.column == 7

    @pytest.mark.unit
    def test_unterminated_escape(self):
        with pytest.raises(LexError, match="Unterminated escape sequence"):
            tokenize('"abc\\')

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "source,message",
        [
            (r'"\u{}"', "Unicode escape must have 1-6 hex digits"),
            (r'"\u{1234567}"', "Unicode escape must have 1-6 hex digits"),
            (r'"\u{110000}"', "Unicode code point 110000 out of range"),
            (r'"\u{D800}"', "Unpaired surrogate in unicode escape"),
            (r'"\u{12g}"', "Invalid hex digit 'g' in unicode escape"),
            (r'"\u{12', "Unterminated unicode escape sequence"),
        ],
    )
    def test_braced_unicode_errors(self, source, message):
        with pytest.raises(LexError) as exc_info:
            tokenize(source)
        assert exc_info.value.message == message


class TestReferenceErrors:
    """Tests for empty prefixed references."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "source,message",
        [
            (": x", "Expected keyword after :"),
            ("$ x", "Expected parameter name after $"),
            ("#(", "Expected identifier after #"),
        ],
    )
    def test_empty_reference(self, source, message):
        with pytest.raises(LexError) as exc_info:
            tokenize(source)
        assert exc_info.value.message == message
        assert exc_info.value.column == 1

    @pytest.mark.unit
    def test_unexpected_character(self):
        expected = r"Unexpected character: \{ at line 2, column 3"
        with pytest.raises(LexError, match=expected):
            tokenize("(a\n  {")
