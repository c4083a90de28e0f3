"""Unit tests for the formatter."""

import pytest

from wirescript.lexer import LexError, TokenKind, tokenize

from wirescript.formatter.lib import (
    FormatOptions,
    balance_tokens,
    escape_string,
    extract_comments,
    format,
)


def count_closes(text: str) -> int:
    return text.count(")")


class TestExtractComments:
    """Tests for comment recovery from raw source."""

    @pytest.mark.unit
    def test_standalone_and_inline(self):
        source = '; header\n(wire (text "a;b") ; trailing  \n  ; indented\n)'
        comments = extract_comments(source)

        assert [c.text for c in comments] == ["; header", "; trailing", "; indented"]
        assert [c.standalone for c in comments] == [True, False, True]
        assert [(c.line, c.column) for c in comments] == [(1, 1), (2, 20), (3, 3)]

    @pytest.mark.unit
    def test_semicolon_in_multiline_string(self):
        assert extract_comments('(text "first\n; not a comment")') == []

    @pytest.mark.unit
    def test_escaped_quote_keeps_string_open(self):
        assert extract_comments('(text "say \\"; hi\\"")') == []


class TestBalanceTokens:
    """Tests for paren repair on the token stream."""

    @pytest.mark.unit
    def test_closes_at_end_of_input(self):
        tokens = balance_tokens(tokenize("(wire (screen a"))
        kinds = [t.kind for t in tokens]

        assert kinds.count(TokenKind.RPAREN) == 2
        assert kinds[-1] == TokenKind.EOF
        # Synthesized parens sit at the end of the last real token
        assert (tokens[-2].line, tokens[-2].column) == (1, 16)

    @pytest.mark.unit
    def test_drops_surplus_close(self):
        kinds = [t.kind for t in balance_tokens(tokenize("(box))"))]

        assert kinds == [
            TokenKind.LPAREN,
            TokenKind.SYMBOL,
            TokenKind.RPAREN,
            TokenKind.EOF,
        ]

    @pytest.mark.unit
    def test_empty_input(self):
        tokens = balance_tokens(tokenize(""))

        assert [t.kind for t in tokens] == [TokenKind.EOF]


class TestAutoBalance:
    """Tests for placement-aware closing."""

    @pytest.mark.unit
    def test_missing_closes(self):
        result = format('(wire (screen a "A" (text "hi"')

        assert '(text "hi")' in result
        assert count_closes(result) == 3

    @pytest.mark.unit
    def test_screen_closes_open_elements(self):
        result = format('(wire (screen a "A" (box (screen b "B" (text "x"')

        assert "(box))" in result
        assert '\n  (screen b "B"' in result

    @pytest.mark.unit
    def test_deep_nesting_closed_before_screen(self):
        result = format('(wire (screen a "A" (box (card (section "S" (group (screen b')

        assert "(group))))" in result

    @pytest.mark.unit
    def test_define_closes_screen(self):
        result = format('(wire (screen a "A" (box (define comp () (text "x"')

        assert "(box))" in result
        assert "\n  (define comp ()" in result

    @pytest.mark.unit
    def test_layout_closes_screen(self):
        result = format('(wire (screen a "A" (box (layout main (slot')

        assert "(box))" in result
        assert "(layout main" in result

    @pytest.mark.unit
    def test_overlay_closes_back_to_screen(self):
        result = format('(wire (screen a "A" (box (drawer :id "d" (text "drawer"')

        assert "(box)" in result
        assert '\n    (drawer :id "d"' in result

    @pytest.mark.unit
    def test_overlay_closes_overlay(self):
        result = format('(wire (screen a (modal :id "m1" (text "1" (modal :id "m2"')

        assert '(text "1"))' in result
        assert '\n    (modal :id "m2")' in result

    @pytest.mark.unit
    def test_overlay_count(self):
        result = format('(wire (screen a "A" (modal :id "m" (text "modal content"')

        assert count_closes(result) == 4

    @pytest.mark.unit
    def test_screen_closes_overlay(self):
        result = format('(wire (screen a "A" (modal :id "m" (box (screen b "B"')

        assert "(box)))" in result

    @pytest.mark.unit
    def test_repeat_closed_before_screen(self):
        result = format('(wire (screen a "A" (repeat :count 3 (box (screen b "B"')

        assert "(repeat :count 3" in result
        assert "(box)))" in result

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "source,expected",
        [
            ('(box (text "hi" (box (text "nested"', '(text "hi")'),
            ('(box (icon "star" (text "label"', '(icon "star")'),
            ('(form (input "Name" :error (input "Email"', '(input "Name" :error)'),
            ('(box (badge "New" (text "Item"', '(badge "New")'),
            ('(box (text "Above" (divider (text "Below"', "(divider)"),
            ('(breadcrumb (crumb "Home" (crumb "Products"', '(crumb "Home")'),
        ],
    )
    def test_leaf_closed_before_next_form(self, source, expected):
        assert expected in format(f'(wire (screen a "A" {source}')

    @pytest.mark.unit
    def test_slot_in_layout(self):
        assert "(slot)" in format('(wire (layout main (box (slot (text "after"')

    @pytest.mark.unit
    def test_container_leaves_children_open(self):
        result = format('(wire (screen a "A" (card (card (card (text "deep"')

        assert count_closes(result) == 6

    @pytest.mark.unit
    def test_button_keeps_icon_child(self):
        result = format('(wire (screen a (button "Click" (icon "arrow"')

        assert '(button "Click" (icon "arrow"))' in result

    @pytest.mark.unit
    def test_user_component_accepts_children(self):
        result = format('(wire (screen a (mycomp (text "nested"')

        assert '(mycomp\n      (text "nested"))))' in result

    @pytest.mark.unit
    def test_surplus_closes_ignored(self):
        result = format('(wire (screen a "A" (text "hi")))))))))))')

        assert result == '(wire\n  (screen a "A"\n    (text "hi")))\n'

    @pytest.mark.unit
    def test_many_open_boxes(self):
        result = format('(wire (screen a "A" (box (box (box (box (box')

        assert count_closes(result) == 7

    @pytest.mark.unit
    def test_single_unclosed_root(self):
        assert format("(wire") == "(wire)\n"

    @pytest.mark.unit
    def test_empty_input(self):
        assert format("") == "\n"


class TestLayout:
    """Tests for the printed layout."""

    @pytest.mark.unit
    def test_canonical_layout(self):
        result = format('(wire (screen home "Home" (box :col (text "Hi"))))')

        assert result == (
            "(wire\n"
            '  (screen home "Home"\n'
            "    (box :col\n"
            '      (text "Hi"))))\n'
        )

    @pytest.mark.unit
    def test_define_parameters_stay_inline(self):
        result = format("(wire (define comp (label) (text $label")

        assert result == "(wire\n  (define comp (label)\n    (text $label)))\n"

    @pytest.mark.unit
    def test_props_and_values_preserved(self):
        source = '(wire (screen a :mobile (box :margin -4 :gap 8 (text "hi" :high'
        result = format(source)

        assert ":mobile" in result
        assert "(box :margin -4 :gap 8" in result
        assert '(text "hi" :high)' in result

    @pytest.mark.unit
    def test_references_preserved(self):
        result = format('(wire (screen a (button "Open" :to #dialog)))')

        assert '(button "Open" :to #dialog)' in result

    @pytest.mark.unit
    def test_strings_are_reescaped(self):
        result = format('(wire (screen a (text "He said \\"hi\\"\\tthen\\nleft"')

        assert '(text "He said \\"hi\\"\\tthen\\nleft")' in result

    @pytest.mark.unit
    def test_parens_in_strings(self):
        result = format('(wire (screen a "A" (text "Hello (world)"')

        assert '"Hello (world)"' in result
        assert count_closes(result) == 4

    @pytest.mark.unit
    def test_empty_string(self):
        assert '(text "")' in format('(wire (screen a (text ""')

    @pytest.mark.unit
    def test_blank_line_between_screens_kept(self):
        source = "(wire\n  (screen a (box))\n\n\n\n  (screen b (box)))"

        assert format(source) == (
            "(wire\n  (screen a\n    (box))\n\n  (screen b\n    (box)))\n"
        )

    @pytest.mark.unit
    def test_blank_line_inside_element_dropped(self):
        source = '(wire (screen a (box\n\n  (text "x"))))'

        assert "\n\n" not in format(source)

    @pytest.mark.unit
    def test_wraps_long_lines(self):
        options = FormatOptions(max_line_length=20)
        source = "(wire (screen home (box :padding 16 :gap 8 :col :center)))"
        result = format(source, options)

        assert result == (
            "(wire\n"
            "  (screen home\n"
            "    (box :padding 16\n"
            "      :gap 8 :col\n"
            "      :center)))\n"
        )

    @pytest.mark.unit
    def test_wraps_between_bare_flags(self):
        options = FormatOptions(max_line_length=20)
        source = "(wire (screen a (box :row :col :center :between :wrap :full)))"
        result = format(source, options)

        assert all(len(line) <= 20 for line in result.splitlines())
        assert ":center :between" not in result
        assert format(result, options) == result

    @pytest.mark.unit
    def test_wrapping_disabled(self):
        options = FormatOptions(max_line_length=0)
        source = "(wire (screen home (box :padding 16 :gap 8 :col :center)))"

        assert "(box :padding 16 :gap 8 :col :center)" in format(source, options)

    @pytest.mark.unit
    def test_custom_indent(self):
        result = format("(wire (screen a (box)))", FormatOptions(indent="    "))

        assert result == "(wire\n    (screen a\n        (box)))\n"

    @pytest.mark.unit
    def test_indent_from_environment(self, monkeypatch):
        monkeypatch.setenv("WIRESCRIPT_INDENT", "\t")

        assert format("(wire (screen a))") == "(wire\n\t(screen a))\n"

    @pytest.mark.unit
    def test_lex_error_propagates(self):
        with pytest.raises(LexError):
            format('(wire (screen a (text "open')


class TestComments:
    """Tests for comment preservation."""

    @pytest.mark.unit
    def test_standalone_comment(self):
        source = '(wire\n  ; Navigation\n  (screen a "A" (text "hi")))'

        assert format(source) == (
            '(wire\n  ; Navigation\n  (screen a "A"\n    (text "hi")))\n'
        )

    @pytest.mark.unit
    def test_inline_comment_dropped(self):
        result = format("(wire (screen a (box))) ; trailing")

        assert "trailing" not in result

    @pytest.mark.unit
    def test_trailing_comment_kept(self):
        result = format("(wire (screen a (box)))\n; end")

        assert result == "(wire\n  (screen a\n    (box)))\n; end\n"

    @pytest.mark.unit
    def test_semicolon_in_string_is_content(self):
        result = format('(wire (screen a (text "a; b")))')

        assert '(text "a; b")' in result

    @pytest.mark.unit
    def test_header_comments_not_duplicated(self):
        source = (
            "; Header comment\n"
            "; Another header\n"
            "(wire\n"
            "  (layout main\n"
            "    (box\n"
            "      (slot)\n"
            "  ; Screen comment\n"
            '  (screen a "A" (text "hi"'
        )
        result = format(source)

        assert result.startswith("; Header comment\n; Another header\n(wire\n")
        assert result.count("; Header comment") == 1
        assert result.count("; Screen comment") == 1
        assert '(slot)))\n  ; Screen comment\n  (screen a "A"' in result

    @pytest.mark.unit
    def test_comments_between_auto_closed_forms(self):
        source = (
            "; File header\n"
            "(wire\n"
            "  (define wrapper ()\n"
            "    (box :col\n"
            "      (card\n"
            '        (text "deep"\n'
            "  ; Component separator\n"
            "  (define another ()\n"
            '    (text "simple"\n'
            "  ; Screen section\n"
            '  (screen main "Main" (text "content"'
        )
        result = format(source)

        for text in ("; File header", "; Component separator", "; Screen section"):
            assert result.count(text) == 1
        assert count_closes(result) == source.count("(")


class TestIdempotency:
    """Formatting formatted output changes nothing."""

    SOURCES = [
        '(wire (screen home "Home" (box :col (text "Hi"))))',
        '(wire (screen a "A" (box (screen b "B" (text "x"',
        "; top\n(wire\n  ; a\n  (screen a (box))\n\n  ; b\n  (screen b (box)))",
        "(wire (define row (label) (box :row (text $label))) (screen a (row \"x\")))",
        '(wire (meta :title "App") (screen a (repeat :count 3 (text "i"))))',
        '(wire (screen a (button "Open" :to #m :primary) (modal :id m (text "Hi"))))',
    ]

    @pytest.mark.unit
    @pytest.mark.parametrize("source", SOURCES)
    def test_idempotent(self, source):
        once = format(source)

        assert format(once) == once

    @pytest.mark.unit
    def test_idempotent_when_wrapping(self):
        options = FormatOptions(max_line_length=24)
        source = (
            "(wire (screen a (box :padding 16 :gap 8 :col"
            ' (text "long content here"))))'
        )
        once = format(source, options)

        assert format(once, options) == once


class TestEscapeString:
    """Tests for string escaping."""

    @pytest.mark.unit
    def test_escapes(self):
        assert escape_string('say "hi"\n\t\\') == 'say \\"hi\\"\\n\\t\\\\'
