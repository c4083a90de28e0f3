"""Unit tests for the parser."""

import pytest

from wirescript.ir import (
    ActionRef,
    ElementNode,
    OverlayRef,
    ParamRef,
    RepeatNode,
    ScreenRef,
    UrlRef,
)
from wirescript.lexer import tokenize

from wirescript.parser.lib import is_url, parse, parse_tokens


def root_of(source: str) -> ElementNode:
    """Parse a single-screen document and return the screen root."""
    result = parse(source)
    assert result.success, result.errors
    return result.document.screens[0].root


def messages(source: str, **kwargs) -> list[str]:
    return [error.message for error in parse(source, **kwargs).errors]


class TestDocument:
    """Tests for the root wrapper and top-level forms."""

    @pytest.mark.unit
    def test_minimal_screen(self):
        """Screen id, name and root content are captured."""
        result = parse('(wire (screen home "Home" (text "Hi")))')

        assert result.success
        assert result.errors == []
        screen = result.document.screens[0]
        assert screen.id == "home"
        assert screen.name == "Home"
        assert screen.root.type == "text"
        assert screen.root.content == "Hi"

    @pytest.mark.unit
    def test_missing_wire_wrapper_is_fatal(self):
        result = parse("(screen home (box))")

        assert not result.success
        assert result.document is None
        assert result.errors[0].message == "Expected 'wire', got 'screen'"

    @pytest.mark.unit
    def test_empty_source_is_fatal(self):
        result = parse("")

        assert not result.success
        assert result.document is None

    @pytest.mark.unit
    def test_zero_screens_parse_successfully(self):
        """Definition-only fragments are valid parse input."""
        result = parse("(wire (define spacer () (box :gap 8)))")

        assert result.success
        assert result.document.screens == []
        assert result.document.get_component("spacer") is not None

    @pytest.mark.unit
    def test_lex_error_reported_in_result(self):
        result = parse('(wire (text "abc')

        assert not result.success
        assert result.document is None
        error = result.errors[0]
        assert error.message == "Unterminated string"
        assert (error.line, error.column) == (1, 13)

    @pytest.mark.unit
    def test_document_location_spans_wire_form(self):
        result = parse("(wire (screen home (box)))")

        loc = result.document.loc
        assert (loc.line, loc.column) == (1, 1)
        assert (loc.end_line, loc.end_column) == (1, 27)

    @pytest.mark.unit
    def test_locations_follow_lines(self):
        source = '(wire\n  (screen home\n    (text "Hi")))'
        root = root_of(source)

        assert (root.loc.line, root.loc.column) == (3, 5)
        assert (root.loc.end_line, root.loc.end_column) == (3, 16)

    @pytest.mark.unit
    def test_meta_forms_are_merged(self):
        source = (
            '(wire (meta :title "App" :version 2 :draft) (meta :theme dark)'
            " (screen home (box)))"
        )
        result = parse(source)

        assert result.success
        assert result.document.meta == {
            "title": "App",
            "version": 2,
            "draft": True,
            "theme": "dark",
        }

    @pytest.mark.unit
    def test_include_paths(self):
        result = parse('(wire (include "lib/cards.wire") (screen home (box)))')

        assert result.success
        assert [i.path for i in result.document.includes] == ["lib/cards.wire"]

    @pytest.mark.unit
    def test_include_requires_string(self):
        assert messages("(wire (include cards) (screen home (box)))") == [
            "Include expects a string path"
        ]

    @pytest.mark.unit
    def test_parse_tokens_appends_missing_eof(self):
        tokens = tokenize("(wire (screen home (box)))")[:-1]
        result = parse_tokens(tokens)

        assert result.success
        assert result.document.screens[0].root.type == "box"


class TestErrorRecovery:
    """Tests for recording errors and continuing."""

    @pytest.mark.unit
    def test_unknown_top_level_form_is_skipped(self):
        result = parse("(wire (bogus 1 (x)) (screen home (box)))")

        assert not result.success
        assert [e.message for e in result.errors] == ["Unknown form type: bogus"]
        assert len(result.document.screens) == 1

    @pytest.mark.unit
    def test_broken_child_is_skipped(self):
        """A failing child is dropped and its siblings survive."""
        result = parse('(wire (screen home (box (button :to) (text "ok"))))')

        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].message.startswith("Expected navigation target")
        root = result.document.screens[0].root
        assert [child.type for child in root.children] == ["text"]

    @pytest.mark.unit
    def test_broken_screen_does_not_hide_later_screens(self):
        result = parse("(wire (screen (box)) (screen ok (box)))")

        assert len(result.errors) == 1
        assert [s.id for s in result.document.screens] == ["ok"]

    @pytest.mark.unit
    def test_missing_wire_close_keeps_document(self):
        result = parse("(wire (screen home (box))")

        assert not result.success
        assert result.document is not None
        assert len(result.document.screens) == 1
        assert result.errors[0].message == "Missing closing parenthesis for 'wire'"

    @pytest.mark.unit
    def test_content_after_wire(self):
        assert messages("(wire (screen home (box))) (box)") == [
            "Unexpected content after 'wire' form"
        ]

    @pytest.mark.unit
    def test_screen_without_root(self):
        result = parse("(wire (screen home) (screen other (box)))")

        assert result.errors[0].message == "Screen 'home' must have a root element"
        assert [s.id for s in result.document.screens] == ["other"]

    @pytest.mark.unit
    def test_screen_with_two_roots_keeps_first(self):
        result = parse("(wire (screen home (box) (card)))")

        assert [e.message for e in result.errors] == [
            "Screen 'home' must have a single root element"
        ]
        assert result.document.screens[0].root.type == "box"

    @pytest.mark.unit
    def test_leaf_element_rejects_children(self):
        result = parse('(wire (screen home (text "a" (box))))')

        assert [e.message for e in result.errors] == [
            "Element 'text' does not support children"
        ]
        assert result.document.screens[0].root.children == []

    @pytest.mark.unit
    def test_top_level_form_inside_element(self):
        assert messages("(wire (screen home (box (screen inner (box)))))") == [
            "'screen' is only allowed at the top level"
        ]

    @pytest.mark.unit
    def test_define_accepts_one_body(self):
        assert messages("(wire (define two () (box) (box)))") == [
            "'define' accepts a single body element"
        ]


class TestNestingLimit:
    """Tests for the nesting depth guard."""

    @pytest.mark.unit
    def test_exceeding_limit_is_fatal(self):
        result = parse("(wire (screen home (box (box))))", max_nesting_depth=3)

        assert not result.success
        assert result.document is None
        error = result.errors[0]
        assert error.message == "Maximum nesting depth exceeded"
        assert (error.line, error.column) == (1, 25)

    @pytest.mark.unit
    def test_limit_is_inclusive(self):
        result = parse("(wire (screen home (box (box))))", max_nesting_depth=4)

        assert result.success

    @pytest.mark.unit
    def test_limit_from_environment(self, monkeypatch):
        monkeypatch.setenv("WIRESCRIPT_MAX_NESTING_DEPTH", "2")

        result = parse("(wire (screen home (box)))")

        assert result.errors[0].message == "Maximum nesting depth exceeded"

    @pytest.mark.unit
    def test_deep_document_within_default_limit(self):
        depth = 150
        body = "(box " * depth + ")" * depth
        result = parse(f"(wire (screen home {body}))")

        assert result.success

    @pytest.mark.unit
    def test_nested_containers_keep_structure(self):
        """Each nesting level appears as exactly one child of its parent."""
        root = root_of('(wire (screen a (box (card (list (box (text "x")))))))')

        node = root
        for expected in ["box", "card", "list", "box"]:
            assert node.type == expected
            assert len(node.children) == 1
            node = node.children[0]

        assert node.type == "text"
        assert node.content == "x"
        assert node.children == []


class TestComponents:
    """Tests for definitions, layouts and forward references."""

    @pytest.mark.unit
    def test_forward_reference_to_component(self):
        """A component may be used before it is defined."""
        source = (
            '(wire (screen home (user-card "Ann" :role admin))'
            " (define user-card (name) (card (text $name))))"
        )
        result = parse(source)

        assert result.success
        root = result.document.screens[0].root
        assert root.is_component
        assert root.content == "Ann"
        assert root.props == {"role": "admin"}

        component = result.document.get_component("user-card")
        assert component.params == ["name"]
        assert component.body.children[0].content == ParamRef(name="name")

    @pytest.mark.unit
    def test_builtin_is_not_component(self):
        assert root_of("(wire (screen home (box)))").is_component is False

    @pytest.mark.unit
    def test_component_children(self):
        root = root_of('(wire (screen home (panel (text "a") (text "b"))))')

        assert len(root.children) == 2

    @pytest.mark.unit
    def test_layout_and_screen_reference(self):
        source = (
            "(wire (layout main (box (header) (slot)))"
            ' (screen home :layout main (text "x")))'
        )
        result = parse(source)

        assert result.success
        assert result.document.screens[0].layout == "main"
        layout = result.document.get_layout("main")
        assert [c.type for c in layout.body.children] == ["header", "slot"]

    @pytest.mark.unit
    def test_screen_options(self):
        result = parse('(wire (screen home "Home" :mobile :layout base (box)))')

        screen = result.document.screens[0]
        assert screen.viewport == "mobile"
        assert screen.layout == "base"

    @pytest.mark.unit
    def test_unknown_screen_option(self):
        assert messages("(wire (screen home :foo (box)))") == [
            "Unknown screen option ':foo'"
        ]


class TestOverlays:
    """Tests for modal, drawer and popover placement."""

    @pytest.mark.unit
    def test_overlay_pulled_out_of_screen_body(self):
        source = (
            '(wire (screen home (box (button "Open" :to #confirm))'
            ' (modal :id "confirm" :title "Sure?" (text "Body"))))'
        )
        result = parse(source)

        assert result.success
        screen = result.document.screens[0]
        assert screen.root.type == "box"
        assert screen.root.children[0].props["to"] == OverlayRef(id="confirm")
        overlay = screen.overlays[0]
        assert overlay.type == "modal"
        assert overlay.id == "confirm"
        assert overlay.props == {"title": "Sure?"}
        assert overlay.children[0].content == "Body"

    @pytest.mark.unit
    def test_overlay_before_root(self):
        result = parse("(wire (screen home (drawer :id menu :left) (box)))")

        screen = result.document.screens[0]
        assert screen.root.type == "box"
        assert screen.overlays[0].id == "menu"
        assert screen.overlays[0].props == {"left": True}

    @pytest.mark.unit
    def test_overlay_without_id_gets_fallback(self):
        result = parse('(wire (screen home (box) (modal (text "x"))))')

        assert [e.message for e in result.errors] == [
            "modal must have an :id property"
        ]
        assert result.document.screens[0].overlays[0].id == "modal-1-26"

    @pytest.mark.unit
    def test_overlay_id_must_be_string(self):
        result = parse("(wire (screen home (box) (popover :id 3)))")

        assert "Overlay :id must be a string" in [e.message for e in result.errors]

    @pytest.mark.unit
    def test_overlay_inside_element_is_rejected(self):
        result = parse("(wire (screen home (box (modal :id m))))")

        assert [e.message for e in result.errors] == [
            "Overlay 'modal' must be a direct child of a screen"
        ]
        assert result.document.screens[0].root.children == []


class TestRepeat:
    """Tests for the repeat form."""

    @pytest.mark.unit
    def test_repeat_child(self):
        source = '(wire (screen home (list (repeat :count 3 :as "i" (text $i)))))'
        root = root_of(source)

        repeat = root.children[0]
        assert isinstance(repeat, RepeatNode)
        assert repeat.count == 3
        assert repeat.variable == "i"
        assert repeat.body.content == ParamRef(name="i")

    @pytest.mark.unit
    def test_repeat_count_parameter(self):
        source = "(wire (define rows (n) (list (repeat :count $n (text)))))"
        result = parse(source)

        repeat = result.document.components[0].body.children[0]
        assert repeat.count == ParamRef(name="n")
        assert repeat.variable is None

    @pytest.mark.unit
    def test_fractional_count(self):
        result = parse("(wire (screen home (list (repeat :count 2.5 (text)))))")

        assert [e.message for e in result.errors] == [":count must be a whole number"]
        assert result.document.screens[0].root.children[0].count == 2

    @pytest.mark.unit
    def test_invalid_count(self):
        assert messages('(wire (screen home (list (repeat :count "x" (text)))))') == [
            ":count must be a number or parameter reference"
        ]

    @pytest.mark.unit
    def test_repeat_as_screen_root_is_wrapped(self):
        root = root_of("(wire (screen home (repeat :count 2 (card))))")

        assert root.type == "repeat-container"
        assert isinstance(root.children[0], RepeatNode)


class TestPropertyValues:
    """Tests for property value parsing and coercion."""

    @pytest.mark.unit
    def test_string_to_number(self):
        root = root_of('(wire (screen home (box :gap "16")))')

        assert root.props["gap"] == 16
        assert type(root.props["gap"]) is int

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ('(text "x" :high "true")', True),
            ('(text "x" :high "0")', False),
            ('(text "x" :high nil)', False),
            ('(text "x" :high t)', True),
            ('(text "x" :high 0)', False),
        ],
    )
    def test_boolean_coercion(self, source, expected):
        root = root_of(f"(wire (screen home {source}))")

        assert root.props["high"] is expected

    @pytest.mark.unit
    def test_number_from_boolean_symbol(self):
        assert root_of("(wire (screen home (box :gap t)))").props["gap"] == 1

    @pytest.mark.unit
    def test_unparseable_number_is_preserved(self):
        assert root_of('(wire (screen home (box :gap "wide")))').props["gap"] == "wide"

    @pytest.mark.unit
    def test_decimal_and_negative_numbers(self):
        root = root_of("(wire (screen home (box :padding 1.5 :gap -4)))")

        assert root.props == {"padding": 1.5, "gap": -4}

    @pytest.mark.unit
    def test_string_property_from_number(self):
        root = root_of("(wire (screen home (input :placeholder 42)))")

        assert root.props["placeholder"] == "42"

    @pytest.mark.unit
    def test_bare_flags_and_defaults(self):
        """Bare keywords take the declared default, or True."""
        root = root_of("(wire (screen home (input :type :disabled :custom)))")

        assert root.props == {"type": "text", "disabled": True, "custom": True}

    @pytest.mark.unit
    def test_unknown_properties_keep_natural_values(self):
        root = root_of('(wire (screen home (box :label "Hi" :n 3 :on t)))')

        assert root.props == {"label": "Hi", "n": 3, "on": True}

    @pytest.mark.unit
    def test_parameter_references_are_not_coerced(self):
        root = root_of("(wire (screen home (box :gap $spacing)))")

        assert root.props["gap"] == ParamRef(name="spacing")

    @pytest.mark.unit
    def test_content_parameter(self):
        root = root_of("(wire (screen home (text $label)))")

        assert root.content == ParamRef(name="label")


class TestNavigationTargets:
    """Tests for :to values."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("settings", ScreenRef(id="settings")),
            ('"settings"', ScreenRef(id="settings")),
            ("#confirm", OverlayRef(id="confirm")),
            ('"#confirm"', OverlayRef(id="confirm")),
            (":back", ActionRef(action="back")),
            (":close", ActionRef(action="close")),
            ('"https://example.com"', UrlRef(url="https://example.com")),
            ("$target", ParamRef(name="target")),
        ],
    )
    def test_targets(self, value, expected):
        root = root_of(f'(wire (screen home (button "Go" :to {value})))')

        assert root.props["to"] == expected

    @pytest.mark.unit
    def test_unknown_action_keyword_kept_as_text(self):
        root = root_of('(wire (screen home (button "Go" :to :home)))')

        assert root.props["to"] == "home"


class TestIsUrl:
    """Tests for URL detection."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value",
        ["https://a.dev", "HTTP://A.DEV", "mailto:x@y.z", "tel:123", "//cdn/x"],
    )
    def test_urls(self, value):
        assert is_url(value)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["settings", "#modal", "www.example.com"])
    def test_not_urls(self, value):
        assert not is_url(value)
