"""Unit tests for validation module."""

import pytest

from wirescript.ir import Document, ElementNode, RepeatNode, ScreenNode
from wirescript.parser import parse
from wirescript.validation import ValidationResult, is_valid, validate


def validate_source(source: str) -> ValidationResult:
    result = parse(source)
    assert result.success, result.errors
    return validate(result.document)


def error_messages(source: str) -> list[str]:
    return [e.message for e in validate_source(source).errors]


def warning_messages(source: str) -> list[str]:
    return [w.message for w in validate_source(source).warnings]


class TestValidDocuments:
    """Tests for documents without problems."""

    @pytest.mark.unit
    def test_clean_document(self):
        """Well-formed document passes validation."""
        source = """
        (wire
          (define user-card (name) (card (text $name)))
          (screen home "Home"
            (box :col :gap 8
              (user-card "Ann")
              (button "Settings" :to settings :primary)))
          (screen settings (box (button "Back" :to :back))))
        """
        result = validate_source(source)

        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.unit
    def test_is_valid(self):
        document = parse("(wire (screen home (box)))").document
        assert is_valid(document)

    @pytest.mark.unit
    def test_repeat_variable_is_bound_in_body(self):
        source = '(wire (screen home (list (repeat :count 3 :as "i" (text $i)))))'

        assert error_messages(source) == []

    @pytest.mark.unit
    def test_repeat_container_is_known(self):
        assert warning_messages("(wire (screen home (repeat :count 2 (box))))") == []

    @pytest.mark.unit
    def test_known_prop_names_are_not_flags(self):
        assert warning_messages("(wire (screen home (box :label :title)))") == []


class TestErrors:
    """Tests for validation errors."""

    @pytest.mark.unit
    def test_duplicate_screen_id(self):
        source = "(wire (screen home (box)) (screen home (card)))"
        result = validate_source(source)

        assert not result.valid
        assert [e.message for e in result.errors] == ["Duplicate screen ID: 'home'"]
        assert (result.errors[0].line, result.errors[0].column) == (1, 27)

    @pytest.mark.unit
    def test_duplicate_overlay_id_across_screens(self):
        source = (
            "(wire (screen a (box) (modal :id m))"
            " (screen b (box) (drawer :id m)))"
        )

        assert error_messages(source) == ["Duplicate overlay ID: 'm'"]

    @pytest.mark.unit
    def test_component_shadows_builtin(self):
        source = "(wire (define card () (box)) (screen home (box)))"

        assert error_messages(source) == [
            "Component 'card' shadows built-in element type"
        ]

    @pytest.mark.unit
    def test_unbound_parameter_in_content(self):
        source = "(wire (screen home (text $missing)))"

        assert error_messages(source) == ["Unknown parameter reference '$missing'"]

    @pytest.mark.unit
    def test_unbound_parameter_in_props(self):
        source = "(wire (define spacer (size) (box :gap $gap)) (screen home (box)))"

        assert error_messages(source) == ["Unknown parameter reference '$gap'"]

    @pytest.mark.unit
    def test_unbound_repeat_count(self):
        source = "(wire (screen home (list (repeat :count $n (text)))))"

        assert error_messages(source) == ["Unknown parameter reference '$n'"]

    @pytest.mark.unit
    def test_repeat_variable_not_visible_outside_body(self):
        source = (
            '(wire (screen home (list (repeat :count 2 :as "i" (text $i))'
            " (text $i))))"
        )

        assert error_messages(source) == ["Unknown parameter reference '$i'"]

    @pytest.mark.unit
    def test_repeat_count_must_be_positive(self):
        document = Document(
            screens=[
                ScreenNode(
                    id="home",
                    root=ElementNode(
                        type="list",
                        children=[RepeatNode(count=0, body=ElementNode(type="text"))],
                    ),
                )
            ]
        )
        result = validate(document)

        assert [e.message for e in result.errors] == [
            "Repeat count must be at least 1"
        ]
        # Nodes built without a location report position 0
        assert (result.errors[0].line, result.errors[0].column) == (0, 0)


class TestWarnings:
    """Tests for validation warnings."""

    @pytest.mark.unit
    def test_unknown_element_type(self):
        result = validate_source('(wire (screen home (fancy-card "x")))')

        assert result.valid
        assert [w.message for w in result.warnings] == [
            "Unknown element type: 'fancy-card'"
        ]

    @pytest.mark.unit
    def test_component_defined_later_is_known(self):
        source = '(wire (screen home (fancy-card "x")) (define fancy-card () (card)))'

        assert warning_messages(source) == []

    @pytest.mark.unit
    def test_unknown_flag(self):
        assert warning_messages("(wire (screen home (box :bold)))") == [
            "Unknown flag ':bold'"
        ]

    @pytest.mark.unit
    def test_unknown_layout(self):
        assert warning_messages("(wire (screen home :layout main (box)))") == [
            "Reference to unknown layout 'main'"
        ]

    @pytest.mark.unit
    def test_unknown_screen_target(self):
        source = '(wire (screen home (button "Go" :to nowhere)))'

        assert warning_messages(source) == ["Reference to unknown screen 'nowhere'"]

    @pytest.mark.unit
    def test_unknown_overlay_target(self):
        source = '(wire (screen home (button "Open" :to #dialog)))'

        assert warning_messages(source) == ["Reference to unknown overlay '#dialog'"]

    @pytest.mark.unit
    def test_overlay_defined_on_other_screen_resolves(self):
        source = (
            '(wire (screen a (button "Open" :to #m))'
            " (screen b (box) (modal :id m)))"
        )

        assert warning_messages(source) == []

    @pytest.mark.unit
    def test_warnings_inside_overlays(self):
        source = "(wire (screen home (box) (modal :id m :shiny (widget))))"

        assert warning_messages(source) == [
            "Unknown flag ':shiny'",
            "Unknown element type: 'widget'",
        ]
