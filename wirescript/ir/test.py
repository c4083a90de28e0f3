"""Unit tests for AST models."""

import pytest
from pydantic import ValidationError

from wirescript.ir import (
    ActionRef,
    ComponentDef,
    Document,
    ElementNode,
    OverlayNode,
    OverlayRef,
    ParamRef,
    ParseError,
    RepeatNode,
    ScreenNode,
    SourceLocation,
    export_json_schema,
)


class TestElementNode:
    """Tests for ElementNode."""

    @pytest.mark.unit
    def test_minimal_node(self):
        """Node with only a type gets empty defaults."""
        node = ElementNode(type="box")
        assert node.content is None
        assert node.props == {}
        assert node.children == []
        assert node.is_component is False

    @pytest.mark.unit
    def test_prop_values_keep_their_types(self):
        """Booleans are not collapsed into ints and refs survive."""
        node = ElementNode(
            type="box",
            props={"gap": 16, "full": True, "ratio": 1.5, "to": OverlayRef(id="m")},
        )
        assert node.props["full"] is True
        assert node.props["gap"] == 16
        assert isinstance(node.props["gap"], int)
        assert node.props["ratio"] == 1.5
        assert node.props["to"] == OverlayRef(id="m")

    @pytest.mark.unit
    def test_nodes_are_frozen(self):
        """Nodes cannot be reassigned after construction."""
        node = ElementNode(type="text", content="Hi")
        with pytest.raises(ValidationError):
            node.content = "Bye"

    @pytest.mark.unit
    def test_nested_children(self):
        """Children may mix elements and repeats."""
        repeat = RepeatNode(count=3, body=ElementNode(type="card"))
        node = ElementNode(type="list", children=[ElementNode(type="text"), repeat])
        assert isinstance(node.children[1], RepeatNode)
        assert node.children[1].count == 3

    @pytest.mark.unit
    def test_param_content(self):
        node = ElementNode(type="text", content=ParamRef(name="title"))
        assert node.content == ParamRef(name="title")


class TestDocument:
    """Tests for Document lookups."""

    @pytest.mark.unit
    def test_lookup_tables(self):
        """Later definitions replace earlier ones by name."""
        first = ComponentDef(name="card-a", body=ElementNode(type="card"))
        second = ComponentDef(name="card-a", body=ElementNode(type="box"))
        doc = Document(components=[first, second])
        assert doc.get_component("card-a") is second
        assert doc.get_component("missing") is None

    @pytest.mark.unit
    def test_get_screen(self):
        screen = ScreenNode(id="home", root=ElementNode(type="box"))
        doc = Document(screens=[screen])
        assert doc.get_screen("home") is screen
        assert doc.get_screen("other") is None

    @pytest.mark.unit
    def test_dump_round_trip(self):
        """Documents dump to JSON-compatible dicts and validate back."""
        overlay = OverlayNode(
            type="modal",
            id="confirm",
            children=[
                ElementNode(type="button", props={"to": ActionRef(action="close")})
            ],
        )
        doc = Document(
            meta={"title": "App"},
            screens=[
                ScreenNode(
                    id="home",
                    root=ElementNode(type="box", loc=SourceLocation(line=1, column=1)),
                    overlays=[overlay],
                )
            ],
        )
        data = doc.model_dump()
        assert data["screens"][0]["overlays"][0]["children"][0]["props"]["to"] == {
            "kind": "action",
            "action": "close",
        }
        assert Document.model_validate(data) == doc

    @pytest.mark.unit
    def test_overlay_type_is_restricted(self):
        with pytest.raises(ValidationError):
            OverlayNode(type="sheet", id="x")


class TestDiagnostics:
    """Tests for ParseError and SourceLocation."""

    @pytest.mark.unit
    def test_parse_error_str(self):
        error = ParseError("Unknown form type: foo", 3, 5)
        assert str(error) == "Unknown form type: foo at line 3, column 5"

    @pytest.mark.unit
    def test_location_is_one_based(self):
        with pytest.raises(ValidationError):
            SourceLocation(line=0, column=1)


class TestJsonSchema:
    """Tests for JSON Schema export."""

    @pytest.mark.unit
    def test_schema_has_document_fields(self):
        schema = export_json_schema()
        assert schema["title"] == "Document"
        assert "screens" in schema["properties"]
