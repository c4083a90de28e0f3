"""Unit tests for the Schema module."""

import json

import pytest

from wirescript.schema import (
    ELEMENT_REGISTRY,
    OVERLAY_PROPS,
    OVERLAY_TYPES,
    STRUCTURAL_FORMS,
    TOP_LEVEL_FORMS,
    PropType,
    SchemaExport,
    accepts_children,
    export_json_schema,
    export_schemas,
    export_schemas_json,
    get_schema,
    is_block_form,
    is_builtin_element,
)


class TestElementRegistry:
    """Tests for ELEMENT_REGISTRY completeness."""

    @pytest.mark.unit
    def test_registry_has_32_entries(self):
        """Registry contains every built-in element."""
        assert len(ELEMENT_REGISTRY) == 32

    @pytest.mark.unit
    def test_entries_are_named_after_their_key(self):
        """Each schema's name matches its registry key."""
        for name, schema in ELEMENT_REGISTRY.items():
            assert schema.name == name
            assert schema.builtin

    @pytest.mark.unit
    def test_all_entries_have_descriptions(self):
        """Every element has a non-empty description."""
        for name, schema in ELEMENT_REGISTRY.items():
            assert schema.description, f"{name} missing description"

    @pytest.mark.unit
    def test_registry_is_read_only(self):
        """The registry cannot be mutated."""
        with pytest.raises(TypeError):
            ELEMENT_REGISTRY["box"] = ELEMENT_REGISTRY["card"]  # type: ignore[index]


class TestElementSchema:
    """Tests for individual element schemas."""

    @pytest.mark.unit
    def test_box_schema(self):
        """Box accepts children but no content."""
        schema = get_schema("box")
        assert schema.children
        assert not schema.content
        assert schema.props["gap"].type == PropType.NUMBER
        assert schema.props["gap"].default == 0
        assert schema.props["to"].type == PropType.NAVIGATION

    @pytest.mark.unit
    def test_leaf_elements(self):
        """Leaf elements refuse children."""
        for name in ("text", "icon", "input", "divider", "slot", "crumb"):
            assert not get_schema(name).children, name

    @pytest.mark.unit
    def test_avatar_size_is_numeric(self):
        """Later prop definitions override grouped ones."""
        assert get_schema("avatar").props["size"].type == PropType.NUMBER

    @pytest.mark.unit
    def test_input_type_default(self):
        """Input type defaults to the text symbol."""
        prop = get_schema("input").props["type"]
        assert prop.type == PropType.SYMBOL
        assert prop.default == "text"

    @pytest.mark.unit
    def test_to_dict(self):
        """Schema converts to a plain dictionary."""
        data = get_schema("section").to_dict()
        assert data["type"] == "section"
        assert data["content"] is True
        assert data["props"]["title"] == {"type": "string"}
        assert data["props"]["row"] == {"type": "boolean", "default": True}


class TestUnknownElements:
    """Tests for the fallback schema."""

    @pytest.mark.unit
    def test_unknown_name_returns_fallback(self):
        """Unknown names resolve to a container fallback, never None."""
        schema = get_schema("user-card")
        assert schema.name == "user-card"
        assert not schema.builtin
        assert schema.children
        assert schema.content
        assert dict(schema.props) == {}

    @pytest.mark.unit
    def test_is_builtin_element(self):
        assert is_builtin_element("button")
        assert not is_builtin_element("user-card")
        assert not is_builtin_element("screen")


class TestStructuralSets:
    """Tests for placement sets and container helpers."""

    @pytest.mark.unit
    def test_sets(self):
        assert TOP_LEVEL_FORMS == {"screen", "define", "layout", "meta", "include"}
        assert OVERLAY_TYPES == {"modal", "drawer", "popover"}
        assert STRUCTURAL_FORMS == {
            "wire",
            "screen",
            "define",
            "layout",
            "repeat",
            "meta",
        }

    @pytest.mark.unit
    def test_accepts_children(self):
        """Structural forms, overlays and unknown names are containers."""
        assert accepts_children("wire")
        assert accepts_children("modal")
        assert accepts_children("repeat")
        assert accepts_children("my-widget")
        assert accepts_children("button")
        assert not accepts_children("text")

    @pytest.mark.unit
    def test_block_forms(self):
        """Layout containers print one child per line."""
        assert is_block_form("screen")
        assert is_block_form("box")
        assert is_block_form("drawer")
        assert not is_block_form("button")
        assert not is_block_form("text")


class TestSchemaExport:
    """Tests for schema export."""

    @pytest.mark.unit
    def test_export_structure(self):
        """Export carries version, elements and overlay props."""
        export = export_schemas()
        assert isinstance(export, SchemaExport)
        assert export.version == "2.0"
        assert set(export.elements) == set(ELEMENT_REGISTRY)
        assert set(export.overlays.props) == set(OVERLAY_PROPS)

    @pytest.mark.unit
    def test_export_json(self):
        """JSON export omits missing defaults."""
        data = json.loads(export_schemas_json())
        assert data["elements"]["text"]["content"] is True
        assert data["elements"]["text"]["props"]["center"] == {
            "type": "boolean",
            "default": True,
        }
        assert data["elements"]["image"]["props"]["src"] == {"type": "string"}
        assert data["overlays"]["props"]["gap"] == {"type": "number", "default": 0}

    @pytest.mark.unit
    def test_compact_json(self):
        """Non-pretty export has no newlines."""
        assert "\n" not in export_schemas_json(pretty=False)

    @pytest.mark.unit
    def test_json_schema(self):
        """JSON Schema of the export model is available."""
        schema = export_json_schema()
        assert "properties" in schema
        assert "elements" in schema["properties"]
