"""Authoritative Schema Module for WireScript elements.

This module serves as the single source of truth for element knowledge in
the compiler. It provides:
- Per-element metadata (content, children, typed properties)
- Structural placement sets (top-level forms, overlays, structural forms)
- A documented fallback schema for names that are not built in
- Serializable schema exports for editors and documentation tooling

Both the parser and the formatter route their structural questions through
this module, which keeps their container decisions in agreement.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, Field


class PropType(str, Enum):
    """Declared type of an element property."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SYMBOL = "symbol"
    ANY = "any"
    NAVIGATION = "navigation"


class ElementCategory(str, Enum):
    """High-level element groupings."""

    CONTAINER = "container"
    CONTENT = "content"
    INTERACTIVE = "interactive"
    INPUT = "input"
    DATA = "data"
    NAVIGATION = "navigation"
    UTILITY = "utility"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PropDef:
    """Type and bare-flag default of a single property.

    ``default`` is the value a property takes when written without a value
    (``:gap`` alone). None means the bare form is read as ``True``.
    """

    type: PropType
    default: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for schema export."""
        data: dict[str, Any] = {"type": self.type.value}
        if self.default is not None:
            data["default"] = self.default
        return data


@dataclass(frozen=True)
class ElementSchema:
    """Schema entry for an element name.

    Attributes:
        name: Element name as written in source.
        category: Grouping for documentation.
        description: One-line human description.
        content: Whether a leading string or ``$param`` is read as content.
        children: Whether nested forms are accepted.
        props: Mapping of property name to its definition.
        block: Whether the formatter puts each child form on its own line.
        builtin: False for the fallback used for unknown names.
    """

    name: str
    category: ElementCategory
    description: str = ""
    content: bool = False
    children: bool = False
    props: Mapping[str, PropDef] = field(default_factory=lambda: MappingProxyType({}))
    block: bool = False
    builtin: bool = True

    def get_prop(self, prop_name: str) -> PropDef | None:
        return self.props.get(prop_name)

    def to_dict(self) -> dict[str, Any]:
        """Convert schema to dictionary for export."""
        return {
            "type": self.name,
            "content": self.content,
            "children": self.children,
            "props": {key: prop.to_dict() for key, prop in self.props.items()},
        }


# =============================================================================
# Prop Definition Helpers
# =============================================================================


def _bool(default: bool = True) -> PropDef:
    return PropDef(PropType.BOOLEAN, default)


def _num(default: int | float | None = None) -> PropDef:
    return PropDef(PropType.NUMBER, default)


def _str(default: str | None = None) -> PropDef:
    return PropDef(PropType.STRING, default)


def _sym(default: str | None = None) -> PropDef:
    return PropDef(PropType.SYMBOL, default)


def _any() -> PropDef:
    return PropDef(PropType.ANY)


def _nav() -> PropDef:
    return PropDef(PropType.NAVIGATION)


def _props(*groups: Mapping[str, PropDef], **extra: PropDef) -> Mapping[str, PropDef]:
    """Merge prop groups into a read-only mapping. Later keys win."""
    merged: dict[str, PropDef] = {}
    for group in groups:
        merged.update(group)
    merged.update(extra)
    return MappingProxyType(merged)


# === PROP GROUPS ===

LAYOUT_PROPS = {"row": _bool(), "col": _bool(), "grid": _bool(), "wrap": _bool()}

ALIGN_PROPS = {
    "center": _bool(),
    "start": _bool(),
    "end": _bool(),
    "between": _bool(),
    "around": _bool(),
    "stretch": _bool(),
}

SIZE_PROPS = {"full": _bool(), "fit": _bool(), "fill": _bool()}

SPACING_PROPS = {"gap": _num(0), "padding": _num(0)}

DIMENSION_PROPS = {"width": _any(), "height": _any()}

POSITION_PROPS = {
    "sticky": _bool(),
    "fixed": _bool(),
    "absolute": _bool(),
    "relative": _bool(),
    "top": _num(),
    "left": _num(),
    "right": _num(),
    "bottom": _num(),
}

VARIANT_PROPS = {
    "primary": _bool(),
    "secondary": _bool(),
    "ghost": _bool(),
    "danger": _bool(),
    "success": _bool(),
    "warning": _bool(),
    "info": _bool(),
}

EMPHASIS_PROPS = {"high": _bool(), "medium": _bool(), "low": _bool()}

NAVIGATION_PROPS = {"to": _nav()}

# Composed groups
CONTAINER_PROPS = _props(
    LAYOUT_PROPS,
    ALIGN_PROPS,
    SIZE_PROPS,
    SPACING_PROPS,
    DIMENSION_PROPS,
    POSITION_PROPS,
)
CONTENT_PROPS = _props(EMPHASIS_PROPS, SIZE_PROPS, DIMENSION_PROPS, NAVIGATION_PROPS)
INTERACTIVE_PROPS = _props(
    VARIANT_PROPS,
    SIZE_PROPS,
    DIMENSION_PROPS,
    NAVIGATION_PROPS,
    disabled=_bool(),
    loading=_bool(),
    active=_bool(),
)
TEXT_ALIGN_PROPS = {"start": _bool(), "center": _bool(), "end": _bool()}


# =============================================================================
# Element Registry
# =============================================================================

ELEMENT_REGISTRY: Mapping[str, ElementSchema] = MappingProxyType(
    {
        # === CONTAINERS ===
        "box": ElementSchema(
            name="box",
            category=ElementCategory.CONTAINER,
            description="Generic layout container",
            children=True,
            props=_props(
                CONTAINER_PROPS,
                VARIANT_PROPS,
                NAVIGATION_PROPS,
                cols=_num(),
                rows=_num(),
            ),
            block=True,
        ),
        "card": ElementSchema(
            name="card",
            category=ElementCategory.CONTAINER,
            description="Elevated container with visual separation",
            children=True,
            props=_props(CONTAINER_PROPS, VARIANT_PROPS, NAVIGATION_PROPS),
            block=True,
        ),
        "section": ElementSchema(
            name="section",
            category=ElementCategory.CONTAINER,
            description="Titled region of a page",
            content=True,
            children=True,
            props=_props(CONTAINER_PROPS, title=_str()),
            block=True,
        ),
        "header": ElementSchema(
            name="header",
            category=ElementCategory.CONTAINER,
            description="Page or section header bar",
            children=True,
            props=CONTAINER_PROPS,
            block=True,
        ),
        "footer": ElementSchema(
            name="footer",
            category=ElementCategory.CONTAINER,
            description="Page or section footer bar",
            children=True,
            props=CONTAINER_PROPS,
            block=True,
        ),
        "nav": ElementSchema(
            name="nav",
            category=ElementCategory.CONTAINER,
            description="Navigation region",
            children=True,
            props=CONTAINER_PROPS,
            block=True,
        ),
        "form": ElementSchema(
            name="form",
            category=ElementCategory.CONTAINER,
            description="Form wrapping inputs and a submit action",
            children=True,
            props=_props(CONTAINER_PROPS, NAVIGATION_PROPS),
            block=True,
        ),
        "list": ElementSchema(
            name="list",
            category=ElementCategory.CONTAINER,
            description="Vertical list of items",
            children=True,
            props=CONTAINER_PROPS,
            block=True,
        ),
        "scroll": ElementSchema(
            name="scroll",
            category=ElementCategory.CONTAINER,
            description="Scrollable viewport",
            children=True,
            props=CONTAINER_PROPS,
            block=True,
        ),
        "group": ElementSchema(
            name="group",
            category=ElementCategory.CONTAINER,
            description="Visual grouping of related elements",
            children=True,
            props=CONTAINER_PROPS,
            block=True,
        ),
        # === CONTENT ===
        "text": ElementSchema(
            name="text",
            category=ElementCategory.CONTENT,
            description="Text label or paragraph",
            content=True,
            props=_props(CONTENT_PROPS, VARIANT_PROPS, TEXT_ALIGN_PROPS),
        ),
        "icon": ElementSchema(
            name="icon",
            category=ElementCategory.CONTENT,
            description="Named icon glyph",
            content=True,
            props=_props(CONTENT_PROPS, VARIANT_PROPS, name=_sym(), size=_num()),
        ),
        "image": ElementSchema(
            name="image",
            category=ElementCategory.CONTENT,
            description="Image placeholder",
            content=True,
            props=_props(
                SIZE_PROPS, DIMENSION_PROPS, NAVIGATION_PROPS, src=_str(), alt=_str()
            ),
        ),
        "avatar": ElementSchema(
            name="avatar",
            category=ElementCategory.CONTENT,
            description="User avatar",
            content=True,
            props=_props(
                SIZE_PROPS,
                EMPHASIS_PROPS,
                DIMENSION_PROPS,
                NAVIGATION_PROPS,
                src=_str(),
                name=_str(),
                size=_num(),
                active=_bool(),
            ),
        ),
        "badge": ElementSchema(
            name="badge",
            category=ElementCategory.CONTENT,
            description="Small status or count indicator",
            content=True,
            props=_props(
                VARIANT_PROPS, SIZE_PROPS, POSITION_PROPS, DIMENSION_PROPS, value=_any()
            ),
        ),
        "divider": ElementSchema(
            name="divider",
            category=ElementCategory.CONTENT,
            description="Horizontal or vertical separator",
            props=_props(DIMENSION_PROPS, row=_bool(), col=_bool()),
        ),
        # === INTERACTIVE ===
        "button": ElementSchema(
            name="button",
            category=ElementCategory.INTERACTIVE,
            description="Clickable button",
            content=True,
            children=True,
            props=_props(INTERACTIVE_PROPS, TEXT_ALIGN_PROPS, icon=_any()),
        ),
        "dropdown": ElementSchema(
            name="dropdown",
            category=ElementCategory.INTERACTIVE,
            description="Trigger label with a menu of child items",
            content=True,
            children=True,
            props=_props(
                SPACING_PROPS,
                DIMENSION_PROPS,
                VARIANT_PROPS,
                disabled=_bool(),
                open=_bool(),
            ),
        ),
        # === INPUTS ===
        "input": ElementSchema(
            name="input",
            category=ElementCategory.INPUT,
            description="Form field (text, checkbox, select, ...)",
            content=True,
            props=_props(
                SIZE_PROPS,
                DIMENSION_PROPS,
                type=_sym("text"),
                placeholder=_str(),
                value=_any(),
                options=_str(),
                disabled=_bool(),
                error=_bool(),
                checked=_bool(),
                min=_num(),
                max=_num(),
                step=_num(),
                rows=_num(),
            ),
        ),
        "datepicker": ElementSchema(
            name="datepicker",
            category=ElementCategory.INPUT,
            description="Date selection field",
            content=True,
            props=_props(
                SIZE_PROPS,
                DIMENSION_PROPS,
                value=_str(),
                placeholder=_str(),
                disabled=_bool(),
                error=_bool(),
            ),
        ),
        # === DATA ===
        "metric": ElementSchema(
            name="metric",
            category=ElementCategory.DATA,
            description="Key figure with label and trend",
            content=True,
            children=True,
            props=_props(
                SIZE_PROPS,
                VARIANT_PROPS,
                DIMENSION_PROPS,
                value=_any(),
                label=_str(),
                change=_any(),
                trend=_sym(),
            ),
        ),
        "progress": ElementSchema(
            name="progress",
            category=ElementCategory.DATA,
            description="Progress bar",
            content=True,
            props=_props(
                SIZE_PROPS, VARIANT_PROPS, DIMENSION_PROPS, value=_any(), max=_any()
            ),
        ),
        "chart": ElementSchema(
            name="chart",
            category=ElementCategory.DATA,
            description="Chart placeholder",
            content=True,
            children=True,
            props=_props(SIZE_PROPS, SPACING_PROPS, DIMENSION_PROPS, type=_sym()),
        ),
        "skeleton": ElementSchema(
            name="skeleton",
            category=ElementCategory.DATA,
            description="Loading placeholder",
            children=True,
            props=_props(CONTAINER_PROPS, circle=_bool(), text=_bool()),
        ),
        # === NAVIGATION ===
        "tabs": ElementSchema(
            name="tabs",
            category=ElementCategory.NAVIGATION,
            description="Tab strip",
            children=True,
            props=CONTAINER_PROPS,
            block=True,
        ),
        "tab": ElementSchema(
            name="tab",
            category=ElementCategory.NAVIGATION,
            description="Single tab with optional panel content",
            content=True,
            children=True,
            props=_props(
                SIZE_PROPS,
                DIMENSION_PROPS,
                NAVIGATION_PROPS,
                active=_bool(),
                disabled=_bool(),
            ),
            block=True,
        ),
        "breadcrumb": ElementSchema(
            name="breadcrumb",
            category=ElementCategory.NAVIGATION,
            description="Breadcrumb trail",
            children=True,
            props=CONTAINER_PROPS,
        ),
        "crumb": ElementSchema(
            name="crumb",
            category=ElementCategory.NAVIGATION,
            description="Single breadcrumb entry",
            content=True,
            props=_props(SIZE_PROPS, NAVIGATION_PROPS, active=_bool()),
        ),
        # === UTILITY ===
        "tooltip": ElementSchema(
            name="tooltip",
            category=ElementCategory.UTILITY,
            description="Hover hint wrapping its target",
            content=True,
            children=True,
            props=_props(DIMENSION_PROPS),
        ),
        "toast": ElementSchema(
            name="toast",
            category=ElementCategory.UTILITY,
            description="Transient notification",
            content=True,
            children=True,
            props=_props(VARIANT_PROPS, DIMENSION_PROPS),
        ),
        "empty": ElementSchema(
            name="empty",
            category=ElementCategory.UTILITY,
            description="Empty state message",
            content=True,
            children=True,
            props=_props(DIMENSION_PROPS),
        ),
        "slot": ElementSchema(
            name="slot",
            category=ElementCategory.UTILITY,
            description="Layout placeholder where screen content is substituted",
        ),
    }
)

# Fallback for names that are not built in: a potential user component.
UNKNOWN_ELEMENT = ElementSchema(
    name="",
    category=ElementCategory.UNKNOWN,
    description="User component or unregistered element",
    content=True,
    children=True,
    block=True,
    builtin=False,
)

OVERLAY_PROPS: Mapping[str, PropDef] = _props(
    SPACING_PROPS,
    DIMENSION_PROPS,
    id=_str(),
    title=_str(),
    position=_sym(),
    top=_bool(),
    bottom=_bool(),
    left=_bool(),
    right=_bool(),
    open=_bool(),
)


# =============================================================================
# Structural Sets
# =============================================================================

ROOT_FORM = "wire"

# Forms that may only appear directly inside the root form
TOP_LEVEL_FORMS = frozenset({"screen", "define", "layout", "meta", "include"})

# Forms that may only appear directly inside a screen
OVERLAY_TYPES = frozenset({"modal", "drawer", "popover"})

# Forms that always accept children, independent of the registry
STRUCTURAL_FORMS = frozenset(
    {ROOT_FORM, "screen", "define", "layout", "repeat", "meta"}
)

VIEWPORTS = frozenset({"mobile", "tablet", "desktop"})

ACTION_KEYWORDS = frozenset({"close", "back", "submit"})

REPEAT_CONTAINER = "repeat-container"

# Boolean flags recognized anywhere, used to warn about typos
# fmt: off
VALID_FLAGS = frozenset(
    {
        # Layout
        "row", "col", "grid", "wrap",
        # Alignment
        "start", "center", "end", "between", "around", "stretch",
        # Emphasis
        "high", "medium", "low",
        # Variant
        "primary", "secondary", "ghost", "danger", "success", "warning", "info",
        # State
        "disabled", "loading", "active", "checked", "open", "error",
        # Size
        "full", "fit", "fill",
        # Position
        "sticky", "fixed", "absolute", "relative", "top", "bottom", "left", "right",
        # Viewport
        "mobile", "tablet", "desktop",
        # Shape
        "circle", "text",
    }
)
# fmt: on


# =============================================================================
# Lookup
# =============================================================================


def get_schema(name: str) -> ElementSchema:
    """Get the schema for an element name.

    Args:
        name: Element name as written in source.

    Returns:
        The registered ElementSchema, or a copy of UNKNOWN_ELEMENT carrying
        ``name`` when the element is not built in. Callers check ``builtin``
        rather than testing for None.
    """
    schema = ELEMENT_REGISTRY.get(name)
    if schema is None:
        return replace(UNKNOWN_ELEMENT, name=name)
    return schema


def is_builtin_element(name: str) -> bool:
    """Check whether a name is a registered element."""
    return name in ELEMENT_REGISTRY


def accepts_children(name: str) -> bool:
    """Whether a form with this name may contain nested forms.

    Structural forms and overlays always do. Built-in elements follow their
    schema and unknown names default to containers.
    """
    if name in STRUCTURAL_FORMS or name in OVERLAY_TYPES:
        return True
    return get_schema(name).children


def is_block_form(name: str) -> bool:
    """Whether the formatter lays out child forms one per line."""
    if name in STRUCTURAL_FORMS or name in OVERLAY_TYPES:
        return True
    return get_schema(name).block


# =============================================================================
# Schema Export
# =============================================================================


class PropSchema(BaseModel):
    """Exported definition of a single property."""

    type: PropType
    default: Any = Field(default=None, description="Value of the bare flag form")

    model_config = {"use_enum_values": True, "frozen": True}


class ElementSchemaExport(BaseModel):
    """Exported definition of an element."""

    type: str = Field(..., description="Element name")
    content: bool = Field(default=False, description="Accepts inline content")
    children: bool = Field(default=False, description="Accepts child elements")
    props: dict[str, PropSchema] = Field(default_factory=dict)

    model_config = {"frozen": True}


class OverlaySchemaExport(BaseModel):
    """Exported overlay property schema."""

    props: dict[str, PropSchema] = Field(default_factory=dict)

    model_config = {"frozen": True}


class SchemaExport(BaseModel):
    """Read-only snapshot of the element registry for external tooling."""

    version: str = "2.0"
    elements: dict[str, ElementSchemaExport] = Field(default_factory=dict)
    overlays: OverlaySchemaExport = Field(default_factory=OverlaySchemaExport)

    model_config = {"frozen": True}


def _export_props(props: Mapping[str, PropDef]) -> dict[str, PropSchema]:
    return {
        key: PropSchema(type=prop.type, default=prop.default)
        for key, prop in props.items()
    }


def export_schemas() -> SchemaExport:
    """Export all element schemas plus the overlay property schema.

    Returns:
        SchemaExport snapshot.
    """
    elements = {
        name: ElementSchemaExport(
            type=schema.name,
            content=schema.content,
            children=schema.children,
            props=_export_props(schema.props),
        )
        for name, schema in ELEMENT_REGISTRY.items()
    }
    return SchemaExport(
        elements=elements,
        overlays=OverlaySchemaExport(props=_export_props(OVERLAY_PROPS)),
    )


def export_schemas_json(pretty: bool = True) -> str:
    """Export schemas as a JSON string.

    Args:
        pretty: Indent the output when True.

    Returns:
        JSON text. Properties without a bare-flag default omit ``default``.
    """
    return export_schemas().model_dump_json(
        indent=2 if pretty else None, exclude_none=True
    )


def export_json_schema() -> dict[str, Any]:
    """Export the JSON Schema describing SchemaExport itself."""
    return SchemaExport.model_json_schema()


__all__ = [
    # Types
    "ElementCategory",
    "ElementSchema",
    "PropDef",
    "PropType",
    # Registry
    "ELEMENT_REGISTRY",
    "OVERLAY_PROPS",
    "UNKNOWN_ELEMENT",
    # Structural sets
    "ACTION_KEYWORDS",
    "OVERLAY_TYPES",
    "REPEAT_CONTAINER",
    "ROOT_FORM",
    "STRUCTURAL_FORMS",
    "TOP_LEVEL_FORMS",
    "VALID_FLAGS",
    "VIEWPORTS",
    # Lookup
    "accepts_children",
    "get_schema",
    "is_block_form",
    "is_builtin_element",
    # Export
    "ElementSchemaExport",
    "OverlaySchemaExport",
    "PropSchema",
    "SchemaExport",
    "export_json_schema",
    "export_schemas",
    "export_schemas_json",
]
