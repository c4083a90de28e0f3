"""Core AST models for compiled WireScript documents.

This module defines the tree the parser produces and every later consumer
(validation, expansion, rendering) reads. Nodes are immutable pydantic models
so a compiled document can be shared freely and dumped to JSON with
``model_dump``.

References to user components and layouts are stored by name only. Name
lookup happens after the whole document is built, so a definition may follow
its first use.
"""

from dataclasses import dataclass
from typing import Literal, Union

from pydantic import BaseModel, Field

# =============================================================================
# Positions and diagnostics
# =============================================================================


class SourceLocation(BaseModel):
    """Source span of a node, from its opening token to its closing token."""

    line: int = Field(..., ge=1)
    column: int = Field(..., ge=1)
    end_line: int | None = None
    end_column: int | None = None

    model_config = {"frozen": True}


@dataclass(frozen=True)
class ParseError:
    """A positioned diagnostic, used for both errors and warnings."""

    message: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}, column {self.column}"


# =============================================================================
# Reference values
# =============================================================================


class ParamRef(BaseModel):
    """``$name`` placeholder substituted when a component is expanded."""

    kind: Literal["param"] = "param"
    name: str

    model_config = {"frozen": True}


class ScreenRef(BaseModel):
    """Navigation to another screen by id."""

    kind: Literal["screen"] = "screen"
    id: str

    model_config = {"frozen": True}


class OverlayRef(BaseModel):
    """``#id`` reference to an overlay."""

    kind: Literal["overlay"] = "overlay"
    id: str

    model_config = {"frozen": True}


class ActionRef(BaseModel):
    """Built-in navigation action such as ``:close``."""

    kind: Literal["action"] = "action"
    action: Literal["close", "back", "submit"]

    model_config = {"frozen": True}


class UrlRef(BaseModel):
    """External URL target."""

    kind: Literal["url"] = "url"
    url: str

    model_config = {"frozen": True}


NavigationTarget = Union[ScreenRef, OverlayRef, ActionRef, UrlRef]

# bool precedes int so True is never read back as 1
PropValue = Union[
    bool, int, float, str, ParamRef, ScreenRef, OverlayRef, ActionRef, UrlRef
]

MetaValue = Union[bool, int, float, str]

OverlayType = Literal["modal", "drawer", "popover"]


# =============================================================================
# Nodes
# =============================================================================


class ElementNode(BaseModel):
    """An element or user-component invocation.

    Attributes:
        type: Element name as written. Unknown names are user components.
        content: Inline text or parameter placeholder.
        props: Property values after coercion.
        children: Child nodes in render order.
        loc: Source span.
        is_component: True when ``type`` is not a built-in element.

    Example:
        >>> node = ElementNode(type="text", content="Hi", props={"high": True})
    """

    type: str = Field(..., description="Element or component name")
    content: str | ParamRef | None = Field(None, description="Inline content")
    props: dict[str, PropValue] = Field(default_factory=dict)
    children: list["ChildNode"] = Field(default_factory=list)
    loc: SourceLocation | None = None
    is_component: bool = False

    model_config = {"frozen": True}


class RepeatNode(BaseModel):
    """A body element logically cloned ``count`` times on expansion."""

    type: Literal["repeat"] = "repeat"
    count: int | ParamRef
    variable: str | None = Field(None, description="Loop variable from :as")
    body: ElementNode
    loc: SourceLocation | None = None

    model_config = {"frozen": True}


ChildNode = Union[ElementNode, RepeatNode]


class ComponentDef(BaseModel):
    """``(define name (params...) body)``"""

    name: str
    params: list[str] = Field(default_factory=list)
    body: ElementNode
    loc: SourceLocation | None = None

    model_config = {"frozen": True}


class LayoutNode(BaseModel):
    """``(layout name body)`` with a ``slot`` marker in the body."""

    name: str
    body: ElementNode
    loc: SourceLocation | None = None

    model_config = {"frozen": True}


class OverlayNode(BaseModel):
    """A modal, drawer or popover attached to a screen."""

    type: OverlayType
    id: str
    props: dict[str, PropValue] = Field(default_factory=dict)
    children: list[ChildNode] = Field(default_factory=list)
    loc: SourceLocation | None = None

    model_config = {"frozen": True}


class ScreenNode(BaseModel):
    """A navigable page: an element tree plus its overlays."""

    id: str
    name: str | None = None
    viewport: str | None = None
    layout: str | None = None
    root: ElementNode
    overlays: list[OverlayNode] = Field(default_factory=list)
    loc: SourceLocation | None = None

    model_config = {"frozen": True}


class IncludeNode(BaseModel):
    """``(include "path")`` directive awaiting resolution."""

    path: str
    loc: SourceLocation | None = None

    model_config = {"frozen": True}


class Document(BaseModel):
    """Root compiled artifact."""

    meta: dict[str, MetaValue] = Field(default_factory=dict)
    includes: list[IncludeNode] = Field(default_factory=list)
    components: list[ComponentDef] = Field(default_factory=list)
    layouts: list[LayoutNode] = Field(default_factory=list)
    screens: list[ScreenNode] = Field(default_factory=list)
    loc: SourceLocation | None = None

    model_config = {"frozen": True}

    def component_table(self) -> dict[str, ComponentDef]:
        """Components by name. Later definitions replace earlier ones."""
        return {component.name: component for component in self.components}

    def layout_table(self) -> dict[str, LayoutNode]:
        """Layouts by name. Later definitions replace earlier ones."""
        return {layout.name: layout for layout in self.layouts}

    def get_component(self, name: str) -> ComponentDef | None:
        return self.component_table().get(name)

    def get_layout(self, name: str) -> LayoutNode | None:
        return self.layout_table().get(name)

    def get_screen(self, screen_id: str) -> ScreenNode | None:
        for screen in self.screens:
            if screen.id == screen_id:
                return screen
        return None


for _model in (
    ElementNode,
    RepeatNode,
    ComponentDef,
    LayoutNode,
    OverlayNode,
    ScreenNode,
    Document,
):
    _model.model_rebuild()


def export_json_schema() -> dict:
    """Export the Document JSON Schema for external tooling.

    Returns:
        dict: JSON Schema representation of Document.
    """
    return Document.model_json_schema()


__all__ = [
    # Positions
    "ParseError",
    "SourceLocation",
    # Values
    "ActionRef",
    "MetaValue",
    "NavigationTarget",
    "OverlayRef",
    "OverlayType",
    "ParamRef",
    "PropValue",
    "ScreenRef",
    "UrlRef",
    # Nodes
    "ChildNode",
    "ComponentDef",
    "Document",
    "ElementNode",
    "IncludeNode",
    "LayoutNode",
    "OverlayNode",
    "RepeatNode",
    "ScreenNode",
    # Schema
    "export_json_schema",
]
