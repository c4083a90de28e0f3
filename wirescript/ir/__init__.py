"""AST models for compiled WireScript documents.

Example:
    >>> from wirescript.ir import Document, ElementNode, ScreenNode
    >>> root = ElementNode(type="text", content="Hi")
    >>> doc = Document(screens=[ScreenNode(id="home", root=root)])
"""

from wirescript.ir.lib import (
    ActionRef,
    ChildNode,
    ComponentDef,
    Document,
    ElementNode,
    IncludeNode,
    LayoutNode,
    MetaValue,
    NavigationTarget,
    OverlayNode,
    OverlayRef,
    OverlayType,
    ParamRef,
    ParseError,
    PropValue,
    RepeatNode,
    ScreenNode,
    ScreenRef,
    SourceLocation,
    UrlRef,
    export_json_schema,
)

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
