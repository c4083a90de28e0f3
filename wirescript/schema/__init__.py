"""Schema module - authoritative source for WireScript element definitions.

This module provides:
- Element schemas with content, children and typed property metadata
- Structural placement sets shared by the parser and the formatter
- A fallback schema for user components and unknown names
- Serializable schema exports for external tooling

Example usage:
    >>> from wirescript.schema import get_schema, export_schemas_json
    >>> get_schema("box").children
    True
    >>> get_schema("my-card").builtin
    False
    >>> text = export_schemas_json()  # For editors and documentation
"""

from wirescript.schema.lib import (
    ACTION_KEYWORDS,
    ELEMENT_REGISTRY,
    OVERLAY_PROPS,
    OVERLAY_TYPES,
    REPEAT_CONTAINER,
    ROOT_FORM,
    STRUCTURAL_FORMS,
    TOP_LEVEL_FORMS,
    UNKNOWN_ELEMENT,
    VALID_FLAGS,
    VIEWPORTS,
    ElementCategory,
    ElementSchema,
    ElementSchemaExport,
    OverlaySchemaExport,
    PropDef,
    PropSchema,
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
