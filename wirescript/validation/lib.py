"""Document validation and static analysis.

This module checks a parsed Document for semantic issues the parser does not
look at: duplicate ids, component names shadowing built-in elements, unbound
``$param`` references and navigation targets pointing nowhere.

Problems that make the document unusable are errors. Problems that may be
intentional (an element defined in a file included later, a flag the
registry does not list) are warnings.
"""

from dataclasses import dataclass, field
from typing import Mapping

from wirescript.core.log import get_logger
from wirescript.ir import (
    ChildNode,
    ComponentDef,
    Document,
    ElementNode,
    OverlayNode,
    OverlayRef,
    ParamRef,
    ParseError,
    PropValue,
    RepeatNode,
    ScreenNode,
    ScreenRef,
    SourceLocation,
)
from wirescript.schema import REPEAT_CONTAINER, VALID_FLAGS, is_builtin_element

logger = get_logger("validation")

# Property names that commonly appear bare without being flags
KNOWN_PROP_NAMES = frozenset(
    {
        "to",
        "icon",
        "src",
        "alt",
        "placeholder",
        "value",
        "type",
        "id",
        "name",
        "title",
        "label",
    }
)


@dataclass
class ValidationResult:
    """Outcome of validating a document.

    Attributes:
        valid: True when no errors were found. Warnings do not count.
        errors: Positioned errors in discovery order.
        warnings: Positioned warnings in discovery order.
    """

    valid: bool
    errors: list[ParseError] = field(default_factory=list)
    warnings: list[ParseError] = field(default_factory=list)


class Validator:
    """Single-pass validator over a parsed document.

    Example:
        >>> result = Validator().validate(document)
        >>> for warning in result.warnings:
        ...     print(warning)
    """

    def __init__(self):
        self.errors: list[ParseError] = []
        self.warnings: list[ParseError] = []
        self.screen_ids: set[str] = set()
        self.overlay_ids: set[str] = set()
        self.component_names: set[str] = set()
        self.layout_names: set[str] = set()

    def validate(self, document: Document) -> ValidationResult:
        """Validate a document.

        Args:
            document: Parsed document.

        Returns:
            ValidationResult with errors and warnings.
        """
        self.errors = []
        self.warnings = []
        self.component_names = {c.name for c in document.components}
        self.layout_names = {layout.name for layout in document.layouts}
        self.screen_ids = set()
        self.overlay_ids = set()

        for screen in document.screens:
            if screen.id in self.screen_ids:
                self._add_error(f"Duplicate screen ID: '{screen.id}'", screen.loc)
            self.screen_ids.add(screen.id)

            for overlay in screen.overlays:
                if overlay.id in self.overlay_ids:
                    self._add_error(
                        f"Duplicate overlay ID: '{overlay.id}'", overlay.loc
                    )
                self.overlay_ids.add(overlay.id)

        for component in document.components:
            self._validate_component(component)

        for screen in document.screens:
            self._validate_screen(screen)

        logger.debug(
            f"Validation found {len(self.errors)} errors "
            f"and {len(self.warnings)} warnings"
        )
        return ValidationResult(
            valid=not self.errors, errors=self.errors, warnings=self.warnings
        )

    # -------------------------------------------------------------------------
    # Top-level forms
    # -------------------------------------------------------------------------

    def _validate_component(self, component: ComponentDef) -> None:
        if is_builtin_element(component.name):
            self._add_error(
                f"Component '{component.name}' shadows built-in element type",
                component.loc,
            )
        self._validate_element(component.body, frozenset(component.params))

    def _validate_screen(self, screen: ScreenNode) -> None:
        if screen.layout and screen.layout not in self.layout_names:
            self._add_warning(
                f"Reference to unknown layout '{screen.layout}'", screen.loc
            )

        self._validate_element(screen.root, frozenset())

        for overlay in screen.overlays:
            self._validate_overlay(overlay)

    def _validate_overlay(self, overlay: OverlayNode) -> None:
        self._validate_props(overlay.props, overlay.loc, frozenset())
        for child in overlay.children:
            self._validate_child(child, frozenset())

    # -------------------------------------------------------------------------
    # Elements
    # -------------------------------------------------------------------------

    def _validate_element(self, element: ElementNode, params: frozenset[str]) -> None:
        loc = element.loc
        known = (
            is_builtin_element(element.type)
            or element.type in self.component_names
            or element.type == REPEAT_CONTAINER
        )
        if not known:
            self._add_warning(f"Unknown element type: '{element.type}'", loc)

        if isinstance(element.content, ParamRef):
            self._check_param(element.content, params, loc)

        self._validate_props(element.props, loc, params)

        target = element.props.get("to")
        if target is not None:
            self._validate_navigation_target(target, loc)

        for child in element.children:
            self._validate_child(child, params)

    def _validate_child(self, child: ChildNode, params: frozenset[str]) -> None:
        if isinstance(child, RepeatNode):
            self._validate_repeat(child, params)
        else:
            self._validate_element(child, params)

    def _validate_repeat(self, repeat: RepeatNode, params: frozenset[str]) -> None:
        if isinstance(repeat.count, ParamRef):
            self._check_param(repeat.count, params, repeat.loc)
        elif repeat.count < 1:
            self._add_error("Repeat count must be at least 1", repeat.loc)

        # The loop variable is only bound inside the body
        if repeat.variable:
            params = params | {repeat.variable}
        self._validate_element(repeat.body, params)

    def _validate_props(
        self,
        props: Mapping[str, PropValue],
        loc: SourceLocation | None,
        params: frozenset[str],
    ) -> None:
        for key, value in props.items():
            if value is True and key not in VALID_FLAGS:
                if key not in KNOWN_PROP_NAMES:
                    self._add_warning(f"Unknown flag ':{key}'", loc)
            if isinstance(value, ParamRef):
                self._check_param(value, params, loc)

    def _validate_navigation_target(
        self, target: PropValue, loc: SourceLocation | None
    ) -> None:
        if isinstance(target, ScreenRef):
            if target.id not in self.screen_ids:
                self._add_warning(f"Reference to unknown screen '{target.id}'", loc)
        elif isinstance(target, OverlayRef):
            if target.id not in self.overlay_ids:
                self._add_warning(f"Reference to unknown overlay '#{target.id}'", loc)

    def _check_param(
        self, ref: ParamRef, params: frozenset[str], loc: SourceLocation | None
    ) -> None:
        if ref.name not in params:
            self._add_error(f"Unknown parameter reference '${ref.name}'", loc)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    @staticmethod
    def _diagnostic(message: str, loc: SourceLocation | None) -> ParseError:
        if loc is None:
            return ParseError(message, 0, 0)
        return ParseError(message, loc.line, loc.column)

    def _add_error(self, message: str, loc: SourceLocation | None) -> None:
        self.errors.append(self._diagnostic(message, loc))

    def _add_warning(self, message: str, loc: SourceLocation | None) -> None:
        self.warnings.append(self._diagnostic(message, loc))


def validate(document: Document) -> ValidationResult:
    """Validate a parsed document.

    Args:
        document: Document produced by the parser.

    Returns:
        ValidationResult: Errors and warnings. ``valid`` ignores warnings.

    Example:
        >>> result = validate(parse(source).document)
        >>> if not result.valid:
        ...     for e in result.errors:
        ...         print(e)
    """
    return Validator().validate(document)


def is_valid(document: Document) -> bool:
    """Check if a document has no validation errors.

    Args:
        document: Document produced by the parser.

    Returns:
        bool: True if validation reports no errors.
    """
    return validate(document).valid


__all__ = [
    "KNOWN_PROP_NAMES",
    "ValidationResult",
    "Validator",
    "is_valid",
    "validate",
]
