"""Compile orchestration: parse, resolve includes, validate.

``compile`` is synchronous and leaves ``(include ...)`` directives on the
document. ``compile_async`` awaits a caller-supplied resolver for every
include, splices the included component and layout definitions into the
document and then validates the merged result. The resolver is the only
place execution may suspend.

Example:
    >>> result = compile('(wire (screen home (text "Hi")))')
    >>> result.success
    True

    >>> async def resolver(path, from_path):
    ...     return ResolvedInclude(content=files[path], resolved_path=path)
    >>> result = await compile_async(source, CompileOptions(resolver=resolver))
"""

import inspect
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Union

from wirescript.config import EnvVar, get_environment
from wirescript.core.log import get_logger
from wirescript.ir import ComponentDef, Document, LayoutNode, ParseError, SourceLocation
from wirescript.parser import parse
from wirescript.validation import validate

logger = get_logger("compiler")


# =============================================================================
# Types
# =============================================================================


class IncludeError(Exception):
    """Raised by resolvers when an include cannot be loaded."""


@dataclass(frozen=True)
class ResolvedInclude:
    """Content of an included file.

    Attributes:
        content: Source text of the included file.
        resolved_path: Absolute path, used for nested includes and cycle
            detection.
    """

    content: str
    resolved_path: str


Resolver = Callable[[str, str], Union[ResolvedInclude, Awaitable[ResolvedInclude]]]


@dataclass
class CompileOptions:
    """Options for compilation.

    Attributes:
        file_path: Path of the source being compiled, passed to the resolver
            as ``from_path``.
        resolver: ``(include_path, from_path) -> ResolvedInclude``. May be a
            plain function or a coroutine function.
        warnings_as_errors: Treat any warning as a failed compile.
        max_include_depth: Override for WIRESCRIPT_MAX_INCLUDE_DEPTH.
        max_nesting_depth: Override for WIRESCRIPT_MAX_NESTING_DEPTH.
    """

    file_path: str = ""
    resolver: Resolver | None = None
    warnings_as_errors: bool = False
    max_include_depth: int | None = None
    max_nesting_depth: int | None = None


@dataclass
class CompileResult:
    """Outcome of compilation.

    Attributes:
        success: True when no errors were reported (and, under
            ``warnings_as_errors``, no warnings).
        document: Parsed document. Partial when parsing recovered from
            errors; None after a fatal parse error.
        errors: Parse, include and validation errors in that order.
        warnings: Validation warnings.
    """

    success: bool
    document: Document | None = None
    errors: list[ParseError] = field(default_factory=list)
    warnings: list[ParseError] = field(default_factory=list)


# =============================================================================
# Finalization
# =============================================================================


def _position(loc: SourceLocation | None) -> tuple[int, int]:
    if loc is None:
        return 1, 1
    return loc.line, loc.column


def _finalize(
    document: Document, errors: list[ParseError], options: CompileOptions
) -> CompileResult:
    """Apply document-level checks and validation to a parsed document."""
    errors = list(errors)

    # Definition-only fragments parse, but an entry document needs a screen
    if not document.screens:
        line, column = _position(document.loc)
        errors.append(
            ParseError("Document must have at least one screen", line, column)
        )

    validation = validate(document)
    errors.extend(validation.errors)

    success = not errors
    if options.warnings_as_errors and validation.warnings:
        success = False

    logger.debug(
        f"Compiled {len(document.screens)} screens: {len(errors)} errors, "
        f"{len(validation.warnings)} warnings"
    )
    return CompileResult(
        success=success,
        document=document,
        errors=errors,
        warnings=validation.warnings,
    )


def compile(source: str, options: CompileOptions | None = None) -> CompileResult:
    """Parse and validate WireScript source.

    Include directives are not resolved; they stay in ``document.includes``.
    Use ``compile_async`` with a resolver to splice them in.

    Args:
        source: Source text.
        options: Compile options. A resolver, if given, is not called; a
            warning is logged when the document has includes.

    Returns:
        CompileResult with document, errors and warnings.
    """
    options = options or CompileOptions()
    parsed = parse(source, max_nesting_depth=options.max_nesting_depth)
    if not parsed.success or parsed.document is None:
        return CompileResult(
            success=False, document=parsed.document, errors=parsed.errors
        )
    if options.resolver is not None and parsed.document.includes:
        logger.warning(
            f"Ignoring resolver for {len(parsed.document.includes)} include "
            "directives; use compile_async to resolve them"
        )
    return _finalize(parsed.document, parsed.errors, options)


# =============================================================================
# Include resolution
# =============================================================================


class IncludeResolver:
    """Resolves include directives recursively for one compile call.

    Cycle detection uses the chain of files currently being resolved, so a
    file included twice from siblings (a diamond) is merged, not reported.
    """

    def __init__(self, options: CompileOptions):
        if options.resolver is None:
            raise ValueError("IncludeResolver requires a resolver")
        self.resolver = options.resolver
        self.options = options
        self.max_depth = get_environment(
            EnvVar.WIRESCRIPT_MAX_INCLUDE_DEPTH, override=options.max_include_depth
        )

    async def _load(self, include_path: str, from_path: str) -> ResolvedInclude:
        try:
            result = self.resolver(include_path, from_path)
            if inspect.isawaitable(result):
                result = await result
        except IncludeError:
            raise
        except Exception as e:
            logger.error(f"Resolver failed for '{include_path}': {e}")
            raise IncludeError(str(e)) from e
        return result

    async def resolve(
        self,
        document: Document,
        from_path: str,
        chain: tuple[str, ...] = (),
        depth: int = 0,
    ) -> tuple[Document, list[ParseError]]:
        """Merge the definitions of every included file into ``document``.

        Args:
            document: Document whose includes are resolved.
            from_path: Path the document was loaded from.
            chain: Resolved paths of the files currently being included.
            depth: Current include depth.

        Returns:
            Tuple of (merged document with no includes, errors).
        """
        if depth > self.max_depth:
            message = f"Maximum include depth ({self.max_depth}) exceeded"
            return document, [ParseError(message, 1, 1)]

        errors: list[ParseError] = []
        components: dict[str, ComponentDef] = {}
        layouts: dict[str, LayoutNode] = {}

        for include in document.includes:
            line, column = _position(include.loc)
            try:
                resolved = await self._load(include.path, from_path)
            except IncludeError as e:
                errors.append(
                    ParseError(
                        f"Cannot resolve include '{include.path}': {e}", line, column
                    )
                )
                continue

            if resolved.resolved_path in chain:
                errors.append(
                    ParseError(
                        f"Circular include detected: {include.path} "
                        f"({resolved.resolved_path})",
                        line,
                        column,
                    )
                )
                continue

            logger.debug(f"Including '{include.path}' from {resolved.resolved_path}")
            parsed = parse(
                resolved.content, max_nesting_depth=self.options.max_nesting_depth
            )
            if not parsed.success or parsed.document is None:
                first = parsed.errors[0].message if parsed.errors else "Parse error"
                errors.append(
                    ParseError(
                        f"Error in included file '{include.path}': {first}",
                        line,
                        column,
                    )
                )
                continue

            included = parsed.document
            if included.includes:
                included, nested_errors = await self.resolve(
                    included,
                    resolved.resolved_path,
                    (*chain, resolved.resolved_path),
                    depth + 1,
                )
                if nested_errors:
                    errors.extend(nested_errors)
                    continue

            for component in included.components:
                components[component.name] = component
            for layout in included.layouts:
                layouts[layout.name] = layout

        # The including document's own definitions win
        for component in document.components:
            components[component.name] = component
        for layout in document.layouts:
            layouts[layout.name] = layout

        merged = document.model_copy(
            update={
                "components": list(components.values()),
                "layouts": list(layouts.values()),
                "includes": [],
            }
        )
        return merged, errors


async def compile_async(
    source: str, options: CompileOptions | None = None
) -> CompileResult:
    """Parse, resolve includes and validate WireScript source.

    Without a resolver, or without include directives, this is equivalent
    to ``compile``.

    Args:
        source: Source text.
        options: Compile options carrying the resolver and ``file_path``.

    Returns:
        CompileResult for the merged document.
    """
    options = options or CompileOptions()
    parsed = parse(source, max_nesting_depth=options.max_nesting_depth)
    if not parsed.success or parsed.document is None:
        return CompileResult(
            success=False, document=parsed.document, errors=parsed.errors
        )

    document = parsed.document
    if not document.includes or options.resolver is None:
        return _finalize(document, parsed.errors, options)

    resolver = IncludeResolver(options)
    document, include_errors = await resolver.resolve(
        document,
        options.file_path,
        chain=(options.file_path,) if options.file_path else (),
    )
    if include_errors:
        return CompileResult(
            success=False,
            document=document,
            errors=[*parsed.errors, *include_errors],
        )
    return _finalize(document, parsed.errors, options)


__all__ = [
    "CompileOptions",
    "CompileResult",
    "IncludeError",
    "IncludeResolver",
    "ResolvedInclude",
    "Resolver",
    "compile",
    "compile_async",
]
