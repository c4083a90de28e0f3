"""Compiler module - parse, include resolution and validation in one call.

Example usage:
    >>> from wirescript.compiler import compile
    >>> result = compile("(wire (define spacer () (box)))")
    >>> result.success
    False
    >>> result.errors[0].message
    'Document must have at least one screen'
"""

from wirescript.compiler.lib import (
    CompileOptions,
    CompileResult,
    IncludeError,
    IncludeResolver,
    ResolvedInclude,
    Resolver,
    compile,
    compile_async,
)

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
