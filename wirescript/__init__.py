"""wirescript: compiler core for the WireScript wireframe language."""

from wirescript.compiler import (
    CompileOptions,
    CompileResult,
    IncludeError,
    ResolvedInclude,
    compile,
    compile_async,
)
from wirescript.formatter import FormatOptions, format
from wirescript.ir import Document, ParseError, export_json_schema
from wirescript.lexer import LexError, Token, TokenKind, tokenize
from wirescript.parser import ParseResult, parse, parse_tokens
from wirescript.schema import export_schemas, export_schemas_json, get_schema
from wirescript.validation import ValidationResult, is_valid, validate

__all__ = [
    # Lexer
    "LexError",
    "Token",
    "TokenKind",
    "tokenize",
    # Parser
    "ParseResult",
    "parse",
    "parse_tokens",
    # AST
    "Document",
    "ParseError",
    "export_json_schema",
    # Compiler
    "CompileOptions",
    "CompileResult",
    "IncludeError",
    "ResolvedInclude",
    "compile",
    "compile_async",
    # Validation
    "ValidationResult",
    "is_valid",
    "validate",
    # Formatter
    "FormatOptions",
    "format",
    # Schema
    "export_schemas",
    "export_schemas_json",
    "get_schema",
]
