"""Schema-driven recursive-descent parser.

Consumes the lexer's token list and builds a ``Document``. Structural
decisions (content, children, property types) come from the schema registry;
names the registry does not know are parsed as user components with
container defaults so definitions may follow their first use.

The parser recovers from malformed forms. A broken top-level form or child
element is recorded as a ``ParseError`` and skipped, and parsing resumes with
the next sibling. Only a missing ``(wire`` wrapper, a lexical error or
excessive nesting abort without a document.

Example:
    >>> result = parse('(wire (screen home "Home" (text "Hi")))')
    >>> result.success
    True
    >>> result.document.screens[0].root.content
    'Hi'
"""

from dataclasses import dataclass, field
from typing import Mapping

from wirescript.config import EnvVar, get_environment
from wirescript.core.log import get_logger
from wirescript.ir import (
    ActionRef,
    ChildNode,
    ComponentDef,
    Document,
    ElementNode,
    IncludeNode,
    LayoutNode,
    MetaValue,
    OverlayNode,
    OverlayRef,
    ParamRef,
    ParseError,
    PropValue,
    RepeatNode,
    ScreenNode,
    ScreenRef,
    SourceLocation,
    UrlRef,
)
from wirescript.lexer import VALUE_KINDS, LexError, Token, TokenKind, tokenize
from wirescript.schema import (
    ACTION_KEYWORDS,
    OVERLAY_PROPS,
    OVERLAY_TYPES,
    REPEAT_CONTAINER,
    ROOT_FORM,
    TOP_LEVEL_FORMS,
    VIEWPORTS,
    PropDef,
    PropType,
    get_schema,
)
from wirescript.value import NumberValue, StringValue, SymbolValue, coerce_literal

logger = get_logger("parser")

# String prefixes parsed as external URLs
URL_PROTOCOLS = (
    "http://",
    "https://",
    "ftp://",
    "ftps://",
    "mailto:",
    "tel:",
    "file://",
    "data:",
    "//",
)


def is_url(value: str) -> bool:
    """Check whether a string starts with a known URL scheme."""
    return value.lower().startswith(URL_PROTOCOLS)


class ParserError(Exception):
    """Unwinds the parser to the nearest recovery point."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at line {line}, column {column}")
        self.message = message
        self.line = line
        self.column = column


@dataclass
class ParseResult:
    """Outcome of parsing.

    Attributes:
        success: True when no errors were recorded.
        document: The parsed document. None only after a fatal error.
        errors: Every error recorded, in source order of discovery.
    """

    success: bool
    document: Document | None = None
    errors: list[ParseError] = field(default_factory=list)


# =============================================================================
# Parser
# =============================================================================


class Parser:
    """Single-use parser over one token list."""

    def __init__(self, tokens: list[Token], max_nesting_depth: int | None = None):
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            line, column = 1, 1
            if tokens:
                line, column = tokens[-1].end_line, tokens[-1].end_column
            tokens = [*tokens, Token(TokenKind.EOF, "", line, column, line, column)]
        self.tokens = tokens
        self.pos = 0
        self.errors: list[ParseError] = []
        self.max_nesting_depth = get_environment(
            EnvVar.WIRESCRIPT_MAX_NESTING_DEPTH, override=max_nesting_depth
        )

    def parse(self) -> ParseResult:
        """Parse the token list into a document.

        Returns:
            ParseResult with the document and collected errors.
        """
        too_deep = self._find_excessive_nesting()
        if too_deep is not None:
            error = ParseError(
                "Maximum nesting depth exceeded", too_deep.line, too_deep.column
            )
            return ParseResult(success=False, errors=[error])

        try:
            document = self._parse_document()
        except ParserError as error:
            self._record(error)
            return ParseResult(success=False, errors=self.errors)

        logger.debug(
            f"Parsed {len(document.screens)} screens, "
            f"{len(document.components)} components, "
            f"{len(document.layouts)} layouts with {len(self.errors)} errors"
        )
        return ParseResult(
            success=not self.errors, document=document, errors=self.errors
        )

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _check(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        token = self._current()
        if token.kind != TokenKind.EOF:
            self.pos += 1
        return token

    def _error(self, message: str, token: Token | None = None) -> ParserError:
        token = token or self._current()
        return ParserError(message, token.line, token.column)

    def _expect(self, kind: TokenKind) -> Token:
        if not self._check(kind):
            token = self._current()
            got = token.kind.value
            if token.value:
                got = f"{got} '{token.value}'"
            raise self._error(f"Expected {kind.value}, got {got}")
        return self._advance()

    def _expect_symbol(self, value: str | None = None) -> str:
        token = self._expect(TokenKind.SYMBOL)
        if value is not None and token.value != value:
            raise self._error(f"Expected '{value}', got '{token.value}'", token)
        return token.value

    def _expect_close(self, form: str) -> Token:
        if self._check(TokenKind.LPAREN):
            raise self._error(f"'{form}' accepts a single body element")
        return self._expect(TokenKind.RPAREN)

    def _has_value(self) -> bool:
        return self._current().kind in VALUE_KINDS

    def _is_form_ahead(self, names: frozenset[str]) -> bool:
        following = self._peek()
        return (
            self._check(TokenKind.LPAREN)
            and following.kind == TokenKind.SYMBOL
            and following.value in names
        )

    def _location(self, start: Token, end: Token) -> SourceLocation:
        return SourceLocation(
            line=start.line,
            column=start.column,
            end_line=end.end_line,
            end_column=end.end_column,
        )

    # -------------------------------------------------------------------------
    # Error recovery
    # -------------------------------------------------------------------------

    def _record(self, error: ParserError) -> None:
        logger.debug(f"Recovered from parse error: {error}")
        self.errors.append(ParseError(error.message, error.line, error.column))

    def _add_error(self, message: str, token: Token) -> None:
        self.errors.append(ParseError(message, token.line, token.column))

    def _skip_form(self, start_pos: int) -> None:
        """Rewind to ``start_pos`` and skip one balanced form (or one token)."""
        self.pos = start_pos
        if not self._check(TokenKind.LPAREN):
            self._advance()
            return
        depth = 0
        while not self._check(TokenKind.EOF):
            token = self._advance()
            if token.kind == TokenKind.LPAREN:
                depth += 1
            elif token.kind == TokenKind.RPAREN:
                depth -= 1
                if depth == 0:
                    return

    def _find_excessive_nesting(self) -> Token | None:
        depth = 0
        for token in self.tokens:
            if token.kind == TokenKind.LPAREN:
                depth += 1
                if depth > self.max_nesting_depth:
                    return token
            elif token.kind == TokenKind.RPAREN:
                depth = max(0, depth - 1)
        return None

    # -------------------------------------------------------------------------
    # Document
    # -------------------------------------------------------------------------

    def _parse_document(self) -> Document:
        start = self._expect(TokenKind.LPAREN)
        self._expect_symbol(ROOT_FORM)

        meta: dict[str, MetaValue] = {}
        includes: list[IncludeNode] = []
        components: list[ComponentDef] = []
        layouts: list[LayoutNode] = []
        screens: list[ScreenNode] = []

        while not self._check(TokenKind.RPAREN) and not self._check(TokenKind.EOF):
            form_pos = self.pos
            try:
                form_start = self._expect(TokenKind.LPAREN)
                form_type = self._expect_symbol()
                if form_type == "include":
                    includes.append(self._parse_include(form_start))
                elif form_type == "meta":
                    meta.update(self._parse_meta())
                elif form_type == "define":
                    components.append(self._parse_define(form_start))
                elif form_type == "layout":
                    layouts.append(self._parse_layout(form_start))
                elif form_type == "screen":
                    screens.append(self._parse_screen(form_start))
                else:
                    self._add_error(f"Unknown form type: {form_type}", form_start)
                    self._skip_form(form_pos)
            except ParserError as error:
                self._record(error)
                self._skip_form(form_pos)

        if self._check(TokenKind.EOF):
            end = self._current()
            self._add_error(f"Missing closing parenthesis for '{ROOT_FORM}'", end)
        else:
            end = self._advance()
            if not self._check(TokenKind.EOF):
                self._add_error(
                    f"Unexpected content after '{ROOT_FORM}' form", self._current()
                )

        return Document(
            meta=meta,
            includes=includes,
            components=components,
            layouts=layouts,
            screens=screens,
            loc=self._location(start, end),
        )

    def _parse_include(self, start: Token) -> IncludeNode:
        if not self._check(TokenKind.STRING):
            raise self._error("Include expects a string path")
        path = self._advance().value
        end = self._expect(TokenKind.RPAREN)
        return IncludeNode(path=path, loc=self._location(start, end))

    def _parse_meta(self) -> dict[str, MetaValue]:
        meta: dict[str, MetaValue] = {}
        while self._check(TokenKind.KEYWORD):
            key = self._advance().value
            if not self._has_value():
                meta[key] = True
                continue
            token = self._advance()
            if token.kind in (TokenKind.PARAM_REF, TokenKind.HASH_REF):
                meta[key] = token.text
            else:
                meta[key] = self._literal(token).natural()
        self._expect(TokenKind.RPAREN)
        return meta

    def _parse_define(self, start: Token) -> ComponentDef:
        name = self._expect_symbol()
        self._expect(TokenKind.LPAREN)
        params: list[str] = []
        while not self._check(TokenKind.RPAREN) and not self._check(TokenKind.EOF):
            params.append(self._expect_symbol())
        self._expect(TokenKind.RPAREN)
        body = self._parse_single_element()
        end = self._expect_close("define")
        return ComponentDef(
            name=name, params=params, body=body, loc=self._location(start, end)
        )

    def _parse_layout(self, start: Token) -> LayoutNode:
        name = self._expect_symbol()
        body = self._parse_single_element()
        end = self._expect_close("layout")
        return LayoutNode(name=name, body=body, loc=self._location(start, end))

    def _parse_screen(self, start: Token) -> ScreenNode:
        screen_id = self._expect_symbol()
        name: str | None = None
        viewport: str | None = None
        layout: str | None = None

        if self._check(TokenKind.STRING):
            name = self._advance().value

        while self._check(TokenKind.KEYWORD):
            option = self._advance()
            if option.value in VIEWPORTS:
                viewport = option.value
            elif option.value == "layout":
                layout = self._expect_symbol()
            else:
                self._add_error(f"Unknown screen option ':{option.value}'", option)
                if self._has_value():
                    self._advance()

        root: ElementNode | None = None
        overlays: list[OverlayNode] = []
        while self._check(TokenKind.LPAREN):
            form_pos = self.pos
            try:
                if self._is_form_ahead(OVERLAY_TYPES):
                    overlays.append(self._parse_overlay())
                elif root is None:
                    root = self._parse_single_element()
                else:
                    raise self._error(
                        f"Screen '{screen_id}' must have a single root element"
                    )
            except ParserError as error:
                self._record(error)
                self._skip_form(form_pos)

        end = self._expect(TokenKind.RPAREN)
        if root is None:
            raise self._error(f"Screen '{screen_id}' must have a root element", start)

        return ScreenNode(
            id=screen_id,
            name=name,
            viewport=viewport,
            layout=layout,
            root=root,
            overlays=overlays,
            loc=self._location(start, end),
        )

    def _parse_overlay(self) -> OverlayNode:
        start = self._expect(TokenKind.LPAREN)
        overlay_type = self._expect_symbol()
        overlay_id = ""
        props: dict[str, PropValue] = {}

        while self._check(TokenKind.KEYWORD):
            key_token = self._current()
            if key_token.value != "id":
                self._advance()
                props[key_token.value] = self._parse_prop_value(
                    OVERLAY_PROPS.get(key_token.value)
                )
                continue
            self._advance()
            if self._check(TokenKind.STRING) or self._check(TokenKind.SYMBOL):
                overlay_id = self._advance().value
            else:
                self._add_error("Overlay :id must be a string", key_token)
                if self._has_value():
                    self._advance()

        children = self._parse_children()
        end = self._expect(TokenKind.RPAREN)

        if not overlay_id:
            self._add_error(f"{overlay_type} must have an :id property", start)
            overlay_id = f"{overlay_type}-{start.line}-{start.column}"

        return OverlayNode(
            type=overlay_type,
            id=overlay_id,
            props=props,
            children=children,
            loc=self._location(start, end),
        )

    # -------------------------------------------------------------------------
    # Elements
    # -------------------------------------------------------------------------

    def _parse_single_element(self) -> ElementNode:
        """Parse a form where exactly one element is expected.

        A ``repeat`` in this position is wrapped in a ``repeat-container``
        element so the slot still holds an ElementNode.
        """
        child = self._parse_child()
        if isinstance(child, RepeatNode):
            return ElementNode(type=REPEAT_CONTAINER, children=[child], loc=child.loc)
        return child

    def _parse_child(self) -> ChildNode:
        start = self._expect(TokenKind.LPAREN)
        name_token = self._current()
        name = self._expect_symbol()

        if name == "repeat":
            return self._parse_repeat(start)
        if name in OVERLAY_TYPES:
            raise self._error(
                f"Overlay '{name}' must be a direct child of a screen", start
            )
        if name in TOP_LEVEL_FORMS:
            raise self._error(f"'{name}' is only allowed at the top level", name_token)

        schema = get_schema(name)
        content: str | ParamRef | None = None
        if schema.content:
            if self._check(TokenKind.STRING):
                content = self._advance().value
            elif self._check(TokenKind.PARAM_REF):
                content = ParamRef(name=self._advance().value)

        props = self._parse_props(schema.props)

        children: list[ChildNode] = []
        if schema.children:
            children = self._parse_children()
        elif self._check(TokenKind.LPAREN):
            self._add_error(
                f"Element '{name}' does not support children", self._current()
            )
            self._parse_children()

        end = self._expect(TokenKind.RPAREN)
        return ElementNode(
            type=name,
            content=content,
            props=props,
            children=children,
            loc=self._location(start, end),
            is_component=not schema.builtin,
        )

    def _parse_children(self) -> list[ChildNode]:
        children: list[ChildNode] = []
        while self._check(TokenKind.LPAREN):
            child_pos = self.pos
            try:
                children.append(self._parse_child())
            except ParserError as error:
                self._record(error)
                self._skip_form(child_pos)
        return children

    def _parse_repeat(self, start: Token) -> RepeatNode:
        count: int | ParamRef = 1
        variable: str | None = None

        while self._check(TokenKind.KEYWORD):
            key = self._current().value
            if key not in ("count", "as"):
                break
            self._advance()
            value = self._current()
            if key == "count" and value.kind == TokenKind.NUMBER:
                number = NumberValue.from_text(self._advance().value)
                count = number.as_int()
                if not number.is_int():
                    self._add_error(":count must be a whole number", value)
            elif key == "count" and value.kind == TokenKind.PARAM_REF:
                count = ParamRef(name=self._advance().value)
            elif key == "as" and value.kind in (TokenKind.STRING, TokenKind.SYMBOL):
                variable = self._advance().value
            else:
                expected = (
                    "a number or parameter reference" if key == "count" else "a string"
                )
                self._add_error(f":{key} must be {expected}", value)
                if self._has_value():
                    self._advance()

        body = self._parse_single_element()
        end = self._expect_close("repeat")
        return RepeatNode(
            count=count, variable=variable, body=body, loc=self._location(start, end)
        )

    # -------------------------------------------------------------------------
    # Properties and values
    # -------------------------------------------------------------------------

    def _parse_props(self, schema_props: Mapping[str, PropDef]) -> dict[str, PropValue]:
        props: dict[str, PropValue] = {}
        while self._check(TokenKind.KEYWORD):
            key = self._advance().value
            props[key] = self._parse_prop_value(schema_props.get(key))
        return props

    def _parse_prop_value(self, prop: PropDef | None) -> PropValue:
        """Read the value following a property keyword.

        Unknown properties (``prop`` is None) keep their natural value. A bare
        keyword takes the declared default, or True.
        """
        if prop is not None and prop.type == PropType.NAVIGATION:
            return self._parse_navigation_target()
        if self._has_value():
            return self._parse_value(prop)
        if prop is not None and prop.default is not None:
            return prop.default
        return True

    def _literal(self, token: Token) -> SymbolValue | StringValue | NumberValue:
        if token.kind == TokenKind.NUMBER:
            return NumberValue.from_text(token.value)
        if token.kind == TokenKind.STRING:
            return StringValue(token.value)
        return SymbolValue(token.value)

    def _parse_value(self, prop: PropDef | None) -> PropValue:
        token = self._advance()
        if token.kind == TokenKind.PARAM_REF:
            return ParamRef(name=token.value)
        if token.kind == TokenKind.HASH_REF:
            return OverlayRef(id=token.value)
        if token.kind == TokenKind.STRING and is_url(token.value):
            return UrlRef(url=token.value)

        literal = self._literal(token)
        if prop is None:
            return literal.natural()
        return coerce_literal(literal, prop.type)

    def _parse_navigation_target(self) -> PropValue:
        token = self._current()
        if token.kind == TokenKind.HASH_REF:
            return OverlayRef(id=self._advance().value)
        if token.kind == TokenKind.PARAM_REF:
            return ParamRef(name=self._advance().value)
        if token.kind == TokenKind.KEYWORD:
            action = self._advance().value
            if action in ACTION_KEYWORDS:
                return ActionRef(action=action)
            return action
        if token.kind == TokenKind.STRING:
            value = self._advance().value
            if is_url(value):
                return UrlRef(url=value)
            if value.startswith("#"):
                return OverlayRef(id=value[1:])
            return ScreenRef(id=value)
        if token.kind == TokenKind.SYMBOL:
            return ScreenRef(id=self._advance().value)
        raise self._error(
            "Expected navigation target (screen, overlay, action, or URL)"
        )


# =============================================================================
# Entry points
# =============================================================================


def parse_tokens(
    tokens: list[Token], max_nesting_depth: int | None = None
) -> ParseResult:
    """Parse an already tokenized source.

    Args:
        tokens: Tokens from ``tokenize``.
        max_nesting_depth: Override for WIRESCRIPT_MAX_NESTING_DEPTH.

    Returns:
        ParseResult.
    """
    return Parser(tokens, max_nesting_depth=max_nesting_depth).parse()


def parse(source: str, max_nesting_depth: int | None = None) -> ParseResult:
    """Tokenize and parse WireScript source.

    Lexical errors are reported in the result rather than raised. A document
    without screens parses successfully; that rule is enforced by compile.

    Args:
        source: Source text.
        max_nesting_depth: Override for WIRESCRIPT_MAX_NESTING_DEPTH.

    Returns:
        ParseResult.
    """
    try:
        tokens = tokenize(source)
    except LexError as error:
        return ParseResult(
            success=False, errors=[ParseError(error.message, error.line, error.column)]
        )
    return parse_tokens(tokens, max_nesting_depth=max_nesting_depth)


__all__ = [
    "URL_PROTOCOLS",
    "ParseResult",
    "Parser",
    "ParserError",
    "is_url",
    "parse",
    "parse_tokens",
]
