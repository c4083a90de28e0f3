"""Source formatter for WireScript.

The formatter never builds a syntax tree. It works on the token stream in
two passes:

1. ``balance_tokens`` repairs structure with an explicit stack of open form
   names. Placement rules from the schema decide where a missing ``)``
   belongs: a top-level form closes everything back to ``wire``, an overlay
   closes everything back to its screen, and a form opened inside a leaf
   element closes that leaf first. Whatever is still open at the end of
   input is closed.
2. ``_Printer`` replays the balanced tokens. Block forms put each child form
   on its own line; everything else stays inline and wraps before a property
   when a line grows past the width limit. Standalone comments, recovered
   from the raw text by ``extract_comments``, are reinserted before the token
   they preceded.

Example:
    >>> print(format('(wire (screen home (box (text "Hi"'), end="")
    (wire
      (screen home
        (box
          (text "Hi"))))
"""

from dataclasses import dataclass

from wirescript.config import get_format_defaults
from wirescript.core.log import get_logger
from wirescript.lexer import VALUE_KINDS, Token, TokenKind, tokenize
from wirescript.schema import (
    OVERLAY_TYPES,
    ROOT_FORM,
    TOP_LEVEL_FORMS,
    accepts_children,
    is_block_form,
)

logger = get_logger("formatter")

SCREEN_FORM = "screen"
DEFINE_FORM = "define"


@dataclass(frozen=True)
class FormatOptions:
    """Formatter options. None falls back to configuration.

    Attributes:
        indent: Indentation unit (WIRESCRIPT_INDENT, two spaces).
        max_line_length: Wrap width (WIRESCRIPT_MAX_LINE_LENGTH, 100).
            Zero or less disables wrapping.
    """

    indent: str | None = None
    max_line_length: int | None = None


@dataclass(frozen=True)
class Comment:
    """A ``;`` comment found in raw source.

    Attributes:
        line: 1-based line of the comment.
        column: 1-based column of the ``;``.
        text: Comment text from ``;`` to end of line, without the newline.
        standalone: True when only whitespace precedes it on its line.
    """

    line: int
    column: int
    text: str
    standalone: bool


# =============================================================================
# Comment extraction
# =============================================================================


def extract_comments(source: str) -> list[Comment]:
    """Find every comment in ``source``.

    The scan tracks string literals across lines, so a ``;`` inside a quoted
    string (including a multi-line one) never starts a comment.

    Args:
        source: Raw source text.

    Returns:
        Comments in source order.
    """
    comments: list[Comment] = []
    in_string = False
    escaped = False
    line = 1
    line_start = 0
    index = 0

    while index < len(source):
        char = source[index]
        if char == "\n":
            line += 1
            line_start = index + 1
            escaped = False
        elif in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == ";":
            end = source.find("\n", index)
            if end == -1:
                end = len(source)
            comments.append(
                Comment(
                    line=line,
                    column=index - line_start + 1,
                    text=source[index:end].rstrip(),
                    standalone=not source[line_start:index].strip(),
                )
            )
            index = end
            continue
        index += 1

    return comments


# =============================================================================
# Auto-balance
# =============================================================================


def _close_token(anchor: Token) -> Token:
    """Synthesize a ``)`` positioned at the end of ``anchor``."""
    return Token(
        TokenKind.RPAREN,
        ")",
        anchor.end_line,
        anchor.end_column,
        anchor.end_line,
        anchor.end_column,
    )


def _form_name(tokens: list[Token], index: int) -> str:
    """Name of the form opened at ``tokens[index]``, or "" for a plain list.

    A define's parameter list is a plain list even when it starts with a
    symbol.
    """
    if index + 1 >= len(tokens) or tokens[index + 1].kind != TokenKind.SYMBOL:
        return ""
    if (
        index >= 3
        and tokens[index - 3].kind == TokenKind.LPAREN
        and tokens[index - 2].kind == TokenKind.SYMBOL
        and tokens[index - 2].value == DEFINE_FORM
        and tokens[index - 1].kind == TokenKind.SYMBOL
    ):
        return ""
    return tokens[index + 1].value


def balance_tokens(tokens: list[Token]) -> list[Token]:
    """Insert missing and drop surplus closing parentheses.

    Parenthesized lists that do not start with a symbol (parameter lists)
    are tracked on the stack under an empty name and never trigger closes.
    Synthesized tokens are positioned at the end of the last real token so
    comments that follow in the source stay after them.

    Args:
        tokens: Tokens from ``tokenize``.

    Returns:
        A balanced token list ending with EOF.
    """
    balanced: list[Token] = []
    stack: list[str] = []
    previous: Token | None = None
    inserted = 0
    dropped = 0

    def close_top(anchor: Token) -> None:
        nonlocal inserted
        stack.pop()
        balanced.append(_close_token(anchor))
        inserted += 1

    for index, token in enumerate(tokens):
        if token.kind == TokenKind.EOF:
            break

        if token.kind == TokenKind.LPAREN:
            name = _form_name(tokens, index)

            if name in TOP_LEVEL_FORMS:
                while stack and stack[-1] != ROOT_FORM:
                    close_top(previous)
            elif name in OVERLAY_TYPES and SCREEN_FORM in stack:
                while stack[-1] != SCREEN_FORM:
                    close_top(previous)
            elif name and stack and stack[-1] and not accepts_children(stack[-1]):
                close_top(previous)

            stack.append(name)

        elif token.kind == TokenKind.RPAREN:
            if not stack:
                dropped += 1
                continue
            stack.pop()

        balanced.append(token)
        previous = token

    while stack:
        close_top(previous)

    line, column = 1, 1
    if tokens:
        line, column = tokens[-1].end_line, tokens[-1].end_column
    balanced.append(Token(TokenKind.EOF, "", line, column, line, column))

    if inserted or dropped:
        logger.debug(f"Balanced tokens: inserted {inserted} and dropped {dropped} ')'")
    return balanced


# =============================================================================
# Pretty printing
# =============================================================================


def escape_string(value: str) -> str:
    """Escape a string value for output between double quotes."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def render_token(token: Token) -> str:
    """Source spelling of a token, with strings quoted and escaped."""
    if token.kind == TokenKind.STRING:
        return f'"{escape_string(token.value)}"'
    return token.text


@dataclass
class _Frame:
    name: str
    block: bool


class _Printer:
    """Replays balanced tokens as formatted text."""

    def __init__(self, comments: list[Comment], indent: str, width: int):
        self.comments = [c for c in comments if c.standalone]
        self.indent = indent
        self.width = width
        self.parts: list[str] = []
        self.stack: list[_Frame] = []
        self.column = 0
        self.last_line = 0
        self.fresh_line = True
        self.after_comment = False
        self.previous_kind: TokenKind | None = None
        self.next_comment = 0

    # -------------------------------------------------------------------------
    # Output helpers
    # -------------------------------------------------------------------------

    def _write(self, text: str) -> None:
        self.parts.append(text)
        self.column += len(text)
        self.fresh_line = False

    def _break(self, level: int, blank: bool = False) -> None:
        if self.parts:
            self.parts.append("\n\n" if blank else "\n")
        prefix = self.indent * level
        self.parts.append(prefix)
        self.column = len(prefix)
        self.fresh_line = True
        self.after_comment = False

    def _flush_comments(self, before_line: int | None) -> None:
        """Emit standalone comments between the last token and ``before_line``."""
        while self.next_comment < len(self.comments):
            comment = self.comments[self.next_comment]
            if before_line is not None and comment.line >= before_line:
                return
            self.next_comment += 1
            if comment.line <= self.last_line:
                continue
            blank = comment.line > self.last_line + 1 and bool(self.parts)
            self._break(len(self.stack), blank=blank)
            self._write(comment.text)
            self.after_comment = True
            self.last_line = comment.line

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def print(self, tokens: list[Token]) -> str:
        for index, token in enumerate(tokens):
            if token.kind == TokenKind.EOF:
                break
            following = tokens[index + 1] if index + 1 < len(tokens) else token
            self._flush_comments(token.line)

            if token.kind == TokenKind.LPAREN:
                self._open(token, _form_name(tokens, index))
            elif token.kind == TokenKind.RPAREN:
                self._close()
            elif (
                token.kind == TokenKind.SYMBOL
                and self.previous_kind == TokenKind.LPAREN
            ):
                if self.after_comment:
                    self._break(len(self.stack))
                self._write(token.value)
            else:
                self._atom(token, following)

            self.previous_kind = token.kind
            self.last_line = max(self.last_line, token.end_line)

        self._flush_comments(None)
        return "".join(self.parts) + "\n"

    def _open(self, token: Token, name: str) -> None:
        parent = self.stack[-1] if self.stack else None
        gap = token.line > self.last_line + 1

        if parent is None:
            if self.parts:
                self._break(0, blank=gap or not self.after_comment)
        elif name and parent.block:
            blank = gap and parent.name == ROOT_FORM and self.last_line > 0
            self._break(len(self.stack), blank=blank)
        elif self.after_comment:
            self._break(len(self.stack))
        elif not self.fresh_line and self.previous_kind != TokenKind.LPAREN:
            self._write(" ")

        self._write("(")
        self.stack.append(_Frame(name, bool(name) and is_block_form(name)))

    def _close(self) -> None:
        if self.after_comment:
            self._break(max(len(self.stack) - 1, 0))
        self._write(")")
        if self.stack:
            self.stack.pop()

    def _atom(self, token: Token, following: Token) -> None:
        text = render_token(token)
        if self.after_comment:
            self._break(len(self.stack))
        else:
            needed = len(text) + 1
            if token.kind == TokenKind.KEYWORD and following.kind in VALUE_KINDS:
                needed += len(render_token(following)) + 1
            # A keyword stays on the line of the value it introduces
            is_value = token.kind in VALUE_KINDS
            wrap_point = not (self.previous_kind == TokenKind.KEYWORD and is_value)
            too_long = self.width > 0 and self.column + needed > self.width
            if wrap_point and too_long and not self.fresh_line:
                self._break(len(self.stack))

        if not self.fresh_line:
            self._write(" ")
        self._write(text)


# =============================================================================
# Entry points
# =============================================================================


def format_tokens(
    tokens: list[Token],
    comments: list[Comment] | None = None,
    options: FormatOptions | None = None,
) -> str:
    """Format an already tokenized source.

    Args:
        tokens: Tokens from ``tokenize``. They are balanced first.
        comments: Comments from ``extract_comments``.
        options: Formatting options.

    Returns:
        Formatted text ending with a single newline.
    """
    options = options or FormatOptions()
    indent, width = get_format_defaults(options.indent, options.max_line_length)
    printer = _Printer(comments or [], indent, width)
    return printer.print(balance_tokens(tokens))


def format(source: str, options: FormatOptions | None = None) -> str:
    """Format WireScript source, repairing unbalanced parentheses.

    Args:
        source: Source text. It may be truncated or have surplus ``)``.
        options: Formatting options.

    Returns:
        Formatted text ending with a single newline.

    Raises:
        LexError: When the source cannot be tokenized.
    """
    return format_tokens(tokenize(source), extract_comments(source), options)


__all__ = [
    "Comment",
    "FormatOptions",
    "balance_tokens",
    "escape_string",
    "extract_comments",
    "format",
    "format_tokens",
    "render_token",
]
