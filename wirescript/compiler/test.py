"""Tests for compile orchestration and include resolution."""

import logging

import pytest

from wirescript.compiler import (
    CompileOptions,
    IncludeError,
    ResolvedInclude,
    compile,
    compile_async,
)


def make_resolver(files: dict[str, str], calls: list | None = None):
    """Build a sync resolver over an in-memory file table."""

    def resolver(include_path: str, from_path: str) -> ResolvedInclude:
        if calls is not None:
            calls.append((include_path, from_path))
        if include_path not in files:
            raise FileNotFoundError(f"No such file: {include_path}")
        return ResolvedInclude(
            content=files[include_path], resolved_path=f"/project/{include_path}"
        )

    return resolver


class TestCompile:
    """Tests for the synchronous compile entry point."""

    @pytest.mark.unit
    def test_success(self):
        result = compile('(wire (screen home "Home" (text "Hi")))')

        assert result.success
        assert result.errors == []
        assert result.warnings == []
        assert result.document.screens[0].id == "home"

    @pytest.mark.unit
    def test_zero_screens_fails(self):
        """Definition-only source parses but does not compile."""
        result = compile("(wire (define spacer () (box)))")

        assert not result.success
        assert result.document is not None
        assert [e.message for e in result.errors] == [
            "Document must have at least one screen"
        ]
        assert (result.errors[0].line, result.errors[0].column) == (1, 1)

    @pytest.mark.unit
    def test_fatal_parse_error(self):
        result = compile("(screen home (box))")

        assert not result.success
        assert result.document is None
        assert len(result.errors) == 1

    @pytest.mark.unit
    def test_lex_error(self):
        result = compile('(wire (screen home (text "\\x4")))')

        assert not result.success
        assert result.errors[0].message.startswith("Invalid hex digit")

    @pytest.mark.unit
    def test_recovered_parse_errors_skip_validation(self):
        result = compile("(wire (bogus) (screen home (text $unbound)))")

        assert not result.success
        assert result.document is not None
        assert [e.message for e in result.errors] == ["Unknown form type: bogus"]

    @pytest.mark.unit
    def test_validation_errors_share_error_list(self):
        result = compile("(wire (screen home (box)) (screen home (box)))")

        assert not result.success
        assert [e.message for e in result.errors] == ["Duplicate screen ID: 'home'"]

    @pytest.mark.unit
    def test_warnings_do_not_fail(self):
        result = compile("(wire (screen home (box :bold)))")

        assert result.success
        assert [w.message for w in result.warnings] == ["Unknown flag ':bold'"]

    @pytest.mark.unit
    def test_warnings_as_errors(self):
        options = CompileOptions(warnings_as_errors=True)
        result = compile("(wire (screen home (box :bold)))", options)

        assert not result.success
        assert result.errors == []
        assert len(result.warnings) == 1

    @pytest.mark.unit
    def test_includes_left_unresolved(self):
        result = compile('(wire (include "lib.wire") (screen home (box)))')

        assert result.success
        assert [i.path for i in result.document.includes] == ["lib.wire"]

    @pytest.mark.unit
    def test_resolver_ignored_with_warning(self, caplog):
        """compile never calls a resolver and says so when includes exist."""
        calls = []
        options = CompileOptions(resolver=make_resolver({"lib.wire": ""}, calls))

        with caplog.at_level(logging.WARNING, logger="wirescript.compiler"):
            result = compile('(wire (include "lib.wire") (screen home (box)))', options)

        assert result.success
        assert calls == []
        assert [i.path for i in result.document.includes] == ["lib.wire"]
        assert "use compile_async" in caplog.text

    @pytest.mark.unit
    def test_nesting_depth_option(self):
        options = CompileOptions(max_nesting_depth=2)
        result = compile("(wire (screen home (box)))", options)

        assert result.errors[0].message == "Maximum nesting depth exceeded"

    @pytest.mark.unit
    def test_deterministic(self):
        source = '(wire (screen home (box :gap "8" (text "a"))))'

        assert compile(source) == compile(source)


class TestCompileAsync:
    """Tests for include resolution."""

    LIB = '(wire (define card-row (label) (box :row (text $label))))'
    MAIN = '(wire (include "lib.wire") (screen home (card-row "A")))'

    @pytest.mark.asyncio
    async def test_merges_included_definitions(self):
        options = CompileOptions(resolver=make_resolver({"lib.wire": self.LIB}))
        result = await compile_async(self.MAIN, options)

        assert result.success, result.errors
        assert result.warnings == []
        assert result.document.includes == []
        assert [c.name for c in result.document.components] == ["card-row"]

    @pytest.mark.asyncio
    async def test_async_resolver(self):
        async def resolver(include_path, from_path):
            return ResolvedInclude(content=self.LIB, resolved_path="/lib.wire")

        result = await compile_async(self.MAIN, CompileOptions(resolver=resolver))

        assert result.success
        assert result.document.get_component("card-row") is not None

    @pytest.mark.asyncio
    async def test_without_resolver_matches_compile(self):
        result = await compile_async(self.MAIN)

        assert result == compile(self.MAIN)

    @pytest.mark.asyncio
    async def test_local_definition_wins(self):
        files = {"lib.wire": "(wire (define tile () (card)))"}
        source = (
            '(wire (include "lib.wire") (define tile () (box))'
            " (screen home (tile)))"
        )
        result = await compile_async(
            source, CompileOptions(resolver=make_resolver(files))
        )

        assert result.success
        assert result.document.get_component("tile").body.type == "box"

    @pytest.mark.asyncio
    async def test_later_include_wins(self):
        files = {
            "a.wire": "(wire (define tile () (card)))",
            "b.wire": "(wire (define tile () (group)))",
        }
        source = '(wire (include "a.wire") (include "b.wire") (screen home (tile)))'
        result = await compile_async(
            source, CompileOptions(resolver=make_resolver(files))
        )

        assert result.document.get_component("tile").body.type == "group"
        assert len(result.document.components) == 1

    @pytest.mark.asyncio
    async def test_nested_includes_resolve_from_included_path(self):
        files = {
            "lib.wire": '(wire (include "base.wire") (define outer () (inner)))',
            "base.wire": "(wire (define inner () (box)))",
        }
        calls = []
        options = CompileOptions(
            file_path="/project/main.wire", resolver=make_resolver(files, calls)
        )
        result = await compile_async(
            '(wire (include "lib.wire") (screen home (outer)))', options
        )

        assert result.success
        assert calls == [
            ("lib.wire", "/project/main.wire"),
            ("base.wire", "/project/lib.wire"),
        ]
        names = {c.name for c in result.document.components}
        assert names == {"outer", "inner"}

    @pytest.mark.asyncio
    async def test_circular_include(self):
        files = {
            "a.wire": '(wire (include "b.wire") (define a () (box)))',
            "b.wire": '(wire (include "a.wire") (define b () (box)))',
        }
        options = CompileOptions(
            file_path="/project/main.wire", resolver=make_resolver(files)
        )
        result = await compile_async(
            '(wire (include "a.wire") (screen home (box)))', options
        )

        assert not result.success
        assert [e.message for e in result.errors] == [
            "Circular include detected: a.wire (/project/a.wire)"
        ]

    @pytest.mark.asyncio
    async def test_self_include(self):
        source = '(wire (include "main.wire") (screen home (box)))'
        options = CompileOptions(
            file_path="/project/main.wire",
            resolver=make_resolver({"main.wire": source}),
        )
        result = await compile_async(source, options)

        assert [e.message for e in result.errors] == [
            "Circular include detected: main.wire (/project/main.wire)"
        ]

    @pytest.mark.asyncio
    async def test_diamond_include_is_not_circular(self):
        files = {
            "a.wire": '(wire (include "common.wire"))',
            "b.wire": '(wire (include "common.wire"))',
            "common.wire": "(wire (define shared () (box)))",
        }
        source = '(wire (include "a.wire") (include "b.wire") (screen home (shared)))'
        result = await compile_async(
            source, CompileOptions(resolver=make_resolver(files))
        )

        assert result.success, result.errors

    @pytest.mark.asyncio
    async def test_resolver_failure(self):
        result = await compile_async(
            '(wire (include "missing.wire") (screen home (box)))',
            CompileOptions(resolver=make_resolver({})),
        )

        assert not result.success
        error = result.errors[0]
        assert error.message == (
            "Cannot resolve include 'missing.wire': No such file: missing.wire"
        )
        assert (error.line, error.column) == (1, 7)

    @pytest.mark.asyncio
    async def test_include_error_message(self):
        def resolver(include_path, from_path):
            raise IncludeError("access denied")

        result = await compile_async(
            '(wire (include "x.wire") (screen home (box)))',
            CompileOptions(resolver=resolver),
        )

        assert [e.message for e in result.errors] == [
            "Cannot resolve include 'x.wire': access denied"
        ]

    @pytest.mark.asyncio
    async def test_included_parse_error(self):
        result = await compile_async(
            '(wire (include "bad.wire") (screen home (box)))',
            CompileOptions(resolver=make_resolver({"bad.wire": "(screen x)"})),
        )

        assert [e.message for e in result.errors] == [
            "Error in included file 'bad.wire': Expected 'wire', got 'screen'"
        ]

    @pytest.mark.asyncio
    async def test_included_fragment_needs_no_screen(self):
        """Library files holding only definitions are valid includes."""
        files = {"lib.wire": "(wire (layout shell (box (slot))))"}
        result = await compile_async(
            '(wire (include "lib.wire") (screen home :layout shell (text "x")))',
            CompileOptions(resolver=make_resolver(files)),
        )

        assert result.success
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_max_include_depth(self):
        files = {
            "a.wire": '(wire (include "b.wire"))',
            "b.wire": '(wire (include "c.wire"))',
            "c.wire": "(wire (define c () (box)))",
        }
        options = CompileOptions(resolver=make_resolver(files), max_include_depth=1)
        result = await compile_async(
            '(wire (include "a.wire") (screen home (box)))', options
        )

        assert [e.message for e in result.errors] == [
            "Maximum include depth (1) exceeded"
        ]
