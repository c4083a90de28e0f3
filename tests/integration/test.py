"""Integration tests across lexer, parser, compiler and formatter."""

import json
from typing import Any

import pytest

from wirescript import (
    CompileOptions,
    ResolvedInclude,
    compile,
    compile_async,
    export_schemas_json,
    format,
    parse,
    tokenize,
)


def strip_locations(value: Any) -> Any:
    """Drop source locations from a model dump so layouts can differ."""
    if isinstance(value, dict):
        return {k: strip_locations(v) for k, v in value.items() if k != "loc"}
    if isinstance(value, list):
        return [strip_locations(v) for v in value]
    return value


class TestEndToEnd:
    """Tests for the full compile pipeline on a realistic document."""

    @pytest.mark.integration
    def test_dashboard_compiles_cleanly(self, dashboard_source):
        result = compile(dashboard_source)

        assert result.success, result.errors
        assert result.warnings == []
        document = result.document
        assert document.meta == {"title": "Admin", "version": 2}
        assert [s.id for s in document.screens] == ["dashboard", "settings"]
        assert document.screens[0].layout == "shell"
        assert [o.id for o in document.screens[0].overlays] == ["confirm"]
        assert document.get_component("stat-card").params == ["label", "value"]

    @pytest.mark.integration
    def test_formatted_source_is_canonical(self, dashboard_source):
        """The sample document is already in canonical layout."""
        assert format(dashboard_source) == dashboard_source

    @pytest.mark.integration
    def test_formatting_preserves_meaning(self, dashboard_source):
        squashed = " ".join(
            line.strip()
            for line in dashboard_source.splitlines()
            if not line.strip().startswith(";")
        )
        original = parse(dashboard_source).document.model_dump()
        reformatted = parse(format(squashed)).document.model_dump()

        assert strip_locations(reformatted) == strip_locations(original)

    @pytest.mark.integration
    def test_repaired_source_compiles(self):
        broken = '(wire (screen a "A" (box (text "hi" (screen b "B" (text "x"'

        assert not parse(broken).success
        result = compile(format(broken))

        assert result.success, result.errors
        assert [s.id for s in result.document.screens] == ["a", "b"]

    @pytest.mark.integration
    def test_formatted_output_tokenizes_identically(self, dashboard_source):
        def significant(source):
            return [(t.kind, t.value) for t in tokenize(source)]

        assert significant(format(dashboard_source)) == significant(dashboard_source)


class TestIncludes:
    """Tests for multi-file compilation."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_library_split_across_files(self):
        library = (
            "(wire\n"
            "  (define stat-card (label value)\n"
            "    (card (text $label) (text $value))))\n"
        )
        main = (
            '(wire (include "widgets.wire")'
            ' (screen home (stat-card "Users" :value "3")))'
        )

        async def resolver(include_path, from_path):
            assert from_path == "/app/main.wire"
            return ResolvedInclude(
                content=library, resolved_path=f"/app/{include_path}"
            )

        options = CompileOptions(file_path="/app/main.wire", resolver=resolver)
        result = await compile_async(main, options)

        assert result.success, result.errors
        assert result.warnings == []
        assert result.document.get_component("stat-card") is not None


class TestSchemaExport:
    """Tests for the schema snapshot consumed by editor tooling."""

    @pytest.mark.integration
    def test_export_is_json(self):
        exported = json.loads(export_schemas_json())

        assert exported["elements"]["box"]["children"] is True
        assert exported["elements"]["text"]["content"] is True
        assert "id" in exported["overlays"]["props"]
