"""Tests for configuration management."""

import pytest

from wirescript.config.lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_format_defaults,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("WIRESCRIPT_MAX_LINE_LENGTH", raising=False)
        result = get_environment(EnvVar.WIRESCRIPT_MAX_LINE_LENGTH)
        assert result == 100

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("WIRESCRIPT_MAX_LINE_LENGTH", "120")
        result = get_environment(EnvVar.WIRESCRIPT_MAX_LINE_LENGTH, override=60)
        assert result == 60

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("WIRESCRIPT_MAX_INCLUDE_DEPTH", "7")
        result = get_environment(EnvVar.WIRESCRIPT_MAX_INCLUDE_DEPTH)
        assert result == 7
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable integers fall back to the default."""
        monkeypatch.setenv("WIRESCRIPT_MAX_NESTING_DEPTH", "deep")
        result = get_environment(EnvVar.WIRESCRIPT_MAX_NESTING_DEPTH)
        assert result == 200

    @pytest.mark.unit
    def test_string_escape_for_tab_indent(self, monkeypatch):
        """A literal backslash-t in the environment becomes a tab."""
        monkeypatch.setenv("WIRESCRIPT_INDENT", "\\t")
        assert get_environment(EnvVar.WIRESCRIPT_INDENT) == "\t"


class TestEnvironmentInfo:
    """Tests for introspection helpers."""

    @pytest.mark.unit
    def test_get_environment_info(self):
        """Info returns the EnvConfig metadata."""
        info = get_environment_info(EnvVar.WIRESCRIPT_INDENT)
        assert isinstance(info, EnvConfig)
        assert info.name == "WIRESCRIPT_INDENT"
        assert info.category == "format"

    @pytest.mark.unit
    def test_all_variables_have_descriptions(self):
        """Every variable documents itself."""
        for var in EnvVar:
            assert var.value.description, f"{var} missing description"

    @pytest.mark.unit
    def test_list_by_category(self):
        """Category filter returns only matching variables."""
        compile_vars = list_environment_variables("compile")
        assert EnvVar.WIRESCRIPT_MAX_INCLUDE_DEPTH in compile_vars
        assert EnvVar.WIRESCRIPT_INDENT not in compile_vars
        assert len(list_environment_variables()) == len(EnvVar)


class TestFormatDefaults:
    """Tests for get_format_defaults."""

    @pytest.mark.unit
    def test_defaults(self, monkeypatch):
        """Defaults are two spaces and 100 columns."""
        monkeypatch.delenv("WIRESCRIPT_INDENT", raising=False)
        monkeypatch.delenv("WIRESCRIPT_MAX_LINE_LENGTH", raising=False)
        assert get_format_defaults() == ("  ", 100)

    @pytest.mark.unit
    def test_explicit_arguments_win(self, monkeypatch):
        """Explicit arguments override the environment."""
        monkeypatch.setenv("WIRESCRIPT_INDENT", "    ")
        assert get_format_defaults(indent="\t", max_line_length=40) == ("\t", 40)
