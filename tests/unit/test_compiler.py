"""Tests for the TokenCompiler facade."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tokenforge import TokenCompiler
from tokenforge.core.config import CompilerConfig
from tokenforge.core.errors import CycleError, MissingReferenceError, ThemeLoadError
from tokenforge.core.expressions.resolver import MissingReferencePolicy
from tokenforge.core.functions import FunctionSpec, Param, ParamKind
from tokenforge.core.ir import Theme, ThemeMode


class TestCompile:
    """Test one full compile pass."""

    def test_themed_output(self, themed_tokens):
        result = TokenCompiler().compile(themed_tokens)

        assert list(result.matrix) == [
            ":root",
            '[data-theme="dark"]',
            ".theme-ocean",
            '[data-theme="dark"].theme-ocean',
        ]
        assert "--spacing-lg: 2rem;" in result.css
        assert set(result.themes) == {"dark", "ocean"}
        assert "$themes" not in result.base_tokens
        assert [r.name for r in result.records][:2] == ["color-brand", "color-black"]
        assert result.diagnostics == []

    def test_diagnostics_collected(self):
        tokens = {"a": {"$value": "foo(1)"}, "b": {"$value": "{missing}"}}
        result = TokenCompiler().compile(tokens)
        assert sorted(d.code for d in result.diagnostics) == ["missing-reference", "unknown-function"]
        assert "Unresolved reference {missing}" in result.warnings
        assert "--a: foo(1);" in result.css

    def test_functions_disabled_by_meta(self, base_tokens):
        tokens = {**base_tokens, "$meta": {"functions": False}}
        result = TokenCompiler().compile(tokens)
        assert "--spacing-lg: multiply(1rem, 2);" in result.css

    def test_strict_missing_references(self):
        compiler = TokenCompiler(CompilerConfig(missing_references=MissingReferencePolicy.STRICT))
        with pytest.raises(MissingReferenceError):
            compiler.compile({"a": {"$value": "{missing}"}})

    def test_cycle_is_fatal(self):
        with pytest.raises(CycleError) as exc_info:
            TokenCompiler().compile({"a": {"$value": "{b}"}, "b": {"$value": "{a}"}})
        assert exc_info.value.context.selector == ":root"

    def test_custom_function(self):
        double = FunctionSpec("double", (Param("value", ParamKind.DIMENSION),), lambda v: v.with_value(v.value * 2), "math")
        compiler = TokenCompiler(extra_functions=[double])
        result = compiler.compile({"gap": {"$value": "double(4px)"}})
        assert "--gap: 8px;" in result.css
        assert "double" in compiler.registry
        assert "double" not in TokenCompiler().registry


class TestCompileFile:
    """Test compiling from disk."""

    def test_with_theme_files(self, tmp_path: Path, base_tokens):
        themes_dir = tmp_path / "tokens" / "themes"
        themes_dir.mkdir(parents=True)
        (themes_dir / "dark.json").write_text(json.dumps({"color": {"semantic": {"text": {"$value": "#ffffff"}}}}))
        tokens = {**base_tokens, "$meta": {"themes": [{"name": "dark", "file": "themes/dark.json"}]}}
        (tmp_path / "tokens" / "design-tokens.json").write_text(json.dumps(tokens))

        result = TokenCompiler().compile_file(Path("tokens/design-tokens.json"), cwd=tmp_path)
        assert '[data-theme="dark"] {\n  --color-semantic-text: #ffffff;\n}\n' in result.css

    def test_skipped_theme_file(self, tmp_path: Path, base_tokens):
        tokens = {**base_tokens, "$meta": {"themes": [{"name": "dark", "file": "nope.json"}]}}
        (tmp_path / "tokens.json").write_text(json.dumps(tokens))

        result = TokenCompiler().compile_file(tmp_path / "tokens.json")
        assert list(result.matrix) == [":root"]
        assert [d.code for d in result.diagnostics] == ["theme-skipped"]

    def test_missing_base_file(self, tmp_path: Path):
        with pytest.raises(ThemeLoadError, match="not found"):
            TokenCompiler().compile_file(tmp_path / "missing.json")

    def test_yaml_base_file(self, tmp_path: Path):
        (tmp_path / "tokens.yaml").write_text("space:\n  sm:\n    $value: 4px\n")
        result = TokenCompiler().compile_file(tmp_path / "tokens.yaml")
        assert "--space-sm: 4px;" in result.css

    def test_yaml_numeric_scale_names(self, tmp_path: Path):
        (tmp_path / "tokens.yaml").write_text(
            "color:\n"
            "  blue:\n"
            "    100:\n"
            "      $value: '#dbeafe'\n"
            "    500:\n"
            "      $value: '#3b82f6'\n"
            "  link:\n"
            "    $value: '{color.blue.500}'\n"
        )
        result = TokenCompiler().compile_file(tmp_path / "tokens.yaml")
        assert "--color-blue-100: #dbeafe;" in result.css
        assert "--color-link: #3b82f6;" in result.css

    def test_undecodable_base_file(self, tmp_path: Path):
        (tmp_path / "tokens.json").write_bytes(b"\xff\xfe")
        with pytest.raises(ThemeLoadError, match="Cannot read"):
            TokenCompiler().compile_file(tmp_path / "tokens.json")


class TestCompilerHelpers:
    """Test SCSS, validation and theme helpers."""

    def test_to_scss(self, themed_tokens):
        scss = TokenCompiler().to_scss(themed_tokens, include_map=False)
        assert "$spacing-lg: 2rem;" in scss
        assert "$themes" not in scss

    def test_validate(self):
        issues = TokenCompiler().validate({"a": {"$value": None}, "$themes": {}})
        assert [i.path for i in issues] == ["a"]

    def test_single_theme(self, base_tokens):
        theme = Theme(name="ocean", tokens={"color": {"brand": {"$value": "#0e7490"}}})
        css = TokenCompiler(CompilerConfig(theme_class_prefix="t-")).generate_single_theme_css(theme, base_tokens)
        assert ".t-ocean {" in css

    def test_theme_options(self):
        themes = {"dark": Theme(name="dark", mode=ThemeMode.DARK), "ocean": Theme(name="ocean")}
        options = TokenCompiler(CompilerConfig(theme_class_prefix="t-")).theme_options(themes)
        assert options["variants"][1]["className"] == "t-ocean"


class TestPackage:
    """Test package metadata."""

    def test_version(self):
        import tokenforge
        from tokenforge._version import get_version

        assert tokenforge.__version__ == get_version()
        assert tokenforge.__version__
