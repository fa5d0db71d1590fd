"""Tests for compiler configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from tokenforge.core.config import CompilerConfig, config_from_dict, load_config
from tokenforge.core.errors import ConfigError
from tokenforge.core.expressions.resolver import MissingReferencePolicy


class TestCompilerConfig:
    """Test defaults and derived values."""

    def test_defaults(self):
        config = CompilerConfig()
        assert config.token_prefix == ""
        assert config.base_font_size == 16.0
        assert config.only_overrides is True
        assert config.missing_references == MissingReferencePolicy.LEAVE_VERBATIM

    def test_selectors(self):
        config = CompilerConfig(dark_mode_attribute="night", theme_class_prefix="t-")
        assert config.mode_selector("dark") == '[data-theme="dark"]'
        assert config.variant_selector("ocean") == ".t-ocean"
        assert config.combined_selector("ocean") == '[data-theme="night"].t-ocean'

    def test_function_context(self):
        ctx = CompilerConfig(base_font_size=20, min_viewport="400px").function_context()
        assert ctx.base_font_size == 20
        assert ctx.min_viewport == "400px"
        assert ctx.max_viewport == "1280px"

    def test_frozen_and_strict(self):
        config = CompilerConfig()
        with pytest.raises(ValidationError):
            config.token_prefix = "x"  # type: ignore[misc]
        with pytest.raises(ValidationError):
            CompilerConfig(unknown_option=True)  # type: ignore[call-arg]
        with pytest.raises(ValidationError):
            CompilerConfig(base_font_size=0)


class TestLoadConfig:
    """Test reading tokenforge.toml."""

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        assert load_config(tmp_path) == CompilerConfig()

    def test_tokens_and_themes_tables(self, tmp_path: Path):
        (tmp_path / "tokenforge.toml").write_text(
            '[tokens]\ntoken_prefix = "ds-"\nbase_font_size = 18\nmissing_references = "strict"\n'
            '\n[themes]\ndark_mode_attribute = "night"\ntheme_class_prefix = "t-"\n'
        )
        config = load_config(tmp_path)
        assert config.token_prefix == "ds-"
        assert config.base_font_size == 18
        assert config.missing_references == MissingReferencePolicy.STRICT
        assert config.dark_mode_attribute == "night"
        assert config.theme_class_prefix == "t-"

    def test_invalid_toml(self, tmp_path: Path):
        (tmp_path / "tokenforge.toml").write_text("[tokens\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(tmp_path)

    def test_invalid_values(self):
        with pytest.raises(ConfigError, match="base_font_size"):
            config_from_dict({"tokens": {"base_font_size": -1}})

    def test_tables_required(self):
        with pytest.raises(ConfigError, match="must be tables"):
            config_from_dict({"tokens": "ds-"})
