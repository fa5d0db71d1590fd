"""
Compiler configuration.

Settings come from an optional tokenforge.toml at the project root:

    [tokens]
    token_prefix = "ds-"
    base_font_size = 16
    missing_references = "strict"

    [themes]
    dark_mode_attribute = "dark"
    theme_class_prefix = "theme-"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .expressions.resolver import MissingReferencePolicy
from .functions import FunctionContext

CONFIG_FILENAME = "tokenforge.toml"

_THEME_KEYS = ("dark_mode_attribute", "theme_class_prefix")


class CompilerConfig(BaseModel):
    """Options for one compile."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    token_prefix: str = Field(default="", description="Prefix for every custom-property name")
    base_font_size: float = Field(default=16.0, gt=0, description="Pixels per rem/em")
    min_viewport: str = Field(default="320px", description="Default fluidType minimum viewport")
    max_viewport: str = Field(default="1280px", description="Default fluidType maximum viewport")
    dark_mode_attribute: str = Field(default="dark", description="Value of data-theme for dark mode")
    theme_class_prefix: str = Field(default="theme-", description="Class prefix for variant themes")
    only_overrides: bool = Field(default=True, description="Emit only the diff for non-root selectors")
    include_comments: bool = Field(default=True, description="Emit theme headers and descriptions")
    indent: str = Field(default="  ", description="Declaration indentation")
    missing_references: MissingReferencePolicy = Field(default=MissingReferencePolicy.LEAVE_VERBATIM)
    functions_enabled: bool = Field(default=True, description="Evaluate function calls")

    def function_context(self) -> FunctionContext:
        return FunctionContext(
            base_font_size=self.base_font_size,
            min_viewport=self.min_viewport,
            max_viewport=self.max_viewport,
        )

    def mode_selector(self, mode: str) -> str:
        return f'[data-theme="{mode}"]'

    def variant_selector(self, variant: str) -> str:
        return f".{self.theme_class_prefix}{variant}"

    def combined_selector(self, variant: str) -> str:
        return f"{self.mode_selector(self.dark_mode_attribute)}{self.variant_selector(variant)}"


def load_config(project_root: Path) -> CompilerConfig:
    """Load tokenforge.toml from a project root; defaults if absent.

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values.
    """
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return CompilerConfig()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    return config_from_dict(data, source=str(config_path))


def config_from_dict(data: dict[str, Any], source: str = CONFIG_FILENAME) -> CompilerConfig:
    """Build a CompilerConfig from parsed [tokens] and [themes] tables."""
    tokens_data = data.get("tokens", {})
    themes_data = data.get("themes", {})
    if not isinstance(tokens_data, dict) or not isinstance(themes_data, dict):
        raise ConfigError(f"{source}: [tokens] and [themes] must be tables")

    values: dict[str, Any] = dict(tokens_data)
    for key in _THEME_KEYS:
        if key in themes_data:
            values[key] = themes_data[key]

    try:
        return CompilerConfig(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"{source}: {problems}") from e
