"""
Theme discovery and theme matrix construction.

Themes come from two places in a token file:

    {
      "$themes": {"ocean": {...overrides...}},
      "$meta": {"themes": [{"name": "dark", "file": "themes/dark.json"}]}
    }

All theme files are read here, before any resolution starts. A broken theme
reference is skipped with a warning; only the base token file is fatal.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .config import CompilerConfig
from .errors import ThemeLoadError
from .ir.themes import (
    ROOT_SELECTOR,
    Theme,
    ThemeMatrix,
    ThemeMatrixEntry,
    ThemeMode,
    ThemeReference,
    ThemeSource,
)
from .ir.tokens import Diagnostic
from .tree import extract_base_tokens, merge_tokens

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


# =============================================================================
# Loading
# =============================================================================


def load_token_file(path: Path) -> dict[str, Any]:
    """Read a JSON or YAML token file.

    Raises:
        ThemeLoadError: If the file is missing, unparsable or not a mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ThemeLoadError(f"Cannot read token file {path}: {e}") from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = _string_keys(yaml.safe_load(text))
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ThemeLoadError(f"Cannot parse token file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ThemeLoadError(f"Token file {path} must contain an object at the top level")
    return data


def _string_keys(data: Any) -> Any:
    """YAML reads `100:` as an int key; token names are always strings."""
    if isinstance(data, dict):
        return {str(key): _string_keys(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_string_keys(item) for item in data]
    return data


def infer_mode_from_name(name: str) -> ThemeMode | None:
    """Themes with "dark" anywhere in the name are dark themes."""
    return ThemeMode.DARK if "dark" in name.lower() else None


def resolve_theme_file(file: str, tokens_dir: Path | None, cwd: Path | None) -> Path | None:
    """Find a theme file next to the token file, then under cwd."""
    for root in (tokens_dir, cwd):
        if root is None:
            continue
        candidate = (root / file).resolve()
        if candidate.is_file():
            return candidate
    return None


# =============================================================================
# Discovery
# =============================================================================


def _skip(diagnostics: list[Diagnostic] | None, message: str, expression: str | None = None) -> None:
    logger.warning("Skipping theme: %s", message)
    if diagnostics is not None:
        diagnostics.append(Diagnostic(code="theme-skipped", message=message, expression=expression))


def _file_mode(data: Mapping[str, Any]) -> ThemeMode | None:
    meta = data.get("$meta")
    if not isinstance(meta, Mapping) or "mode" not in meta:
        return None
    try:
        return ThemeMode(str(meta["mode"]).lower())
    except ValueError:
        return None


def discover_themes(
    tokens: Mapping[str, Any],
    tokens_dir: Path | None = None,
    cwd: Path | None = None,
    diagnostics: list[Diagnostic] | None = None,
) -> dict[str, Theme]:
    """
    Collect inline `$themes` and `$meta.themes` file references.

    File-referenced themes take their mode from the reference, then from the
    file's own `$meta.mode`, then from the name. A later theme replaces an
    earlier one with the same name.

    Args:
        tokens: The raw base token file, `$themes` and `$meta` included
        tokens_dir: Directory of the base token file
        cwd: Fallback directory for theme file paths
        diagnostics: Receives a "theme-skipped" entry per skipped reference

    Returns:
        Theme name -> Theme, in declaration order
    """
    themes: dict[str, Theme] = {}

    inline = tokens.get("$themes")
    if isinstance(inline, Mapping):
        for name, theme_tokens in inline.items():
            if not isinstance(theme_tokens, Mapping):
                _skip(diagnostics, f"inline theme '{name}' is not an object")
                continue
            themes[name] = Theme(
                name=name,
                tokens=extract_base_tokens(theme_tokens),
                mode=infer_mode_from_name(name),
                source=ThemeSource.INLINE,
            )
    elif inline is not None:
        _skip(diagnostics, "$themes must be an object")

    meta = tokens.get("$meta")
    references = meta.get("themes") if isinstance(meta, Mapping) else None
    if references is None:
        return themes
    if not isinstance(references, list):
        _skip(diagnostics, "$meta.themes must be a list")
        return themes

    for entry in references:
        try:
            reference = ThemeReference.model_validate(entry)
        except ValidationError as e:
            _skip(diagnostics, f"malformed theme reference {entry!r}: {e.errors()[0]['msg']}")
            continue

        path = resolve_theme_file(reference.file, tokens_dir, cwd)
        if path is None:
            _skip(diagnostics, f"theme file '{reference.file}' for '{reference.name}' not found", reference.file)
            continue

        try:
            data = load_token_file(path)
        except ThemeLoadError as e:
            _skip(diagnostics, f"theme '{reference.name}': {e.message}", reference.file)
            continue

        themes[reference.name] = Theme(
            name=reference.name,
            tokens=extract_base_tokens(data),
            mode=reference.mode or _file_mode(data) or infer_mode_from_name(reference.name),
            extends=reference.extends,
            source=ThemeSource.FILE,
            file=reference.file,
        )

    return themes


# =============================================================================
# Matrix
# =============================================================================


def build_theme_matrix(
    base_tokens: Mapping[str, Any],
    themes: Mapping[str, Theme],
    config: CompilerConfig | None = None,
) -> ThemeMatrix:
    """
    Build the selector -> override tree matrix.

    - `:root` holds the full base tree
    - `[data-theme="<mode>"]` for each mode theme (dark, no hyphen); the
      theme named "dark" uses the configured dark mode attribute
    - `.theme-<variant>` for each variant theme
    - `[data-theme="dark"].theme-<variant>` from an explicit `<variant>-dark`
      theme (merged over its `extends` theme), or else auto-generated from
      the dark mode tree with the variant layered on top
    """
    config = config or CompilerConfig()
    base = dict(base_tokens)
    entries: dict[str, ThemeMatrixEntry] = {
        ROOT_SELECTOR: ThemeMatrixEntry(selector=ROOT_SELECTOR, name="base", tokens=base),
    }

    mode_themes: dict[str, Theme] = {}
    variant_themes: dict[str, Theme] = {}
    for name, theme in themes.items():
        if theme.is_mode_theme:
            mode_themes[name] = theme
        elif theme.is_combined:
            logger.debug("Theme '%s' is a combined variant+dark theme", name)
        else:
            variant_themes[name] = theme

    # A theme named "dark" stands in for the configured dark mode attribute
    dark = mode_themes.get(config.dark_mode_attribute) or mode_themes.get("dark")
    for name, theme in mode_themes.items():
        selector = config.mode_selector(config.dark_mode_attribute if theme is dark else name)
        entries[selector] = ThemeMatrixEntry(
            selector=selector,
            name=name,
            tokens=theme.tokens,
            mode=ThemeMode.DARK,
            base_tokens=base,
        )

    for name, theme in variant_themes.items():
        selector = config.variant_selector(name)
        entries[selector] = ThemeMatrixEntry(
            selector=selector,
            name=name,
            tokens=theme.tokens,
            base_tokens=base,
        )

        combined_selector = config.combined_selector(name)
        combined = themes.get(f"{name}-dark")
        if combined is not None:
            tokens = combined.tokens
            if combined.extends and combined.extends in themes:
                tokens = merge_tokens(themes[combined.extends].tokens, combined.tokens)
            entries[combined_selector] = ThemeMatrixEntry(
                selector=combined_selector,
                name=combined.name,
                tokens=tokens,
                mode=ThemeMode.DARK,
                base_tokens=base,
            )
        elif dark is not None:
            logger.debug("Auto-generating %s from '%s' and '%s'", combined_selector, dark.name, name)
            entries[combined_selector] = ThemeMatrixEntry(
                selector=combined_selector,
                name=f"{name}-dark",
                tokens=merge_tokens(dark.tokens, theme.tokens),
                mode=ThemeMode.DARK,
                base_tokens=base,
                auto_generated=True,
            )

    return ThemeMatrix(entries)


def get_theme_options(themes: Mapping[str, Theme], config: CompilerConfig | None = None) -> dict[str, list[dict[str, str]]]:
    """Mode and variant choices for a theme picker; combined themes are left out."""
    config = config or CompilerConfig()
    modes = [{"name": "light", "label": "Light"}]
    variants = [{"name": "default", "label": "Default", "className": ""}]

    for name, theme in themes.items():
        if "-" in name:
            continue
        if theme.is_dark:
            modes.append({"name": name, "label": name.capitalize()})
        else:
            variants.append(
                {
                    "name": name,
                    "label": name.capitalize(),
                    "className": f"{config.theme_class_prefix}{name}",
                }
            )

    return {"modes": modes, "variants": variants}
