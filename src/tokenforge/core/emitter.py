"""
CSS emission.

Turns token trees into custom-property blocks:

    :root {
      --color-primary: #3b82f6;
    }

`:root` always gets every token; theme selectors get only the tokens whose
resolved value differs from the base. Structured values (colorScale,
typeScale, ...) become one property per key, e.g. --color-scale-step1.

Also produces SCSS variables, documentation records and a
Style-Dictionary-shaped export from the same resolution.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, NamedTuple

from .config import CompilerConfig
from .errors import TokenError
from .expressions.resolver import TokenResolver
from .functions import FunctionRegistry, default_registry
from .ir.themes import ROOT_SELECTOR, Theme, ThemeMatrix, ThemeMode
from .ir.tokens import Diagnostic, TokenRecord
from .tree import flatten_tokens, infer_token_type, merge_tokens

logger = logging.getLogger(__name__)


class Declaration(NamedTuple):
    """One resolved custom property."""

    name: str
    value: str
    description: str | None = None
    type: str | None = None


class CssEmitter:
    """
    Resolves token trees and writes them out as CSS.

    Every tree is resolved by a fresh TokenResolver; diagnostics from all
    of them are collected (without duplicates) on the emitter.
    """

    def __init__(
        self,
        config: CompilerConfig | None = None,
        registry: FunctionRegistry | None = None,
        functions_enabled: bool | None = None,
    ):
        self.config = config or CompilerConfig()
        self.registry = registry if registry is not None else default_registry()
        self.functions_enabled = (
            self.config.functions_enabled if functions_enabled is None else functions_enabled
        )
        self.diagnostics: list[Diagnostic] = []

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolver(self, tree: Mapping[str, Any]) -> TokenResolver:
        return TokenResolver(
            tree,
            registry=self.registry,
            ctx=self.config.function_context(),
            policy=self.config.missing_references,
            functions_enabled=self.functions_enabled,
        )

    def declarations(
        self,
        tokens: Mapping[str, Any],
        lookup_tree: Mapping[str, Any] | None = None,
        selector: str | None = None,
    ) -> list[Declaration]:
        """
        Resolve every leaf of a tree.

        Args:
            tokens: Tree whose leaves are emitted
            lookup_tree: Tree references resolve against (defaults to tokens)
            selector: Added to the context of any error raised

        Returns:
            Declarations in tree order, structured values expanded per key
        """
        resolver = self.resolver(lookup_tree if lookup_tree is not None else tokens)
        result: list[Declaration] = []
        try:
            for name, flat in flatten_tokens(tokens, self.config.token_prefix).items():
                value = resolver.resolve_token(flat.path)
                description = flat.token.get("$description")
                declared_type = flat.token.get("$type")
                if isinstance(value, dict):
                    for key, item in value.items():
                        result.append(Declaration(f"{name}-{key}", item, description, declared_type))
                else:
                    result.append(Declaration(name, value, description, declared_type))
        except TokenError as exc:
            exc.with_context(selector=selector)
            raise
        finally:
            self._collect(resolver.diagnostics)
        return result

    def _collect(self, diagnostics: list[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            if diagnostic not in self.diagnostics:
                self.diagnostics.append(diagnostic)

    # =========================================================================
    # CSS
    # =========================================================================

    def _block(self, selector: str, declarations: list[Declaration], descriptions: bool) -> str:
        indent = self.config.indent
        lines = [f"{selector} {{"]
        for decl in declarations:
            if descriptions and decl.description:
                lines.append(f"{indent}/* {decl.description} */")
            lines.append(f"{indent}--{decl.name}: {decl.value};")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def emit(
        self,
        tokens: Mapping[str, Any],
        selector: str = ROOT_SELECTOR,
        descriptions: bool | None = None,
    ) -> str:
        """Full emission: one declaration per leaf."""
        if descriptions is None:
            descriptions = self.config.include_comments
        decls = self.declarations(tokens, selector=selector)
        logger.debug("Emitting %d declarations under %s", len(decls), selector)
        return self._block(selector, decls, descriptions)

    def override_declarations(
        self,
        tokens: Mapping[str, Any],
        base_tokens: Mapping[str, Any],
        selector: str | None = None,
    ) -> list[Declaration]:
        """Declarations of `tokens` that are new or resolve differently from the base.

        Theme values resolve against the base with the theme merged on top,
        so a theme can reference base tokens and base tokens that reference
        overridden ones pick up the override.
        """
        base_values = {d.name: d.value for d in self.declarations(base_tokens, selector=selector)}
        theme_decls = self.declarations(tokens, merge_tokens(base_tokens, tokens), selector)
        return [d for d in theme_decls if base_values.get(d.name) != d.value]

    def emit_overrides(
        self,
        tokens: Mapping[str, Any],
        base_tokens: Mapping[str, Any],
        selector: str,
    ) -> str:
        """Override emission; an empty string when nothing differs."""
        changed = self.override_declarations(tokens, base_tokens, selector)
        logger.debug("Emitting %d overrides under %s", len(changed), selector)
        if not changed:
            return ""
        return self._block(selector, changed, descriptions=False)

    def generate_theme_css(self, matrix: ThemeMatrix) -> str:
        """CSS for every selector of a theme matrix, in matrix order."""
        sections: list[str] = []
        for selector, entry in matrix.items():
            if entry.is_root or not self.config.only_overrides:
                body = self.emit(entry.tokens, selector, descriptions=False)
            else:
                body = self.emit_overrides(entry.tokens, entry.base_tokens or matrix.root.tokens, selector)
            if not body:
                continue

            if self.config.include_comments:
                suffix = " (auto-generated)" if entry.auto_generated else ""
                body = f"/* Theme: {entry.name}{suffix} */\n{body}"
            sections.append(body)
        return "\n".join(sections)

    def theme_selector(self, theme: Theme) -> str:
        """Selector a standalone theme file is scoped to."""
        config = self.config
        if theme.mode != ThemeMode.DARK:
            return config.variant_selector(theme.name)
        if theme.name in ("dark", config.dark_mode_attribute):
            return config.mode_selector(config.dark_mode_attribute)
        if "-" in theme.name:
            variant = theme.name.removesuffix("-dark")
            return config.combined_selector(variant)
        return config.mode_selector(theme.name)

    def generate_single_theme_css(self, theme: Theme, base_tokens: Mapping[str, Any] | None = None) -> str:
        """CSS for one theme on its own, e.g. for a per-theme stylesheet."""
        selector = self.theme_selector(theme)
        if self.config.only_overrides and base_tokens is not None:
            body = self.emit_overrides(theme.tokens, base_tokens, selector)
        else:
            body = self.emit(theme.tokens, selector, descriptions=False)

        if self.config.include_comments:
            return f"/* Theme: {theme.name} */\n{body}"
        return body

    # =========================================================================
    # Other formats
    # =========================================================================

    def tokens_to_scss(self, tokens: Mapping[str, Any], include_map: bool = True) -> str:
        """SCSS variables (`$name: value;`), optionally followed by a `$design-tokens` map."""
        decls = self.declarations(tokens)
        lines: list[str] = []
        for decl in decls:
            if self.config.include_comments and decl.description:
                lines.append(f"// {decl.description}")
            lines.append(f"${decl.name}: {decl.value};")

        if include_map and decls:
            lines.append("")
            lines.append("// Design tokens map")
            lines.append("$design-tokens: (")
            lines.extend(f"  '{decl.name}': ${decl.name}," for decl in decls)
            lines.append(");")
        return "\n".join(lines) + "\n" if lines else ""

    def token_records(self, tokens: Mapping[str, Any]) -> list[TokenRecord]:
        """Flattened, resolved records for documentation pages."""
        return [
            TokenRecord(
                name=decl.name,
                css_var=f"--{decl.name}",
                value=decl.value,
                type=decl.type or infer_token_type(decl.value).value,
                description=decl.description,
            )
            for decl in self.declarations(tokens)
        ]


def tokens_to_style_dictionary(tokens: Mapping[str, Any], token_prefix: str = "") -> dict[str, Any]:
    """Convert a DTCG tree to Style Dictionary's `value`/`type` shape.

    Values are kept unresolved; Style Dictionary does its own aliasing.
    """

    def convert(node: Mapping[str, Any], name: str) -> dict[str, Any]:
        if "$value" in node:
            converted = {
                "value": node["$value"],
                "type": node.get("$type", "string"),
                "name": name,
            }
            if node.get("$description"):
                converted["description"] = node["$description"]
            return converted
        return {
            key: convert(child, f"{name}-{key}")
            for key, child in node.items()
            if not key.startswith("$") and isinstance(child, Mapping)
        }

    return {
        key: convert(value, f"{token_prefix}{key}")
        for key, value in tokens.items()
        if not key.startswith("$") and isinstance(value, Mapping)
    }
