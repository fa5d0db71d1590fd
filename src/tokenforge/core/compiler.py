"""
Token compiler facade.

One compile pass:
1. Discover themes (all file reads happen here)
2. Build the theme matrix
3. Resolve and emit every selector

Each pass builds fresh resolvers and a fresh matrix; nothing carries over
between compiles except the immutable config and function registry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import CompilerConfig
from .emitter import CssEmitter
from .errors import ThemeLoadError
from .functions import FunctionRegistry, FunctionSpec, build_registry
from .ir.themes import Theme, ThemeMatrix
from .ir.tokens import Diagnostic, TokenIssue, TokenRecord
from .themes import build_theme_matrix, discover_themes, get_theme_options, load_token_file
from .tree import extract_base_tokens, validate_tokens

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
    """Everything one compile produced."""

    css: str
    base_tokens: dict[str, Any]
    themes: dict[str, Theme]
    matrix: ThemeMatrix
    records: list[TokenRecord] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [d.message for d in self.diagnostics]


def functions_enabled(tokens: Mapping[str, Any], config: CompilerConfig) -> bool:
    """A token file opts out of function evaluation with `$meta.functions: false`."""
    meta = tokens.get("$meta")
    if isinstance(meta, Mapping) and meta.get("functions") is False:
        return False
    return config.functions_enabled


class TokenCompiler:
    """
    Compiles DTCG token trees into themed CSS.

    Example:
        compiler = TokenCompiler(CompilerConfig(token_prefix="ds-"))
        result = compiler.compile_file(Path("tokens/design-tokens.json"))
        Path("dist/tokens.css").write_text(result.css)
    """

    def __init__(
        self,
        config: CompilerConfig | None = None,
        registry: FunctionRegistry | None = None,
        extra_functions: Iterable[FunctionSpec] = (),
    ):
        self.config = config or CompilerConfig()
        base_registry = registry if registry is not None else build_registry()
        self.registry = base_registry.with_functions(*extra_functions)

    def emitter(self, tokens: Mapping[str, Any] | None = None) -> CssEmitter:
        enabled = functions_enabled(tokens, self.config) if tokens is not None else None
        return CssEmitter(self.config, self.registry, functions_enabled=enabled)

    def compile(
        self,
        tokens: Mapping[str, Any],
        tokens_dir: Path | None = None,
        cwd: Path | None = None,
    ) -> CompileResult:
        """
        Compile an already-loaded token file.

        Args:
            tokens: Raw token file contents, `$themes`/`$meta` included
            tokens_dir: Directory theme file paths are relative to
            cwd: Fallback directory for theme file paths

        Raises:
            TokenError: For fatal resolution errors (invalid function
                arguments, cycles, strict missing references)
        """
        diagnostics: list[Diagnostic] = []
        themes = discover_themes(tokens, tokens_dir, cwd, diagnostics)
        base = extract_base_tokens(tokens)
        matrix = build_theme_matrix(base, themes, self.config)
        logger.debug("Theme matrix: %s", list(matrix))

        emitter = self.emitter(tokens)
        css = emitter.generate_theme_css(matrix)
        records = emitter.token_records(base)

        for diagnostic in emitter.diagnostics:
            if diagnostic not in diagnostics:
                diagnostics.append(diagnostic)

        return CompileResult(
            css=css,
            base_tokens=base,
            themes=themes,
            matrix=matrix,
            records=records,
            diagnostics=diagnostics,
        )

    def compile_file(self, path: Path, cwd: Path | None = None) -> CompileResult:
        """Load a JSON or YAML token file and compile it.

        Raises:
            ThemeLoadError: If the file is missing or cannot be parsed.
        """
        cwd = cwd or Path.cwd()
        full_path = path if path.is_absolute() else cwd / path
        if not full_path.is_file():
            raise ThemeLoadError(f"Token file not found: {full_path}")
        tokens = load_token_file(full_path)
        return self.compile(tokens, tokens_dir=full_path.parent, cwd=cwd)

    def generate_single_theme_css(self, theme: Theme, base_tokens: Mapping[str, Any] | None = None) -> str:
        return self.emitter(base_tokens).generate_single_theme_css(theme, base_tokens)

    def to_scss(self, tokens: Mapping[str, Any], include_map: bool = True) -> str:
        return self.emitter(tokens).tokens_to_scss(extract_base_tokens(tokens), include_map)

    def validate(self, tokens: Mapping[str, Any]) -> list[TokenIssue]:
        return validate_tokens(extract_base_tokens(tokens))

    def theme_options(self, themes: Mapping[str, Theme]) -> dict[str, list[dict[str, str]]]:
        return get_theme_options(themes, self.config)
