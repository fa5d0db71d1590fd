"""Core tokenforge functionality: IR, color engine, expression resolution, themes, CSS emission."""

from . import ir
from .compiler import CompileResult, TokenCompiler
from .config import CompilerConfig, load_config
from .emitter import CssEmitter, Declaration, tokens_to_style_dictionary
from .errors import (
    ConfigError,
    CycleError,
    InvalidArgumentError,
    InvalidTokenError,
    MissingReferenceError,
    ThemeLoadError,
    TokenError,
    TokenErrorContext,
)
from .expressions.resolver import MissingReferencePolicy, TokenResolver
from .functions import FunctionContext, FunctionRegistry, FunctionSpec, build_registry, default_registry
from .themes import build_theme_matrix, discover_themes, get_theme_options, load_token_file
from .tree import flatten_tokens, merge_tokens, validate_tokens

__all__ = [
    "ir",
    # Compilation
    "CompileResult",
    "CompilerConfig",
    "CssEmitter",
    "Declaration",
    "TokenCompiler",
    "TokenResolver",
    "MissingReferencePolicy",
    "load_config",
    "tokens_to_style_dictionary",
    # Functions
    "FunctionContext",
    "FunctionRegistry",
    "FunctionSpec",
    "build_registry",
    "default_registry",
    # Themes
    "build_theme_matrix",
    "discover_themes",
    "get_theme_options",
    "load_token_file",
    # Trees
    "flatten_tokens",
    "merge_tokens",
    "validate_tokens",
    # Errors
    "ConfigError",
    "CycleError",
    "InvalidArgumentError",
    "InvalidTokenError",
    "MissingReferenceError",
    "ThemeLoadError",
    "TokenError",
    "TokenErrorContext",
]
