"""
Token function library.

The default registry holds every built-in function; custom functions are
layered on with build_registry() or FunctionRegistry.with_functions().
"""

from collections.abc import Iterable
from functools import lru_cache

from . import color, contrast, math, typography
from .registry import (
    REQUIRED,
    FunctionContext,
    FunctionRegistry,
    FunctionResult,
    FunctionSpec,
    IncompatibleUnitsError,
    Param,
    ParamKind,
    format_result,
)

BUILTIN_FUNCTIONS: tuple[FunctionSpec, ...] = (
    *color.FUNCTIONS,
    *contrast.FUNCTIONS,
    *typography.FUNCTIONS,
    *math.FUNCTIONS,
)


@lru_cache(maxsize=1)
def default_registry() -> FunctionRegistry:
    """The built-in registry. Safe to share: registries are immutable."""
    return FunctionRegistry.from_specs(BUILTIN_FUNCTIONS)


def build_registry(extra: Iterable[FunctionSpec] = ()) -> FunctionRegistry:
    """Built-ins plus extra functions; extras replace same-named built-ins."""
    return default_registry().with_functions(*extra)


__all__ = [
    "BUILTIN_FUNCTIONS",
    "REQUIRED",
    "FunctionContext",
    "FunctionRegistry",
    "FunctionResult",
    "FunctionSpec",
    "IncompatibleUnitsError",
    "Param",
    "ParamKind",
    "build_registry",
    "default_registry",
    "format_result",
]
