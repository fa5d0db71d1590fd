"""
tokenforge - design-token compiler.

Resolves W3C DTCG token trees (references, color/typography/math functions,
composite values) into themed CSS custom properties.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.compiler import CompileResult, TokenCompiler
from .core.config import CompilerConfig, load_config
from .core.errors import CycleError, InvalidArgumentError, TokenError

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "CompileResult",
    "CompilerConfig",
    "TokenCompiler",
    "load_config",
    "CycleError",
    "InvalidArgumentError",
    "TokenError",
]
