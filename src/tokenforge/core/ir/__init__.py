"""
tokenforge Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

from .themes import (
    ROOT_SELECTOR,
    Theme,
    ThemeMatrix,
    ThemeMatrixEntry,
    ThemeMode,
    ThemeReference,
    ThemeSource,
)
from .tokens import (
    Border,
    ColorStop,
    Diagnostic,
    Gradient,
    ShadowLayer,
    TokenIssue,
    TokenRecord,
    TokenType,
    composite_kind,
)

__all__ = [
    # Tokens
    "Border",
    "ColorStop",
    "Diagnostic",
    "Gradient",
    "ShadowLayer",
    "TokenIssue",
    "TokenRecord",
    "TokenType",
    "composite_kind",
    # Themes
    "ROOT_SELECTOR",
    "Theme",
    "ThemeMatrix",
    "ThemeMatrixEntry",
    "ThemeMode",
    "ThemeReference",
    "ThemeSource",
]
