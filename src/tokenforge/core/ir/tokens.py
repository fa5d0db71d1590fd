"""
Token-level IR types.

Token trees themselves stay plain mappings (the W3C DTCG JSON shape), so the
models here cover what gets validated or produced: composite leaf values,
flattened documentation records, and diagnostics.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enums
# =============================================================================


class TokenType(StrEnum):
    """Semantic `$type` tags from the W3C DTCG format.

    Used for formatting hints only; expressions are never type-checked
    against them.
    """

    COLOR = "color"
    DIMENSION = "dimension"
    FONT_FAMILY = "fontFamily"
    FONT_WEIGHT = "fontWeight"
    DURATION = "duration"
    CUBIC_BEZIER = "cubicBezier"
    NUMBER = "number"
    STRING = "string"
    COMPOSITE = "composite"
    STROKE_STYLE = "strokeStyle"
    BORDER = "border"
    TRANSITION = "transition"
    SHADOW = "shadow"
    GRADIENT = "gradient"
    TYPOGRAPHY = "typography"
    ASSET = "asset"
    ICON = "icon"


# =============================================================================
# Composite values
# =============================================================================


class ShadowLayer(BaseModel):
    """One layer of a DTCG shadow value."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    color: str
    offset_x: str | float = Field(default="0px", alias="offsetX")
    offset_y: str | float = Field(default="0px", alias="offsetY")
    blur: str | float = Field(default="0px")
    spread: str | float = Field(default="0px")
    inset: bool = False


class ColorStop(BaseModel):
    """A gradient color stop; position is a 0-1 fraction or a CSS length."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    color: str
    position: float | str | None = None


class Gradient(BaseModel):
    """A DTCG-style gradient value."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    type: Literal["linear", "radial", "conic"] = "linear"
    angle: str = "180deg"
    shape: str = "ellipse"
    size: str = "farthest-corner"
    position: str = "center"
    from_angle: str = Field(default="0deg", alias="from")
    at: str = "center"
    color_stops: list[ColorStop] = Field(alias="colorStops", min_length=2)


class Border(BaseModel):
    """A DTCG border value."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    color: str
    width: str | float
    style: str = "solid"


# =============================================================================
# Outputs
# =============================================================================


class TokenRecord(BaseModel):
    """A flattened, resolved token for documentation rendering."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(description="Dash-joined token name (prefix included)")
    css_var: str = Field(alias="cssVar", description="Custom property, e.g. --color-primary")
    value: str = Field(description="Resolved CSS value")
    type: str | None = Field(default=None, description="DTCG $type, if declared")
    description: str | None = Field(default=None, description="DTCG $description, if declared")


class Diagnostic(BaseModel):
    """A recoverable problem observed during resolution or theme discovery."""

    model_config = ConfigDict(frozen=True)

    code: Literal[
        "unknown-function",
        "missing-reference",
        "structured-reference",
        "theme-skipped",
    ]
    message: str
    path: str | None = None
    expression: str | None = None


class TokenIssue(BaseModel):
    """A structural problem reported by validate_tokens()."""

    model_config = ConfigDict(frozen=True)

    path: str
    message: str
    valid_types: list[str] | None = None


def composite_kind(value: Any) -> Literal["shadow", "gradient", "border"] | None:
    """Classify a non-string leaf value by its shape."""
    if isinstance(value, list):
        if value and all(_is_shadow_layer(item) for item in value):
            return "shadow"
        return None
    if not isinstance(value, dict):
        return None
    if isinstance(value.get("colorStops"), list):
        return "gradient"
    if _is_shadow_layer(value):
        return "shadow"
    if "color" in value and "width" in value:
        return "border"
    return None


def _is_shadow_layer(value: Any) -> bool:
    return isinstance(value, dict) and "color" in value and ("offsetX" in value or "offsetY" in value)
