"""
Typography functions: fluid sizing, modular scales and text metrics.

Sizes are converted to pixels with the compile's base font size; fluid
values come out in rem so they respect user font settings.
"""

from __future__ import annotations

import re

from ..dimensions import Dimension, format_dimension, format_number, parse_dimension
from .registry import FunctionContext, FunctionSpec, Param, ParamKind

SCALE_RATIOS: dict[str, float] = {
    "minorSecond": 1.067,
    "majorSecond": 1.125,
    "minorThird": 1.2,
    "majorThird": 1.25,
    "perfectFourth": 1.333,
    "augmentedFourth": 1.414,
    "perfectFifth": 1.5,
    "minorSixth": 1.6,
    "goldenRatio": 1.618,
    "majorSixth": 1.667,
    "minorSeventh": 1.778,
    "majorSeventh": 1.875,
    "octave": 2.0,
}

# major_third -> majorThird
_SNAKE_RATIOS = {re.sub(r"([A-Z])", r"_\1", name).lower(): value for name, value in SCALE_RATIOS.items()}

SIZE_NAMES: dict[int, str] = {
    -4: "3xs",
    -3: "2xs",
    -2: "xs",
    -1: "sm",
    0: "base",
    1: "lg",
    2: "xl",
    3: "2xl",
    4: "3xl",
    5: "4xl",
    6: "5xl",
    7: "6xl",
    8: "7xl",
}


def resolve_ratio(ratio: str) -> float:
    """Map a preset name (camelCase or snake_case) or a number to a ratio."""
    text = ratio.strip()
    if text in SCALE_RATIOS:
        return SCALE_RATIOS[text]
    if text in _SNAKE_RATIOS:
        return _SNAKE_RATIOS[text]
    try:
        value = float(text)
    except ValueError:
        raise ValueError(
            f"Unknown scale ratio '{ratio}' (expected a number or one of {', '.join(SCALE_RATIOS)})"
        ) from None
    if value <= 0:
        raise ValueError(f"Scale ratio must be positive, got {ratio}")
    return value


def _viewports(
    min_viewport: Dimension | None,
    max_viewport: Dimension | None,
    ctx: FunctionContext,
) -> tuple[float, float]:
    low = min_viewport or parse_dimension(ctx.min_viewport)
    high = max_viewport or parse_dimension(ctx.max_viewport)
    return low.to_px(ctx.base_font_size), high.to_px(ctx.base_font_size)


def _fluid_clamp(min_px: float, max_px: float, min_vp: float, max_vp: float, base: float) -> str:
    if min_vp == max_vp:
        raise ValueError("minimum and maximum viewport must differ")

    slope = (max_px - min_px) / (max_vp - min_vp)
    intercept = min_px - slope * min_vp

    slope_vw = format_number(slope * 100)
    intercept_rem = round(intercept / base, 4)
    if intercept_rem >= 0:
        preferred = f"{slope_vw}vw + {format_number(intercept_rem)}rem"
    else:
        preferred = f"{slope_vw}vw - {format_number(abs(intercept_rem))}rem"

    return (
        f"clamp({format_dimension(min_px / base, 'rem')}, {preferred}, "
        f"{format_dimension(max_px / base, 'rem')})"
    )


def fluid_type(
    min_size: Dimension,
    max_size: Dimension,
    min_viewport: Dimension | None,
    max_viewport: Dimension | None,
    *,
    ctx: FunctionContext,
) -> str:
    """clamp() that scales linearly from min_size at min_viewport to max_size at max_viewport."""
    base = ctx.base_font_size
    min_vp, max_vp = _viewports(min_viewport, max_viewport, ctx)
    return _fluid_clamp(min_size.to_px(base), max_size.to_px(base), min_vp, max_vp, base)


def modular_scale(base: Dimension, step: int, ratio: str) -> str:
    """base x ratio^step; unitless bases are taken as rem."""
    scaled = base.value * resolve_ratio(ratio) ** step
    return format_dimension(scaled, base.unit or "rem")


def type_scale(base: Dimension, ratio: str, steps: int) -> dict[str, str]:
    if steps < 0:
        raise ValueError(f"steps must not be negative, got {steps}")
    return {
        SIZE_NAMES.get(step, f"step{step}"): modular_scale(base, step, ratio)
        for step in range(-min(steps, 4), steps + 1)
    }


def line_height(font_size: Dimension, base_line_height: float, *, ctx: FunctionContext) -> str:
    """Unitless line height that tightens as text grows, within 1.2-2."""
    px = font_size.to_px(ctx.base_font_size)
    value = max(1.2, min(2.0, base_line_height - (px - 16) * 0.01))
    return format_number(value, 2)


def optimal_measure(font_size: Dimension, *, ctx: FunctionContext) -> str:
    """Readable line length in ch, 45-85 characters."""
    px = font_size.to_px(ctx.base_font_size)
    chars = round(max(45.0, min(85.0, 65 + (px - 16) * 0.5)))
    return f"{chars}ch"


def responsive_type(
    min_size: Dimension,
    mid_size: Dimension,
    max_size: Dimension,
    *,
    ctx: FunctionContext,
) -> dict[str, str]:
    base = ctx.base_font_size
    low, mid, high = (size.to_px(base) for size in (min_size, mid_size, max_size))
    return {
        "mobile": str(min_size),
        "tablet": str(mid_size),
        "desktop": str(max_size),
        "fluidMobileTablet": _fluid_clamp(low, mid, 320, 768, base),
        "fluidTabletDesktop": _fluid_clamp(mid, high, 768, 1280, base),
        "fluidFull": _fluid_clamp(low, high, 320, 1280, base),
    }


def letter_spacing(font_size: Dimension, *, ctx: FunctionContext) -> str:
    """Tracking in em: looser for small text, tighter for display sizes."""
    px = font_size.to_px(ctx.base_font_size)
    tracking = max(-0.05, min(0.1, 0.08 - px * 0.002))
    return format_dimension(tracking, "em", 3)


D = ParamKind.DIMENSION

FUNCTIONS: tuple[FunctionSpec, ...] = (
    FunctionSpec(
        "fluidType",
        (Param("min", D), Param("max", D), Param("minViewport", D, None), Param("maxViewport", D, None)),
        fluid_type,
        "typography",
        "Fluid font size between two viewports",
        contextual=True,
    ),
    FunctionSpec(
        "fluidSpace",
        (Param("min", D), Param("max", D), Param("minViewport", D, None), Param("maxViewport", D, None)),
        fluid_type,
        "typography",
        "Fluid spacing between two viewports",
        contextual=True,
    ),
    FunctionSpec(
        "modularScale",
        (Param("base", D), Param("step", ParamKind.INTEGER), Param("ratio", ParamKind.STRING, "majorThird")),
        modular_scale,
        "typography",
        "base x ratio^step",
    ),
    FunctionSpec(
        "typeScale",
        (Param("base", D), Param("ratio", ParamKind.STRING, "majorThird"), Param("steps", ParamKind.INTEGER, "4")),
        type_scale,
        "typography",
        "Structured type scale 3xs..7xl",
    ),
    FunctionSpec(
        "lineHeight",
        (Param("fontSize", D), Param("base", ParamKind.NUMBER, "1.5")),
        line_height,
        "typography",
        "Line height adjusted for font size",
        contextual=True,
    ),
    FunctionSpec(
        "optimalMeasure",
        (Param("fontSize", D),),
        optimal_measure,
        "typography",
        "Readable line length in ch",
        contextual=True,
    ),
    FunctionSpec(
        "responsiveType",
        (Param("min", D), Param("mid", D), Param("max", D)),
        responsive_type,
        "typography",
        "Structured mobile/tablet/desktop sizes with fluid variants",
        contextual=True,
    ),
    FunctionSpec(
        "letterSpacing",
        (Param("fontSize", D),),
        letter_spacing,
        "typography",
        "Letter spacing adjusted for font size",
        contextual=True,
    ),
)
