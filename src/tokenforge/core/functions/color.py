"""
Color manipulation functions.

All math happens in OKLCH on Color values; the registry formats results to
hex (or rgba when translucent) after gamut clamping.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from ..dimensions import Dimension
from ..oklch import MAX_CHROMA, Color, clamp_chroma, to_rgba
from .registry import FunctionSpec, Param, ParamKind

C = ParamKind.COLOR
P = ParamKind.PERCENTAGE


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _rotate(hue: float | None, degrees: float) -> float | None:
    if hue is None:
        return None
    return (hue + degrees) % 360


def tint(color: Color, amount: float) -> Color:
    """Move lightness toward white; chroma drops by up to half the amount."""
    return replace(
        color,
        l=min(1.0, color.l + (1 - color.l) * amount),
        c=max(0.0, color.c * (1 - amount * 0.5)),
    )


def shade(color: Color, amount: float) -> Color:
    """Scale lightness toward black with a small chroma boost."""
    return replace(
        color,
        l=max(0.0, color.l * (1 - amount)),
        c=min(MAX_CHROMA, color.c * (1 + amount * 0.1)),
    )


def mix(first: Color, second: Color, ratio: float) -> Color:
    """Linear interpolation of L, C, H and alpha (0 -> first, 1 -> second)."""
    if first.h is None:
        hue = second.h
    elif second.h is None:
        hue = first.h
    else:
        hue = first.h + (second.h - first.h) * ratio
    return Color(
        l=first.l + (second.l - first.l) * ratio,
        c=first.c + (second.c - first.c) * ratio,
        h=hue,
        alpha=first.alpha + (second.alpha - first.alpha) * ratio,
    )


def _delta(adjustments: dict[str, Any], *keys: str) -> float:
    for key in keys:
        if key in adjustments:
            try:
                return float(adjustments[key])
            except (TypeError, ValueError):
                raise ValueError(f"'{key}' must be a number, got {adjustments[key]!r}") from None
    return 0.0


def adjust(color: Color, adjustments: dict[str, Any]) -> Color:
    """Additive L/C/H deltas; l and c are given in hundredths."""
    dl = _delta(adjustments, "l", "lightness") / 100
    dc = _delta(adjustments, "c", "chroma") / 100
    dh = _delta(adjustments, "h", "hue")
    return replace(
        color,
        l=_clamp(color.l + dl, 0.0, 1.0),
        c=_clamp(color.c + dc, 0.0, MAX_CHROMA),
        h=(color.hue + dh) % 360 if (color.h is not None or dh) else None,
    )


def alpha(color: Color, value: float) -> str:
    return to_rgba(replace(color, alpha=_clamp(value, 0.0, 1.0)))


def saturate(color: Color, amount: float) -> Color:
    return replace(color, c=min(MAX_CHROMA, color.c * (1 + amount)))


def desaturate(color: Color, amount: float) -> Color:
    return replace(color, c=max(0.0, color.c * (1 - amount)))


def complement(color: Color) -> Color:
    return replace(color, h=_rotate(color.h, 180))


def invert(color: Color) -> Color:
    return replace(color, l=1 - color.l)


def grayscale(color: Color) -> Color:
    return replace(color, c=0.0, h=None)


def hue_rotate(color: Color, degrees: Dimension) -> Color:
    return replace(color, h=_rotate(color.h, degrees.value))


def lighten(color: Color, amount: float) -> Color:
    return replace(color, l=min(1.0, color.l + amount))


def darken(color: Color, amount: float) -> Color:
    return replace(color, l=max(0.0, color.l - amount))


def dark_mode(color: Color, options: dict[str, Any]) -> Color:
    """Remap a light-mode color for dark backgrounds.

    Light colors land in roughly 0.1-0.4 lightness, dark ones in 0.6-0.95.
    Options: chromaAdjust (percent, default -10), preserveHue (default true).
    """
    if color.l > 0.5:
        lightness = 0.1 + (1 - color.l) * 0.6
    else:
        lightness = 0.6 + color.l * 0.7

    chroma_adjust = _delta(options, "chromaAdjust") if "chromaAdjust" in options else -10.0
    chroma = _clamp(color.c * (1 + chroma_adjust / 100), 0.0, MAX_CHROMA)

    hue = color.h
    if options.get("preserveHue") is False:
        hue = _rotate(hue, 180)
    return replace(color, l=lightness, c=chroma, h=hue)


def color_scale(color: Color, steps: int) -> dict[str, Color]:
    """Light-to-dark scale step1..stepN with chroma peaking mid-scale."""
    if steps < 2:
        raise ValueError(f"steps must be at least 2, got {steps}")

    scale: dict[str, Color] = {}
    half = steps / 2
    for i in range(1, steps + 1):
        t = (i - 1) / (steps - 1)
        falloff = abs(i - half) / half
        scale[f"step{i}"] = clamp_chroma(
            Color(
                l=_clamp(0.97 - t * 0.82, 0.0, 1.0),
                c=_clamp(color.c * (1 - falloff * 0.5), 0.0, MAX_CHROMA),
                h=color.h,
            )
        )
    return scale


FUNCTIONS: tuple[FunctionSpec, ...] = (
    FunctionSpec("tint", (Param("color", C), Param("amount", P)), tint, "color",
                 "Lighter tint in OKLCH, chroma eased toward white"),
    FunctionSpec("shade", (Param("color", C), Param("amount", P)), shade, "color",
                 "Darker shade in OKLCH with a slight chroma boost"),
    FunctionSpec("mix", (Param("color1", C), Param("color2", C), Param("ratio", P, "0.5")), mix,
                 "color", "Interpolate two colors in OKLCH"),
    FunctionSpec("adjust", (Param("color", C), Param("adjustments", ParamKind.OBJECT)), adjust,
                 "color", "Additive lightness/chroma/hue deltas, e.g. { l: 10, c: -5, h: 30 }"),
    FunctionSpec("alpha", (Param("color", C), Param("alpha", P)), alpha, "color",
                 "Set opacity, producing rgba()"),
    FunctionSpec("saturate", (Param("color", C), Param("amount", P)), saturate, "color",
                 "Scale chroma up"),
    FunctionSpec("desaturate", (Param("color", C), Param("amount", P)), desaturate, "color",
                 "Scale chroma down"),
    FunctionSpec("complement", (Param("color", C),), complement, "color",
                 "Rotate hue by 180 degrees"),
    FunctionSpec("invert", (Param("color", C),), invert, "color", "Invert lightness"),
    FunctionSpec("grayscale", (Param("color", C),), grayscale, "color", "Remove chroma"),
    FunctionSpec("hueRotate", (Param("color", C), Param("degrees", ParamKind.DIMENSION)),
                 hue_rotate, "color", "Rotate hue, normalized to [0, 360)"),
    FunctionSpec("lighten", (Param("color", C), Param("amount", P)), lighten, "color",
                 "Add to lightness"),
    FunctionSpec("darken", (Param("color", C), Param("amount", P)), darken, "color",
                 "Subtract from lightness"),
    FunctionSpec("darkMode", (Param("color", C), Param("options", ParamKind.OBJECT, "{}")),
                 dark_mode, "color", "Remap a light-mode color for dark mode"),
    FunctionSpec("colorScale", (Param("color", C), Param("steps", ParamKind.INTEGER, "12")),
                 color_scale, "color", "Structured light-to-dark scale step1..stepN"),
)
