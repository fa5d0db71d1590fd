"""
WCAG contrast and accessibility functions.

contrastRatio and ensureContrast use WCAG 2.1 relative luminance of the
rendered sRGB color. luminance/isLight/isDark read OKLCH lightness directly,
which is a perceptual approximation rather than CIE relative luminance.
"""

from __future__ import annotations

from dataclasses import replace

from ..oklch import Color, clamp_chroma, contrast, parse_color, quantize
from .registry import FunctionSpec, Param, ParamKind

WHITE = "#ffffff"
BLACK = "#000000"

WCAG_LEVELS = {"AA": 4.5, "AAA": 7.0}

# Binary search budget and early-exit tolerance for ensureContrast
_SEARCH_STEPS = 20
_TOLERANCE = 0.1


def _threshold(level: str) -> float:
    try:
        return WCAG_LEVELS[level.strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown WCAG level '{level}' (expected AA or AAA)") from None


def contrast_ratio(foreground: Color, background: Color) -> float:
    return round(contrast(foreground, background), 2)


def meets_contrast(foreground: Color, background: Color, level: str) -> bool:
    return contrast_ratio(foreground, background) >= _threshold(level)


def accessible_text(background: Color, prefer_light: bool = True) -> str:
    """Pick white or black text, whichever contrasts more with background."""
    on_white = contrast(parse_color(WHITE), background)
    on_black = contrast(parse_color(BLACK), background)
    if on_white == on_black:
        return WHITE if prefer_light else BLACK
    return WHITE if on_white > on_black else BLACK


def _search(color: Color, against: Color, target: float, lighter: bool) -> Color | None:
    """Binary-search lightness in one direction for a color meeting target.

    Candidates are quantized to 8-bit sRGB so the ratio checked is the ratio
    of the emitted hex. Returns None when even the extreme misses target.
    """
    extreme = quantize(clamp_chroma(replace(color, l=1.0 if lighter else 0.0)))
    if contrast(extreme, against) < target:
        return None

    best = extreme
    low, high = (color.l, 1.0) if lighter else (0.0, color.l)
    for _ in range(_SEARCH_STEPS):
        mid = (low + high) / 2
        candidate = quantize(clamp_chroma(replace(color, l=mid)))
        ratio = contrast(candidate, against)
        if ratio >= target:
            best = candidate
            if ratio - target < _TOLERANCE:
                break
            # Passing: step back toward the input lightness
            if lighter:
                high = mid
            else:
                low = mid
        elif lighter:
            low = mid
        else:
            high = mid
    return best


def ensure_contrast(color: Color, against: Color, min_contrast: float) -> Color:
    """Adjust lightness until color reaches min_contrast against `against`.

    Colors that already pass are returned unchanged. The search goes lighter
    on dark backgrounds and darker on light ones, then tries the other way.
    If neither reaches the target, the higher-contrast extreme is returned,
    never anything with less contrast than the input.
    """
    start_ratio = contrast(color, against)
    if start_ratio >= min_contrast:
        return color

    prefer_lighter = against.l < 0.5
    for lighter in (prefer_lighter, not prefer_lighter):
        found = _search(color, against, min_contrast, lighter)
        if found is not None:
            return found

    extremes = [quantize(clamp_chroma(replace(color, l=value))) for value in (1.0, 0.0)]
    best = max(extremes, key=lambda candidate: contrast(candidate, against))
    if contrast(best, against) < start_ratio:
        return color
    return best


def luminance(color: Color) -> float:
    return round(color.l, 3)


def is_light(color: Color) -> bool:
    return luminance(color) > 0.5


def is_dark(color: Color) -> bool:
    return not is_light(color)


def accessible_pair(base: Color, level: str) -> dict[str, Color | str]:
    _threshold(level)
    background = clamp_chroma(base)
    return {"background": background, "text": accessible_text(background)}


C = ParamKind.COLOR

FUNCTIONS: tuple[FunctionSpec, ...] = (
    FunctionSpec("contrastRatio", (Param("foreground", C), Param("background", C)),
                 contrast_ratio, "contrast", "WCAG contrast ratio, rounded to 2 decimals"),
    FunctionSpec("meetsContrast",
                 (Param("foreground", C), Param("background", C),
                  Param("level", ParamKind.STRING, "AA")),
                 meets_contrast, "contrast", "true if the pair meets WCAG AA (4.5) or AAA (7)"),
    FunctionSpec("accessibleText",
                 (Param("background", C), Param("preferLight", ParamKind.BOOLEAN, "true")),
                 accessible_text, "contrast", "White or black text for a background"),
    FunctionSpec("ensureContrast",
                 (Param("color", C), Param("against", C),
                  Param("minContrast", ParamKind.NUMBER, "4.5")),
                 ensure_contrast, "contrast", "Adjust lightness to reach a contrast ratio"),
    FunctionSpec("luminance", (Param("color", C),), luminance, "contrast",
                 "OKLCH lightness rounded to 3 decimals"),
    FunctionSpec("isLight", (Param("color", C),), is_light, "contrast",
                 "true if OKLCH lightness is above 0.5"),
    FunctionSpec("isDark", (Param("color", C),), is_dark, "contrast",
                 "true if OKLCH lightness is 0.5 or below"),
    FunctionSpec("accessiblePair", (Param("base", C), Param("level", ParamKind.STRING, "AA")),
                 accessible_pair, "contrast", "Structured {background, text} pair"),
)
