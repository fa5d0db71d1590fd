"""
Pure-Python OKLCH color engine.

Colors are held in the OKLCH color space (lightness 0-1, chroma >= 0, hue in
degrees) and converted to sRGB only at the parse and format boundaries. No
external color libraries required.

Conversion matrices follow Björn Ottosson's OKLab definition.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace

# Practical chroma ceiling for sRGB-safe colors
MAX_CHROMA = 0.4

# Below this chroma the hue is meaningless and is dropped
_ACHROMATIC_EPSILON = 1e-5

# Channel tolerance when deciding whether a color sits inside sRGB
_GAMUT_EPSILON = 1e-4


@dataclass(frozen=True)
class Color:
    """An OKLCH color with an alpha channel.

    Attributes:
        l: Lightness (0-1).
        c: Chroma (>= 0, practically <= 0.4).
        h: Hue in degrees [0, 360), or None for achromatic colors.
        alpha: Opacity (0-1).
    """

    l: float  # noqa: E741
    c: float
    h: float | None = None
    alpha: float = 1.0

    @property
    def hue(self) -> float:
        """Hue with achromatic colors reported as 0."""
        return self.h if self.h is not None else 0.0


# =============================================================================
# OKLab <-> sRGB
# =============================================================================


def _srgb_to_linear(channel: float) -> float:
    if abs(channel) <= 0.04045:
        return channel / 12.92
    return math.copysign(((abs(channel) + 0.055) / 1.055) ** 2.4, channel)


def _linear_to_srgb(channel: float) -> float:
    if abs(channel) <= 0.0031308:
        return channel * 12.92
    return math.copysign(1.055 * abs(channel) ** (1 / 2.4) - 0.055, channel)


def srgb_to_oklch(r: float, g: float, b: float, alpha: float = 1.0) -> Color:
    """Convert sRGB channels (0-1) to an OKLCH Color."""
    lr, lg, lb = _srgb_to_linear(r), _srgb_to_linear(g), _srgb_to_linear(b)

    lms_l = math.cbrt(0.4122214708 * lr + 0.5363325363 * lg + 0.0514459929 * lb)
    lms_m = math.cbrt(0.2119034982 * lr + 0.6806995451 * lg + 0.1073969566 * lb)
    lms_s = math.cbrt(0.0883024619 * lr + 0.2817188376 * lg + 0.6299787005 * lb)

    L = 0.2104542553 * lms_l + 0.7936177850 * lms_m - 0.0040720468 * lms_s
    a = 1.9779984951 * lms_l - 2.4285922050 * lms_m + 0.4505937099 * lms_s
    bb = 0.0259040371 * lms_l + 0.7827717662 * lms_m - 0.8086757660 * lms_s

    C = math.hypot(a, bb)
    H: float | None = None
    if C > _ACHROMATIC_EPSILON:
        H = math.degrees(math.atan2(bb, a)) % 360.0
    else:
        C = 0.0
    return Color(l=L, c=C, h=H, alpha=alpha)


def oklch_to_srgb(color: Color) -> tuple[float, float, float]:
    """Convert an OKLCH Color to unclamped sRGB channels (0-1 when in gamut)."""
    hue = math.radians(color.hue)
    a = color.c * math.cos(hue)
    b = color.c * math.sin(hue)

    lms_l = (color.l + 0.3963377774 * a + 0.2158037573 * b) ** 3
    lms_m = (color.l - 0.1055613458 * a - 0.0638541728 * b) ** 3
    lms_s = (color.l - 0.0894841775 * a - 1.2914855480 * b) ** 3

    lr = 4.0767416621 * lms_l - 3.3077115913 * lms_m + 0.2309699292 * lms_s
    lg = -1.2684380046 * lms_l + 2.6097574011 * lms_m - 0.3413193965 * lms_s
    lb = -0.0041960863 * lms_l - 0.7034186147 * lms_m + 1.7076147010 * lms_s

    return _linear_to_srgb(lr), _linear_to_srgb(lg), _linear_to_srgb(lb)


def in_gamut(color: Color) -> bool:
    """Check whether a color round-trips through sRGB without clipping."""
    return all(-_GAMUT_EPSILON <= ch <= 1 + _GAMUT_EPSILON for ch in oklch_to_srgb(color))


def clamp_chroma(color: Color) -> Color:
    """Reduce chroma until the color fits the sRGB gamut.

    Lightness is clamped to 0-1 first; hue is preserved.
    """
    lightness = min(1.0, max(0.0, color.l))
    chroma = min(MAX_CHROMA, max(0.0, color.c))
    candidate = replace(color, l=lightness, c=chroma)
    if in_gamut(candidate):
        return candidate

    low, high = 0.0, chroma
    for _ in range(24):
        mid = (low + high) / 2
        if in_gamut(replace(candidate, c=mid)):
            low = mid
        else:
            high = mid
    return replace(candidate, c=low)


def to_rgb255(color: Color) -> tuple[int, int, int]:
    """Gamut-clamp a color and return integer sRGB channels."""
    r, g, b = oklch_to_srgb(clamp_chroma(color))
    return tuple(round(min(1.0, max(0.0, ch)) * 255) for ch in (r, g, b))  # type: ignore[return-value]


# =============================================================================
# Formatting
# =============================================================================


def _format_alpha(alpha: float) -> str:
    text = f"{round(alpha, 4):.4f}".rstrip("0").rstrip(".")
    return text or "0"


def to_hex(color: Color) -> str:
    """Format a color as lowercase #rrggbb (alpha is dropped)."""
    r, g, b = to_rgb255(color)
    return f"#{r:02x}{g:02x}{b:02x}"


def to_rgba(color: Color) -> str:
    """Format a color as rgb()/rgba() depending on its alpha."""
    r, g, b = to_rgb255(color)
    if color.alpha < 1.0:
        return f"rgba({r}, {g}, {b}, {_format_alpha(color.alpha)})"
    return f"rgb({r}, {g}, {b})"


def format_color(color: Color) -> str:
    """Format a color for CSS output: hex when opaque, rgba() otherwise."""
    if color.alpha < 1.0:
        return to_rgba(color)
    return to_hex(color)


def quantize(color: Color) -> Color:
    """Snap a color to what its hex output will actually render as."""
    r, g, b = to_rgb255(color)
    return srgb_to_oklch(r / 255, g / 255, b / 255, color.alpha)


# =============================================================================
# WCAG luminance
# =============================================================================


def relative_luminance(color: Color) -> float:
    """WCAG 2.1 relative luminance of the rendered sRGB color."""
    r, g, b = (ch / 255 for ch in to_rgb255(color))
    return 0.2126 * _srgb_to_linear(r) + 0.7152 * _srgb_to_linear(g) + 0.0722 * _srgb_to_linear(b)


def contrast(foreground: Color, background: Color) -> float:
    """Unrounded WCAG contrast ratio (1-21)."""
    l1 = relative_luminance(foreground)
    l2 = relative_luminance(background)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


# =============================================================================
# Parsing
# =============================================================================

NAMED_COLORS: dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "orange": "#ffa500",
    "purple": "#800080",
    "pink": "#ffc0cb",
    "teal": "#008080",
    "cyan": "#00ffff",
    "aqua": "#00ffff",
    "magenta": "#ff00ff",
    "fuchsia": "#ff00ff",
    "gray": "#808080",
    "grey": "#808080",
    "silver": "#c0c0c0",
    "brown": "#a52a2a",
    "indigo": "#4b0082",
    "lime": "#00ff00",
    "navy": "#000080",
    "maroon": "#800000",
    "olive": "#808000",
    "gold": "#ffd700",
    "coral": "#ff7f50",
    "salmon": "#fa8072",
    "tomato": "#ff6347",
    "violet": "#ee82ee",
    "crimson": "#dc143c",
    "rebeccapurple": "#663399",
}

_HEX = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC = re.compile(r"^(rgba?|hsla?|oklch)\(\s*(.*?)\s*\)$", re.IGNORECASE | re.DOTALL)


def _split_channels(body: str) -> tuple[list[str], str | None]:
    """Split "r g b / a" or "r, g, b, a" into channels and an optional alpha."""
    alpha: str | None = None
    if "/" in body:
        body, alpha = (part.strip() for part in body.split("/", 1))
    parts = [p for p in re.split(r"[\s,]+", body.strip()) if p]
    if alpha is None and len(parts) == 4:
        alpha = parts.pop()
    return parts, alpha


def _number(text: str, *, percent_scale: float = 1.0) -> float:
    if text.endswith("%"):
        return float(text[:-1]) / 100.0 * percent_scale
    return float(text)


def _parse_alpha(text: str | None) -> float:
    if text is None:
        return 1.0
    return min(1.0, max(0.0, _number(text)))


def _hsl_to_srgb(h: float, s: float, lightness: float) -> tuple[float, float, float]:
    def channel(n: int) -> float:
        k = (n + h / 30.0) % 12
        a = s * min(lightness, 1 - lightness)
        return lightness - a * max(-1.0, min(k - 3, 9 - k, 1.0))

    return channel(0), channel(8), channel(4)


def parse_color(value: str) -> Color:
    """Parse a CSS color string into an OKLCH Color.

    Accepts #rgb, #rgba, #rrggbb, #rrggbbaa, rgb()/rgba(), hsl()/hsla(),
    oklch() and a set of CSS named colors.

    Raises:
        ValueError: If the string is not a recognizable color.
    """
    text = value.strip()
    lowered = text.lower()

    if lowered in NAMED_COLORS:
        return parse_color(NAMED_COLORS[lowered])
    if lowered == "transparent":
        return Color(l=0.0, c=0.0, h=None, alpha=0.0)

    hex_match = _HEX.match(text)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        channels = [int(digits[i : i + 2], 16) / 255 for i in range(0, len(digits), 2)]
        alpha = channels[3] if len(channels) == 4 else 1.0
        return srgb_to_oklch(channels[0], channels[1], channels[2], alpha)

    func_match = _FUNC.match(text)
    if not func_match:
        raise ValueError(f"Invalid color: {value}")

    name = func_match.group(1).lower()
    try:
        parts, alpha_text = _split_channels(func_match.group(2))
        if len(parts) != 3:
            raise ValueError(f"Invalid color: {value}")
        alpha = _parse_alpha(alpha_text)

        if name.startswith("rgb"):
            r, g, b = (_number(p, percent_scale=255.0) / 255 for p in parts)
            return srgb_to_oklch(r, g, b, alpha)

        if name.startswith("hsl"):
            h = float(parts[0].removesuffix("deg")) % 360
            s = _number(parts[1])
            lightness = _number(parts[2])
            return srgb_to_oklch(*_hsl_to_srgb(h, s, lightness), alpha)

        lightness = _number(parts[0])
        chroma = _number(parts[1], percent_scale=MAX_CHROMA)
        hue = None if parts[2] == "none" else float(parts[2].removesuffix("deg")) % 360
        return Color(l=lightness, c=max(0.0, chroma), h=hue if chroma > 0 else None, alpha=alpha)
    except (ValueError, IndexError) as exc:
        raise ValueError(f"Invalid color: {value}") from exc


def is_color(value: str) -> bool:
    """Check whether a string parses as a color."""
    try:
        parse_color(value)
    except ValueError:
        return False
    return True
