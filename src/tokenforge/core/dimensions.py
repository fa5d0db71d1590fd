"""
Unit-aware dimension values.

A Dimension is a (magnitude, unit) pair. Cross-unit arithmetic goes through a
pixel basis; rem and em use the configured base font size. Units without a
fixed pixel basis (%, vw, vh, ch, ...) can only be combined with themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_BASE_FONT_SIZE = 16.0

# Absolute units, in CSS reference pixels
_ABSOLUTE_PX: dict[str, float] = {
    "px": 1.0,
    "pt": 96 / 72,
    "pc": 16.0,
    "in": 96.0,
    "cm": 96 / 2.54,
    "mm": 96 / 25.4,
}

# Units that scale with the root font size
_FONT_RELATIVE = frozenset({"rem", "em"})

CONVERTIBLE_UNITS = frozenset(_ABSOLUTE_PX) | _FONT_RELATIVE

_DIMENSION = re.compile(r"^(-?(?:\d+\.?\d*|\.\d+)(?:e[-+]?\d+)?)([a-z%]+)?$", re.IGNORECASE)


@dataclass(frozen=True)
class Dimension:
    """A magnitude with an optional CSS unit ("" for unitless)."""

    value: float
    unit: str = ""

    @property
    def convertible(self) -> bool:
        """True if the unit has a pixel basis (unitless counts as px)."""
        return self.unit == "" or self.unit in CONVERTIBLE_UNITS

    def to_px(self, base_font_size: float = DEFAULT_BASE_FONT_SIZE) -> float:
        """Convert to pixels.

        Raises:
            ValueError: If the unit has no pixel basis.
        """
        if self.unit == "":
            return self.value
        if self.unit in _FONT_RELATIVE:
            return self.value * base_font_size
        if self.unit in _ABSOLUTE_PX:
            return self.value * _ABSOLUTE_PX[self.unit]
        raise ValueError(f"Unit '{self.unit}' cannot be converted to pixels")

    def with_value(self, value: float) -> Dimension:
        return Dimension(value, self.unit)

    def __str__(self) -> str:
        return format_dimension(self.value, self.unit)


def parse_dimension(text: str | float | int) -> Dimension:
    """Parse "16px", "1.5rem", "-8px", "50%" or a bare number.

    Raises:
        ValueError: If the text is not a number with an optional unit.
    """
    if isinstance(text, bool):
        raise ValueError(f"Invalid dimension: {text!r}")
    if isinstance(text, int | float):
        return Dimension(float(text))
    match = _DIMENSION.match(text.strip())
    if not match:
        raise ValueError(f"Invalid dimension: {text!r}")
    return Dimension(float(match.group(1)), (match.group(2) or "").lower())


def from_px(px: float, unit: str, base_font_size: float = DEFAULT_BASE_FONT_SIZE) -> float:
    """Convert a pixel amount into the given unit.

    Raises:
        ValueError: If the unit has no pixel basis.
    """
    unit = unit.lower()
    if unit in ("", "px"):
        return px
    if unit in _FONT_RELATIVE:
        return px / base_font_size
    if unit in _ABSOLUTE_PX:
        return px / _ABSOLUTE_PX[unit]
    raise ValueError(f"Unit '{unit}' cannot be converted from pixels")


def format_number(value: float, precision: int = 4) -> str:
    """Format a number the way it should appear in CSS: no trailing zeros, no -0."""
    rounded = round(value, precision)
    if rounded == 0:
        return "0"
    return f"{rounded:.{precision}f}".rstrip("0").rstrip(".")


def format_dimension(value: float, unit: str, precision: int = 4) -> str:
    """Format a magnitude and unit, e.g. (1.5, "rem") -> "1.5rem"."""
    return f"{format_number(value, precision)}{unit}"
