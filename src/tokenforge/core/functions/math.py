"""
Unit-aware arithmetic on dimensions.

Mixed-unit operands are converted through pixels and the result is
formatted in the first operand's unit. min, max and clamp share their
names with CSS functions; when they cannot be computed (viewport units,
calc() arguments, more operands) the call is kept as CSS.
"""

from __future__ import annotations

import math

from ..dimensions import Dimension, format_dimension, from_px
from .registry import FunctionContext, FunctionSpec, IncompatibleUnitsError, Param, ParamKind


def _px(dimension: Dimension, base: float) -> float:
    if not dimension.convertible:
        raise IncompatibleUnitsError(f"'{dimension}' has no pixel equivalent")
    return dimension.to_px(base)


def _combine(first: Dimension, second: Dimension, base: float, sign: int) -> str:
    if second.unit in ("", first.unit):
        return format_dimension(first.value + sign * second.value, first.unit)
    total = _px(first, base) + sign * _px(second, base)
    return format_dimension(from_px(total, first.unit, base), first.unit)


def _compare_px(dimensions: tuple[Dimension, ...], base: float) -> list[float]:
    if len({d.unit for d in dimensions}) == 1:
        return [d.value for d in dimensions]
    return [_px(d, base) for d in dimensions]


def _round_half_up(value: float, precision: int) -> float:
    factor = 10**precision
    return math.floor(value * factor + 0.5) / factor


def multiply(value: Dimension, factor: float) -> str:
    return format_dimension(value.value * factor, value.unit)


def divide(value: Dimension, divisor: float) -> str:
    if divisor == 0:
        raise ValueError("division by zero")
    return format_dimension(value.value / divisor, value.unit)


def add(first: Dimension, second: Dimension, *, ctx: FunctionContext) -> str:
    return _combine(first, second, ctx.base_font_size, 1)


def subtract(first: Dimension, second: Dimension, *, ctx: FunctionContext) -> str:
    return _combine(first, second, ctx.base_font_size, -1)


def round_(value: Dimension, precision: int) -> str:
    return format_dimension(_round_half_up(value.value, precision), value.unit)


def floor(value: Dimension, precision: int) -> str:
    factor = 10**precision
    return format_dimension(math.floor(value.value * factor) / factor, value.unit)


def ceil(value: Dimension, precision: int) -> str:
    factor = 10**precision
    return format_dimension(math.ceil(value.value * factor) / factor, value.unit)


def min_(first: Dimension, second: Dimension, *, ctx: FunctionContext) -> str:
    a, b = _compare_px((first, second), ctx.base_font_size)
    return str(first if a <= b else second)


def max_(first: Dimension, second: Dimension, *, ctx: FunctionContext) -> str:
    a, b = _compare_px((first, second), ctx.base_font_size)
    return str(first if a >= b else second)


def clamp(value: Dimension, low: Dimension, high: Dimension, *, ctx: FunctionContext) -> str:
    px, px_low, px_high = _compare_px((value, low, high), ctx.base_font_size)
    if px < px_low:
        return str(low)
    if px > px_high:
        return str(high)
    return str(value)


def convert(value: Dimension, to_unit: str, base_font_size: float | None, *, ctx: FunctionContext) -> str:
    base = base_font_size if base_font_size is not None else ctx.base_font_size
    if base <= 0:
        raise ValueError("base font size must be positive")
    unit = to_unit.strip().lower()
    if not value.convertible:
        raise ValueError(f"cannot convert '{value}' to {unit}")
    return format_dimension(from_px(value.to_px(base), unit, base), unit)


def mod(value: Dimension, divisor: float) -> str:
    if divisor == 0:
        raise ValueError("modulo by zero")
    return format_dimension(math.fmod(value.value, divisor), value.unit)


def abs_(value: Dimension) -> str:
    return format_dimension(abs(value.value), value.unit)


def negate(value: Dimension) -> str:
    return format_dimension(-value.value, value.unit)


def percent(value: Dimension, percentage: str) -> str:
    """Take a percentage of a value; "25" and "25%" both mean a quarter."""
    factor = float(percentage.strip().rstrip("%")) / 100
    return format_dimension(value.value * factor, value.unit)


D = ParamKind.DIMENSION
N = ParamKind.NUMBER
I = ParamKind.INTEGER  # noqa: E741

FUNCTIONS: tuple[FunctionSpec, ...] = (
    FunctionSpec("multiply", (Param("value", D), Param("factor", N)), multiply, "math",
                 "Multiply a dimension by a number"),
    FunctionSpec("divide", (Param("value", D), Param("divisor", N)), divide, "math",
                 "Divide a dimension by a number"),
    FunctionSpec("add", (Param("a", D), Param("b", D)), add, "math",
                 "Add two dimensions, in the first one's unit", contextual=True),
    FunctionSpec("subtract", (Param("a", D), Param("b", D)), subtract, "math",
                 "Subtract two dimensions, in the first one's unit", contextual=True),
    FunctionSpec("round", (Param("value", D), Param("precision", I, "2")), round_, "math",
                 "Round to a number of decimals"),
    FunctionSpec("floor", (Param("value", D), Param("precision", I, "0")), floor, "math",
                 "Round down to a number of decimals"),
    FunctionSpec("ceil", (Param("value", D), Param("precision", I, "0")), ceil, "math",
                 "Round up to a number of decimals"),
    FunctionSpec("min", (Param("a", D), Param("b", D)), min_, "math",
                 "Smaller of two dimensions, or CSS min()", contextual=True, css_native=True),
    FunctionSpec("max", (Param("a", D), Param("b", D)), max_, "math",
                 "Larger of two dimensions, or CSS max()", contextual=True, css_native=True),
    FunctionSpec("clamp", (Param("value", D), Param("min", D), Param("max", D)), clamp, "math",
                 "Clamp a dimension, or CSS clamp()", contextual=True, css_native=True),
    FunctionSpec("convert",
                 (Param("value", D), Param("toUnit", ParamKind.STRING), Param("baseFontSize", N, None)),
                 convert, "math", "Convert between px, rem, em, pt and other absolute units",
                 contextual=True),
    FunctionSpec("mod", (Param("value", D), Param("divisor", N)), mod, "math",
                 "Remainder, keeping the dividend's sign"),
    FunctionSpec("abs", (Param("value", D),), abs_, "math", "Absolute value"),
    FunctionSpec("negate", (Param("value", D),), negate, "math", "Flip the sign"),
    FunctionSpec("percent", (Param("value", D), Param("percentage", ParamKind.STRING)), percent,
                 "math", "Percentage of a dimension"),
)
