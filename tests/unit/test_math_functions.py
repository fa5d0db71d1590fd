"""Tests for unit-aware math functions."""

from __future__ import annotations

import pytest

from tokenforge.core.errors import InvalidArgumentError
from tokenforge.core.functions import FunctionContext, default_registry


def call(name: str, *args: str, ctx: FunctionContext | None = None):
    return default_registry().call(name, list(args), ctx)


class TestArithmetic:
    """Test add, subtract, multiply and divide."""

    def test_same_unit(self):
        assert call("add", "1rem", "0.5rem") == "1.5rem"
        assert call("subtract", "1rem", "0.5rem") == "0.5rem"

    def test_mixed_units_use_first_unit(self):
        assert call("add", "1rem", "8px") == "1.5rem"
        assert call("subtract", "1rem", "8px") == "0.5rem"
        assert call("add", "8px", "1rem") == "24px"

    def test_base_font_size_from_context(self):
        ctx = FunctionContext(base_font_size=20)
        assert call("add", "1rem", "10px", ctx=ctx) == "1.5rem"

    def test_unitless_operand(self):
        assert call("add", "1rem", "2") == "3rem"

    def test_multiply_divide(self):
        assert call("multiply", "1rem", "2") == "2rem"
        assert call("multiply", "4px", "0.5") == "2px"
        assert call("divide", "3rem", "2") == "1.5rem"

    def test_division_by_zero(self):
        with pytest.raises(InvalidArgumentError, match="division by zero"):
            call("divide", "1rem", "0")

    def test_incompatible_units(self):
        with pytest.raises(InvalidArgumentError, match="pixel"):
            call("add", "1rem", "2vw")

    def test_invalid_dimension(self):
        with pytest.raises(InvalidArgumentError, match="expects a dimension"):
            call("multiply", "red", "2")


class TestRounding:
    """Test round, floor and ceil."""

    def test_round(self):
        assert call("round", "1.234rem") == "1.23rem"
        assert call("round", "1.25px", "1") == "1.3px"

    def test_floor_ceil(self):
        assert call("floor", "1.7rem") == "1rem"
        assert call("ceil", "1.2rem") == "2rem"
        assert call("floor", "1.27px", "1") == "1.2px"


class TestConversion:
    """Test unit conversion and remaining helpers."""

    def test_convert(self):
        assert call("convert", "16px", "rem") == "1rem"
        assert call("convert", "12pt", "px") == "16px"
        assert call("convert", "1rem", "px", "20") == "20px"

    def test_convert_viewport_unit(self):
        with pytest.raises(InvalidArgumentError):
            call("convert", "10vw", "px")

    def test_mod(self):
        assert call("mod", "10px", "3") == "1px"
        with pytest.raises(InvalidArgumentError, match="modulo by zero"):
            call("mod", "10px", "0")

    def test_abs_negate(self):
        assert call("abs", "-4px") == "4px"
        assert call("negate", "4px") == "-4px"
        assert call("negate", "0px") == "0px"

    def test_percent(self):
        assert call("percent", "2rem", "25") == "0.5rem"
        assert call("percent", "2rem", "25%") == "0.5rem"


class TestCssNative:
    """Test min, max and clamp, which double as CSS functions."""

    def test_computable(self):
        assert call("min", "1rem", "20px") == "1rem"
        assert call("max", "1rem", "20px") == "20px"
        assert call("clamp", "3rem", "1rem", "2rem") == "2rem"
        assert call("clamp", "8px", "1rem", "2rem") == "1rem"
        assert call("clamp", "1.5rem", "1rem", "2rem") == "1.5rem"

    def test_same_relative_unit(self):
        assert call("min", "2vw", "3vw") == "2vw"

    def test_uncomputable_returns_none(self):
        assert call("min", "1rem", "2vw") is None
        assert call("max", "1rem", "2px", "3px") is None
        assert call("clamp", "1rem", "calc(1vw + 1rem)", "2rem") is None
