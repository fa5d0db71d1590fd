"""Tests for the pure-Python OKLCH color engine."""

from __future__ import annotations

import pytest

from tokenforge.core.oklch import (
    MAX_CHROMA,
    Color,
    clamp_chroma,
    contrast,
    format_color,
    in_gamut,
    is_color,
    parse_color,
    to_hex,
    to_rgba,
)


class TestParseColor:
    """Test CSS color parsing into OKLCH."""

    @pytest.mark.parametrize("value", ["#3b82f6", "#0e7490", "#ff0000", "#000000", "#ffffff"])
    def test_hex_round_trip(self, value: str):
        assert to_hex(parse_color(value)) == value

    def test_short_hex(self):
        assert to_hex(parse_color("#f00")) == "#ff0000"

    def test_hex_with_alpha(self):
        color = parse_color("#ff000080")
        assert color.alpha == pytest.approx(128 / 255)
        assert to_hex(color) == "#ff0000"

    def test_white_and_black_lightness(self):
        assert parse_color("#ffffff").l == pytest.approx(1.0, abs=1e-6)
        assert parse_color("#000000").l == pytest.approx(0.0, abs=1e-6)

    def test_gray_is_achromatic(self):
        gray = parse_color("#808080")
        assert gray.c == 0.0
        assert gray.h is None

    def test_rgb_functions(self):
        assert to_hex(parse_color("rgb(255, 0, 0)")) == "#ff0000"
        assert to_hex(parse_color("rgb(255 0 0)")) == "#ff0000"
        assert parse_color("rgba(0, 0, 255, 0.5)").alpha == 0.5

    def test_hsl(self):
        assert to_hex(parse_color("hsl(0, 100%, 50%)")) == "#ff0000"
        assert to_hex(parse_color("hsl(120deg 100% 50%)")) == "#00ff00"

    def test_oklch(self):
        color = parse_color("oklch(0.7 0.1 200)")
        assert color.l == 0.7
        assert color.c == 0.1
        assert color.h == 200.0

    def test_named_colors(self):
        assert to_hex(parse_color("red")) == "#ff0000"
        assert to_hex(parse_color("White")) == "#ffffff"
        assert parse_color("transparent").alpha == 0.0

    @pytest.mark.parametrize("value", ["notacolor", "#12", "rgb(1, 2)", "1rem", ""])
    def test_invalid(self, value: str):
        with pytest.raises(ValueError):
            parse_color(value)
        assert is_color(value) is False


class TestGamut:
    """Test sRGB gamut clamping."""

    def test_in_gamut_color_unchanged(self):
        color = parse_color("#3b82f6")
        assert clamp_chroma(color) == color

    def test_out_of_gamut_reduces_chroma(self):
        vivid = Color(l=0.9, c=0.35, h=150.0)
        assert not in_gamut(vivid)

        clamped = clamp_chroma(vivid)
        assert in_gamut(clamped)
        assert clamped.c < vivid.c
        assert clamped.l == vivid.l
        assert clamped.h == vivid.h

    def test_lightness_and_chroma_bounds(self):
        clamped = clamp_chroma(Color(l=1.4, c=0.9, h=30.0))
        assert clamped.l == 1.0
        assert clamped.c <= MAX_CHROMA


class TestFormatting:
    """Test hex and rgba output."""

    def test_opaque_formats_as_hex(self):
        assert format_color(parse_color("#3b82f6")) == "#3b82f6"

    def test_translucent_formats_as_rgba(self):
        color = Color(l=0.0, c=0.0, alpha=0.5)
        assert format_color(color) == "rgba(0, 0, 0, 0.5)"

    def test_to_rgba_opaque(self):
        assert to_rgba(parse_color("#ff0000")) == "rgb(255, 0, 0)"


class TestContrast:
    """Test the WCAG contrast ratio."""

    def test_black_on_white_is_maximum(self):
        assert contrast(parse_color("#000000"), parse_color("#ffffff")) == pytest.approx(21.0)

    def test_symmetric(self):
        a, b = parse_color("#3b82f6"), parse_color("#ffffff")
        assert contrast(a, b) == contrast(b, a)

    def test_same_color_is_one(self):
        color = parse_color("#3b82f6")
        assert contrast(color, color) == pytest.approx(1.0)
