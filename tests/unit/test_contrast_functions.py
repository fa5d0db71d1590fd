"""Tests for WCAG contrast and accessibility functions."""

from __future__ import annotations

import pytest

from tokenforge.core.errors import InvalidArgumentError
from tokenforge.core.functions import default_registry
from tokenforge.core.functions.contrast import (
    accessible_text,
    contrast_ratio,
    ensure_contrast,
    is_dark,
    is_light,
)
from tokenforge.core.oklch import contrast, parse_color


def call(name: str, *args: str):
    return default_registry().call(name, list(args))


class TestContrastRatio:
    """Test contrastRatio and meetsContrast."""

    def test_black_white_is_21(self):
        assert contrast_ratio(parse_color("#ffffff"), parse_color("#000000")) == 21.0
        assert call("contrastRatio", "#ffffff", "#000000") == "21"

    def test_rounded_to_two_decimals(self):
        ratio = contrast_ratio(parse_color("#777777"), parse_color("#ffffff"))
        assert ratio == round(ratio, 2)
        assert 1 <= ratio <= 21

    def test_meets_contrast_levels(self):
        assert call("meetsContrast", "#000000", "#ffffff") == "true"
        assert call("meetsContrast", "#000000", "#ffffff", "AAA") == "true"
        assert call("meetsContrast", "#777777", "#ffffff") == "false"
        assert call("meetsContrast", "#767676", "#ffffff", "aa") == "true"

    def test_unknown_level(self):
        with pytest.raises(InvalidArgumentError, match="Unknown WCAG level"):
            call("meetsContrast", "#000000", "#ffffff", "AAAA")


class TestAccessibleText:
    """Test automatic text color selection."""

    def test_dark_background_gets_white(self):
        assert accessible_text(parse_color("#000000")) == "#ffffff"
        assert call("accessibleText", "#0e1a2b") == "#ffffff"

    def test_light_background_gets_black(self):
        assert accessible_text(parse_color("#ffffff")) == "#000000"
        assert call("accessibleText", "#3b82f6") == "#000000"

    def test_prefer_light_flag_parses(self):
        assert call("accessibleText", "#000000", "false") == "#ffffff"

    def test_accessible_pair(self):
        assert call("accessiblePair", "#000000") == {"background": "#000000", "text": "#ffffff"}


class TestEnsureContrast:
    """Test the lightness search for a minimum contrast."""

    def test_passing_color_unchanged(self):
        color = parse_color("#000000")
        assert ensure_contrast(color, parse_color("#ffffff"), 4.5) is color
        assert call("ensureContrast", "#3b3b3b", "#ffffff") == "#3b3b3b"

    def test_darkens_on_light_background(self):
        gray, white = parse_color("#777777"), parse_color("#ffffff")
        result = ensure_contrast(gray, white, 4.5)
        assert contrast(result, white) >= 4.5
        assert result.l < gray.l

    def test_lightens_on_dark_background(self):
        gray, black = parse_color("#555555"), parse_color("#000000")
        result = ensure_contrast(gray, black, 7.0)
        assert contrast(result, black) >= 7.0
        assert result.l > gray.l

    def test_converges_near_target(self):
        white = parse_color("#ffffff")
        result = ensure_contrast(parse_color("#3b82f6"), white, 4.5)
        assert 4.5 <= contrast(result, white) < 5.5

    def test_unreachable_target_never_loses_contrast(self):
        color, against = parse_color("#666666"), parse_color("#777777")
        result = ensure_contrast(color, against, 21.0)
        assert contrast(result, against) >= contrast(color, against)

    @pytest.mark.parametrize(
        "color,against,target",
        [
            ("#3b82f6", "#ffffff", 4.5),
            ("#3b82f6", "#000000", 7.0),
            ("#ff0000", "#ffffff", 4.5),
            ("#0e7490", "#0e1a2b", 4.5),
            ("#cccccc", "#ffffff", 3.0),
        ],
    )
    def test_result_meets_target_or_best_effort(self, color: str, against: str, target: float):
        start, bg = parse_color(color), parse_color(against)
        result = parse_color(call("ensureContrast", color, against, str(target)))
        ratio = contrast(result, bg)
        assert ratio >= target or ratio >= contrast(start, bg)


class TestLightness:
    """Test luminance, isLight and isDark."""

    def test_luminance(self):
        assert call("luminance", "#ffffff") == "1"
        assert call("luminance", "#000000") == "0"

    @pytest.mark.parametrize("value", ["#ffffff", "#000000", "#808080", "#3b82f6", "#777777", "#fde047"])
    def test_light_and_dark_are_complementary(self, value: str):
        color = parse_color(value)
        assert is_light(color) is not is_dark(color)

    def test_registry_strings(self):
        assert call("isLight", "#ffffff") == "true"
        assert call("isDark", "#ffffff") == "false"
        assert call("isDark", "#000000") == "true"
