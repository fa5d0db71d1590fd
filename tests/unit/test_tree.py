"""Tests for token tree helpers."""

from __future__ import annotations

import pytest

from tokenforge.core.ir import TokenType
from tokenforge.core.tree import (
    extract_base_tokens,
    find_leaf,
    flatten_tokens,
    infer_token_type,
    merge_tokens,
    validate_tokens,
)


class TestFlatten:
    """Test leaf enumeration and naming."""

    def test_names_and_paths(self, base_tokens):
        flat = flatten_tokens(base_tokens)
        assert list(flat) == [
            "color-brand",
            "color-black",
            "color-white",
            "color-semantic-text",
            "color-semantic-background",
            "spacing-base",
            "spacing-lg",
        ]
        assert flat["color-semantic-text"].path == "color.semantic.text"

    def test_prefix(self, base_tokens):
        assert "ds-color-brand" in flatten_tokens(base_tokens, "ds-")

    def test_metadata_keys_skipped(self, themed_tokens):
        names = flatten_tokens(themed_tokens)
        assert not any(name.startswith("$") for name in names)
        assert len(names) == 7


class TestFindLeaf:
    """Test dot path lookup."""

    def test_exact(self, base_tokens):
        consumed, leaf = find_leaf(base_tokens, ["color", "brand"])
        assert consumed == 2
        assert leaf["$value"] == "#3b82f6"

    def test_trailing_segments(self, base_tokens):
        consumed, _ = find_leaf(base_tokens, ["color", "brand", "step3"])
        assert consumed == 2

    def test_missing_or_group(self, base_tokens):
        assert find_leaf(base_tokens, ["color", "nope"]) is None
        assert find_leaf(base_tokens, ["color"]) is None


class TestMerge:
    """Test deep merging."""

    def test_later_wins(self, base_tokens):
        merged = merge_tokens(base_tokens, {"color": {"brand": {"$value": "#0e7490"}}})
        assert merged["color"]["brand"]["$value"] == "#0e7490"
        assert merged["color"]["brand"]["$description"] == "Primary brand color"
        assert merged["color"]["black"]["$value"] == "#000000"

    def test_inputs_not_mutated(self, base_tokens):
        override = {"color": {"brand": {"$value": "#0e7490"}}}
        merge_tokens(base_tokens, override)
        assert base_tokens["color"]["brand"]["$value"] == "#3b82f6"

    def test_extract_base(self, themed_tokens):
        base = extract_base_tokens({**themed_tokens, "$meta": {"themes": []}})
        assert "$themes" not in base
        assert "$meta" not in base
        assert "color" in base


class TestInferType:
    """Test type inference from resolved values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("#3b82f6", TokenType.COLOR),
            ("rgb(0, 0, 0)", TokenType.COLOR),
            ("1.5rem", TokenType.DIMENSION),
            ("200ms", TokenType.DURATION),
            ("700", TokenType.FONT_WEIGHT),
            ("Inter, sans-serif", TokenType.FONT_FAMILY),
            ("1.5", TokenType.NUMBER),
            ("cubic-bezier(0.4, 0, 0.2, 1)", TokenType.CUBIC_BEZIER),
            ("linear-gradient(red, blue)", TokenType.GRADIENT),
            ("~icons/check.svg", TokenType.ASSET),
            ("uppercase", TokenType.STRING),
        ],
    )
    def test_infer(self, value: str, expected: TokenType):
        assert infer_token_type(value) == expected


class TestValidate:
    """Test structural validation."""

    def test_valid_tree(self, base_tokens):
        assert validate_tokens(base_tokens) == []

    def test_null_value(self):
        issues = validate_tokens({"color": {"brand": {"$value": None}}})
        assert [i.path for i in issues] == ["color.brand"]

    def test_unknown_type(self):
        issues = validate_tokens({"size": {"$value": "1rem", "$type": "length"}})
        assert issues[0].message == "Invalid token type: length"
        assert "dimension" in issues[0].valid_types

    def test_metadata_without_value(self):
        issues = validate_tokens({"color": {"brand": {"$type": "color"}}})
        assert issues[0].message == "Token must have a $value"
