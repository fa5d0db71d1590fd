"""
Token tree helpers.

A token tree is a nested mapping in the W3C DTCG shape: groups are mappings
of name -> node, leaves are mappings holding a `$value` (plus optional
`$type` and `$description`). Keys starting with `$` on groups are metadata
and never become token names.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterator, Mapping
from typing import Any, NamedTuple

from .ir.tokens import TokenIssue, TokenType

THEME_KEYS = frozenset({"$themes", "$meta"})


class FlatToken(NamedTuple):
    """A leaf located by both its emitted name and its dot path."""

    name: str
    path: str
    token: Mapping[str, Any]


def is_token(node: Any) -> bool:
    """A leaf is a mapping carrying `$value`."""
    return isinstance(node, Mapping) and "$value" in node


def find_leaf(tree: Mapping[str, Any], segments: list[str]) -> tuple[int, Mapping[str, Any]] | None:
    """Walk a dot path down the tree.

    Returns:
        (consumed, leaf) where consumed is the number of segments used to
        reach the leaf; trailing segments index into a structured value.
        None if the path is missing or stops on a group.
    """
    current: Any = tree
    for index, segment in enumerate(segments):
        if is_token(current):
            return index, current
        if not isinstance(current, Mapping) or segment.startswith("$") or segment not in current:
            return None
        current = current[segment]
    if is_token(current):
        return len(segments), current
    return None


def iter_tokens(tree: Mapping[str, Any], path: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], Mapping[str, Any]]]:
    """Yield (path segments, leaf) for every leaf, depth first in key order."""
    for key, value in tree.items():
        if key.startswith("$"):
            continue
        if is_token(value):
            yield (*path, key), value
        elif isinstance(value, Mapping):
            yield from iter_tokens(value, (*path, key))


def flatten_tokens(tree: Mapping[str, Any], token_prefix: str = "") -> dict[str, FlatToken]:
    """Flatten a tree to dash-joined names, e.g. color.brand.500 -> color-brand-500."""
    flat: dict[str, FlatToken] = {}
    for segments, token in iter_tokens(tree):
        name = f"{token_prefix}{'-'.join(segments)}"
        flat[name] = FlatToken(name=name, path=".".join(segments), token=token)
    return flat


def merge_tokens(*trees: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge token trees; later trees win. Inputs are never mutated."""
    result: dict[str, Any] = {}
    for tree in trees:
        _deep_merge(result, tree)
    return result


def _deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, Mapping):
            existing = target.get(key)
            if not isinstance(existing, dict):
                existing = {}
                target[key] = existing
            _deep_merge(existing, value)
        else:
            target[key] = copy.deepcopy(value)


def extract_base_tokens(tokens: Mapping[str, Any]) -> dict[str, Any]:
    """Drop the theme-related `$themes` and `$meta` keys."""
    return {key: value for key, value in tokens.items() if key not in THEME_KEYS}


# =============================================================================
# Type inference
# =============================================================================

_COLOR_PREFIXES = ("#", "rgb", "hsl", "oklch", "oklab", "lab", "lch")
_DIMENSION_RE = re.compile(r"^-?\d+(\.\d+)?(px|rem|em|%|vw|vh|vmin|vmax|ch|ex|cm|mm|in|pt|pc)$")
_DURATION_RE = re.compile(r"^-?\d+(\.\d+)?(ms|s)$")
_FONT_WEIGHT_RE = re.compile(r"^(100|200|300|400|500|600|700|800|900|normal|bold|lighter|bolder)$")
_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
_ASSET_RE = re.compile(r"\.(svg|png|jpg|jpeg|gif|webp)$", re.IGNORECASE)


def infer_token_type(value: str) -> TokenType:
    """Guess a DTCG type from a resolved CSS value."""
    if value.startswith("~") and _ASSET_RE.search(value):
        return TokenType.ASSET
    if value.startswith(_COLOR_PREFIXES):
        return TokenType.COLOR
    if _DIMENSION_RE.match(value):
        return TokenType.DIMENSION
    if _DURATION_RE.match(value):
        return TokenType.DURATION
    if _FONT_WEIGHT_RE.match(value):
        return TokenType.FONT_WEIGHT
    if "," in value and any(f in value for f in ("sans-serif", "serif", "monospace")):
        return TokenType.FONT_FAMILY
    if _NUMBER_RE.match(value):
        return TokenType.NUMBER
    if value.startswith("cubic-bezier"):
        return TokenType.CUBIC_BEZIER
    if value.startswith(("linear-gradient", "radial-gradient", "conic-gradient")):
        return TokenType.GRADIENT
    return TokenType.STRING


# =============================================================================
# Validation
# =============================================================================


def validate_tokens(tokens: Mapping[str, Any], path: str = "") -> list[TokenIssue]:
    """Check a tree against the DTCG structure rules.

    Reports leaves whose `$value` is null, unknown `$type` tags, and nodes
    that carry `$` metadata but no `$value`.
    """
    issues: list[TokenIssue] = []
    valid_types = [t.value for t in TokenType]

    for key, value in tokens.items():
        if key.startswith("$") or not isinstance(value, Mapping):
            continue
        current = f"{path}.{key}" if path else key

        if "$value" in value:
            if value["$value"] is None:
                issues.append(TokenIssue(path=current, message="Token must have a $value"))
            declared = value.get("$type")
            if declared and declared not in valid_types:
                issues.append(
                    TokenIssue(
                        path=current,
                        message=f"Invalid token type: {declared}",
                        valid_types=valid_types,
                    )
                )
        elif any(k.startswith("$") and k != "$description" for k in value):
            issues.append(TokenIssue(path=current, message="Token must have a $value"))
        else:
            issues.extend(validate_tokens(value, current))

    return issues
