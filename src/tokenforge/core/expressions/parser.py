"""
Value parser for token expressions.

Recognizes `{path.to.token}` reference placeholders and a single top-level
`name(arg, arg, ...)` call. Arguments may nest calls, references and
`{ key: value }` object literals, so splitting tracks paren, brace and quote
depth instead of splitting on every comma.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_FUNCTION_PATTERN = re.compile(r"^([a-zA-Z][a-zA-Z0-9]*)\((.*)\)$", re.DOTALL)

# Paths never contain whitespace, colons or commas; that keeps object
# literals such as {l:10} and { l: 10 } from being read as references.
REFERENCE_PATTERN = re.compile(r"\{([^{}\s:,()]+)\}")

_OPENERS = {"(": ")", "{": "}", "[": "]"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


@dataclass(frozen=True)
class FunctionCall:
    """A parsed top-level function call."""

    name: str
    args: tuple[str, ...]
    raw: str


def _balanced(text: str) -> bool:
    """True if brackets in text never close below depth zero and end balanced."""
    stack: list[str] = []
    quote: str | None = None
    for char in text:
        if quote:
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char in _OPENERS:
            stack.append(char)
        elif char in _CLOSERS:
            if not stack or stack[-1] != _CLOSERS[char]:
                return False
            stack.pop()
    return not stack and quote is None


def parse_function(value: Any) -> FunctionCall | None:
    """Parse a value as a single function call.

    Returns None for non-strings, plain literals, references, and strings like
    "a(1) b(2)" whose leading call does not span the whole value.
    """
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    match = _FUNCTION_PATTERN.match(trimmed)
    if not match:
        return None
    name, body = match.groups()
    if not _balanced(body):
        return None
    return FunctionCall(name=name, args=tuple(split_arguments(body)), raw=trimmed)


def is_function(value: Any) -> bool:
    """Check whether a value is a single function call."""
    return parse_function(value) is not None


def split_arguments(body: str) -> list[str]:
    """Split a call's argument string on top-level commas.

    >>> split_arguments("shade(#ff0000, 20%), {l: 10, c: -5}")
    ['shade(#ff0000, 20%)', '{l: 10, c: -5}']
    """
    if not body or not body.strip():
        return []

    args: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None

    for char in body:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif char == "," and depth == 0:
            args.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    tail = "".join(current).strip()
    if tail:
        args.append(tail)
    return args


def find_references(value: str) -> list[str]:
    """Return the paths of all `{path}` placeholders, in order."""
    return REFERENCE_PATTERN.findall(value)


def is_single_reference(value: str) -> bool:
    """True if the whole value is exactly one placeholder."""
    return REFERENCE_PATTERN.fullmatch(value.strip()) is not None


def parse_percentage(value: str | float | int) -> float:
    """Parse "80%" -> 0.8; bare numbers are taken as fractions ("0.8" -> 0.8).

    Raises:
        ValueError: If the value is not numeric.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid percentage: {value!r}")
    if isinstance(value, int | float):
        return float(value)
    text = str(value).strip()
    if text.endswith("%"):
        return float(text[:-1]) / 100
    return float(text)


def _literal(text: str) -> Any:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    lowered = text.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return float(text)
    except ValueError:
        return text


def parse_object_literal(text: str) -> dict[str, Any] | None:
    """Parse a simple `{ key: value, ... }` literal.

    Values become floats or booleans where they look like one, otherwise
    strings. Returns None if text is not wrapped in braces.

    Raises:
        ValueError: If a pair is not `key: value`.
    """
    trimmed = text.strip()
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        return None
    inner = trimmed[1:-1].strip()
    if not inner:
        return {}

    result: dict[str, Any] = {}
    for pair in split_arguments(inner):
        key, sep, raw_value = pair.partition(":")
        key = key.strip().strip("'\"")
        if not sep or not key or not raw_value.strip():
            raise ValueError(f"Invalid object literal entry: {pair!r}")
        result[key] = _literal(raw_value)
    return result
