"""
Reference resolution and expression evaluation.

A TokenResolver is bound to one token tree for one resolution pass. Leaf
values are resolved lazily and memoized; references are substituted as
plain text first, then a value that is exactly one function call is handed
to the function registry with its arguments resolved recursively.

Resolving a referenced leaf does not evaluate its function call: the text
is substituted into the referencing expression, and evaluation happens
once at the outer level. Indexing into a structured result
({color.scale.step3}) is the exception, since it needs the evaluated value.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from ..dimensions import format_number
from ..errors import CycleError, InvalidTokenError, MissingReferenceError, TokenError, TokenErrorContext
from ..functions import FunctionContext, FunctionRegistry, FunctionResult, default_registry
from ..ir.tokens import Border, Diagnostic, Gradient, ShadowLayer, composite_kind
from ..tree import find_leaf
from .parser import REFERENCE_PATTERN, FunctionCall, is_single_reference, parse_function

logger = logging.getLogger(__name__)

Resolved = FunctionResult

# CSS functions that are never token functions; passed through without a warning
CSS_NATIVE_FUNCTIONS = frozenset(
    {
        "attr",
        "calc",
        "color",
        "color-mix",
        "counter",
        "cubic-bezier",
        "env",
        "hsl",
        "hsla",
        "hwb",
        "lab",
        "lch",
        "linear-gradient",
        "oklab",
        "oklch",
        "radial-gradient",
        "conic-gradient",
        "repeat",
        "rgb",
        "rgba",
        "rotate",
        "scale",
        "steps",
        "translate",
        "url",
        "var",
    }
)


class MissingReferencePolicy(StrEnum):
    """What to do with a `{path}` that does not reach a leaf."""

    LEAVE_VERBATIM = "leave_verbatim"
    STRICT = "strict"


class TokenResolver:
    """
    Resolves expressions against one token tree.

    Not shared across compiles: memo entries are only valid for the tree the
    resolver was built with.

    Attributes:
        tree: Token tree references are looked up in
        registry: Functions available to expressions
        ctx: Compile-wide settings for contextual functions
        policy: Missing-reference handling
        functions_enabled: False resolves references only
        diagnostics: Recoverable problems seen so far, in order
    """

    def __init__(
        self,
        tree: Mapping[str, Any],
        registry: FunctionRegistry | None = None,
        ctx: FunctionContext | None = None,
        policy: MissingReferencePolicy = MissingReferencePolicy.LEAVE_VERBATIM,
        functions_enabled: bool = True,
    ):
        self.tree = tree
        self.registry = registry if registry is not None else default_registry()
        self.ctx = ctx or FunctionContext()
        self.policy = policy
        self.functions_enabled = functions_enabled
        self.diagnostics: list[Diagnostic] = []
        self._memo: dict[tuple[str, bool], Resolved] = {}
        self._active: list[str] = []

    # =========================================================================
    # Public API
    # =========================================================================

    def resolve(self, expression: Any, path: str | None = None) -> Resolved:
        """Resolve a raw `$value` (string, number, boolean or composite)."""
        try:
            return self._resolve_value(expression, path, evaluate=True)
        except TokenError as exc:
            exc.with_context(path=path, expression=_describe(expression))
            raise

    def resolve_token(self, path: str) -> Resolved:
        """Resolve the leaf at a dot path.

        Raises:
            KeyError: If the path does not reach a leaf.
        """
        found = find_leaf(self.tree, path.split("."))
        if found is None or found[0] != len(path.split(".")):
            raise KeyError(path)
        return self._resolve_leaf(path, found[1], evaluate=True)

    # =========================================================================
    # Leaves
    # =========================================================================

    def _resolve_leaf(self, path: str, leaf: Mapping[str, Any], evaluate: bool) -> Resolved:
        key = (path, evaluate)
        if key in self._memo:
            return self._memo[key]

        if path in self._active:
            start = self._active.index(path)
            cycle = (*self._active[start:], path)
            raise CycleError(cycle, TokenErrorContext(path=path))

        self._active.append(path)
        try:
            value = self._resolve_value(leaf["$value"], path, evaluate)
        except TokenError as exc:
            exc.with_context(path=path, expression=_describe(leaf["$value"]))
            raise
        finally:
            self._active.pop()

        self._memo[key] = value
        return value

    def _resolve_value(self, value: Any, path: str | None, evaluate: bool) -> Resolved:
        if isinstance(value, str):
            return self._resolve_string(value, path, evaluate)
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int | float):
            return format_number(value)
        if isinstance(value, dict | list):
            return self._render_composite(value, path)
        raise InvalidTokenError(f"Unsupported token value: {value!r}")

    # =========================================================================
    # Strings
    # =========================================================================

    def _resolve_string(self, text: str, path: str | None, evaluate: bool) -> Resolved:
        if is_single_reference(text):
            target = self._lookup(text.strip()[1:-1], path, text, evaluate)
            if isinstance(target, dict):
                return target
            substituted = text if target is None else target
        else:
            substituted = self._substitute(text, path)

        if evaluate and self.functions_enabled:
            call = parse_function(substituted)
            if call is not None:
                return self._evaluate(call, path)
        return substituted

    def _substitute(self, text: str, path: str | None) -> str:
        def replace(match: Any) -> str:
            placeholder = match.group(0)
            target = self._lookup(match.group(1), path, placeholder, evaluate=False)
            if target is None:
                return placeholder
            if self.functions_enabled and parse_function(target) is not None:
                # Only evaluation tells whether a call yields a structured value
                evaluated = self._lookup(match.group(1), path, placeholder, evaluate=True)
                if isinstance(evaluated, dict):
                    target = evaluated
            if isinstance(target, dict):
                self._diagnose(
                    "structured-reference",
                    f"Reference {placeholder} points at a structured value and cannot be "
                    f"embedded in a string; index one of its keys ({', '.join(target)})",
                    path,
                    text,
                )
                return placeholder
            return target

        return REFERENCE_PATTERN.sub(replace, text)

    def _lookup(self, ref: str, path: str | None, placeholder: str, evaluate: bool) -> Resolved | None:
        """Resolve one reference; None means it was left as-is."""
        segments = ref.split(".")
        found = find_leaf(self.tree, segments)
        if found is not None:
            consumed, leaf = found
            leaf_path = ".".join(segments[:consumed])
            rest = segments[consumed:]
            if not rest:
                return self._resolve_leaf(leaf_path, leaf, evaluate)
            value = self._resolve_leaf(leaf_path, leaf, evaluate=True)
            if isinstance(value, dict) and len(rest) == 1 and rest[0] in value:
                return value[rest[0]]

        if self.policy == MissingReferencePolicy.STRICT:
            raise MissingReferenceError(
                f"Reference {placeholder} does not point at a token",
                TokenErrorContext(path=path, expression=placeholder),
            )
        self._diagnose("missing-reference", f"Unresolved reference {placeholder}", path, placeholder)
        return None

    # =========================================================================
    # Functions
    # =========================================================================

    def _evaluate(self, call: FunctionCall, path: str | None) -> Resolved:
        if call.name not in self.registry:
            if call.name.lower() in CSS_NATIVE_FUNCTIONS:
                logger.debug("Passing CSS function %s() through at %s", call.name, path)
            else:
                self._diagnose(
                    "unknown-function",
                    f"Unknown function '{call.name}', value left unchanged",
                    path,
                    call.raw,
                )
            return call.raw

        args = [self._resolve_string(arg, path, evaluate=True) for arg in call.args]
        try:
            result = self.registry.call(call.name, args, self.ctx)
        except TokenError as exc:
            exc.with_context(path=path, expression=call.raw)
            raise

        if result is not None:
            return result
        logger.debug("Keeping %s() as CSS at %s", call.name, path)
        if all(isinstance(arg, str) for arg in args):
            return f"{call.name}({', '.join(args)})"  # type: ignore[arg-type]
        return call.raw

    # =========================================================================
    # Composites
    # =========================================================================

    def _render_composite(self, value: dict[str, Any] | list[Any], path: str | None) -> str:
        kind = composite_kind(value)
        try:
            if kind == "shadow":
                layers = value if isinstance(value, list) else [value]
                return ", ".join(
                    self._render_shadow(ShadowLayer.model_validate(layer), path) for layer in layers
                )
            if kind == "gradient":
                return self._render_gradient(Gradient.model_validate(value), path)
            if kind == "border":
                return self._render_border(Border.model_validate(value), path)
        except ValidationError as exc:
            raise InvalidTokenError(f"Invalid {kind} value: {exc.errors()[0]['msg']}") from exc
        raise InvalidTokenError("Composite value is not a shadow, gradient or border")

    def _text(self, field: str | float, path: str | None) -> str:
        if isinstance(field, int | float):
            return format_number(field)
        resolved = self._resolve_string(field, path, evaluate=True)
        if isinstance(resolved, dict):
            raise InvalidTokenError(f"Composite field {field!r} resolved to a structured value")
        return resolved

    def _render_shadow(self, layer: ShadowLayer, path: str | None) -> str:
        parts = [
            self._text(layer.offset_x, path),
            self._text(layer.offset_y, path),
            self._text(layer.blur, path),
            self._text(layer.spread, path),
            self._text(layer.color, path),
        ]
        text = " ".join(parts)
        return f"inset {text}" if layer.inset else text

    def _render_gradient(self, gradient: Gradient, path: str | None) -> str:
        stops = []
        for stop in gradient.color_stops:
            color = self._text(stop.color, path)
            position = _stop_position(stop.position)
            stops.append(f"{color} {position}" if position else color)
        joined = ", ".join(stops)

        if gradient.type == "radial":
            return f"radial-gradient({gradient.shape} {gradient.size} at {gradient.position}, {joined})"
        if gradient.type == "conic":
            return f"conic-gradient(from {gradient.from_angle} at {gradient.at}, {joined})"
        return f"linear-gradient({self._text(gradient.angle, path)}, {joined})"

    def _render_border(self, border: Border, path: str | None) -> str:
        return f"{self._text(border.width, path)} {border.style} {self._text(border.color, path)}"

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _diagnose(self, code: str, message: str, path: str | None, expression: str | None) -> None:
        location = f" at {path}" if path else ""
        logger.warning("%s%s", message, location)
        self.diagnostics.append(
            Diagnostic(code=code, message=message, path=path, expression=expression)  # type: ignore[arg-type]
        )


def _stop_position(position: float | str | None) -> str:
    """0-1 fractions become percentages; strings pass through."""
    if position is None:
        return ""
    if isinstance(position, str):
        return position
    if 0 <= position <= 1:
        return f"{round(position * 100)}%"
    return f"{format_number(position)}%"


def _describe(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)
