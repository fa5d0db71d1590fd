"""
Function registry for token expressions.

Each token function declares its parameters up front (name, kind, default),
so raw argument strings are coerced once into typed values (Color,
Dimension, float, dict, ...) before the implementation runs. Arity and type
mismatches are reported as InvalidArgumentError before evaluation.

The registry is an immutable mapping. A compile builds one at startup and
passes it by reference to every resolution; custom functions are added by
deriving a new registry with with_functions(), never by mutation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from ..dimensions import DEFAULT_BASE_FONT_SIZE, Dimension, format_number, parse_dimension
from ..errors import InvalidArgumentError
from ..expressions.parser import parse_object_literal, parse_percentage
from ..oklch import Color, format_color, parse_color

FunctionResult = str | dict[str, str]


class ParamKind(StrEnum):
    """Coercion applied to a raw argument."""

    COLOR = "color"
    PERCENTAGE = "percentage"
    NUMBER = "number"
    INTEGER = "integer"
    DIMENSION = "dimension"
    OBJECT = "object"
    STRING = "string"
    BOOLEAN = "boolean"


class _Required:
    def __repr__(self) -> str:
        return "REQUIRED"


REQUIRED: Any = _Required()


class IncompatibleUnitsError(ValueError):
    """Operands whose units share no pixel basis (e.g. 2vw and 1rem)."""


@dataclass(frozen=True)
class Param:
    """A declared function parameter.

    A default of None means "supplied by the FunctionContext"; any other
    default is a raw value coerced exactly like a passed argument.
    """

    name: str
    kind: ParamKind
    default: Any = REQUIRED

    @property
    def required(self) -> bool:
        return self.default is REQUIRED


@dataclass(frozen=True)
class FunctionContext:
    """Compile-wide settings visible to contextual functions."""

    base_font_size: float = DEFAULT_BASE_FONT_SIZE
    min_viewport: str = "320px"
    max_viewport: str = "1280px"


@dataclass(frozen=True)
class FunctionSpec:
    """A named pure function with a static signature.

    Attributes:
        name: Name used in expressions, e.g. "tint".
        params: Declared parameters in call order.
        impl: Implementation receiving coerced arguments positionally.
        category: Documentation group (color, contrast, typography, math).
        description: One-line description for docs.
        contextual: Pass the FunctionContext as the `ctx` keyword.
        css_native: The name is also a CSS function (min, max, clamp); when
            the arguments are not plain dimensions the call is left as CSS.
    """

    name: str
    params: tuple[Param, ...]
    impl: Callable[..., Any]
    category: str
    description: str = ""
    contextual: bool = False
    css_native: bool = False

    @property
    def signature(self) -> str:
        parts = [p.name if p.required else f"{p.name}?" for p in self.params]
        return f"{self.name}({', '.join(parts)})"


# =============================================================================
# Coercion
# =============================================================================


def _coerce(raw: Any, kind: ParamKind) -> Any:
    """Convert one resolved argument to its declared kind. Raises ValueError."""
    if kind == ParamKind.OBJECT:
        if isinstance(raw, Mapping):
            return dict(raw)
        parsed = parse_object_literal(str(raw))
        if parsed is None:
            raise ValueError("expected an object literal like { l: 10, c: -5 }")
        return parsed

    if isinstance(raw, Mapping):
        raise ValueError("structured value cannot be used here")

    if kind == ParamKind.COLOR:
        if isinstance(raw, Color):
            return raw
        return parse_color(str(raw))
    if kind == ParamKind.PERCENTAGE:
        return parse_percentage(raw)
    if kind == ParamKind.NUMBER:
        return float(str(raw).strip())
    if kind == ParamKind.INTEGER:
        number = float(str(raw).strip())
        return int(number)
    if kind == ParamKind.DIMENSION:
        if isinstance(raw, Dimension):
            return raw
        return parse_dimension(raw)
    if kind == ParamKind.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text not in ("true", "false"):
            raise ValueError("expected true or false")
        return text == "true"
    return str(raw)


def format_result(value: Any) -> FunctionResult:
    """Serialize a function's return value for CSS."""
    if isinstance(value, Mapping):
        return {str(k): format_result(v) for k, v in value.items()}  # type: ignore[misc]
    if isinstance(value, Color):
        return format_color(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return format_number(value)
    return str(value)


# =============================================================================
# Registry
# =============================================================================


class FunctionRegistry(Mapping[str, FunctionSpec]):
    """Immutable name -> FunctionSpec catalog."""

    def __init__(self, specs: Mapping[str, FunctionSpec] | None = None):
        self._specs: Mapping[str, FunctionSpec] = MappingProxyType(dict(specs or {}))

    def __repr__(self) -> str:
        return f"FunctionRegistry({sorted(self._specs)!r})"

    @classmethod
    def from_specs(cls, specs: Iterable[FunctionSpec]) -> FunctionRegistry:
        return cls({spec.name: spec for spec in specs})

    def __getitem__(self, name: str) -> FunctionSpec:
        return self._specs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def with_functions(self, *specs: FunctionSpec) -> FunctionRegistry:
        """Return a new registry with specs added (replacing same-named ones)."""
        merged = dict(self._specs)
        merged.update({spec.name: spec for spec in specs})
        return FunctionRegistry(merged)

    def without(self, *names: str) -> FunctionRegistry:
        """Return a new registry with the named functions removed."""
        return FunctionRegistry({k: v for k, v in self._specs.items() if k not in names})

    def docs(self) -> dict[str, dict[str, dict[str, str]]]:
        """Group signatures and descriptions by category."""
        grouped: dict[str, dict[str, dict[str, str]]] = {}
        for spec in self._specs.values():
            grouped.setdefault(spec.category, {})[spec.name] = {
                "signature": spec.signature,
                "description": spec.description,
            }
        return grouped

    def call(
        self,
        name: str,
        args: Sequence[Any],
        ctx: FunctionContext | None = None,
    ) -> FunctionResult | None:
        """Coerce arguments and invoke a function.

        Returns:
            The formatted result, or None when a CSS-native function (min,
            max, clamp) received arguments it cannot compute, meaning the
            call should stay in the output as plain CSS.

        Raises:
            KeyError: If the name is not registered.
            InvalidArgumentError: On arity or coercion failures and on
                errors raised by the implementation.
        """
        spec = self._specs[name]
        ctx = ctx or FunctionContext()

        if len(args) > len(spec.params):
            if spec.css_native:
                return None
            raise InvalidArgumentError(
                f"{spec.signature} takes at most {len(spec.params)} argument(s), got {len(args)}"
            )

        coerced: list[Any] = []
        for index, param in enumerate(spec.params):
            if index < len(args):
                raw = args[index]
            elif param.required:
                if spec.css_native:
                    return None
                raise InvalidArgumentError(
                    f"{spec.signature}: missing required argument '{param.name}'"
                )
            elif param.default is None:
                coerced.append(None)
                continue
            else:
                raw = param.default

            try:
                coerced.append(_coerce(raw, param.kind))
            except ValueError as exc:
                if spec.css_native:
                    return None
                raise InvalidArgumentError(
                    f"{name}(): argument '{param.name}' expects a {param.kind.value}, "
                    f"got {raw!r} ({exc})"
                ) from exc

        try:
            if spec.contextual:
                result = spec.impl(*coerced, ctx=ctx)
            else:
                result = spec.impl(*coerced)
        except ValueError as exc:
            if spec.css_native and isinstance(exc, IncompatibleUnitsError):
                return None
            raise InvalidArgumentError(f"{name}(): {exc}") from exc
        except ZeroDivisionError as exc:
            raise InvalidArgumentError(f"{name}(): division by zero") from exc

        return format_result(result)
