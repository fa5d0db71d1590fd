"""
Error types for token resolution, theme loading, and configuration.

Resolution is pure: the compiler never retries and never swallows a fatal
error. Every error can carry a TokenErrorContext so callers can report the
token path, selector, and raw expression that failed.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenErrorContext:
    """
    Location information for a token error.

    Attributes:
        path: Dot-separated token path (e.g. "color.brand.primary")
        expression: Raw expression being resolved when the error occurred
        selector: CSS selector being emitted, if any
    """

    path: str | None = None
    expression: str | None = None
    selector: str | None = None

    def format(self) -> str:
        """
        Format the context as a human-readable location.

        Returns:
            String like: 'color.brand [:root]: "tint({color.base}, 20%)"'
        """
        parts: list[str] = []
        if self.path:
            parts.append(self.path)
        if self.selector:
            parts.append(f"[{self.selector}]")
        location = " ".join(parts)
        if self.expression is not None:
            expr = f'"{self.expression}"'
            return f"{location}: {expr}" if location else expr
        return location


class TokenError(Exception):
    """Base exception for all tokenforge errors."""

    def __init__(self, message: str, context: TokenErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            location = self.context.format()
            if location:
                return f"{location}\n{self.message}"
        return self.message

    def with_context(
        self,
        path: str | None = None,
        expression: str | None = None,
        selector: str | None = None,
    ) -> TokenError:
        """
        Fill in missing context fields, keeping any already set.

        The innermost resolution knows the raw argument, the outer layers know
        the token path and selector, so context is completed on the way out.
        """
        current = self.context or TokenErrorContext()
        self.context = TokenErrorContext(
            path=current.path or path,
            expression=current.expression if current.expression is not None else expression,
            selector=current.selector or selector,
        )
        self.args = (self._format_message(),)
        return self


class InvalidArgumentError(TokenError):
    """
    Raised when a known token function receives an argument it cannot use.

    Examples:
    - "notacolor" passed where a color is expected
    - Division or modulo by zero
    - Wrong number of arguments
    - Arithmetic across units that have no pixel basis (e.g. vw + rem)
    """

    pass


class CycleError(TokenError):
    """
    Raised when token references form a cycle.

    The cycle attribute lists the paths in visit order with the repeated
    path at both ends, e.g. ("a", "b", "a").
    """

    def __init__(
        self,
        cycle: tuple[str, ...],
        context: TokenErrorContext | None = None,
    ):
        self.cycle = cycle
        super().__init__(f"Circular token reference: {' -> '.join(cycle)}", context)


class MissingReferenceError(TokenError):
    """Raised for an unresolvable reference when the strict policy is active."""

    pass


class InvalidTokenError(TokenError):
    """
    Raised when a leaf value has an unusable structure.

    Examples:
    - A composite object that is neither a shadow, gradient nor border
    - A list value that is not a list of shadow layers
    """

    pass


class ThemeLoadError(TokenError):
    """Raised when the base token file cannot be read or parsed."""

    pass


class ConfigError(TokenError):
    """Raised when tokenforge.toml is malformed or holds invalid values."""

    pass
