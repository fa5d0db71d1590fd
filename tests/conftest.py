"""Shared pytest fixtures for tokenforge tests."""

from __future__ import annotations

from typing import Any

import pytest

from tokenforge.core.expressions.resolver import TokenResolver
from tokenforge.core.functions import default_registry


@pytest.fixture
def base_tokens() -> dict[str, Any]:
    """A small base tree with references, a function and a description."""
    return {
        "color": {
            "brand": {"$value": "#3b82f6", "$type": "color", "$description": "Primary brand color"},
            "black": {"$value": "#000000", "$type": "color"},
            "white": {"$value": "#ffffff", "$type": "color"},
            "semantic": {
                "text": {"$value": "{color.black}"},
                "background": {"$value": "{color.white}"},
            },
        },
        "spacing": {
            "base": {"$value": "1rem", "$type": "dimension"},
            "lg": {"$value": "multiply({spacing.base}, 2)", "$type": "dimension"},
        },
    }


@pytest.fixture
def themed_tokens(base_tokens: dict[str, Any]) -> dict[str, Any]:
    """Base tree plus inline dark and ocean themes."""
    return {
        **base_tokens,
        "$themes": {
            "dark": {"color": {"semantic": {"text": {"$value": "#ffffff"}}}},
            "ocean": {"color": {"brand": {"$value": "#0e7490"}}},
        },
    }


@pytest.fixture
def resolver_for():
    """Build a TokenResolver over a tree with the default registry."""

    def _make(tree: dict[str, Any], **kwargs: Any) -> TokenResolver:
        return TokenResolver(tree, registry=default_registry(), **kwargs)

    return _make
