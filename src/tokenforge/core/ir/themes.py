"""
Theme IR types.

A Theme is a named partial override tree; the ThemeMatrix maps each CSS
selector to the merged override tree that should be emitted under it.
Both are built once per compile and read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ROOT_SELECTOR = ":root"


class ThemeMode(StrEnum):
    """Color mode a theme applies to."""

    LIGHT = "light"
    DARK = "dark"


class ThemeSource(StrEnum):
    """Where a theme was declared."""

    INLINE = "inline"
    FILE = "file"


class ThemeReference(BaseModel):
    """An entry of `$meta.themes` pointing at an external theme file."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1, description="Theme name, e.g. 'dark' or 'ocean-dark'")
    file: str = Field(min_length=1, description="Path relative to the token file or cwd")
    mode: ThemeMode | None = Field(default=None, description="Explicit mode override")
    extends: str | None = Field(default=None, description="Theme whose tokens are applied first")


class Theme(BaseModel):
    """A discovered theme."""

    model_config = ConfigDict(frozen=True)

    name: str
    tokens: dict[str, Any] = Field(default_factory=dict, description="Override tree")
    mode: ThemeMode | None = None
    extends: str | None = None
    source: ThemeSource = ThemeSource.INLINE
    file: str | None = None

    @property
    def is_dark(self) -> bool:
        return self.mode == ThemeMode.DARK

    @property
    def is_combined(self) -> bool:
        """A pre-combined variant+dark theme such as 'ocean-dark'."""
        return self.is_dark and "-" in self.name

    @property
    def is_mode_theme(self) -> bool:
        """A pure mode overlay such as 'dark'."""
        return self.is_dark and "-" not in self.name


class ThemeMatrixEntry(BaseModel):
    """The override tree emitted under one selector."""

    model_config = ConfigDict(frozen=True)

    selector: str
    name: str
    tokens: dict[str, Any]
    mode: ThemeMode = ThemeMode.LIGHT
    base_tokens: dict[str, Any] | None = Field(
        default=None, description="The global base tree, for override diffing"
    )
    auto_generated: bool = False

    @property
    def is_root(self) -> bool:
        return self.selector == ROOT_SELECTOR


class ThemeMatrix(Mapping[str, ThemeMatrixEntry]):
    """Read-only mapping of CSS selector -> ThemeMatrixEntry, in emission order."""

    def __init__(self, entries: Mapping[str, ThemeMatrixEntry]):
        if ROOT_SELECTOR not in entries:
            raise ValueError("A theme matrix must contain a ':root' entry")
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, selector: str) -> ThemeMatrixEntry:
        return self._entries[selector]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ThemeMatrix({list(self._entries)!r})"

    @property
    def root(self) -> ThemeMatrixEntry:
        return self._entries[ROOT_SELECTOR]
