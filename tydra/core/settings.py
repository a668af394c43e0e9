"""Display settings and their cascading resolution.

Settings are sparse override records that may appear globally, on a page, on a
group and (for the shortcut color only) on an entry. A
:class:`SettingsAccumulator` holds the fully resolved values at one position
of that tree; every ``with_*`` call returns a new accumulator and leaves the
receiver untouched, so siblings resolved from the same parent never interfere.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from .model import Entry, Group, Page


class Layout(str, Enum):
    LIST = "list"
    COLUMNS = "columns"


class Color(str, Enum):
    RESET = "reset"
    BLACK = "black"
    BLUE = "blue"
    CYAN = "cyan"
    GREEN = "green"
    MAGENTA = "magenta"
    RED = "red"
    WHITE = "white"
    YELLOW = "yellow"


@dataclass(frozen=True)
class Settings:
    """Sparse display overrides; ``None`` means "inherit"."""

    layout: Optional[Layout] = None
    shortcut_color: Optional[Color] = None


DEFAULT_SETTINGS = Settings(layout=Layout.LIST, shortcut_color=Color.RED)


@dataclass(frozen=True)
class SettingsAccumulator:
    """Fully resolved display settings."""

    layout: Layout = Layout.LIST
    shortcut_color: Color = Color.RED

    @classmethod
    def from_settings(cls, settings: Settings) -> "SettingsAccumulator":
        """Merge the global ``settings`` over the built-in defaults."""

        return cls().with_settings(DEFAULT_SETTINGS).with_settings(settings)

    def with_settings(self, settings: Settings) -> "SettingsAccumulator":
        return SettingsAccumulator(
            layout=settings.layout if settings.layout is not None else self.layout,
            shortcut_color=(
                settings.shortcut_color
                if settings.shortcut_color is not None
                else self.shortcut_color
            ),
        )

    def with_page(self, page: "Page") -> "SettingsAccumulator":
        if page.settings is None:
            return self
        return self.with_settings(page.settings)

    def with_group(self, group: "Group") -> "SettingsAccumulator":
        if group.settings is None:
            return self
        return self.with_settings(group.settings)

    def with_entry(self, entry: "Entry") -> "SettingsAccumulator":
        # Layout is not an entry-level concept.
        if entry.shortcut_color is None:
            return self
        return replace(self, shortcut_color=entry.shortcut_color)


__all__ = ["Color", "DEFAULT_SETTINGS", "Layout", "Settings", "SettingsAccumulator"]
