"""Immutable configuration model of an action file.

The model is built once by :mod:`tydra.core.loader` and never mutated
afterwards. Command and Return are closed unions of small frozen dataclasses;
callers dispatch on them with ``isinstance`` and treat anything else as a
programming error.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterator, Mapping, Optional, Tuple, Union

from .settings import Color, Settings, SettingsAccumulator

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from .validator import ValidationError

DEFAULT_PAGE_TITLE = "Tydra"
DEFAULT_START_PAGE = "root"


# --- Commands ----------------------------------------------------------------


@dataclass(frozen=True)
class NoCommand:
    """Run nothing and only act on the entry's return setting."""

    def __str__(self) -> str:
        return "(Nothing)"


@dataclass(frozen=True)
class ShellScript:
    """A full shell script, run inside ``/bin/sh``."""

    script: str

    def __str__(self) -> str:
        return self.script


@dataclass(frozen=True)
class Executable:
    """An executable and its arguments, run without any shell processing."""

    name: str
    args: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return shlex.join([self.name, *self.args])


Command = Union[NoCommand, ShellScript, Executable]

NO_COMMAND = NoCommand()


# --- Returns -----------------------------------------------------------------


@dataclass(frozen=True)
class Quit:
    """Leave the menu."""


@dataclass(frozen=True)
class SamePage:
    """Render the current page again."""


@dataclass(frozen=True)
class OtherPage:
    """Switch to the page called ``name``."""

    name: str


Return = Union[Quit, SamePage, OtherPage]

QUIT = Quit()
SAME_PAGE = SamePage()


class Mode(str, Enum):
    """How the command of an entry is executed."""

    NORMAL = "normal"
    WAIT = "wait"
    EXEC = "exec"
    BACKGROUND = "background"


# --- Tree --------------------------------------------------------------------


@dataclass(frozen=True)
class Entry:
    """A single selectable menu item."""

    title: str
    shortcut: str
    command: Command = NO_COMMAND
    shortcut_color: Optional[Color] = None
    mode: Mode = Mode.NORMAL
    return_to: Return = QUIT


@dataclass(frozen=True)
class Group:
    entries: Tuple[Entry, ...] = ()
    title: Optional[str] = None
    settings: Optional[Settings] = None


@dataclass(frozen=True)
class Page:
    groups: Tuple[Group, ...] = ()
    title: str = DEFAULT_PAGE_TITLE
    header: Optional[str] = None
    footer: Optional[str] = None
    settings: Optional[Settings] = None

    def all_entries(self) -> Iterator[Entry]:
        """Yield every entry, groups first, in source order."""

        for group in self.groups:
            yield from group.entries

    def entry_with_shortcut(self, shortcut: str) -> Optional[Entry]:
        for entry in self.all_entries():
            if entry.shortcut == shortcut:
                return entry
        return None


@dataclass(frozen=True)
class ActionFile:
    """Global settings plus the ordered, name-keyed collection of pages."""

    pages: Mapping[str, Page] = field(default_factory=dict)
    global_settings: Settings = field(default_factory=Settings)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pages", MappingProxyType(dict(self.pages)))

    def has_page(self, name: str) -> bool:
        return name in self.pages

    def get_page(self, name: str) -> Page:
        return self.pages[name]

    def pages_with_names(self) -> Iterator[Tuple[str, Page]]:
        yield from self.pages.items()

    def settings_accumulator(self) -> SettingsAccumulator:
        return SettingsAccumulator.from_settings(self.global_settings)

    def validate(self, root: str = DEFAULT_START_PAGE) -> "list[ValidationError]":
        from .validator import validate

        return validate(self, root)


__all__ = [
    "DEFAULT_PAGE_TITLE",
    "DEFAULT_START_PAGE",
    "NO_COMMAND",
    "QUIT",
    "SAME_PAGE",
    "ActionFile",
    "Command",
    "Entry",
    "Executable",
    "Group",
    "Mode",
    "NoCommand",
    "OtherPage",
    "Page",
    "Quit",
    "Return",
    "SamePage",
    "ShellScript",
]
