"""Static consistency checks over a loaded action file.

:func:`validate` never stops at the first problem: it walks every page and
entry and returns all violations, in a stable order, so the operator can fix
an action file in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Set, Union

from .model import DEFAULT_START_PAGE, Mode, NoCommand, OtherPage, Quit

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from .model import ActionFile, Entry


@dataclass(frozen=True)
class NoRoot:
    root_name: str

    @property
    def message(self) -> str:
        return f'There is no "{self.root_name}" page. A start page must exist.'


@dataclass(frozen=True)
class EmptyPage:
    page_name: str

    @property
    def message(self) -> str:
        return f"Found page with no entries: {self.page_name}"


@dataclass(frozen=True)
class DuplicatedShortcut:
    page_name: str
    shortcut: str
    title: str

    @property
    def message(self) -> str:
        return (
            f'Page {self.page_name} has more than one entry with shortcut "{self.shortcut}" '
            f'(duplicate: "{self.title}")'
        )


@dataclass(frozen=True)
class UnknownPage:
    page_name: str

    @property
    def message(self) -> str:
        return f"Found reference to an unknown page: {self.page_name}"


@dataclass(frozen=True)
class ExecWithReturn:
    page_name: str
    shortcut: str

    @property
    def message(self) -> str:
        return (
            f'Entry "{self.shortcut}" on page {self.page_name} runs in exec mode but has a '
            "return other than quit; exec never returns"
        )


@dataclass(frozen=True)
class ExecWithoutCommand:
    page_name: str
    shortcut: str

    @property
    def message(self) -> str:
        return (
            f'Entry "{self.shortcut}" on page {self.page_name} runs in exec mode but has no '
            "command to run"
        )


ValidationError = Union[
    NoRoot,
    EmptyPage,
    DuplicatedShortcut,
    UnknownPage,
    ExecWithReturn,
    ExecWithoutCommand,
]


def _entry_errors(actions: "ActionFile", page_name: str, entry: "Entry") -> List[ValidationError]:
    errors: List[ValidationError] = []
    target = entry.return_to
    if isinstance(target, OtherPage) and not actions.has_page(target.name):
        errors.append(UnknownPage(page_name=target.name))

    if entry.mode is Mode.EXEC:
        if not isinstance(target, Quit):
            errors.append(ExecWithReturn(page_name=page_name, shortcut=entry.shortcut))
        if isinstance(entry.command, NoCommand):
            errors.append(ExecWithoutCommand(page_name=page_name, shortcut=entry.shortcut))
    return errors


def validate(actions: "ActionFile", root: str = DEFAULT_START_PAGE) -> List[ValidationError]:
    """Return every violation found in ``actions``; an empty list means valid."""

    errors: List[ValidationError] = []

    if not actions.has_page(root):
        errors.append(NoRoot(root_name=root))

    for page_name, page in actions.pages_with_names():
        entries = list(page.all_entries())
        if not entries:
            errors.append(EmptyPage(page_name=page_name))

        seen: Set[str] = set()
        for entry in entries:
            if entry.shortcut in seen:
                errors.append(
                    DuplicatedShortcut(page_name=page_name, shortcut=entry.shortcut, title=entry.title)
                )
            seen.add(entry.shortcut)
            errors.extend(_entry_errors(actions, page_name, entry))

    return errors


__all__ = [
    "DuplicatedShortcut",
    "EmptyPage",
    "ExecWithReturn",
    "ExecWithoutCommand",
    "NoRoot",
    "UnknownPage",
    "ValidationError",
    "validate",
]
