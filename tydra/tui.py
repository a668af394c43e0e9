"""Curses display surface, key decoding and page rendering for tydra."""

from __future__ import annotations

import curses
import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Sequence, TextIO, Union

from .core.settings import Color, Layout, SettingsAccumulator
from .errors import EndOfInputError

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from .core.model import Group, Page

ESCAPE = "\x1b"
CTRL_C = "\x03"
CTRL_L = "\x0c"
CTRL_Z = "\x1a"
CONFIRM_KEYS = {"\n", "\r", ESCAPE}

COLUMN_GAP = 4

CURSES_COLORS: Dict[Color, int] = {
    Color.BLACK: curses.COLOR_BLACK,
    Color.BLUE: curses.COLOR_BLUE,
    Color.CYAN: curses.COLOR_CYAN,
    Color.GREEN: curses.COLOR_GREEN,
    Color.MAGENTA: curses.COLOR_MAGENTA,
    Color.RED: curses.COLOR_RED,
    Color.WHITE: curses.COLOR_WHITE,
    Color.YELLOW: curses.COLOR_YELLOW,
}


class KeyKind(str, Enum):
    ESCAPE = "escape"
    REDRAW = "redraw"
    PAUSE = "pause"
    CHAR = "char"
    OTHER = "other"


@dataclass(frozen=True)
class Key:
    """A decoded keyboard event."""

    kind: KeyKind
    char: str = ""


def decode_key(raw: Union[int, str]) -> Key:
    """Translate a ``get_wch`` result into a :class:`Key`."""

    if isinstance(raw, int):
        if raw == curses.KEY_RESIZE:
            return Key(KeyKind.REDRAW)
        return Key(KeyKind.OTHER)
    if raw in (ESCAPE, CTRL_C):
        return Key(KeyKind.ESCAPE)
    if raw == CTRL_L:
        return Key(KeyKind.REDRAW)
    if raw == CTRL_Z:
        return Key(KeyKind.PAUSE)
    if len(raw) == 1 and raw.isprintable():
        return Key(KeyKind.CHAR, raw)
    return Key(KeyKind.OTHER)


# --- Drawing helpers -----------------------------------------------------------


def _safe_addstr(win: "curses._CursesWindow", y: int, x: int, text: str, attr: int = 0) -> None:
    """Safely add ``text`` at ``(y, x)`` without raising ``curses.error``."""

    max_y, max_x = win.getmaxyx()
    if y < 0 or x < 0 or y >= max_y or x >= max_x:
        return
    available = max_x - x
    if available <= 0:
        return
    snippet = text[:available]
    if not snippet:
        return
    try:
        win.addstr(y, x, snippet, attr)
    except curses.error:
        # Some terminals are strict about drawing on the bottom-right cell.
        pass


def _group_lines(group: "Group") -> int:
    return len(group.entries) + (1 if group.title else 0)


def _draw_group(
    win: "curses._CursesWindow",
    top: int,
    left: int,
    width: int,
    group: "Group",
    settings: SettingsAccumulator,
    palette: Dict[str, int],
    color_attrs: Dict[Color, int],
) -> int:
    """Draw ``group`` at ``(top, left)`` and return the next free row."""

    row = top
    if group.title:
        _safe_addstr(win, row, left, group.title[:width], palette.get("group", 0))
        row += 1
    group_settings = settings.with_group(group)
    for entry in group.entries:
        entry_settings = group_settings.with_entry(entry)
        label = f"[{entry.shortcut}] {entry.title}"[:width]
        _safe_addstr(win, row, left, label[:1], palette.get("entry", 0))
        _safe_addstr(win, row, left + 1, label[1:2], color_attrs.get(entry_settings.shortcut_color, 0))
        _safe_addstr(win, row, left + 2, label[2:], palette.get("entry", 0))
        row += 1
    return row


def render_page(
    win: "curses._CursesWindow",
    page: "Page",
    settings: SettingsAccumulator,
    palette: Optional[Dict[str, int]] = None,
    color_attrs: Optional[Dict[Color, int]] = None,
) -> None:
    """Draw ``page`` using the resolved ``settings``."""

    palette = palette or {}
    color_attrs = color_attrs or {}
    win.erase()
    height, width = win.getmaxyx()

    row = 0
    _safe_addstr(win, row, 1, page.title, palette.get("title", 0))
    row += 1
    if page.header:
        for line in page.header.splitlines():
            _safe_addstr(win, row, 1, line, palette.get("header", 0))
            row += 1
    row += 1

    groups: Sequence["Group"] = page.groups
    if settings.layout is Layout.COLUMNS and groups:
        column_width = max(1, (width - 2) // len(groups))
        for idx, group in enumerate(groups):
            left = 1 + idx * column_width
            _draw_group(
                win, row, left, max(1, column_width - COLUMN_GAP), group, settings, palette, color_attrs
            )
        row += max(_group_lines(group) for group in groups) + 1
    else:
        for group in groups:
            row = _draw_group(win, row, 1, width - 2, group, settings, palette, color_attrs) + 1

    if page.footer:
        footer_lines = page.footer.splitlines()
        footer_row = max(row, height - len(footer_lines) - 1)
        for line in footer_lines:
            _safe_addstr(win, footer_row, 1, line, palette.get("footer", 0))
            footer_row += 1

    win.refresh()


# --- Display surface -----------------------------------------------------------


class CursesDisplay:
    """The alternate curses screen the menu is drawn on.

    Opening enters curses (raw keys, hidden cursor); :meth:`close` restores the
    terminal and is safe to call more than once.
    """

    def __init__(self) -> None:
        self._stdscr: Optional["curses._CursesWindow"] = None
        self.palette: Dict[str, int] = {}
        self.color_attrs: Dict[Color, int] = {}
        self.open()

    @property
    def is_open(self) -> bool:
        return self._stdscr is not None

    def open(self) -> None:
        if self._stdscr is not None:
            return
        os.environ.setdefault("ESCDELAY", "25")
        stdscr = curses.initscr()
        try:
            curses.noecho()
            curses.raw()
            stdscr.keypad(True)
            stdscr.nodelay(False)
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            self._init_palette()
        except BaseException:
            curses.endwin()
            raise
        self._stdscr = stdscr

    def _init_palette(self) -> None:
        self.palette = {
            "title": curses.A_BOLD,
            "header": curses.A_NORMAL,
            "group": curses.A_BOLD | curses.A_UNDERLINE,
            "entry": curses.A_NORMAL,
            "footer": curses.A_DIM,
        }
        self.color_attrs = {Color.RESET: curses.A_BOLD}
        if not curses.has_colors():
            return
        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK
        for pair, (color, code) in enumerate(CURSES_COLORS.items(), start=1):
            curses.init_pair(pair, code, background)
            self.color_attrs[color] = curses.color_pair(pair) | curses.A_BOLD

    def close(self) -> None:
        stdscr = self._stdscr
        if stdscr is None:
            return
        self._stdscr = None
        try:
            stdscr.keypad(False)
            curses.noraw()
            curses.echo()
            try:
                curses.curs_set(1)
            except curses.error:
                pass
        finally:
            curses.endwin()
            # Flush so nothing written later lands on the alternate screen.
            sys.stdout.flush()

    def render(self, page: "Page", settings: SettingsAccumulator) -> None:
        if self._stdscr is None:
            raise RuntimeError("display surface is closed")
        render_page(self._stdscr, page, settings, self.palette, self.color_attrs)

    def keys(self) -> Iterator[Key]:
        """Yield decoded keys until the input stream closes."""

        while self._stdscr is not None:
            try:
                raw = self._stdscr.get_wch()
            except curses.error:
                return
            yield decode_key(raw)


def wait_for_confirmation(stream: Optional[TextIO] = None, out: Optional[TextIO] = None) -> None:
    """Block until Enter (or Escape) is read from ``stream``."""

    stream = stream or sys.stdin
    out = out or sys.stdout
    out.write("Press enter to continue... ")
    out.flush()
    while True:
        char = stream.read(1)
        if not char:
            raise EndOfInputError()
        if char in CONFIRM_KEYS:
            return


__all__ = [
    "CursesDisplay",
    "Key",
    "KeyKind",
    "decode_key",
    "render_page",
    "wait_for_confirmation",
]
