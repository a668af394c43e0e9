"""Tests for key decoding and page rendering that avoid a real terminal."""

from __future__ import annotations

import curses
import io
from typing import Iterable, List

import pytest

from tydra import tui
from tydra.core import Color, Layout, Settings, SettingsAccumulator, loads
from tydra.errors import EndOfInputError
from tydra.tui import Key, KeyKind, decode_key


class FakeWindow:
    """Minimal curses window stub capturing drawn content for assertions."""

    def __init__(self, *, height: int = 24, width: int = 80, inputs: Iterable[object] | None = None) -> None:
        self.height = height
        self.width = width
        self._inputs: List[object] = list(inputs or [])
        self.buffer: List[List[str]] = [[" "] * width for _ in range(height)]
        self.attrs: dict[tuple[int, int], int] = {}
        self.refreshed = 0

    # Curses window interface -------------------------------------------------
    def getmaxyx(self) -> tuple[int, int]:
        return self.height, self.width

    def erase(self) -> None:
        for row in range(self.height):
            self.buffer[row] = [" "] * self.width
        self.attrs.clear()

    def addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        if y < 0 or y >= self.height:
            return
        if x < 0 or x >= self.width:
            return
        limit = min(self.width - x, len(text))
        for idx in range(limit):
            self.buffer[y][x + idx] = text[idx]
            self.attrs[(y, x + idx)] = attr

    def refresh(self) -> None:
        self.refreshed += 1

    def get_wch(self) -> object:
        if self._inputs:
            return self._inputs.pop(0)
        raise curses.error("no input")

    # Helpers ----------------------------------------------------------------
    def line(self, y: int) -> str:
        return "".join(self.buffer[y]).rstrip()

    def lines(self) -> List[str]:
        return [self.line(y) for y in range(self.height)]


MENU = """
global:
  shortcut_color: green
pages:
  root:
    title: Main menu
    header: Pick something
    footer: Escape quits
    groups:
      - title: Tools
        settings:
          shortcut_color: yellow
        entries:
          - {shortcut: h, title: htop, command: htop}
          - {shortcut: l, title: List files, command: ls, shortcut_color: blue}
      - title: Pages
        entries:
          - {shortcut: g, title: Git, return: git}
  git:
    groups:
      - entries:
          - {shortcut: s, title: Status}
"""

COLORS = {
    Color.GREEN: 10,
    Color.YELLOW: 20,
    Color.BLUE: 30,
    Color.RED: 40,
}


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a", Key(KeyKind.CHAR, "a")),
        ("7", Key(KeyKind.CHAR, "7")),
        ("\x1b", Key(KeyKind.ESCAPE)),
        ("\x03", Key(KeyKind.ESCAPE)),
        ("\x0c", Key(KeyKind.REDRAW)),
        ("\x1a", Key(KeyKind.PAUSE)),
        ("\t", Key(KeyKind.OTHER)),
        (curses.KEY_RESIZE, Key(KeyKind.REDRAW)),
        (curses.KEY_UP, Key(KeyKind.OTHER)),
    ],
)
def test_decode_key(raw: object, expected: Key) -> None:
    assert decode_key(raw) == expected


def _root(layout: Layout = Layout.LIST):
    actions = loads(MENU)
    page = actions.get_page("root")
    settings = actions.settings_accumulator().with_settings(Settings(layout=layout))
    return page, settings


def test_render_list_layout() -> None:
    window = FakeWindow()
    page, settings = _root()

    tui.render_page(window, page, settings, color_attrs=COLORS)

    lines = window.lines()
    assert lines[0].strip() == "Main menu"
    assert lines[1].strip() == "Pick something"
    assert lines[3].strip() == "Tools"
    assert lines[4].strip() == "[h] htop"
    assert lines[5].strip() == "[l] List files"
    assert lines[7].strip() == "Pages"
    assert lines[8].strip() == "[g] Git"
    assert window.refreshed == 1


def test_render_uses_cascaded_shortcut_colors() -> None:
    window = FakeWindow()
    page, settings = _root()

    tui.render_page(window, page, settings, color_attrs=COLORS)

    # The shortcut character sits right after the opening bracket.
    assert window.attrs[(4, 2)] == COLORS[Color.YELLOW]
    assert window.attrs[(5, 2)] == COLORS[Color.BLUE]
    assert window.attrs[(8, 2)] == COLORS[Color.GREEN]


def test_render_columns_layout_places_groups_side_by_side() -> None:
    window = FakeWindow()
    page, settings = _root(Layout.COLUMNS)

    tui.render_page(window, page, settings)

    group_row = window.line(3)
    assert "Tools" in group_row and "Pages" in group_row
    assert group_row.index("Tools") < group_row.index("Pages")
    entry_row = window.line(4)
    assert "[h] htop" in entry_row and "[g] Git" in entry_row


def test_footer_is_drawn_at_the_bottom() -> None:
    window = FakeWindow(height=20)
    page, settings = _root()

    tui.render_page(window, page, settings)

    assert window.line(18).strip() == "Escape quits"


def test_render_survives_tiny_windows() -> None:
    window = FakeWindow(height=3, width=6)
    page, settings = _root()

    tui.render_page(window, page, settings)

    assert window.line(0).strip() == "Main"


def test_render_page_defaults_title() -> None:
    window = FakeWindow()
    actions = loads(MENU)

    tui.render_page(window, actions.get_page("git"), SettingsAccumulator())

    assert window.line(0).strip() == "Tydra"
    assert window.line(2).strip() == "[s] Status"


def test_display_keys_decode_until_input_ends() -> None:
    display = tui.CursesDisplay.__new__(tui.CursesDisplay)
    display._stdscr = FakeWindow(inputs=["a", "\x1b", curses.KEY_RESIZE])

    assert list(display.keys()) == [
        Key(KeyKind.CHAR, "a"),
        Key(KeyKind.ESCAPE),
        Key(KeyKind.REDRAW),
    ]


def test_closed_display_refuses_to_render() -> None:
    display = tui.CursesDisplay.__new__(tui.CursesDisplay)
    display._stdscr = None
    page, settings = _root()

    assert display.is_open is False
    with pytest.raises(RuntimeError):
        display.render(page, settings)
    display.close()


@pytest.mark.parametrize("typed", ["\n", "\r", "\x1b", "xyz\n"])
def test_wait_for_confirmation_returns_on_enter(typed: str) -> None:
    out = io.StringIO()

    tui.wait_for_confirmation(io.StringIO(typed), out)

    assert out.getvalue() == "Press enter to continue... "


def test_wait_for_confirmation_fails_on_end_of_input() -> None:
    with pytest.raises(EndOfInputError):
        tui.wait_for_confirmation(io.StringIO("abc"), io.StringIO())


@pytest.mark.parametrize("width, expected", [(1, "["), (2, "[h"), (5, "[h] h"), (20, "[h] htop")])
def test_group_entries_stay_inside_their_width(width: int, expected: str) -> None:
    window = FakeWindow(width=30)
    page, settings = _root()
    tools = page.groups[0]

    tui._draw_group(window, 0, 3, width, tools, settings, {}, COLORS)

    assert window.line(0) == " " * 3 + tools.title[:width]
    assert window.line(1) == " " * 3 + expected
    if width >= 2:
        assert window.attrs[(1, 4)] == COLORS[Color.YELLOW]


def test_narrow_columns_do_not_overlap() -> None:
    window = FakeWindow(height=12, width=14)
    page, settings = _root(Layout.COLUMNS)

    tui.render_page(window, page, settings)

    # Two columns of width (14 - 2) // 2 = 6, each leaving the gap for text.
    first_column = window.line(4)[1:7]
    second_column = window.line(4)[7:]
    assert first_column.rstrip() == "[h"
    assert second_column.rstrip() == "[g"
