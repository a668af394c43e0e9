from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tydra.core import Command, Page, SettingsAccumulator  # noqa: E402
from tydra.tui import Key, KeyKind  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    state = tmp_path / "state"
    monkeypatch.setenv("TYDRA_STATE_DIR", str(state))
    return state


@pytest.fixture()
def fixture_path() -> Path:
    return FIXTURES


def chars(text: str) -> List[Key]:
    return [Key(KeyKind.CHAR, char) for char in text]


class FakeDisplay:
    """Display surface stub replaying scripted keys and recording renders.

    Every instance shares one :class:`DisplayLog` so tests can see how often
    the surface was opened and closed across redraws and commands.
    """

    def __init__(self, log: "DisplayLog") -> None:
        self.log = log
        self.closed = False
        log.opened += 1

    def render(self, page: Page, settings: SettingsAccumulator) -> None:
        assert not self.closed, "render on a closed display"
        self.log.renders.append((page, settings))

    def keys(self) -> Iterator[Key]:
        while self.log.keys:
            yield self.log.keys.pop(0)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.log.closed += 1


class DisplayLog:
    def __init__(self, keys: Iterable[Key]) -> None:
        self.keys: List[Key] = list(keys)
        self.renders: List[Tuple[Page, SettingsAccumulator]] = []
        self.opened = 0
        self.closed = 0

    def factory(self) -> FakeDisplay:
        return FakeDisplay(self)

    @property
    def is_open(self) -> bool:
        return self.opened > self.closed

    @property
    def titles(self) -> List[str]:
        return [page.title for page, _ in self.renders]


class FakeRunner:
    """Process runner stub recording every call."""

    def __init__(self, statuses: Optional[List[int]] = None, *, display: Optional[DisplayLog] = None) -> None:
        self.statuses = list(statuses or [])
        self.display = display
        self.calls: List[Tuple[str, Command]] = []
        self.display_open_during_call: List[bool] = []
        self.background_error: Optional[Exception] = None
        self.exec_error: Optional[Exception] = None
        self.suspended = 0

    def _record(self, kind: str, command: Command) -> None:
        self.calls.append((kind, command))
        if self.display is not None:
            self.display_open_during_call.append(self.display.is_open)

    def run_foreground(self, command: Command) -> int:
        self._record("run", command)
        return self.statuses.pop(0) if self.statuses else 0

    def replace_process(self, command: Command) -> None:
        self._record("exec", command)
        if self.exec_error is not None:
            raise self.exec_error

    def spawn_detached(self, command: Command) -> None:
        self._record("background", command)
        if self.background_error is not None:
            raise self.background_error

    def suspend(self) -> None:
        self.suspended += 1
        if self.display is not None:
            self.display_open_during_call.append(self.display.is_open)
