"""The menu event loop.

Start:
    Begin on the start page and open the display surface.
Loop:
    Render the page, wait for an actionable key, perform its action (possibly
    running a command), wait for confirmation when asked to, then move to the
    page named by the entry's return setting.
End:
    Restore the terminal, whatever way the loop was left.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterator, Optional, Protocol, Union

from . import tui
from .core.model import (
    DEFAULT_START_PAGE,
    QUIT,
    SAME_PAGE,
    ActionFile,
    Command,
    Entry,
    OtherPage,
    Page,
    Quit,
    Return,
    SamePage,
)
from .core.resolver import Action, Run, RunBackground, RunExec, resolve_entry
from .core.settings import SettingsAccumulator
from .errors import CommandFailedError, EndOfInputError, TydraError
from .runner import ProcessRunner
from .tui import Key, KeyKind
from .utils import logbook


class Display(Protocol):
    """What the engine needs from a display surface."""

    def render(self, page: Page, settings: SettingsAccumulator) -> None:
        ...

    def keys(self) -> Iterator[Key]:
        ...

    def close(self) -> None:
        ...


DisplayFactory = Callable[[], Display]
Confirm = Callable[[], None]


class Runner(Protocol):
    def run_foreground(self, command: Command) -> int:
        ...

    def replace_process(self, command: Command) -> None:
        ...

    def spawn_detached(self, command: Command) -> None:
        ...

    def suspend(self) -> None:
        ...


class EngineState(str, Enum):
    DISPLAYING = "displaying"
    AWAITING_INPUT = "awaiting_input"
    EXECUTING_FOREGROUND = "executing_foreground"
    EXECUTING_BACKGROUND = "executing_background"
    PAUSED = "paused"
    TERMINATED = "terminated"


Event = Union[Key, Entry]


class Engine:
    """Single-threaded state machine driving one menu session."""

    def __init__(
        self,
        actions: ActionFile,
        *,
        start_page: str = DEFAULT_START_PAGE,
        ignore_exit_status: bool = False,
        display_factory: Optional[DisplayFactory] = None,
        runner: Optional[Runner] = None,
        confirm: Optional[Confirm] = None,
    ) -> None:
        self.actions = actions
        self.ignore_exit_status = ignore_exit_status
        self._display_factory = display_factory or tui.CursesDisplay
        self._runner = runner or ProcessRunner()
        self._confirm = confirm or tui.wait_for_confirmation
        self._display: Optional[Display] = None
        self._base_settings = actions.settings_accumulator()

        self.state = EngineState.DISPLAYING
        self.page_name = start_page
        self.page = actions.get_page(start_page)
        self.page_settings = self._base_settings.with_page(self.page)

    # ------------------------------------------------------------------
    # Display surface
    # ------------------------------------------------------------------
    def _open_display(self) -> Display:
        if self._display is None:
            self._display = self._display_factory()
        return self._display

    def _close_display(self) -> None:
        display, self._display = self._display, None
        if display is not None:
            display.close()

    def _restart_display(self) -> None:
        self._close_display()
        self._open_display()

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        """Run the menu until the operator quits.

        Raises a :class:`~tydra.errors.TydraError` on any fatal condition; the
        terminal is restored before the error leaves this method.
        """

        logbook.event("engine", "start", page=self.page_name)
        self._open_display()
        try:
            while True:
                self.state = EngineState.DISPLAYING
                self._open_display().render(self.page, self.page_settings)

                self.state = EngineState.AWAITING_INPUT
                return_to = self._perform(self._next_event())
                if not self._navigate(return_to):
                    break
        except TydraError as exc:
            logbook.event("engine", "error", error=str(exc), page=self.page_name)
            raise
        finally:
            self._close_display()
            self.state = EngineState.TERMINATED
        logbook.event("engine", "quit", page=self.page_name)

    def _next_event(self) -> Event:
        """Read keys until one is actionable on the current page."""

        display = self._open_display()
        for key in display.keys():
            if key.kind is KeyKind.CHAR:
                entry = self.page.entry_with_shortcut(key.char)
                if entry is not None:
                    return entry
                continue
            if key.kind is KeyKind.OTHER:
                continue
            return key
        raise EndOfInputError()

    def _perform(self, event: Event) -> Return:
        if isinstance(event, Entry):
            logbook.event("engine", "select", page=self.page_name, shortcut=event.shortcut)
            return self._dispatch(resolve_entry(event))
        if event.kind is KeyKind.ESCAPE:
            return QUIT
        if event.kind is KeyKind.REDRAW:
            self._restart_display()
            return SAME_PAGE
        if event.kind is KeyKind.PAUSE:
            self._pause()
            return SAME_PAGE
        raise ValueError(f"Unexpected key event: {event!r}")

    def _dispatch(self, action: Action) -> Return:
        if isinstance(action, Run):
            return self._run_normal(action)
        if isinstance(action, RunExec):
            return self._run_exec(action)
        if isinstance(action, RunBackground):
            return self._run_background(action)
        raise TypeError(f"Unknown action: {action!r}")

    def _navigate(self, return_to: Return) -> bool:
        """Apply ``return_to``; ``False`` means the session is over."""

        if isinstance(return_to, Quit):
            return False
        if isinstance(return_to, SamePage):
            return True
        if isinstance(return_to, OtherPage):
            # The validator guarantees the page exists.
            self.page_name = return_to.name
            self.page = self.actions.get_page(return_to.name)
            self.page_settings = self._base_settings.with_page(self.page)
            logbook.event("engine", "navigate", page=self.page_name)
            return True
        raise TypeError(f"Unknown return target: {return_to!r}")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def _pause(self) -> None:
        self.state = EngineState.PAUSED
        self._close_display()
        self._runner.suspend()
        self._open_display()

    def _run_normal(self, action: Run) -> Return:
        self.state = EngineState.EXECUTING_FOREGROUND
        # Commands run on the normal screen so their output survives the menu.
        self._close_display()

        status = self._runner.run_foreground(action.command)
        if status != 0:
            if not self.ignore_exit_status:
                raise CommandFailedError(action.command, status)
            logbook.event("engine", "failure_ignored", command=str(action.command), status=status)

        if action.wait:
            self._confirm()

        self._open_display()
        return action.return_to

    def _run_exec(self, action: RunExec) -> Return:
        self.state = EngineState.EXECUTING_FOREGROUND
        self._close_display()
        self._runner.replace_process(action.command)
        # Only the no-op command comes back from an exec.
        return QUIT

    def _run_background(self, action: RunBackground) -> Return:
        self.state = EngineState.EXECUTING_BACKGROUND
        try:
            self._runner.spawn_detached(action.command)
        except TydraError as exc:
            if not self.ignore_exit_status:
                raise
            logbook.event("engine", "failure_ignored", command=str(action.command), error=str(exc))
        return action.return_to


__all__ = ["Display", "Engine", "EngineState", "Runner"]
