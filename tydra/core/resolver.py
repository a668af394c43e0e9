"""Map a selected entry to the action the engine performs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from .model import Mode

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from .model import Command, Entry, Return


@dataclass(frozen=True)
class Run:
    """Run a command on the normal screen and come back afterwards."""

    command: "Command"
    return_to: "Return"
    wait: bool = False


@dataclass(frozen=True)
class RunExec:
    """Replace the tydra process with the command."""

    command: "Command"


@dataclass(frozen=True)
class RunBackground:
    """Start the command detached and continue immediately."""

    command: "Command"
    return_to: "Return"


Action = Union[Run, RunExec, RunBackground]


def resolve_action(command: "Command", mode: Mode, return_to: "Return") -> Action:
    if mode is Mode.NORMAL or mode is Mode.WAIT:
        return Run(command=command, return_to=return_to, wait=mode is Mode.WAIT)
    if mode is Mode.EXEC:
        # A successful exec never comes back, so the return target is ignored.
        return RunExec(command=command)
    if mode is Mode.BACKGROUND:
        return RunBackground(command=command, return_to=return_to)
    raise ValueError(f"Unknown run mode: {mode!r}")


def resolve_entry(entry: "Entry") -> Action:
    return resolve_action(entry.command, entry.mode, entry.return_to)


__all__ = ["Action", "Run", "RunBackground", "RunExec", "resolve_action", "resolve_entry"]
