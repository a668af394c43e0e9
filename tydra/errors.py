"""Runtime errors raised while loading action files or running the menu."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from .core.model import Command


class TydraError(RuntimeError):
    """Base class for errors that end a tydra session."""


class ActionFileError(TydraError):
    """Raised when an action file cannot be read or has an invalid structure."""


class SpawnError(TydraError):
    """Raised when a command could not be started or the process image replaced."""


class CapabilityError(TydraError):
    """Raised when the platform lacks a process feature (detaching, job control)."""


class EndOfInputError(TydraError):
    """Raised when the keyboard stream closes before producing an actionable key."""

    def __init__(self, message: str = "stdin was closed.") -> None:
        super().__init__(message)


class CommandFailedError(TydraError):
    """Raised when a foreground command exits unsuccessfully."""

    def __init__(self, command: "Command", exit_status: int) -> None:
        self.command = command
        self.exit_status = exit_status
        super().__init__(f"Command exited with exit status {exit_status}: {command}")


__all__ = [
    "ActionFileError",
    "CapabilityError",
    "CommandFailedError",
    "EndOfInputError",
    "SpawnError",
    "TydraError",
]
