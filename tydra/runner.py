"""Process backend used by the engine to run entry commands."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .core.model import Command, Executable, NoCommand, ShellScript
from .errors import CapabilityError, SpawnError
from .utils import logbook

SHELL = "/bin/sh"

# Keyboard signals hit the whole foreground process group; the child decides
# what they mean while it runs.
TERMINAL_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGQUIT") if hasattr(signal, name)
)
# Python starts with these ignored and subprocess restores them for children.
INHERITED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGPIPE", "SIGXFSZ") if hasattr(signal, name)
)


def command_argv(command: Command) -> Optional[List[str]]:
    """Return the argv for ``command``, or ``None`` for the no-op command."""

    if isinstance(command, NoCommand):
        return None
    if isinstance(command, ShellScript):
        return [SHELL, "-c", command.script]
    if isinstance(command, Executable):
        return [command.name, *command.args]
    raise TypeError(f"Unknown command variant: {command!r}")


def _ignore_signal(_signum: int, _frame: object) -> None:
    return


@contextmanager
def _signals_handled_by(handler: object, signals: tuple) -> Iterator[None]:
    """Install ``handler`` for ``signals`` and restore the previous ones on exit."""

    previous = {signum: signal.signal(signum, handler) for signum in signals}
    try:
        yield
    finally:
        for signum, old in previous.items():
            signal.signal(signum, old)


class ProcessRunner:
    """Spawn, replace or detach system commands.

    The no-op command is an immediate success in every mode and never creates
    a process.
    """

    def __init__(self, *, posix: Optional[bool] = None) -> None:
        self.posix = os.name == "posix" if posix is None else posix

    def run_foreground(self, command: Command) -> int:
        """Run ``command`` to completion and return its exit status."""

        argv = command_argv(command)
        if argv is None:
            return 0
        logbook.event("runner", "run", command=str(command))
        try:
            # A Python handler, not SIG_IGN: ignored signals survive exec.
            with _signals_handled_by(_ignore_signal, TERMINAL_SIGNALS):
                completed = subprocess.run(argv, check=False)
        except OSError as exc:
            raise SpawnError(f"Could not run {command}: {exc}") from exc
        logbook.event("runner", "exited", command=str(command), status=completed.returncode)
        return completed.returncode

    def replace_process(self, command: Command) -> None:
        """Replace the current process image with ``command``.

        Returns only for the no-op command. Platforms without ``exec`` run the
        command and exit with its status instead.
        """

        argv = command_argv(command)
        if argv is None:
            return
        logbook.event("runner", "exec", command=str(command))
        if not self.posix:
            status = self.run_foreground(command)
            sys.exit(status)
        try:
            with _signals_handled_by(signal.SIG_DFL, INHERITED_SIGNALS):
                os.execvp(argv[0], argv)
        except OSError as exc:
            raise SpawnError(f"Could not exec {command}: {exc}") from exc

    def spawn_detached(self, command: Command) -> None:
        """Start ``command`` in its own session with no terminal attached."""

        argv = command_argv(command)
        if argv is None:
            return
        if not self.posix:
            raise CapabilityError("Running in background is currently only supported on unix platforms.")
        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise SpawnError(f"Could not start {command} in the background: {exc}") from exc
        logbook.event("runner", "background", command=str(command), pid=process.pid)

    def suspend(self) -> None:
        """Stop this process like ^Z would; returns once it is resumed."""

        if not self.posix or not hasattr(signal, "SIGTSTP"):
            raise CapabilityError("Pausing is only supported on unix platforms.")
        logbook.event("runner", "suspend", pid=os.getpid())
        os.kill(os.getpid(), signal.SIGTSTP)


__all__ = ["ProcessRunner", "SHELL", "command_argv"]
