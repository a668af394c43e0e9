"""Application entry point: load, validate and run an action file."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from . import __version__
from .core import DEFAULT_START_PAGE, ActionFile, ValidationError, load_action_file
from .engine import Engine
from .errors import ActionFileError, TydraError
from .utils import logbook


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tydra", description="Shortcut menu-based task runner")
    parser.add_argument("--version", action="version", version=f"tydra {__version__}")
    parser.add_argument("filename", metavar="ACTION_FILE", help="Read menu contents from this file.")
    parser.add_argument(
        "-p",
        "--page",
        dest="start_page",
        default=DEFAULT_START_PAGE,
        help="Start on this page.",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Instead of showing the menu, validate the action file.",
    )
    parser.add_argument(
        "-e",
        "--ignore-exit-status",
        action="store_true",
        help="When a command fails, ignore it and do not exit tydra.",
    )
    return parser


def _print_error_chain(console: Console, error: BaseException) -> None:
    """Print ``error`` followed by every exception it was raised from."""

    cause = error.__cause__ or error.__context__
    while cause is not None:
        console.print(f"Caused by: {escape(str(cause))}")
        cause = cause.__cause__ or cause.__context__


def print_validation_errors(console: Console, errors: Sequence[ValidationError]) -> None:
    console.print("[bold red]Actions are invalid:[/]")
    for number, error in enumerate(errors, start=1):
        console.print(f"  {number}. {escape(error.message)}")


def _load(console: Console, filename: str) -> Optional[ActionFile]:
    try:
        return load_action_file(filename)
    except ActionFileError as exc:
        console.print(f'[bold red]Error while loading "{escape(filename)}":[/] {escape(str(exc))}')
        _print_error_chain(console, exc)
        return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run tydra and return the process exit code."""

    parser = _build_parser()
    options = parser.parse_args(list(argv) if argv is not None else None)
    console = Console(stderr=True, highlight=False)

    logbook.configure()
    log = logbook.get_logger("app")

    actions = _load(console, options.filename)
    if actions is None:
        return 1

    errors: List[ValidationError] = actions.validate(options.start_page)
    if errors:
        log.info("validation failed for %s with %d error(s)", options.filename, len(errors))
        print_validation_errors(console, errors)
        return 1

    if options.validate:
        console.print("File is valid.")
        return 0

    engine = Engine(
        actions,
        start_page=options.start_page,
        ignore_exit_status=options.ignore_exit_status,
    )
    try:
        engine.run()
    except TydraError as exc:
        console.print(f"[bold red]Error:[/] {escape(str(exc))}")
        _print_error_chain(console, exc)
        return 1
    finally:
        logging.shutdown()
    return 0


def run() -> None:
    """Console script entry point."""

    sys.exit(main())


__all__ = ["main", "run"]
