"""Filesystem path helpers for tydra state."""

from __future__ import annotations

import os
from pathlib import Path


def state_dir() -> Path:
    """Return the directory used for persistent tydra state.

    The location defaults to ``~/.tydra`` but can be overridden via the
    ``TYDRA_STATE_DIR`` environment variable. The path is expanded and
    resolved so callers always receive an absolute location.
    """

    override = os.environ.get("TYDRA_STATE_DIR")
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / ".tydra"


def log_file() -> Path:
    """Return the rotating log file location inside :func:`state_dir`."""

    return state_dir() / "logs" / "tydra.log"
