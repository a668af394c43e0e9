"""Rotating file logger emitting structured JSON lines for menu sessions."""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from .paths import log_file

ROOT_LOGGER = "tydra"

_HANDLER: Optional[RotatingFileHandler] = None


def _coerce_level(raw: Optional[str]) -> int:
    if not raw:
        return logging.INFO
    value = logging.getLevelName(raw.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure(path: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Attach the rotating file handler to the ``tydra`` logger.

    Nothing is ever written to the console: while the menu is open curses owns
    the terminal. Calling this again replaces the previously installed
    handler, so tests can point the log at a temporary directory.
    """

    global _HANDLER

    logger = logging.getLogger(ROOT_LOGGER)
    target = path or log_file()
    target.parent.mkdir(parents=True, exist_ok=True)

    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)
        _HANDLER.close()

    handler = RotatingFileHandler(target, maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(_coerce_level(level or os.environ.get("TYDRA_LOG_LEVEL")))
    _HANDLER = handler
    return logger


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Return ``tydra`` or one of its ``tydra.<component>`` children."""

    if component:
        return logging.getLogger(f"{ROOT_LOGGER}.{component}")
    return logging.getLogger(ROOT_LOGGER)


def _serialize(value: object) -> object:
    """Make ``value`` JSON-serialisable."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _serialize(item) for key, item in value.items()}
    return str(value)


def event(channel: str, action: str, *, level: int = logging.INFO, **fields: object) -> None:
    """Emit a structured log line for ``action`` on ``channel``."""

    logger = get_logger(channel)
    if not logger.isEnabledFor(level):
        return
    timestamp = datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")
    payload: Dict[str, object] = {key: _serialize(value) for key, value in fields.items()}
    details = " ".join(f"{key}={payload[key]}" for key in sorted(payload))
    message = f"[{channel}] {action}"
    if details:
        message = f"{message} {details}"
    record = {
        "timestamp": timestamp,
        "channel": channel,
        "action": action,
        **payload,
        "message": message,
    }
    logger.log(level, json.dumps(record, sort_keys=True))


__all__ = ["ROOT_LOGGER", "configure", "event", "get_logger"]
