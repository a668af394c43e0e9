"""Utility helpers exposed by tydra."""

from .paths import state_dir

__all__ = ["state_dir"]
