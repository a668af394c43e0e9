"""Terminal menu launcher driven by YAML action files."""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__"]
