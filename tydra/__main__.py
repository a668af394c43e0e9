"""Console entrypoint bridging to :mod:`tydra.app`."""

from __future__ import annotations

from .app import run

if __name__ == "__main__":
    run()
