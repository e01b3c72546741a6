"""
Logging setup for the command line entry point.

Modules obtain a logger via `logging.getLogger(__name__)`. Everything goes to
stderr: stdout is reserved for the selected value.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "DBAR_LOG_LEVEL"


def resolve_log_level(default: str = "WARNING") -> int:
    name = os.getenv(LOG_LEVEL_ENV, default)
    lvl = getattr(logging, name.strip().upper(), None)
    return lvl if isinstance(lvl, int) else getattr(logging, default)


def setup_default_logging(level: int | str | None = None) -> None:
    """Configure a single stderr handler once.

    - No-op if the root logger already has handlers
    - Level from the argument, else from DBAR_LOG_LEVEL
    """
    if level is None:
        lvl = resolve_log_level()
    elif isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.WARNING)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=lvl,
        stream=sys.stderr,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


__all__ = ["setup_default_logging", "resolve_log_level", "LOG_LEVEL_ENV"]
