# src/nav/logging_config.py
"""
Central logging configuration for block-nav hosts.

Call configure_logging() from your main entrypoint once, for example:

    from nav.logging_config import configure_logging
    configure_logging("DEBUG")

After that, search start/finish lines from nav.steps (and per-node detail
from nav.frontier at DEBUG) will be visible on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional, Union

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return resolved


def configure_logging(
    level: Union[int, str] = logging.INFO,
    stream: Optional[IO[str]] = None,
    fmt: str = DEFAULT_FORMAT,
) -> None:
    """
    Configure root logging if no handlers are attached yet.

    Args:
        level: logging level, as an int or a name such as "DEBUG"
        stream: where to write; stdout by default
        fmt: log line format
    """
    root = logging.getLogger()
    numeric_level = _coerce_level(level)

    # Someone already configured logging; only adjust the level.
    if root.handlers:
        root.setLevel(numeric_level)
        return

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=fmt))
    root.addHandler(handler)
    root.setLevel(numeric_level)


__all__ = ["configure_logging", "DEFAULT_FORMAT"]
