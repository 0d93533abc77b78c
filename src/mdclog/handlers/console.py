"""Console and null handler helpers."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TextIO

__all__ = ["ConsoleHandlerConfig", "build_console_handler", "build_null_handler"]


@dataclass(slots=True)
class ConsoleHandlerConfig:
    """Configuration for console handlers."""

    stream: str = "stderr"


def _resolve_stream(name: str) -> TextIO:
    if name == "stdout":
        return sys.stdout
    if name == "stderr":
        return sys.stderr
    raise ValueError(f"Unknown console stream: {name!r} (expected 'stdout' or 'stderr')")


def build_console_handler(config: ConsoleHandlerConfig | None = None) -> logging.Handler:
    """Construct a :class:`logging.StreamHandler` based on ``config``."""

    cfg = config or ConsoleHandlerConfig()
    return logging.StreamHandler(stream=_resolve_stream(cfg.stream))


def build_null_handler() -> logging.Handler:
    return logging.NullHandler()
