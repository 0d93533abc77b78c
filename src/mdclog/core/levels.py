"""Log level helpers."""

from __future__ import annotations

import logging

__all__ = ["get_level_by_name", "ensure_level"]


def get_level_by_name(name: str) -> int:
    """Resolve a logging level from a name such as ``"debug"`` or ``"10"``.

    Unknown names fall back to ``INFO``.
    """

    text = name.strip()
    if text.isdigit():
        return int(text)
    resolved = logging.getLevelName(text.upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def ensure_level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    return get_level_by_name(value)
