"""Public API surface for mdclog."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .config.loader import load_configuration
from .core.context import ContextAdapter
from .core.manager import GLOBAL_MANAGER

_CONFIGURED = False


def configure(overrides: Mapping[str, Any] | None = None) -> None:
    """Configure mdclog using the provided overrides."""

    global _CONFIGURED
    config = load_configuration(overrides or {})
    GLOBAL_MANAGER.configure(config)
    _CONFIGURED = True


def shutdown() -> None:
    """Remove and close the handlers installed by :func:`configure`."""

    global _CONFIGURED
    GLOBAL_MANAGER.shutdown()
    _CONFIGURED = False


def _ensure_configured() -> None:
    if not _CONFIGURED:
        configure({})


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the given name."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_logger(name)


def get_context_logger(name: str, **context_kv: Any) -> ContextAdapter:
    """Return a logger adapter carrying static context entries."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_context_logger(name, **context_kv)
