"""Task-scoped diagnostic context and logging glue.

The store keeps one immutable snapshot per execution context in a
:class:`contextvars.ContextVar`. Every mutation installs a fresh snapshot, so
a mapping returned by :func:`snapshot` never changes afterwards and can be
handed to formatters without locking. Threads and asyncio tasks each start
from their own copy of the variable.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Tuple

__all__ = [
    "ContextSnapshot",
    "snapshot",
    "get",
    "put",
    "put_all",
    "remove",
    "clear",
    "scoped",
    "ContextFilter",
    "ContextAdapter",
    "ensure_context_filter",
    "inject_context",
]

ContextSnapshot = Mapping[str, str]

_EMPTY: ContextSnapshot = MappingProxyType({})
_CURRENT: ContextVar[ContextSnapshot] = ContextVar("mdclog_context", default=_EMPTY)


def _freeze(data: Dict[str, str]) -> ContextSnapshot:
    return MappingProxyType(data) if data else _EMPTY


def snapshot() -> ContextSnapshot:
    """Return the immutable context of the current thread or task."""

    return _CURRENT.get()


def get(key: str, default: str | None = None) -> str | None:
    return _CURRENT.get().get(key, default)


def put(key: str, value: Any) -> None:
    """Set ``key`` to ``str(value)`` in the current context."""

    if not key:
        raise ValueError("Context keys must be non-empty strings")
    data = dict(_CURRENT.get())
    data[key] = str(value)
    _CURRENT.set(_freeze(data))


def put_all(entries: Mapping[str, Any]) -> None:
    data = dict(_CURRENT.get())
    for key, value in entries.items():
        if not key:
            raise ValueError("Context keys must be non-empty strings")
        data[str(key)] = str(value)
    _CURRENT.set(_freeze(data))


def remove(key: str) -> None:
    current = _CURRENT.get()
    if key not in current:
        return
    data = dict(current)
    del data[key]
    _CURRENT.set(_freeze(data))


def clear() -> None:
    _CURRENT.set(_EMPTY)


@contextmanager
def scoped(**entries: Any) -> Iterator[ContextSnapshot]:
    """Install ``entries`` for the duration of the ``with`` block.

    The previous context is restored on exit, including any changes made
    inside the block with :func:`put` or :func:`remove`.
    """

    data = dict(_CURRENT.get())
    data.update((key, str(value)) for key, value in entries.items())
    token = _CURRENT.set(_freeze(data))
    try:
        yield _CURRENT.get()
    finally:
        _CURRENT.reset(token)


class ContextFilter(logging.Filter):
    """Capture the current context snapshot on each record as ``record.mdc``."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not isinstance(record.__dict__.get("mdc"), Mapping):
            record.mdc = snapshot()
        return True


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that overlays static entries onto the live context.

    Static entries act as defaults; values set in the task context with
    :func:`put` or :func:`scoped` take precedence over them.
    """

    def __init__(self, logger: logging.Logger, *, base_context: Mapping[str, Any] | None = None) -> None:
        super().__init__(logger, {})
        self._base: Dict[str, str] = {str(k): str(v) for k, v in (base_context or {}).items()}

    @property
    def base_context(self) -> ContextSnapshot:
        return MappingProxyType(self._base)

    def add_context(self, **kwargs: Any) -> None:
        # copy-on-write, like the task snapshots
        self._base = {**self._base, **{key: str(value) for key, value in kwargs.items()}}

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        call_extra = kwargs.get("extra")
        merged: Dict[str, Any] = dict(call_extra) if isinstance(call_extra, Mapping) else {}
        base = self._base
        if base:
            combined = dict(base)
            combined.update(snapshot())
            merged["mdc"] = MappingProxyType(combined)
        else:
            merged["mdc"] = snapshot()
        kwargs["extra"] = merged
        return msg, kwargs


def ensure_context_filter(logger: logging.Logger) -> None:
    """Attach the :class:`ContextFilter` to ``logger`` if missing."""

    for existing in logger.filters:
        if isinstance(existing, ContextFilter):
            return
    logger.addFilter(ContextFilter())


def inject_context(logger: logging.Logger, *, base_context: Mapping[str, Any] | None = None) -> ContextAdapter:
    """Return a :class:`ContextAdapter` attached to ``logger`` with filter."""

    ensure_context_filter(logger)
    return ContextAdapter(logger, base_context=base_context)
