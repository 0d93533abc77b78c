"""Diagnostic context converter.

A converter is bound to one :data:`~mdclog.core.selection.KeySelection` at
construction and renders context snapshots into a text sink::

    converter = construct("object, subject")
    buffer = io.StringIO()
    render(converter, {"object": "Log4j", "subject": "I"}, buffer)
    buffer.getvalue()  # '{object=Log4j, subject=I}'

Rendering never raises and never reads or rewinds the sink; the fragment is
always appended after whatever the caller already wrote.
"""

from __future__ import annotations

import io
from typing import Mapping, Protocol, Sequence

from .selection import KeySelection, OneKey, parse_selection

__all__ = ["TextSink", "MdcConverter", "as_text", "construct", "render"]

_PAIR_SEPARATOR = ", "
_EMPTY = "{}"


def as_text(value: object) -> str:
    """Return ``str(value)``, or its ``repr`` when ``__str__`` raises."""

    if isinstance(value, str):
        return value
    try:
        return str(value)
    except Exception:
        return repr(value)


class TextSink(Protocol):
    """Append-only text buffer."""

    def write(self, text: str, /) -> object:
        ...


class MdcConverter:
    """Render a context snapshot according to a fixed key selection."""

    __slots__ = ("_selection",)

    def __init__(self, selection: KeySelection) -> None:
        self._selection = selection

    @classmethod
    def from_option(cls, option: str | Sequence[str] | None) -> "MdcConverter":
        return cls(parse_selection(option))

    @property
    def selection(self) -> KeySelection:
        return self._selection

    def format(self, snapshot: Mapping[str, object], buffer: TextSink) -> None:
        buffer.write(self._fragment(snapshot))

    def to_string(self, snapshot: Mapping[str, object]) -> str:
        buffer = io.StringIO()
        self.format(snapshot, buffer)
        return buffer.getvalue()

    def _fragment(self, snapshot: Mapping[str, object]) -> str:
        pairs = self._selection.select(snapshot)
        if isinstance(self._selection, OneKey):
            # bare value, no braces
            return as_text(pairs[0][1]) if pairs else ""
        if not pairs:
            return _EMPTY
        body = _PAIR_SEPARATOR.join(f"{key}={as_text(value)}" for key, value in pairs)
        return f"{{{body}}}"

    def __repr__(self) -> str:
        return f"MdcConverter({self._selection!r})"


def construct(raw_option: str | Sequence[str] | None = None) -> MdcConverter:
    """Build a converter from a raw converter option."""

    return MdcConverter.from_option(raw_option)


def render(converter: MdcConverter, snapshot: Mapping[str, object], buffer: TextSink) -> None:
    """Append the fragment for ``snapshot`` to ``buffer``."""

    converter.format(snapshot, buffer)
