"""Human readable text formatter with a diagnostic context placeholder."""

from __future__ import annotations

import logging
from typing import Literal, Mapping, Sequence

from ..core.context import snapshot
from ..core.converter import MdcConverter

__all__ = ["MdcTextFormatter"]

_DEFAULT_FMTS = {
    "%": "%(asctime)s | %(levelname)-5s | %(name)s | %(mdc)s | %(message)s",
    "{": "{asctime} | {levelname:<5} | {name} | {mdc} | {message}",
    "$": "${asctime} | ${levelname} | ${name} | ${mdc} | ${message}",
}


class MdcTextFormatter(logging.Formatter):
    """Formatter that renders ``%(mdc)s`` through an :class:`MdcConverter`.

    ``mdc_keys`` is the converter option: ``None`` prints the whole context,
    ``"user"`` prints the bare value of one key and ``"user, session"`` prints
    the listed keys in that order. The record itself is left untouched so the
    same record can pass through formatters with different selections.
    """

    def __init__(
        self,
        *,
        fmt: str | None = None,
        datefmt: str | None = "%Y-%m-%d %H:%M:%S",
        style: Literal["%", "{", "$"] = "%",
        mdc_keys: str | Sequence[str] | None = None,
    ) -> None:
        if style not in _DEFAULT_FMTS:
            raise ValueError(f"Style must be one of: {', '.join(_DEFAULT_FMTS)}")
        super().__init__(fmt or _DEFAULT_FMTS[style], datefmt=datefmt, style=style)
        # ``converter`` is the time function used by formatTime
        self.mdc_converter = MdcConverter.from_option(mdc_keys)

    def render_context(self, record: logging.LogRecord) -> str:
        captured = record.__dict__.get("mdc")
        if not isinstance(captured, Mapping):
            captured = snapshot()
        return self.mdc_converter.to_string(captured)

    def formatMessage(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        view = logging.makeLogRecord(record.__dict__)
        view.mdc = self.render_context(record)
        return super().formatMessage(view)
