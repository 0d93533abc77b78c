"""JSON Lines formatter."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, MutableMapping, Sequence

from ..core.context import snapshot
from ..core.converter import as_text
from ..core.selection import parse_selection

__all__ = ["JSONLinesFormatter"]

_STANDARD_ATTRS = frozenset(
    logging.makeLogRecord({}).__dict__.keys() | {"message", "asctime", "mdc", "taskName"}
)


class JSONLinesFormatter(logging.Formatter):
    """Emit records as one JSON object per line.

    The selected context entries land under ``"mdc"`` as an object whose key
    order follows the selection: sorted for the whole context, configured
    order otherwise. Non-standard record attributes go under ``"extra"``.
    """

    def __init__(
        self,
        *,
        mdc_keys: str | Sequence[str] | None = None,
        datefmt: str | None = "%Y-%m-%dT%H:%M:%S%z",
    ) -> None:
        super().__init__(datefmt=datefmt)
        self.selection = parse_selection(mdc_keys)

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: MutableMapping[str, Any] = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        captured = record.__dict__.get("mdc")
        if not isinstance(captured, Mapping):
            captured = snapshot()
        payload["mdc"] = {key: as_text(value) for key, value in self.selection.select(captured)}

        extra = {key: value for key, value in record.__dict__.items() if key not in _STANDARD_ATTRS}
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=as_text)
