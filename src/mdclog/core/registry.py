"""Registry of formatter and handler builders."""

from __future__ import annotations

import logging
from typing import Callable, Dict

from ..config.schema import FormatterSpec, HandlerSpec
from ..formatters.jsonl import JSONLinesFormatter
from ..formatters.text import MdcTextFormatter
from ..handlers.console import ConsoleHandlerConfig, build_console_handler, build_null_handler

__all__ = [
    "FORMATTER_BUILDERS",
    "HANDLER_BUILDERS",
    "build_formatter",
    "build_handler",
]

FormatterBuilder = Callable[[FormatterSpec], logging.Formatter]
HandlerBuilder = Callable[[HandlerSpec], logging.Handler]


def _build_text(spec: FormatterSpec) -> logging.Formatter:
    return MdcTextFormatter(**spec.options)


def _build_jsonl(spec: FormatterSpec) -> logging.Formatter:
    return JSONLinesFormatter(**spec.options)


FORMATTER_BUILDERS: Dict[str, FormatterBuilder] = {
    "text": _build_text,
    "jsonl": _build_jsonl,
}


def build_formatter(spec: FormatterSpec) -> logging.Formatter:
    builder = FORMATTER_BUILDERS.get(spec.kind)
    if builder is None:
        raise ValueError(f"Unknown formatter kind: {spec.kind}")
    return builder(spec)


def _build_console_handler(spec: HandlerSpec) -> logging.Handler:
    cfg = ConsoleHandlerConfig(stream=str(spec.options.get("stream", "stderr")))
    return build_console_handler(cfg)


def _build_null_handler(spec: HandlerSpec) -> logging.Handler:
    return build_null_handler()


HANDLER_BUILDERS: Dict[str, HandlerBuilder] = {
    "console": _build_console_handler,
    "null": _build_null_handler,
}


def build_handler(spec: HandlerSpec) -> logging.Handler:
    builder = HANDLER_BUILDERS.get(spec.kind)
    if builder is None:
        raise ValueError(f"Unknown handler kind: {spec.kind}")
    return builder(spec)
