"""mdclog public API."""

from .api import configure, get_context_logger, get_logger, shutdown
from .core import context
from .core.context import ContextAdapter, ContextFilter, scoped
from .core.converter import MdcConverter, construct, render
from .core.selection import AllKeys, KeySelection, ManyKeys, OneKey, parse_selection
from .core.validation import ConfigurationError
from .formatters.jsonl import JSONLinesFormatter
from .formatters.text import MdcTextFormatter
from .version import __version__

__all__ = [
    "configure",
    "shutdown",
    "get_logger",
    "get_context_logger",
    "context",
    "scoped",
    "ContextAdapter",
    "ContextFilter",
    "MdcConverter",
    "construct",
    "render",
    "AllKeys",
    "OneKey",
    "ManyKeys",
    "KeySelection",
    "parse_selection",
    "ConfigurationError",
    "MdcTextFormatter",
    "JSONLinesFormatter",
    "__version__",
]
