"""Configuration schema definition for mdclog."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

DEFAULT_CONFIG: Dict[str, Any] = {
    "formatters": {
        "text": {
            "default": {"mdc_keys": None},
        },
        "jsonl": {
            "default": {"mdc_keys": None},
        },
    },
    "handlers": {
        "enabled": ["console"],
        "console": {
            "type": "console",
            "level": "INFO",
            "formatter": "text.default",
            "stream": "stderr",
        },
    },
    "logging": {
        "root": {
            "level": "INFO",
            "handlers": ["console"],
        },
        "loggers": {},
        "disable_existing_loggers": False,
        "capture_warnings": True,
    },
    "levels": {
        "root": None,
        "overrides": {},
    },
    "context": {
        "enabled": True,
        "allowed_keys": [],
    },
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(slots=True)
class FormatterSpec:
    name: str
    kind: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class HandlerSpec:
    name: str
    kind: str
    level: str | int
    formatter: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class LoggerSpec:
    name: str
    level: str | int
    handlers: List[str] = field(default_factory=list)
    propagate: bool = False


@dataclass(slots=True)
class LevelsConfig:
    root_level: str | int | None
    overrides: Dict[str, str | int] = field(default_factory=dict)


@dataclass(slots=True)
class ContextConfig:
    enabled: bool = True
    allowed_keys: List[str] = field(default_factory=list)


@dataclass(slots=True)
class MdclogConfig:
    formatters: Dict[str, FormatterSpec]
    handlers: Dict[str, HandlerSpec]
    handlers_enabled: List[str]
    loggers: Dict[str, LoggerSpec]
    root_logger: LoggerSpec
    levels: LevelsConfig
    context: ContextConfig
    capture_warnings: bool
    disable_existing_loggers: bool
    raw: Dict[str, Any] = field(repr=False)

    def formatter(self, name: str) -> FormatterSpec:
        return self.formatters[name]

    def handler(self, name: str) -> HandlerSpec:
        return self.handlers[name]


def _to_formatters(data: Mapping[str, Any]) -> Dict[str, FormatterSpec]:
    specs: Dict[str, FormatterSpec] = {}
    for kind, entries in data.items():
        if not isinstance(entries, Mapping):
            continue
        for name, options in entries.items():
            key = f"{kind}.{name}"
            opts = dict(options or {}) if isinstance(options, Mapping) else {}
            specs[key] = FormatterSpec(name=key, kind=kind, options=opts)
    return specs


def _to_handlers(data: Mapping[str, Any]) -> tuple[Dict[str, HandlerSpec], List[str]]:
    handlers: Dict[str, HandlerSpec] = {}
    enabled_raw = data.get("enabled")
    enabled = [str(item) for item in enabled_raw] if isinstance(enabled_raw, list) else []

    for name, payload in data.items():
        if name == "enabled" or not isinstance(payload, Mapping):
            continue
        options = {
            key: value
            for key, value in payload.items()
            if key not in {"type", "level", "formatter"}
        }
        handlers[name] = HandlerSpec(
            name=name,
            kind=str(payload.get("type", "console")),
            level=payload.get("level", "INFO"),
            formatter=str(payload.get("formatter", "text.default")),
            options=options,
        )

    if not enabled:
        enabled = list(handlers.keys())
    return handlers, enabled


def _to_logger(name: str, payload: Mapping[str, Any]) -> LoggerSpec:
    handlers = payload.get("handlers")
    return LoggerSpec(
        name=name,
        level=payload.get("level", "INFO"),
        handlers=[str(h) for h in handlers] if isinstance(handlers, list) else [],
        propagate=bool(payload.get("propagate", False)),
    )


def _to_levels(data: Mapping[str, Any]) -> LevelsConfig:
    overrides_raw = data.get("overrides", {})
    overrides: Dict[str, str | int] = {}
    if isinstance(overrides_raw, Mapping):
        overrides = {str(name): value for name, value in overrides_raw.items()}
    return LevelsConfig(root_level=data.get("root"), overrides=overrides)


def _to_context(data: Mapping[str, Any]) -> ContextConfig:
    enabled = bool(data.get("enabled", True))
    allowed_raw = data.get("allowed_keys", [])
    if isinstance(allowed_raw, str):
        allowed = [part.strip() for part in allowed_raw.split(",") if part.strip()]
    elif isinstance(allowed_raw, Iterable):
        allowed = [str(item) for item in allowed_raw]
    else:
        allowed = []
    return ContextConfig(enabled=enabled, allowed_keys=allowed)


def build_config(data: Mapping[str, Any]) -> MdclogConfig:
    formatters = _to_formatters(data.get("formatters", {}))
    handlers, enabled = _to_handlers(data.get("handlers", {}))

    logging_data = data.get("logging", {})
    if not isinstance(logging_data, Mapping):
        logging_data = {}
    root_data = logging_data.get("root", {})
    root_logger = _to_logger("root", root_data if isinstance(root_data, Mapping) else {})
    loggers_data = logging_data.get("loggers", {})
    loggers = {
        str(name): _to_logger(str(name), payload)
        for name, payload in (loggers_data.items() if isinstance(loggers_data, Mapping) else ())
        if isinstance(payload, Mapping)
    }

    if not root_logger.handlers:
        root_logger.handlers = enabled.copy()

    return MdclogConfig(
        formatters=formatters,
        handlers=handlers,
        handlers_enabled=enabled,
        loggers=loggers,
        root_logger=root_logger,
        levels=_to_levels(data.get("levels", {})),
        context=_to_context(data.get("context", {})),
        capture_warnings=bool(logging_data.get("capture_warnings", True)),
        disable_existing_loggers=bool(logging_data.get("disable_existing_loggers", False)),
        raw=deepcopy(dict(data)),
    )
