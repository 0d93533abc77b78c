"""Logging manager responsible for runtime configuration and lifecycle."""

from __future__ import annotations

import logging
from typing import Dict, Set

from ..config.schema import MdclogConfig
from .context import ContextAdapter, ContextFilter, inject_context
from .levels import ensure_level
from .registry import build_formatter, build_handler
from .validation import ConfigurationError, validate_configuration


class LogManager:
    """Central coordinator for mdclog configuration."""

    def __init__(self) -> None:
        self._config: MdclogConfig | None = None
        self._handlers: Dict[str, logging.Handler] = {}
        self._formatters_cache: Dict[str, logging.Formatter] = {}
        self._configured_loggers: Set[str] = set()

    @property
    def config(self) -> MdclogConfig | None:
        return self._config

    # ------------------------------------------------------------------
    def configure(self, config: MdclogConfig) -> None:
        """Apply the supplied configuration."""

        validate_configuration(config)
        formatters: Dict[str, logging.Formatter] = {}
        for name, spec in config.formatters.items():
            try:
                formatters[name] = build_formatter(spec)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"Formatter '{name}' has invalid options: {exc}") from exc

        self._teardown()
        self._config = config
        self._formatters_cache = formatters
        logging.captureWarnings(config.capture_warnings)

        self._handlers = {}
        for name in config.handlers_enabled:
            spec = config.handlers[name]
            handler = build_handler(spec)
            handler.setLevel(ensure_level(spec.level))
            handler.setFormatter(self._formatters_cache[spec.formatter])
            if config.context.enabled:
                handler.addFilter(ContextFilter())
            self._handlers[name] = handler

        self._configured_loggers = set()
        self._configure_root_logger()
        self._configure_named_loggers()
        self._apply_level_overrides()
        if config.disable_existing_loggers:
            self._disable_unconfigured_loggers()

    # ------------------------------------------------------------------
    def shutdown(self) -> None:
        """Detach and close every handler installed by :meth:`configure`."""

        self._teardown()
        self._config = None

    # ------------------------------------------------------------------
    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def get_context_logger(self, name: str, **context_kv: object) -> ContextAdapter:
        logger = self.get_logger(name)
        if self._config and not self._config.context.enabled:
            base = {}
        else:
            base = dict(context_kv)
            if self._config and self._config.context.allowed_keys:
                allowed = set(self._config.context.allowed_keys)
                base = {k: v for k, v in base.items() if k in allowed}
        return inject_context(logger, base_context=base)

    # ------------------------------------------------------------------
    def _teardown(self) -> None:
        installed = set(self._handlers.values())
        if installed:
            for logger_name in self._configured_loggers:
                logger = logging.getLogger(None if logger_name == "root" else logger_name)
                for handler in list(logger.handlers):
                    if handler in installed:
                        logger.removeHandler(handler)

        for handler in self._handlers.values():
            try:
                handler.flush()
            except (OSError, ValueError):
                pass
            handler.close()

        self._handlers.clear()
        self._configured_loggers.clear()

    def _configure_root_logger(self) -> None:
        assert self._config is not None
        root_logger = logging.getLogger()
        root_logger.handlers = []
        root_level = ensure_level(self._config.levels.root_level or self._config.root_logger.level)
        root_logger.setLevel(root_level)
        for handler_name in self._config.root_logger.handlers:
            handler = self._handlers.get(handler_name)
            if handler is not None:
                root_logger.addHandler(handler)
        self._configured_loggers.add("root")

    def _configure_named_loggers(self) -> None:
        assert self._config is not None
        for name, spec in self._config.loggers.items():
            logger = logging.getLogger(name)
            logger.handlers = []
            level_value = self._config.levels.overrides.get(name, spec.level)
            logger.setLevel(ensure_level(level_value))
            for handler_name in spec.handlers:
                handler = self._handlers.get(handler_name)
                if handler is not None:
                    logger.addHandler(handler)
            logger.propagate = spec.propagate
            self._configured_loggers.add(name)

    def _apply_level_overrides(self) -> None:
        assert self._config is not None
        for name, level in self._config.levels.overrides.items():
            if name in self._config.loggers:
                continue
            logging.getLogger(name).setLevel(ensure_level(level))

    def _disable_unconfigured_loggers(self) -> None:
        configured = set(self._configured_loggers)
        manager = logging.getLogger().manager
        for name in list(manager.loggerDict.keys()):
            if not name or name in configured:
                continue
            logging.getLogger(name).disabled = True


GLOBAL_MANAGER = LogManager()
