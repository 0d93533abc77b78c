"""Configuration validation helpers."""

from __future__ import annotations

from typing import Any

from ..config.schema import MdclogConfig
from .registry import FORMATTER_BUILDERS, HANDLER_BUILDERS


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""


def _valid_mdc_keys(value: Any) -> bool:
    if value is None or isinstance(value, str):
        return True
    return isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)


def validate_configuration(config: MdclogConfig) -> None:
    """Ensure configuration references are consistent."""

    for spec in config.formatters.values():
        if spec.kind not in FORMATTER_BUILDERS:
            raise ConfigurationError(f"Formatter '{spec.name}' has unknown kind '{spec.kind}'")
        if not _valid_mdc_keys(spec.options.get("mdc_keys")):
            raise ConfigurationError(
                f"Formatter '{spec.name}' option 'mdc_keys' must be a string, a list of strings or null"
            )

    missing_handlers = [name for name in config.handlers_enabled if name not in config.handlers]
    if missing_handlers:
        raise ConfigurationError(
            f"Handlers referenced in 'enabled' but undefined: {', '.join(missing_handlers)}"
        )

    if not config.handlers_enabled:
        raise ConfigurationError("At least one handler must be enabled")

    enabled_set = set(config.handlers_enabled)

    for handler in config.handlers.values():
        if handler.kind not in HANDLER_BUILDERS:
            raise ConfigurationError(f"Handler '{handler.name}' has unknown type '{handler.kind}'")
        if handler.kind == "console" and handler.options.get("stream", "stderr") not in {"stdout", "stderr"}:
            raise ConfigurationError(f"Handler '{handler.name}' stream must be 'stdout' or 'stderr'")
        if handler.formatter not in config.formatters:
            raise ConfigurationError(f"Handler '{handler.name}' references unknown formatter '{handler.formatter}'")

    for logger in (config.root_logger, *config.loggers.values()):
        for handler_name in logger.handlers:
            if handler_name not in config.handlers:
                raise ConfigurationError(f"Logger '{logger.name}' references unknown handler '{handler_name}'")
            if handler_name not in enabled_set:
                raise ConfigurationError(
                    f"Logger '{logger.name}' references handler '{handler_name}' which is not enabled"
                )
