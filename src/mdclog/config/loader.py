"""Configuration loading pipeline."""

from __future__ import annotations

import importlib
import json
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Mapping, cast

from platformdirs import user_config_dir

from .schema import MdclogConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml_module = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml_module = None

yaml: ModuleType | None = yaml_module


_APP_NAME = "mdclog"
_ENV_PREFIX = "MDCLOG__"
_CONFIG_FILENAMES = ("mdclog.toml", "mdclog.yaml", "mdclog.yml")
_RAW_KEYS = frozenset({"mdc_keys"})


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if yaml is None or not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        loader = cast(Callable[[Any], Any], getattr(yaml, "safe_load"))
        data = loader(fh)
    if isinstance(data, Mapping):
        return {str(key): value for key, value in data.items()}
    return {}


def _load_file(path: Path) -> Dict[str, Any]:
    return _load_toml(path) if path.suffix == ".toml" else _load_yaml(path)


def _merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in incoming.items():
        existing = base.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge(existing, value)
        elif isinstance(value, Mapping):
            base[key] = _merge(dict(existing) if isinstance(existing, Mapping) else {}, value)
        else:
            base[key] = value
    return base


def _load_directory(directory: Path) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if not directory.exists():
        return data
    for filename in _CONFIG_FILENAMES:
        payload = _load_file(directory / filename)
        if payload:
            _merge(data, payload)
    return data


def _load_user_config() -> Dict[str, Any]:
    return _load_directory(Path(user_config_dir(_APP_NAME)))


def _load_local_config() -> Dict[str, Any]:
    return _load_directory(Path.cwd())


def _load_pyproject() -> Dict[str, Any]:
    data = _load_toml(Path("pyproject.toml"))
    tool = data.get("tool", {})
    if not isinstance(tool, Mapping):
        return {}
    section = tool.get(_APP_NAME, {})
    if isinstance(section, Mapping):
        return {str(key): value for key, value in section.items()}
    return {}


def _coerce_value(value: str) -> Any:
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    try:
        return int(stripped)
    except ValueError:
        try:
            return float(stripped)
        except ValueError:
            pass
    if stripped.startswith("[") or stripped.startswith("{"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
    return stripped


def _env_config() -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for env_key, raw_value in os.environ.items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        path = env_key[len(_ENV_PREFIX) :].split("__")
        target: Dict[str, Any] = data
        for segment in path[:-1]:
            target = cast(Dict[str, Any], target.setdefault(segment.lower(), {}))
        leaf = path[-1].lower()
        # any token is a legal context key, so key lists stay verbatim
        target[leaf] = raw_value.strip() if leaf in _RAW_KEYS else _coerce_value(raw_value)
    return data


def _merge_overrides(*mappings: Mapping[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = default_config()
    for mapping in mappings:
        if mapping:
            _merge(result, mapping)
    return result


def load_configuration(overrides: Mapping[str, Any] | None = None) -> MdclogConfig:
    """Load configuration from supported sources in precedence order.

    Lowest to highest: built-in defaults, the user config directory, config
    files in the working directory, ``[tool.mdclog]`` in ``pyproject.toml``,
    ``MDCLOG__*`` environment variables and finally ``overrides``.
    """

    merged = _merge_overrides(
        _load_user_config(),
        _load_local_config(),
        _load_pyproject(),
        _env_config(),
        overrides or {},
    )
    return build_config(merged)
