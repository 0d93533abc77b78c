from __future__ import annotations

from pathlib import Path

import pytest

from mdclog.config import loader


def _keys(config) -> object:
    return config.formatters["text.default"].options.get("mdc_keys")


def test_configuration_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    user_dir = tmp_path / "user"
    user_dir.mkdir()
    (user_dir / "mdclog.toml").write_text("""[formatters.text.default]\nmdc_keys = \"user\"\n""")
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(user_dir))

    project_dir = tmp_path / "project"
    project_dir.mkdir()
    (project_dir / "mdclog.toml").write_text("""[formatters.text.default]\nmdc_keys = \"local\"\n""")
    monkeypatch.chdir(project_dir)

    (project_dir / "pyproject.toml").write_text(
        """[tool.mdclog.formatters.text.default]\nmdc_keys = \"pyproject\"\n"""
    )

    monkeypatch.setenv("MDCLOG__FORMATTERS__TEXT__DEFAULT__MDC_KEYS", "env, keys")

    config = loader.load_configuration({"formatters": {"text": {"default": {"mdc_keys": "override"}}}})
    assert _keys(config) == "override"

    config = loader.load_configuration({})
    assert _keys(config) == "env, keys"

    monkeypatch.delenv("MDCLOG__FORMATTERS__TEXT__DEFAULT__MDC_KEYS")
    config = loader.load_configuration({})
    assert _keys(config) == "pyproject"

    (project_dir / "pyproject.toml").unlink()
    config = loader.load_configuration({})
    assert _keys(config) == "local"

    (project_dir / "mdclog.toml").unlink()
    config = loader.load_configuration({})
    assert _keys(config) == "user"


def test_yaml_config_is_read(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pytest.importorskip("yaml")
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(tmp_path / "absent"))
    monkeypatch.chdir(tmp_path)
    (tmp_path / "mdclog.yaml").write_text("context:\n  allowed_keys: [user, request_id]\n")

    config = loader.load_configuration({})

    assert config.context.allowed_keys == ["user", "request_id"]


def test_env_config_coerces_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(tmp_path / "absent"))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDCLOG__LOGGING__ROOT__LEVEL", "  DEBUG  ")
    monkeypatch.setenv("MDCLOG__CONTEXT__ENABLED", "false")

    config = loader.load_configuration({})

    assert config.root_logger.level == "DEBUG"
    assert config.context.enabled is False


@pytest.mark.parametrize("raw", ["404", "none", "null", "true", " 1.5 ", "404, none"])
def test_env_key_lists_stay_verbatim(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(tmp_path / "absent"))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDCLOG__FORMATTERS__TEXT__DEFAULT__MDC_KEYS", raw)

    config = loader.load_configuration({})

    assert _keys(config) == raw.strip()


def test_defaults_select_whole_context(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(tmp_path / "absent"))
    monkeypatch.chdir(tmp_path)

    config = loader.load_configuration()

    assert _keys(config) is None
    assert config.handlers_enabled == ["console"]
    assert config.root_logger.handlers == ["console"]
