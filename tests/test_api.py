from __future__ import annotations

import json
import logging

import pytest

import mdclog
from mdclog.core.manager import GLOBAL_MANAGER


def _lines(captured: str) -> list[str]:
    return [line for line in captured.splitlines() if line]


def test_configured_text_layout_renders_context(capsys: pytest.CaptureFixture[str]) -> None:
    mdclog.configure(
        {
            "formatters": {
                "text": {"plain": {"fmt": "%(name)s %(mdc)s %(message)s", "mdc_keys": "object, subject"}},
            },
            "handlers": {
                "enabled": ["out"],
                "out": {"type": "console", "stream": "stdout", "formatter": "text.plain"},
            },
            "logging": {"root": {"level": "INFO", "handlers": ["out"]}},
        }
    )
    logger = mdclog.get_logger("tests.api")

    with mdclog.scoped(subject="I", verb="love", object="Log4j"):
        logger.info("first")
    logger.info("second")

    assert _lines(capsys.readouterr().out) == [
        "tests.api {object=Log4j, subject=I} first",
        "tests.api {} second",
    ]


def test_context_logger_static_entries(capsys: pytest.CaptureFixture[str]) -> None:
    mdclog.configure(
        {
            "formatters": {"jsonl": {"audit": {"mdc_keys": None}}},
            "handlers": {
                "enabled": ["audit"],
                "audit": {"type": "console", "stream": "stdout", "formatter": "jsonl.audit"},
            },
            "logging": {"root": {"level": "INFO", "handlers": ["audit"]}},
            "context": {"allowed_keys": ["service"]},
        }
    )
    logger = mdclog.get_context_logger("tests.static", service="billing", dropped="x")
    mdclog.context.put("request_id", "r-1")
    logger.info("charged", extra={"amount": 12})
    GLOBAL_MANAGER.shutdown()

    record = json.loads(_lines(capsys.readouterr().out)[0])
    assert record["mdc"] == {"request_id": "r-1", "service": "billing"}
    assert record["extra"] == {"amount": 12}


def test_disabled_context_ignores_static_entries() -> None:
    mdclog.configure({"context": {"enabled": False}})
    adapter = mdclog.get_context_logger("tests.disabled", service="billing")
    assert dict(adapter.base_context) == {}
    handler = logging.getLogger().handlers[0]
    assert not any(isinstance(f, mdclog.ContextFilter) for f in handler.filters)


def test_named_logger_and_level_overrides(capsys: pytest.CaptureFixture[str]) -> None:
    mdclog.configure(
        {
            "formatters": {"text": {"bare": {"fmt": "%(levelname)s %(mdc)s", "mdc_keys": "job"}}},
            "handlers": {
                "enabled": ["out"],
                "out": {"type": "console", "stream": "stdout", "level": "DEBUG", "formatter": "text.bare"},
            },
            "logging": {
                "root": {"level": "WARNING", "handlers": []},
                "loggers": {"tests.jobs": {"level": "INFO", "handlers": ["out"]}},
            },
            "levels": {"overrides": {"tests.jobs": "DEBUG"}},
        }
    )
    logger = mdclog.get_logger("tests.jobs")
    with mdclog.scoped(job="nightly"):
        logger.debug("ignored message text")

    assert _lines(capsys.readouterr().out) == ["DEBUG nightly"]
    assert logging.getLogger("tests.jobs").propagate is False


def test_get_logger_configures_defaults() -> None:
    logger = mdclog.get_logger("tests.defaults")
    assert isinstance(logger, logging.Logger)
    root_handlers = logging.getLogger().handlers
    assert len(root_handlers) == 1
    assert isinstance(root_handlers[0].formatter, mdclog.MdcTextFormatter)


def test_shutdown_detaches_handlers() -> None:
    mdclog.configure({})
    assert logging.getLogger().handlers
    mdclog.shutdown()
    assert logging.getLogger().handlers == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"handlers": {"enabled": ["ghost"]}},
        {"handlers": {"console": {"type": "console", "formatter": "text.nope"}}},
        {"handlers": {"console": {"type": "smoke-signal"}}},
        {"handlers": {"console": {"type": "console", "stream": "stdlog"}}},
        {"formatters": {"xml": {"default": {}}}},
        {"formatters": {"text": {"default": {"mdc_keys": 42}}}},
        {"formatters": {"text": {"default": {"colour": True}}}},
        {"formatters": {"text": {"default": {"fmt": "%(message)s", "style": "{"}}}},
        {"formatters": {"text": {"default": {"style": "#"}}}},
        {"logging": {"loggers": {"tests.bad": {"handlers": ["ghost"]}}}},
    ],
)
def test_invalid_configuration_is_rejected(overrides: dict) -> None:
    with pytest.raises(mdclog.ConfigurationError):
        mdclog.configure(overrides)


def _stdout_default_layout() -> dict:
    return {
        "handlers": {
            "enabled": ["console"],
            "console": {"type": "console", "stream": "stdout", "formatter": "text.default"},
        },
    }


def test_default_layout_logs_timestamp_and_context(capsys: pytest.CaptureFixture[str]) -> None:
    mdclog.configure(_stdout_default_layout())
    logger = mdclog.get_logger("tests.layout")

    with mdclog.scoped(user="ada"):
        logger.warning("hello")

    captured = capsys.readouterr()
    lines = _lines(captured.out)
    assert len(lines) == 1
    timestamp, level, name, ctx, message = lines[0].split(" | ")
    assert len(timestamp) == len("2024-01-01 00:00:00")
    assert (level, name, ctx, message) == ("WARNING", "tests.layout", "{user=ada}", "hello")
    assert "Logging error" not in captured.err


def test_brace_style_uses_matching_default_layout(capsys: pytest.CaptureFixture[str]) -> None:
    overrides = _stdout_default_layout()
    overrides["formatters"] = {"text": {"default": {"style": "{", "mdc_keys": "user"}}}
    mdclog.configure(overrides)

    with mdclog.scoped(user="ada"):
        mdclog.get_logger("tests.brace").info("hello")

    assert _lines(capsys.readouterr().out)[0].endswith(" | INFO  | tests.brace | ada | hello")


def test_numeric_key_from_environment(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MDCLOG__FORMATTERS__TEXT__DEFAULT__MDC_KEYS", "404")
    mdclog.configure(_stdout_default_layout())

    with mdclog.scoped(**{"404": "not found", "none": "x"}):
        mdclog.get_logger("tests.env").info("hello")

    assert _lines(capsys.readouterr().out)[0].endswith(" | not found | hello")
