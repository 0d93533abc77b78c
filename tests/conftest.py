from __future__ import annotations

import logging
from typing import Iterator

import pytest

import mdclog.api as mdclog_api
from mdclog.core import context
from mdclog.core.manager import GLOBAL_MANAGER


@pytest.fixture(autouse=True)
def reset_mdclog() -> Iterator[None]:
    context.clear()
    yield
    GLOBAL_MANAGER.shutdown()
    mdclog_api._CONFIGURED = False
    context.clear()
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(logging.NOTSET)
    logging.captureWarnings(False)


@pytest.fixture
def sample_context() -> dict[str, str]:
    return {"subject": "I", "verb": "love", "object": "Log4j"}
