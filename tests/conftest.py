import logging
import os
from datetime import date

import pytest
import structlog

from src.timetable import config as config_module
from tests.feed_rows import RecordingRenderer


@pytest.fixture
def monday():
    return date(2026, 2, 16)


@pytest.fixture
def wednesday():
    return date(2026, 2, 18)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    # Default structlog prints to stdout, which the CLI tests read
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL))
    for name in list(os.environ):
        if name.upper().startswith("TIMETABLE_"):
            monkeypatch.delenv(name)
    yield
    config_module._config = None
    structlog.reset_defaults()
