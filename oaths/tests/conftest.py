"""Pytest configuration for the oaths test suite.

Clears ``OATHS_*`` environment variables around every test so the ambient
environment cannot change log levels or formats, and re-applies the settings
to the shared logger afterwards so one test's level never leaks into the next.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from oaths.config import ENV_FIELD_MAP
from oaths.logging import configure_logger, get_logger


@pytest.fixture(autouse=True)
def clean_oaths_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for var in ENV_FIELD_MAP.values():
        monkeypatch.delenv(var, raising=False)
    yield
    for var in ENV_FIELD_MAP.values():
        monkeypatch.delenv(var, raising=False)
    configure_logger(file_path=None)
    get_logger()
