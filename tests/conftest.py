# tests/conftest.py
"""Shared test setup for project."""

from collections.abc import Generator

import pytest

import eunit_runner.logs as mod_logs
from tests.utils import DEFAULT_TEST_LOG_LEVEL
from tests.utils.log_fixtures import (
    direct_logger,
    module_logger,
)


# These fixtures are intentionally re-exported so pytest can discover them.
__all__ = [
    "direct_logger",
    "module_logger",
]


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_logger_level() -> Generator[None, None, None]:
    """Reset the app logger level before and after each test for isolation.

    CLI tests change the level through --log-level/-q and config files; the
    logger is a module-level singleton, so without this the next test would
    inherit it.
    """
    logger = mod_logs.getAppLogger()
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)
    yield
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)


@pytest.fixture(autouse=True)
def isolate_log_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's LOG_LEVEL variables from leaking into tests."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("EUNIT_RUNNER_LOG_LEVEL", raising=False)
