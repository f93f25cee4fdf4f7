"""
Pytest Configuration and Fixtures for the Notifier Tests
========================================================

Purpose
-------
Centralized test fixtures and configuration for the notifier test suite.

Responsibilities
----------------
- Pin the environment used while tests run
- Provide ready-made Notifier instances for each error policy
- Provide an isolated configuration environment for Config tests

Architecture Notes
------------------
- Listeners in tests are pytest-mock mocks (`mocker.Mock()`), which record
  their calls and compare by identity
- Fixtures are function-scoped: every test gets a fresh Notifier
"""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, Generator

import pytest

CONFIG_ENV_KEYS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "LOG_JSON",
    "LOG_COLORS",
    "NOTIFIER_ERROR_POLICY",
    "NOTIFIER_ENABLE_METRICS",
)


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ["ENVIRONMENT"] = "testing"

    from notifier.config import Config

    Config.reset()


# ============================================================================
# NOTIFIER FIXTURES
# ============================================================================


@pytest.fixture
def notifier():
    """
    Notifier[str] with the default (RAISE) error policy and metrics enabled.

    Scope: function
    """
    from notifier import ErrorPolicy, Notifier

    return Notifier(name="test", error_policy=ErrorPolicy.RAISE, enable_metrics=True)


@pytest.fixture
def collecting_notifier():
    """
    Notifier[str] that isolates listener failures (COLLECT policy).

    Scope: function
    """
    from notifier import ErrorPolicy, Notifier

    return Notifier(
        name="collecting", error_policy=ErrorPolicy.COLLECT, enable_metrics=True
    )


@pytest.fixture
def failing_listener(mocker):
    """Listener that raises RuntimeError("boom") when called."""
    return mocker.Mock(side_effect=RuntimeError("boom"))


# ============================================================================
# CONFIG FIXTURES
# ============================================================================


@pytest.fixture
def config_env(monkeypatch) -> Generator[Callable[..., Any], None, None]:
    """
    Isolated environment for Config tests.

    Clears every Config variable, yields a loader that sets the given
    variables and reloads Config, and restores Config afterwards.

    Usage:
        config = config_env(NOTIFIER_ERROR_POLICY="collect")
        assert config.NOTIFIER_ERROR_POLICY == "collect"
    """
    from notifier.config import Config

    saved: Dict[str, Any] = {
        attr: getattr(Config, attr)
        for attr in CONFIG_ENV_KEYS
    }
    saved_metrics = Config._metrics

    for key in CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)

    def load(**env: str):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        Config.reset()
        return Config

    yield load

    for attr, value in saved.items():
        setattr(Config, attr, value)
    Config._metrics = saved_metrics
