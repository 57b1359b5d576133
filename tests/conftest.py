"""Shared pytest fixtures for foldexpr tests."""

import pytest

from foldexpr.core.ir import Environment
from foldexpr.core.settings import TOLERANCE_ENV_VAR


@pytest.fixture
def env() -> Environment:
    """Return an empty environment with default settings."""
    return Environment()


@pytest.fixture(autouse=True)
def _clean_tolerance_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a tolerance override in the caller's shell from leaking into tests."""
    monkeypatch.delenv(TOLERANCE_ENV_VAR, raising=False)

