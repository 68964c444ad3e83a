"""
Shared pytest fixtures and configuration for faultline tests.

This module provides:
- src/ on sys.path so the package imports without installation
- Settings cache reset between tests for environment isolation
- Small units of work reused across barrier and fan-out tests
"""

import os
import sys
import time
from pathlib import Path
from typing import Callable, Generator

import pytest

# Ensure faultline package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from faultline.core.settings import reset_settings


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop cached settings and FAULTLINE_* env vars around every test."""
    for key in [k for k in os.environ if k.startswith("FAULTLINE_")]:
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# Units of Work
# =============================================================================


@pytest.fixture
def noop() -> Callable[[], None]:
    """A unit of work that returns normally."""
    return lambda: None


@pytest.fixture
def raiser() -> Callable[[BaseException], Callable[[], None]]:
    """Factory for units of work that raise the given exception."""

    def make(exc: BaseException) -> Callable[[], None]:
        def work() -> None:
            raise exc

        return work

    return make


@pytest.fixture
def sleeper() -> Callable[[float], Callable[[], None]]:
    """Factory for units of work that sleep for the given seconds."""

    def make(seconds: float) -> Callable[[], None]:
        return lambda: time.sleep(seconds)

    return make
