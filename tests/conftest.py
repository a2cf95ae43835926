"""
Pytest Configuration and Fixtures for emitkit Tests
===================================================

Purpose
-------
Centralized fixtures for the emitkit test suite: fresh registries and
emitters, controllable pending futures, and helpers to let the event loop
make progress.

Architecture Notes
------------------
- Every fixture is function scoped; emitters never leak listeners across tests
- Async fixtures and tests run through pytest-asyncio
"""

from __future__ import annotations

import asyncio

import pytest

from emitkit import Emitter, ListenerRegistry
from emitkit.core.config import Config
from emitkit.core.logging import clear_log_context


# ============================================================================
# HELPERS
# ============================================================================


async def drain_loop(iterations: int = 10) -> None:
    """Yield to the event loop enough times for ready callbacks to run."""
    for _ in range(iterations):
        await asyncio.sleep(0)


# ============================================================================
# CORE FIXTURES
# ============================================================================


@pytest.fixture
def registry() -> ListenerRegistry:
    """Empty listener registry."""
    return ListenerRegistry()


@pytest.fixture
def emitter() -> Emitter:
    """Emitter with the default strategy."""
    return Emitter.create()


@pytest.fixture
def drain():
    """The drain_loop helper, for async tests."""
    return drain_loop


@pytest.fixture
def pending_future():
    """
    Factory for futures settled manually by the test.

    Must be used from an async test (needs the running loop).
    """

    def _make() -> asyncio.Future:
        return asyncio.get_running_loop().create_future()

    return _make


@pytest.fixture(autouse=True)
def _reset_log_context():
    """Every test starts without an emission log context."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def restore_config():
    """Restore Config class attributes changed by a test."""
    names = (
        "ENVIRONMENT",
        "LOG_LEVEL",
        "LOG_JSON",
        "LOG_COLORS",
        "_validation_errors",
        "_from_environment",
    )
    saved = {name: getattr(Config, name) for name in names}
    yield Config
    for name, value in saved.items():
        setattr(Config, name, value)
