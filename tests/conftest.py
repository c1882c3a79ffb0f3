"""Pytest configuration and fixtures.

Provides environment isolation and small test doubles. Fixtures here are
autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
import os
from typing import Any

import pytest

from upshot.config import reset_config_cache

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class CallRecorder:
    """Callable double that records every argument it is called with.

    Use it as a continuation or hook to assert whether (and with what) a
    combinator invoked user code.
    """

    returns: Any = None
    calls: list[Any] = field(default_factory=list)

    def __call__(self, arg: Any) -> Any:
        self.calls.append(arg)
        return self.returns

    @property
    def called(self) -> bool:
        return bool(self.calls)


@dataclass
class AsyncCallRecorder(CallRecorder):
    """Async variant of ``CallRecorder``."""

    async def __call__(self, arg: Any) -> Any:  # type: ignore[override]
        self.calls.append(arg)
        return self.returns


@pytest.fixture
def recorder() -> CallRecorder:
    """Return a fresh synchronous CallRecorder (not autouse)."""
    return CallRecorder()


@pytest.fixture
def async_recorder() -> AsyncCallRecorder:
    """Return a fresh AsyncCallRecorder (not autouse)."""
    return AsyncCallRecorder()


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests."""
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_upshot_env(monkeypatch):
    """Clear UPSHOT_* variables and the cached configuration around each test."""
    for key in list(os.environ.keys()):
        if key.startswith("UPSHOT_"):
            monkeypatch.delenv(key, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
