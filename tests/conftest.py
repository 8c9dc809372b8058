"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are set before any paramtree import so the global
settings pick the in-memory SQLite backend and never touch AWS.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ["STORE_BACKEND"] = "local"
os.environ["STORE_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "plain")

import pytest
import pytest_asyncio

from paramtree.adapters.store.local import LocalParameterStore


class FakeClock:
    """Deterministic clock whose sleep advances time instead of waiting."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.current

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += max(seconds, 0.0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def local_store():
    """Fresh in-memory SQLite store with small pages to exercise pagination."""
    store = LocalParameterStore(database_url="sqlite+aiosqlite:///:memory:", page_size=3)
    await store.init()
    try:
        yield store
    finally:
        await store.close()
