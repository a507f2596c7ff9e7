"""
Centralized Test Configuration.
"""

import asyncio
from datetime import datetime, timedelta

import pytest

from ledgerstore.app.core.config import Settings
from ledgerstore.app.db.bootstrap import LedgerDatabase


# Mock Redis standing in for the browser's async key-value store
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False
        self.set_calls = 0
        self.set_delay = 0

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        if self.set_delay:
            await asyncio.sleep(self.set_delay)
        self.store[key] = value
        self.set_calls += 1
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


class SteppingClock:
    """Deterministic clock moving one second forward per reading."""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0)):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def redis_store():
    return MockRedis()


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides):
        values = {
            "data_dir": tmp_path / "data",
            "database_name": "test_ledger",
            "platform": "native",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
async def make_database(make_settings, redis_store, clock):
    """Factory for LedgerDatabase contexts; every one is torn down after the test."""
    created = []

    def _make(platform="native", **overrides):
        database = LedgerDatabase(
            make_settings(platform=platform, **overrides),
            kv_store_factory=lambda settings: redis_store,
            clock=clock,
        )
        created.append(database)
        return database

    yield _make

    for database in created:
        await database.teardown()


# Every service test runs against both storage backends
@pytest.fixture(params=["native", "web"])
async def database(request, make_database):
    database = make_database(request.param)
    await database.initialize()
    return database


@pytest.fixture
async def owner(database):
    return await database.get_user_service().create_user({"name": "Alice", "email": "alice@example.com"})


@pytest.fixture
async def ledger(database, owner):
    return await database.get_ledger_service().create_ledger(
        {"name": "Personal", "default_currency": "CNY", "owner_id": owner.id}
    )
