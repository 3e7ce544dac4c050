"""
Unit tests for the MongoDB and Redis cache store backends.
"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_disasters.app.caching.store import (
    CacheEntry,
    MongoCacheStore,
    RedisCacheStore,
    create_cache_store,
)
from shared.config import ServiceConfig
from shared.errors import PersistenceError


EXPIRES = datetime(2024, 8, 1, 13, 0, 0, tzinfo=timezone.utc)


def test_naive_expiry_is_treated_as_utc():
    entry = CacheEntry(key="/k", value="[]", expires_at=datetime(2024, 8, 1, 13, 0, 0))

    assert entry.is_expired(EXPIRES) is True
    assert entry.is_expired(EXPIRES - timedelta(seconds=1)) is False


def test_create_cache_store_selects_backend():
    assert isinstance(create_cache_store(ServiceConfig(cache_backend="mongo")), MongoCacheStore)
    assert isinstance(create_cache_store(ServiceConfig(cache_backend="redis")), RedisCacheStore)


class TestMongoCacheStore:
    """Test cases for MongoCacheStore."""

    @pytest.fixture
    def collection(self):
        collection = MagicMock()
        collection.find_one = AsyncMock()
        collection.update_one = AsyncMock()
        return collection

    @pytest.fixture
    def store(self, collection):
        store = MongoCacheStore("mongodb://localhost:27017/test")
        store._collection = collection
        return store

    @pytest.mark.asyncio
    async def test_get_entry_found(self, store, collection):
        collection.find_one.return_value = {"key": "/k", "value": "[1]", "expires_at": EXPIRES}

        entry = await store.get_entry("/k")

        assert entry == CacheEntry(key="/k", value="[1]", expires_at=EXPIRES)
        collection.find_one.assert_awaited_once_with({"key": "/k"})

    @pytest.mark.asyncio
    async def test_get_entry_missing(self, store, collection):
        collection.find_one.return_value = None

        assert await store.get_entry("/k") is None

    @pytest.mark.asyncio
    async def test_upsert_entry(self, store, collection):
        await store.upsert_entry(CacheEntry(key="/k", value="[1]", expires_at=EXPIRES))

        collection.update_one.assert_awaited_once_with(
            {"key": "/k"},
            {"$set": {"value": "[1]", "expires_at": EXPIRES}},
            upsert=True,
        )

    @pytest.mark.asyncio
    async def test_unstarted_store_raises(self):
        store = MongoCacheStore("mongodb://localhost:27017/test")

        with pytest.raises(PersistenceError):
            await store.get_entry("/k")


class TestRedisCacheStore:
    """Test cases for RedisCacheStore."""

    @pytest.fixture
    def redis_client(self):
        client = MagicMock()
        client.get = AsyncMock()
        client.set = AsyncMock()
        client.ping = AsyncMock(return_value=True)
        return client

    @pytest.fixture
    def store(self, redis_client):
        return RedisCacheStore("redis://localhost:6379/0", client=redis_client)

    @pytest.mark.asyncio
    async def test_upsert_sets_value_and_expiry(self, store, redis_client):
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=600)

        await store.upsert_entry(CacheEntry(key="/k", value='{"a": 1}', expires_at=expires_at))

        args, kwargs = redis_client.set.await_args
        assert args[0] == "disasters:cache:/k"
        stored = json.loads(args[1])
        assert stored["value"] == '{"a": 1}'
        assert datetime.fromisoformat(stored["expires_at"]) == expires_at
        assert 1 <= kwargs["ex"] <= 600

    @pytest.mark.asyncio
    async def test_get_entry_round_trips_expiry(self, store, redis_client):
        redis_client.get.return_value = json.dumps({"value": "[]", "expires_at": EXPIRES.isoformat()})

        entry = await store.get_entry("/k")

        assert entry == CacheEntry(key="/k", value="[]", expires_at=EXPIRES)
        redis_client.get.assert_awaited_once_with("disasters:cache:/k")

    @pytest.mark.asyncio
    async def test_get_entry_missing(self, store, redis_client):
        redis_client.get.return_value = None

        assert await store.get_entry("/k") is None

    @pytest.mark.asyncio
    async def test_ping_reports_failure(self, store, redis_client):
        redis_client.ping.side_effect = ConnectionError("down")

        assert await store.ping() is False
