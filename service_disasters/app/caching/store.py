"""
Cache store backends for the Disasters service.

A store only persists entries; deciding whether an entry is still live is the
cache manager's job, so every backend hands back the stored expiry untouched.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import redis.asyncio as redis
from pymongo import ASCENDING, AsyncMongoClient

from shared.logging import get_logger
from shared.errors import PersistenceError


@dataclass(frozen=True)
class CacheEntry:
    """A cached response payload keyed by request identity."""

    key: str
    value: str
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """An entry is gone once the clock reaches its expiry, purged or not."""
        current = now or datetime.now(timezone.utc)
        return current >= _as_utc(self.expires_at)


def _as_utc(value: datetime) -> datetime:
    # MongoDB returns naive datetimes that are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CacheStore:
    """Abstract cache interface (implemented for MongoDB and Redis)."""

    name = "abstract"

    async def start(self) -> None:
        """Open connections and prepare indexes."""

    async def stop(self) -> None:
        """Release connections."""

    async def get_entry(self, key: str) -> Optional[CacheEntry]:
        raise NotImplementedError

    async def upsert_entry(self, entry: CacheEntry) -> None:
        raise NotImplementedError

    async def ping(self) -> bool:
        raise NotImplementedError


class MongoCacheStore(CacheStore):
    """Cache collection with a unique key and a TTL index on expires_at."""

    name = "mongo"

    def __init__(
        self,
        mongo_uri: str,
        database: Optional[str] = None,
        collection: str = "cache",
        *,
        client: Optional[AsyncMongoClient] = None,
    ):
        self.mongo_uri = mongo_uri
        self.database_name = database
        self.collection_name = collection
        self.logger = get_logger("disasters.cache.mongo")
        self._client = client
        self._owns_client = client is None
        self._collection = None

    async def start(self) -> None:
        """Connect and create the key and expiry indexes."""
        try:
            if self._client is None:
                self._client = AsyncMongoClient(self.mongo_uri, tz_aware=True)
            db = (
                self._client[self.database_name]
                if self.database_name
                else self._client.get_default_database()
            )
            self._collection = db[self.collection_name]
            await self._collection.create_index([("key", ASCENDING)], unique=True)
            # The server sweeps roughly once a minute, so reads still check expiry
            await self._collection.create_index([("expires_at", ASCENDING)], expireAfterSeconds=1)
            self.logger.info("MongoDB cache store started", collection=self.collection_name)
        except Exception as e:
            self.logger.error("Failed to start MongoDB cache store", error=str(e))
            raise PersistenceError("Failed to start MongoDB cache store", {"error": str(e)})

    async def stop(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.close()
            self.logger.info("MongoDB cache store stopped")

    @property
    def collection(self):
        if self._collection is None:
            raise PersistenceError("MongoDB cache store is not started")
        return self._collection

    async def get_entry(self, key: str) -> Optional[CacheEntry]:
        doc = await self.collection.find_one({"key": key})
        if not doc:
            return None
        return CacheEntry(key=doc["key"], value=doc["value"], expires_at=doc["expires_at"])

    async def upsert_entry(self, entry: CacheEntry) -> None:
        await self.collection.update_one(
            {"key": entry.key},
            {"$set": {"value": entry.value, "expires_at": entry.expires_at}},
            upsert=True,
        )

    async def ping(self) -> bool:
        try:
            await self.collection.database.command("ping")
            return True
        except Exception as exc:
            self.logger.error("MongoDB cache health check failed", error=str(exc))
            return False


class RedisCacheStore(CacheStore):
    """Redis-backed cache; entries carry their own expiry next to the value."""

    name = "redis"
    KEY_PREFIX = "disasters:cache:"

    def __init__(self, redis_url: str, *, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self.logger = get_logger("disasters.cache.redis")
        self.redis: Optional[redis.Redis] = client

    async def start(self) -> None:
        try:
            if self.redis is None:
                self.redis = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=5,
                )
            await self.redis.ping()
            self.logger.info("Redis cache store started")
        except Exception as e:
            self.logger.error("Failed to start Redis cache store", error=str(e))
            raise PersistenceError("Failed to start Redis cache store", {"error": str(e)})

    async def stop(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
            self.logger.info("Redis cache store stopped")

    def _key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    async def get_entry(self, key: str) -> Optional[CacheEntry]:
        if self.redis is None:
            raise PersistenceError("Redis cache store is not started")
        raw = await self.redis.get(self._key(key))
        if not raw:
            return None
        data: Dict[str, Any] = json.loads(raw)
        return CacheEntry(
            key=key,
            value=data["value"],
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )

    async def upsert_entry(self, entry: CacheEntry) -> None:
        if self.redis is None:
            raise PersistenceError("Redis cache store is not started")
        ttl = int((_as_utc(entry.expires_at) - datetime.now(timezone.utc)).total_seconds())
        payload = json.dumps({
            "value": entry.value,
            "expires_at": _as_utc(entry.expires_at).isoformat(),
        })
        await self.redis.set(self._key(entry.key), payload, ex=max(1, ttl))

    async def ping(self) -> bool:
        try:
            return bool(self.redis is not None and await self.redis.ping())
        except Exception as exc:
            self.logger.error("Redis cache health check failed", error=str(exc))
            return False


def create_cache_store(config) -> CacheStore:
    """Build the configured cache backend."""
    if config.cache_backend == "redis":
        return RedisCacheStore(config.redis_url)
    return MongoCacheStore(config.mongo_uri, config.mongo_database)
