"""
Cache-aside manager for the Disasters enrichment endpoints.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional, TYPE_CHECKING

from shared.logging import get_logger
from .store import CacheEntry, CacheStore

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_SOCIAL_MEDIA_TTL = 600
DEFAULT_OFFICIAL_UPDATES_TTL = 3600


class CacheManager:
    """Reads and writes response payloads keyed by request identity.

    Cache failures never reach the caller: a failed or undecodable read is a
    miss and a failed write is logged and dropped. Concurrent misses on one
    key are not coalesced; each runs its producer and the last upsert wins.
    """

    def __init__(
        self,
        store: CacheStore,
        *,
        metrics: Optional["MetricsCollector"] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.metrics = metrics
        self.clock = clock
        self.logger = get_logger("disasters.cache_manager")

    async def get(self, key: str, *, cache_type: str = "response") -> Optional[Any]:
        """Return the live payload for key, or None on miss."""
        try:
            entry = await self.store.get_entry(key)
        except Exception as exc:
            self.logger.error("Cache fetch error", key=key, error=str(exc))
            self._record(cache_type, hit=False)
            return None

        if entry is None:
            self.logger.info("Cache MISS", key=key)
            self._record(cache_type, hit=False)
            return None

        if entry.is_expired(self.clock()):
            self.logger.info("Cache MISS (expired entry not yet purged)", key=key)
            self._record(cache_type, hit=False)
            return None

        try:
            payload = json.loads(entry.value)
        except (TypeError, json.JSONDecodeError):
            self.logger.warning("Discarding malformed cache payload", key=key)
            self._record(cache_type, hit=False)
            return None

        self.logger.info("Cache HIT", key=key)
        self._record(cache_type, hit=True)
        return payload

    async def set(self, key: str, payload: Any, ttl_seconds: int) -> bool:
        """Store payload under key until now + ttl_seconds."""
        try:
            entry = CacheEntry(
                key=key,
                value=json.dumps(payload),
                expires_at=self.clock() + timedelta(seconds=ttl_seconds),
            )
            await self.store.upsert_entry(entry)
            return True
        except Exception as exc:
            self.logger.error("Cache write error", key=key, error=str(exc))
            return False

    async def cache_aside(
        self,
        key: str,
        ttl_seconds: int,
        producer: Callable[[], Awaitable[Any]],
        *,
        cache_type: str = "response",
        should_store: Optional[Callable[[Any], bool]] = None,
    ) -> Any:
        """Serve key from cache, or run producer and populate the cache.

        Producer errors propagate and leave the cache untouched.
        """
        cached = await self.get(key, cache_type=cache_type)
        if cached is not None:
            return cached

        payload = await producer()
        if should_store is None or should_store(payload):
            await self.set(key, payload, ttl_seconds)
        else:
            self.logger.info("Skipping cache write for partial result", key=key)
        return payload

    async def check_health(self) -> bool:
        return await self.store.ping()

    def _record(self, cache_type: str, *, hit: bool) -> None:
        if not self.metrics:
            return
        metric = "cache_hits_total" if hit else "cache_misses_total"
        self.metrics.increment_counter(metric, cache_type=cache_type)
