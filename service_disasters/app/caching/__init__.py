"""
Disasters caching package.

Cache-aside storage for third-party enrichment responses. Entries expire by
timestamp; the manager treats expired-but-unpurged entries as misses.
"""

from .cache_manager import CacheManager
from .store import CacheEntry, CacheStore, MongoCacheStore, RedisCacheStore, create_cache_store

__all__ = [
    "CacheManager",
    "CacheEntry",
    "CacheStore",
    "MongoCacheStore",
    "RedisCacheStore",
    "create_cache_store",
]
