"""
Image Colors Result Cache
In-memory LRU cache for extracted color results, shared across requests.
"""
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Dict, Optional, Union

from loguru import logger

from imagecolors.config import config


class CacheBackend(ABC):
    """Abstract base class for cache backends."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in cache, optionally expiring after ttl seconds."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete key from cache."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if key exists."""
        pass

    @abstractmethod
    def clear(self) -> bool:
        """Clear all cache entries."""
        pass


class InMemoryLRUCache(CacheBackend):
    """
    Thread-safe in-memory LRU cache.

    Reads and writes are serialised by a re-entrant lock. A lookup followed
    by a later store is not atomic: two requests missing the same key may
    both compute, and the last store wins.
    """

    def __init__(self, max_size: int = 500, default_ttl: Optional[int] = None):
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._cache: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self._lock = threading.RLock()
        self.stats = {"hits": 0, "misses": 0, "evictions": 0}

    def get(self, key: str) -> Optional[Any]:
        """Get value and mark it most recently used."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self.stats["misses"] += 1
                return None

            expires = entry["expires"]
            if expires is not None and expires <= time.time():
                del self._cache[key]
                self.stats["misses"] += 1
                return None

            self._cache.move_to_end(key)
            self.stats["hits"] += 1
            return entry["value"]

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value and evict the least recently used entry when full."""
        ttl = ttl if ttl is not None else self.default_ttl
        with self._lock:
            if key not in self._cache and len(self._cache) >= self.max_size:
                self._evict_lru()

            self._cache[key] = {
                "value": value,
                "expires": time.time() + ttl if ttl else None
            }
            self._cache.move_to_end(key)
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        """Check if non-expired key exists."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return False
            return entry["expires"] is None or entry["expires"] > time.time()

    def clear(self) -> bool:
        """Clear all entries and reset stats."""
        with self._lock:
            self._cache.clear()
            for key in self.stats:
                self.stats[key] = 0
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def _evict_lru(self):
        lru_key, _ = self._cache.popitem(last=False)
        self.stats["evictions"] += 1
        logger.debug(f"Evicted cache key {lru_key[:64]}")

    def get_cache_stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self.stats["hits"] + self.stats["misses"]
            return {
                "stats": self.stats.copy(),
                "size": len(self._cache),
                "max_size": self.max_size,
                "hit_rate": self.stats["hits"] / total if total > 0 else 0.0
            }


def resolve_cache_key(source: Union[str, int, float], key: Optional[str] = None,
                      max_length: int = config.CACHE_KEY_MAX_LENGTH) -> str:
    """
    Resolve the cache key for an image request.

    An explicit non-empty key wins. Numeric resource ids map to
    "resource_<id>"; string locators are truncated to max_length characters.
    """
    if key:
        return key
    if isinstance(source, (int, float)) and not isinstance(source, bool):
        return f"resource_{source}"
    return str(source)[:max_length]


def create_result_cache() -> InMemoryLRUCache:
    """Build the process-wide result cache from configuration."""
    return InMemoryLRUCache(max_size=config.CACHE_MAX_SIZE, default_ttl=config.CACHE_TTL)
