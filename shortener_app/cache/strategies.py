"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).

Only resolve() reads through the cache. Mappings never change once stored,
so a cached entry cannot go stale and nothing ever needs invalidating.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Optional, Tuple

import redis


logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    This is the Strategy Pattern interface - allows multiple cache implementations
    without changing the service layer code.

    A failing cache must never fail a request: implementations log and
    report a miss instead of raising.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or expired
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL (Time To Live).

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (default: 1 hour)

        Returns:
            True if successful, False otherwise
        """
        pass


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Shared by every server process, survives restarts if Redis is
    configured for persistence, TTL handled by Redis itself.
    """

    def __init__(self, redis_client: redis.Redis):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
            return value.decode('utf-8') if value else None
        except redis.RedisError as e:
            logger.warning("Redis get error: %s", e)
            return None

    def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        try:
            return bool(self.redis.setex(key, ttl, value))
        except redis.RedisError as e:
            logger.warning("Redis set error: %s", e)
            return False


class InMemoryCache(CacheStrategy):
    """
    In-memory LRU cache with per-entry expiry.

    Pros:
    - Very fast (no network overhead)
    - No external service
    - Good for development and testing

    Cons:
    - Not distributed (each server has its own cache)
    - Lost on restart

    Expired entries are dropped when read. Once max_entries is reached the
    least recently used entry is evicted, so memory stays bounded.
    """

    def __init__(
        self,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_entries: Upper bound on stored entries
            clock: Seconds source used for expiry (injectable for tests)
        """
        self.max_entries = max(max_entries, 1)
        self._clock = clock
        self._cache: "OrderedDict[str, Tuple[str, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return value

    def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        expires_at = self._clock() + ttl
        with self._lock:
            self._cache[key] = (value, expires_at)
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_entries:
                self._cache.popitem(last=False)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Used to disable caching without branching in the service.
    """

    def get(self, key: str) -> Optional[str]:
        """Always returns None (cache miss)"""
        return None

    def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        return True
