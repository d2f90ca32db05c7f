"""Cache stores and the cache-aside layer for SeoWise."""

import base64
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Any, Awaitable, Callable, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class CacheEntry:
    """A cached value with its expiry."""

    value: str
    created_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        """Check if entry is expired (ttl <= 0 never expires)."""
        if self.ttl <= 0:
            return False
        return (now - self.created_at) >= self.ttl


@dataclass
class CacheStats:
    """Statistics for cache operations."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    evictions: int = 0
    errors: int = 0

    @property
    def total_requests(self) -> int:
        """Total cache requests."""
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Cache hit rate."""
        if self.total_requests == 0:
            return 0.0
        return self.hits / self.total_requests


class CacheStore(ABC):
    """Async key-value store holding serialized results."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get value from cache."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: float = 0) -> None:
        """Set value in cache with a TTL in seconds."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Clear all entries."""
        pass

    @abstractmethod
    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        pass


class InMemoryCacheStore(CacheStore):
    """In-process store with TTL and LRU eviction."""

    def __init__(
        self,
        max_size: int = 1000,
        namespace: str = "",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize in-memory store.

        Args:
            max_size: Maximum number of entries.
            namespace: Key prefix namespace.
            clock: Clock returning seconds.
        """
        self.max_size = max_size
        self.namespace = namespace
        self._clock = clock

        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()

    def _make_key(self, key: str) -> str:
        if self.namespace:
            return f"{self.namespace}:{key}"
        return key

    def _evict_lru(self) -> None:
        while len(self._cache) >= self.max_size:
            self._cache.popitem(last=False)
            self._stats.evictions += 1

    async def get(self, key: str) -> Optional[str]:
        full_key = self._make_key(key)

        with self._lock:
            entry = self._cache.get(full_key)
            if entry is None:
                self._stats.misses += 1
                return None

            if entry.is_expired(self._clock()):
                del self._cache[full_key]
                self._stats.evictions += 1
                self._stats.misses += 1
                return None

            self._cache.move_to_end(full_key)
            self._stats.hits += 1
            return entry.value

    async def set(self, key: str, value: str, ttl: float = 0) -> None:
        full_key = self._make_key(key)

        with self._lock:
            if full_key not in self._cache:
                self._evict_lru()

            self._cache[full_key] = CacheEntry(
                value=value,
                created_at=self._clock(),
                ttl=ttl,
            )
            self._cache.move_to_end(full_key)
            self._stats.sets += 1

    async def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def get_stats(self) -> CacheStats:
        return self._stats

    @property
    def size(self) -> int:
        """Get current number of entries, expired ones included."""
        return len(self._cache)


class RedisCacheStore(CacheStore):
    """Redis-backed store using ``redis.asyncio``."""

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        namespace: str = "seowise",
        client: Optional[Any] = None,
    ) -> None:
        """Initialize Redis store.

        Args:
            url: Redis connection URL.
            namespace: Key prefix namespace.
            client: An existing ``redis.asyncio.Redis`` client to use.
        """
        self.url = url
        self.namespace = namespace

        self._client = client
        self._stats = CacheStats()

    def _get_client(self):
        """Get or create Redis client."""
        if self._client is None:
            try:
                import redis.asyncio as aioredis
            except ImportError:
                raise ImportError(
                    "Redis client not installed. "
                    "Install with: pip install seowise[redis]"
                )
            self._client = aioredis.from_url(self.url, decode_responses=True)
        return self._client

    def _make_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[str]:
        value = await self._get_client().get(self._make_key(key))
        if value is None:
            self._stats.misses += 1
            return None

        self._stats.hits += 1
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl: float = 0) -> None:
        client = self._get_client()
        full_key = self._make_key(key)

        if ttl > 0:
            await client.set(full_key, value, ex=int(ttl))
        else:
            await client.set(full_key, value)

        self._stats.sets += 1

    async def clear(self) -> None:
        """Clear all entries in namespace."""
        client = self._get_client()
        keys = [key async for key in client.scan_iter(match=f"{self.namespace}:*", count=100)]
        if keys:
            await client.delete(*keys)

    def get_stats(self) -> CacheStats:
        return self._stats

    async def close(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def generate_cache_key(operation: str, params: Dict[str, Any]) -> str:
    """Generate a reversible cache key for an operation call.

    Args:
        operation: Operation name, e.g. ``"keyword_suggestions"``.
        params: Call parameters. Key order does not matter.

    Returns:
        URL-safe base64 of ``operation:canonical-json``.
    """
    canonical = json.dumps(params, sort_keys=True, separators=(",", ":"))
    raw = f"{operation}:{canonical}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cache_key(key: str) -> str:
    """Recover the ``operation:canonical-json`` string from a cache key."""
    return base64.urlsafe_b64decode(key.encode("ascii")).decode("utf-8")


class CacheAside:
    """Read-through/write-behind wrapper around a CacheStore.

    Cache failures are logged and never propagate; the wrapped computation
    runs as if no cache were configured.
    """

    def __init__(
        self,
        store: Optional[CacheStore],
        enabled: bool = True,
        sandbox: bool = False,
        ttl_seconds: float = 0,
    ) -> None:
        self.store = store
        self.enabled = enabled
        self.sandbox = sandbox
        self.ttl_seconds = ttl_seconds

    @property
    def active(self) -> bool:
        """Whether lookups and writes reach the store."""
        return self.enabled and not self.sandbox and self.store is not None

    async def lookup(self, key: str, result_type: Type[ModelT]) -> Optional[ModelT]:
        """Return the cached result for ``key``, or None on miss or failure."""
        if not self.active:
            return None

        try:
            cached = await self.store.get(key)
        except Exception as e:
            self.store.get_stats().errors += 1
            logger.warning(f"Cache read failed for {key[:16]}...: {e}")
            return None

        if cached is None:
            return None

        try:
            return result_type.model_validate_json(cached)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable cache entry {key[:16]}...: {e.error_count()} error(s)")
            return None

    async def store_result(self, key: str, result: BaseModel) -> None:
        """Write ``result`` to the store, logging failures."""
        if not self.active:
            return

        try:
            await self.store.set(key, result.model_dump_json(), self.ttl_seconds)
        except Exception as e:
            self.store.get_stats().errors += 1
            logger.warning(f"Cache write failed for {key[:16]}...: {e}")

    async def with_cache(
        self,
        key: str,
        compute: Callable[[], Awaitable[ModelT]],
        should_cache: Callable[[ModelT], bool],
        result_type: Type[ModelT],
    ) -> ModelT:
        """Return a cached result or compute and cache a fresh one.

        Args:
            key: Cache key from ``generate_cache_key``.
            compute: Coroutine function producing the result on a miss.
            should_cache: Predicate deciding whether a fresh result is stored.
            result_type: Model used to deserialize cached values.

        Returns:
            The cached or freshly computed result.
        """
        cached = await self.lookup(key, result_type)
        if cached is not None:
            logger.debug(f"Cache hit for {key[:16]}...")
            return cached

        result = await compute()

        if should_cache(result):
            await self.store_result(key, result)

        return result
