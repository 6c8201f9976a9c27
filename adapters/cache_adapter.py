"""
Cache adapter - key/value store used by every service for read-through caching.

Services talk to a SafeCache, never to a backend directly. SafeCache turns any
backend failure into a logged cache miss so the catalog store stays the only
hard dependency of a request.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

from app.exceptions import DependencyUnavailableError

logger = logging.getLogger("pantrychef.cache")


class CacheBackend(ABC):
    """Minimal key/value contract: string values, optional TTL in seconds."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        ...

    @abstractmethod
    def delete(self, *keys: str) -> int:
        ...

    @abstractmethod
    def keys(self, pattern: str) -> List[str]:
        ...

    @abstractmethod
    def flush_all(self) -> None:
        ...

    def ping(self) -> bool:
        return True


class InMemoryCache(CacheBackend):
    """Process-local TTL cache.

    Expired entries are dropped lazily on access and when the store grows
    past max_entries, after which the oldest writes are evicted first.
    """

    def __init__(self, max_entries: int = 10000, clock: Callable[[], float] = time.monotonic):
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()
        self._max_entries = max_entries
        self._clock = clock

    def _expired(self, expires_at: Optional[float], now: float) -> bool:
        return expires_at is not None and expires_at <= now

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._expired(expires_at, self._clock()):
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        with self._lock:
            expires_at = self._clock() + ttl if ttl else None
            # re-insert so dict order tracks write recency
            self._data.pop(key, None)
            self._data[key] = (value, expires_at)
            if len(self._data) > self._max_entries:
                self._evict()

    def _evict(self) -> None:
        now = self._clock()
        for key in [k for k, (_, exp) in self._data.items() if self._expired(exp, now)]:
            del self._data[key]
        while len(self._data) > self._max_entries:
            oldest = next(iter(self._data))
            del self._data[oldest]

    def delete(self, *keys: str) -> int:
        removed = 0
        with self._lock:
            for key in keys:
                if self._data.pop(key, None) is not None:
                    removed += 1
        return removed

    def keys(self, pattern: str) -> List[str]:
        with self._lock:
            now = self._clock()
            return [
                k
                for k, (_, exp) in self._data.items()
                if not self._expired(exp, now) and fnmatch.fnmatchcase(k, pattern)
            ]

    def ttl(self, key: str) -> Optional[float]:
        """Remaining lifetime in seconds, None for a missing or non-expiring key."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None or entry[1] is None:
                return None
            return max(0.0, entry[1] - self._clock())

    def flush_all(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class SafeCache:
    """Failure-tolerant facade over a CacheBackend.

    Reads degrade to a miss, writes and deletes degrade to a no-op; every
    failure is logged. Values are JSON encoded.
    """

    def __init__(self, backend: CacheBackend):
        self.backend = backend

    def get_json(self, key: str) -> Optional[Any]:
        try:
            raw = self.backend.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed key={key}: {e}")
            return None
        if raw is None:
            logger.debug(f"Cache MISS: {key}")
            return None
        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry key={key}")
            self.delete(key)
            return None
        logger.debug(f"Cache HIT: {key}")
        return value

    def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            self.backend.set(key, json.dumps(value, default=str), ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache write failed key={key}: {e}")
            return False

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return self.backend.delete(*keys)
        except Exception as e:
            logger.error(f"Cache invalidation failed keys={list(keys)}: {e}")
            return 0

    def delete_pattern(self, pattern: str) -> int:
        try:
            matched = self.backend.keys(pattern)
            if not matched:
                return 0
            return self.backend.delete(*matched)
        except Exception as e:
            logger.error(f"Cache family invalidation failed pattern={pattern}: {e}")
            return 0

    def flush_all(self) -> bool:
        try:
            self.backend.flush_all()
            logger.info("All caches invalidated")
            return True
        except Exception as e:
            logger.error(f"Failed to invalidate all caches: {e}")
            return False

    def ping(self) -> bool:
        try:
            return bool(self.backend.ping())
        except Exception as e:
            logger.warning(f"Cache ping failed: {e}")
            return False


class UnavailableCache(CacheBackend):
    """Backend that always fails; stands in while the real backend is down."""

    def _fail(self, *args, **kwargs):
        raise DependencyUnavailableError("Cache backend unavailable")

    get = _fail
    set = _fail
    delete = _fail
    keys = _fail
    flush_all = _fail
    ping = _fail


_cache: Optional[SafeCache] = None


def connect(max_entries: int = 10000) -> SafeCache:
    """Initialize the process-wide cache."""
    global _cache
    _cache = SafeCache(InMemoryCache(max_entries=max_entries))
    logger.info("In-memory cache ready max_entries=%d", max_entries)
    return _cache


def get_cache() -> SafeCache:
    """Return the process-wide cache, creating it on first use."""
    if _cache is None:
        return connect()
    return _cache


def close():
    global _cache
    if _cache is not None:
        _cache.flush_all()
        logger.info("Cache closed")
    _cache = None
