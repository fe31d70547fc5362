"""Minimal get/set/delete-with-TTL cache interface and its backends."""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

from redis.exceptions import RedisError

from crag_tides.cache.redis_client import get_redis, reconnect_redis, redis_configured
from crag_tides.errors import CacheUnavailableError

log = logging.getLogger(__name__)


class CacheStore(ABC):
    @abstractmethod
    def get_text(self, key: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def set_text(self, key: str, value: str, ttl: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError


class RedisCacheStore(CacheStore):
    """Redis-backed store.  Reads/writes degrade to miss/no-op on Redis errors.

    ``delete`` never degrades: when Redis is configured but cannot be reached
    (after one reconnect attempt), or the command fails, it raises
    ``CacheUnavailableError`` so a configuration update is not reported as
    applied while a stale entry survives.
    """

    def __init__(
        self,
        client_factory: Callable = get_redis,
        reconnect: Callable = reconnect_redis,
        configured: Callable[[], bool] = redis_configured,
    ) -> None:
        self._client_factory = client_factory
        self._reconnect = reconnect
        self._configured = configured

    def get_text(self, key: str) -> Optional[str]:
        r = self._client_factory()
        if r is None:
            return None
        try:
            return r.get(key)
        except RedisError as exc:
            log.warning("Redis get failed for %s: %s", key, exc)
            return None

    def set_text(self, key: str, value: str, ttl: int) -> None:
        r = self._client_factory()
        if r is None:
            return
        try:
            r.set(key, value, ex=ttl)
        except RedisError as exc:
            log.warning("Redis set failed for %s: %s", key, exc)

    def delete(self, key: str) -> None:
        r = self._client_factory()
        if r is None:
            if not self._configured():
                return
            r = self._reconnect()
            if r is None:
                raise CacheUnavailableError(f"Cache unreachable, could not invalidate {key}")
        try:
            r.delete(key)
        except RedisError as exc:
            raise CacheUnavailableError(f"Cache delete failed for {key}: {exc}") from exc


class MemoryCacheStore(CacheStore):
    """In-process TTL dict.  ``clock`` is injectable for tests."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._data: Dict[str, Tuple[str, float]] = {}

    def get_text(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def set_text(self, key: str, value: str, ttl: int) -> None:
        self._data[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
