"""Lazy Redis connection.

Connection failure never breaks the app: ``get_redis`` returns ``None`` and
the forecast path runs uncached.
"""
from __future__ import annotations

import logging

log = logging.getLogger(__name__)

_redis_client = None
_redis_checked = False


def get_redis():
    """Lazy singleton.  Returns ``redis.Redis`` or ``None`` if unavailable."""
    global _redis_client, _redis_checked
    if _redis_checked:
        return _redis_client
    _redis_checked = True
    try:
        from crag_tides.config import settings

        if not settings.redis_url:
            return None
        import redis

        _redis_client = redis.Redis.from_url(
            settings.redis_url, decode_responses=True, socket_connect_timeout=3
        )
        _redis_client.ping()
        log.info("Redis connected: %s", settings.redis_url)
    except Exception as exc:
        log.warning("Redis unavailable (%s), running without cache", exc)
        _redis_client = None
    return _redis_client


def reconnect_redis():
    """Drop the cached connection result and try again.

    ``get_redis`` latches a failed connection for the process lifetime; the
    invalidation path cannot accept that, so it calls this before giving up.
    """
    global _redis_client, _redis_checked
    _redis_client = None
    _redis_checked = False
    return get_redis()


def redis_configured() -> bool:
    from crag_tides.config import settings

    return bool(settings.redis_url)
