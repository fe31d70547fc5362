import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from crag_tides.cache import keys
from crag_tides.cache.store import MemoryCacheStore, RedisCacheStore
from crag_tides.errors import CacheUnavailableError


def test_key_scheme_is_versioned():
    assert keys.tides_location("abc-123") == "tides:location:abc-123:v1"


class FakeRedis:
    def __init__(self, fail=False):
        self.data = {}
        self.ttls = {}
        self.fail = fail

    def get(self, key):
        if self.fail:
            raise RedisConnectionError("down")
        return self.data.get(key)

    def set(self, key, value, ex=None):
        if self.fail:
            raise RedisConnectionError("down")
        self.data[key] = value
        self.ttls[key] = ex

    def delete(self, key):
        if self.fail:
            raise RedisConnectionError("down")
        self.data.pop(key, None)


def test_redis_store_round_trip():
    r = FakeRedis()
    store = RedisCacheStore(client_factory=lambda: r)
    store.set_text("k", "v", ttl=21600)
    assert r.ttls["k"] == 21600
    assert store.get_text("k") == "v"
    store.delete("k")
    assert store.get_text("k") is None


def test_redis_store_degrades_on_read_and_write_errors():
    store = RedisCacheStore(client_factory=lambda: FakeRedis(fail=True))
    assert store.get_text("k") is None
    store.set_text("k", "v", ttl=60)


def test_redis_store_delete_failure_raises_unavailable():
    store = RedisCacheStore(client_factory=lambda: FakeRedis(fail=True))
    with pytest.raises(CacheUnavailableError):
        store.delete("k")


def test_redis_store_without_client_when_disabled():
    store = RedisCacheStore(client_factory=lambda: None, configured=lambda: False)
    assert store.get_text("k") is None
    store.set_text("k", "v", ttl=60)
    store.delete("k")


def test_delete_configured_but_unreachable_raises():
    reconnects = []

    def reconnect():
        reconnects.append(1)
        return None

    store = RedisCacheStore(client_factory=lambda: None, reconnect=reconnect, configured=lambda: True)
    with pytest.raises(CacheUnavailableError):
        store.delete("tides:location:cliff:v1")
    assert reconnects == [1]


def test_delete_reconnects_after_failed_first_connect():
    r = FakeRedis()
    r.data["k"] = "stale"
    store = RedisCacheStore(client_factory=lambda: None, reconnect=lambda: r, configured=lambda: True)
    store.delete("k")
    assert "k" not in r.data


def test_reconnect_clears_connection_latch(monkeypatch):
    from crag_tides.cache import redis_client
    from crag_tides.config import settings

    monkeypatch.setattr(settings, "redis_url", "redis://127.0.0.1:1/0")
    monkeypatch.setattr(redis_client, "_redis_client", None)
    monkeypatch.setattr(redis_client, "_redis_checked", True)
    attempts = []

    def fake_get_redis():
        attempts.append(redis_client._redis_checked)
        return None

    monkeypatch.setattr(redis_client, "get_redis", fake_get_redis)
    assert redis_client.redis_configured() is True
    assert redis_client.reconnect_redis() is None
    # the latch is cleared before the new attempt
    assert attempts == [False]


def test_memory_store_expiry():
    now = [0.0]
    store = MemoryCacheStore(clock=lambda: now[0])
    store.set_text("k", "v", ttl=10)
    now[0] = 9.9
    assert store.get_text("k") == "v"
    now[0] = 10.0
    assert store.get_text("k") is None


def test_unreachable_configured_redis_blocks_invalidation(monkeypatch):
    from crag_tides.cache import redis_client
    from crag_tides.config import settings

    monkeypatch.setattr(settings, "redis_url", "redis://127.0.0.1:1/0")
    monkeypatch.setattr(redis_client, "_redis_client", None)
    monkeypatch.setattr(redis_client, "_redis_checked", False)

    store = RedisCacheStore()
    assert store.get_text("tides:location:cliff:v1") is None
    with pytest.raises(CacheUnavailableError):
        store.delete("tides:location:cliff:v1")
