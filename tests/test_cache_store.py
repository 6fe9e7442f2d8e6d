"""Tests for the Django cache backed store."""

import pytest

from sitecounts.cache_store import CacheEntry, DjangoCacheStore
from sitecounts.exceptions import CacheUnavailable


class Clock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class BrokenBackend:
    def get(self, key, default=None):
        raise ConnectionError("cache server down")

    def set(self, key, value, timeout=None):
        raise ConnectionError("cache server down")


def test_set_then_get():
    clock = Clock()
    store = DjangoCacheStore(clock=clock)

    store.set("k", (5, 7, 12), 300)

    assert store.get("k") == CacheEntry(key="k", value=(5, 7, 12), expires_at=1300.0)


def test_missing_key_is_none():
    assert DjangoCacheStore().get("nope") is None


def test_entry_past_expiry_is_absent():
    clock = Clock()
    store = DjangoCacheStore(clock=clock)
    store.set("k", (1,), 300)

    clock.now = 1299.0
    assert store.get("k") is not None
    clock.now = 1300.0
    assert store.get("k") is None


def test_set_overwrites_previous_entry():
    store = DjangoCacheStore(clock=Clock())
    store.set("k", (1, 2, 3), 300)
    store.set("k", (4,), 300)

    assert store.get("k").value == (4,)


def test_unreadable_payload_is_absent():
    store = DjangoCacheStore()
    store.backend.set("k", [1, 2, 3])
    assert store.get("k") is None

    store.backend.set("k", {"ids": ["x"], "expires_at": 1})
    assert store.get("k") is None


def test_backend_errors_raise_cache_unavailable(monkeypatch):
    monkeypatch.setattr(DjangoCacheStore, "backend", property(lambda self: BrokenBackend()))
    store = DjangoCacheStore()

    with pytest.raises(CacheUnavailable):
        store.get("k")
    with pytest.raises(CacheUnavailable):
        store.set("k", (1,), 300)
