from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Protocol

from django.core.cache import BaseCache, caches

from .exceptions import CacheUnavailable


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: tuple[int, ...]
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CacheStore(Protocol):
    def get(self, key: str) -> CacheEntry | None: ...

    def set(self, key: str, value: tuple[int, ...], ttl: int) -> None: ...


class DjangoCacheStore:
    """
    Cache entries kept in a Django cache backend.

    The expiry timestamp is stored next to the value so a read past it is a
    miss even if the backend keeps the key a bit longer (or has no TTL).
    Backend errors are raised as CacheUnavailable.
    """

    def __init__(self, alias: str = "default", *, clock: Callable[[], float] = time.time):
        self.alias = alias
        self.clock = clock

    @property
    def backend(self) -> BaseCache:
        return caches[self.alias]

    def get(self, key: str) -> CacheEntry | None:
        try:
            raw = self.backend.get(key)
        except Exception as e:
            raise CacheUnavailable(f"Cache read failed for {key!r}: {e}") from e
        if not isinstance(raw, dict):
            return None
        try:
            entry = CacheEntry(
                key=key,
                value=tuple(int(v) for v in raw["ids"]),
                expires_at=float(raw["expires_at"]),
            )
        except (KeyError, TypeError, ValueError):
            # Unreadable payload (e.g. older format): same as absent.
            return None
        if entry.is_expired(self.clock()):
            return None
        return entry

    def set(self, key: str, value: tuple[int, ...], ttl: int) -> None:
        payload = {"ids": list(value), "expires_at": self.clock() + ttl}
        try:
            self.backend.set(key, payload, timeout=ttl)
        except Exception as e:
            raise CacheUnavailable(f"Cache write failed for {key!r}: {e}") from e
