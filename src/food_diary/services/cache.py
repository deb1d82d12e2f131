"""Process-local key-value cache with per-entry expiry."""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Protocol


class Cache(Protocol):
    """Key-value store for small, recomputable lookups."""

    def get(self, key: str) -> object | None:
        """Return the value for ``key`` unless it is missing or stale."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store ``value`` for ``ttl_seconds``."""


@dataclass
class _Slot:
    value: object
    expires_at: float


class InMemoryCache(Cache):
    """Bounded in-memory cache; the oldest entry is evicted when full."""

    def __init__(self, max_entries: int = 1024) -> None:
        self.max_entries = max_entries
        self._slots: OrderedDict[str, _Slot] = OrderedDict()

    def get(self, key: str) -> object | None:
        slot = self._slots.get(key)
        if slot is None:
            return None
        if time.monotonic() >= slot.expires_at:
            self._slots.pop(key, None)
            return None
        return slot.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        self._slots.pop(key, None)
        self._slots[key] = _Slot(value=value, expires_at=time.monotonic() + ttl_seconds)
        while len(self._slots) > self.max_entries:
            self._slots.popitem(last=False)

    def __len__(self) -> int:
        return len(self._slots)
