"""Cache port for read-heavy trainer listings.

Only listing results go through here. Ownership decisions are never cached.
"""
import threading
import time
from abc import ABC, abstractmethod


class Cache(ABC):

    @abstractmethod
    def get(self, key):
        """Return the cached value or None on a miss."""

    @abstractmethod
    def set(self, key, value, ttl):
        pass

    @abstractmethod
    def delete_prefix(self, prefix):
        pass


class MemoryCache(Cache):
    """Process-local TTL cache."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def set(self, key, value, ttl):
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)

    def delete_prefix(self, prefix):
        with self._lock:
            for key in [k for k in self._entries if k.startswith(prefix)]:
                del self._entries[key]
