from fsbuckets.interfaces import IVisibilityCache
from zope.interface import implementer

import collections
import logging
import threading
import time


logger = logging.getLogger(__name__)


@implementer(IVisibilityCache)
class VisibilityCache:
    """In-memory LRU cache of bucket name -> public flag.

    One instance is created at startup and shared by every Bucket handle
    of a Storage. Writers call put() so the cache never lags behind the
    marker file; get_or_compute() fills misses, computing each missing
    key at most once while concurrent callers wait for the result.
    """

    def __init__(self, max_size=1024, ttl=None):
        self.max_size = max_size
        self.ttl = ttl or None
        self._entries = collections.OrderedDict()  # {key: (value, stored_at)}
        self._key_locks = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def _lookup(self, key):
        """Return the live entry for key or None. Caller holds _lock."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.ttl is not None and time.monotonic() - entry[1] >= self.ttl:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry

    def _store(self, key, value):
        """Caller holds _lock."""
        self._entries[key] = (value, time.monotonic())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def get(self, key):
        with self._lock:
            entry = self._lookup(key)
        return None if entry is None else entry[0]

    def get_or_compute(self, key, compute):
        with self._lock:
            entry = self._lookup(key)
            if entry is not None:
                return entry[0]
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                entry = self._lookup(key)
                if entry is not None:
                    return entry[0]
            logger.debug("Visibility cache miss for %s", key)
            try:
                # No answer counts as private.
                value = bool(compute(key))
                with self._lock:
                    # A put() made while computing wins over the computed value.
                    entry = self._lookup(key)
                    if entry is not None:
                        return entry[0]
                    self._store(key, value)
                    return value
            finally:
                with self._lock:
                    self._key_locks.pop(key, None)

    def put(self, key, value):
        with self._lock:
            self._store(key, bool(value))

    def invalidate(self, key):
        with self._lock:
            self._entries.pop(key, None)

    def clear(self):
        with self._lock:
            self._entries.clear()
