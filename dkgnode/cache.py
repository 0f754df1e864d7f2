"""
Process wide state shared by request handlers:
    1. replay caches, one per verifier identifier, entries expire on their own
    2. typed stores filled by the DKG subsystem (user index -> share, user index -> public key)
"""

import logging
import threading
import time
from collections import namedtuple
from typing import Dict, Generic, Optional, Type, TypeVar

from .curve import Point
from .errors import CacheStructureMissingError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# this node's share of the key for one user index
SiStore = namedtuple("SiStore", ["index", "value"])


class ExpiringCache:
    """
    key -> value with a per entry time to live. An expired entry is the same as a missing one.
    Writes sweep out expired entries at most once every `purge_interval` seconds.
    """

    def __init__(self, clock=time.time, purge_interval: float = 60.0):
        self._clock = clock
        self._items = {}
        self._lock = threading.Lock()
        self._purge_interval = purge_interval
        self._next_purge = clock() + purge_interval

    def _live(self, key):
        item = self._items.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            del self._items[key]
            return None
        return item

    def _purge_locked(self):
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._items.items() if expires_at is not None and now >= expires_at]
        for key in expired:
            del self._items[key]
        self._next_purge = now + self._purge_interval

    def _maybe_purge_locked(self):
        if self._clock() >= self._next_purge:
            self._purge_locked()

    def get(self, key, default=None):
        with self._lock:
            item = self._live(key)
        return default if item is None else item[0]

    def __contains__(self, key):
        with self._lock:
            return self._live(key) is not None

    def set(self, key, value, ttl: Optional[float] = None):
        with self._lock:
            self._maybe_purge_locked()
            expires_at = None if ttl is None else self._clock() + ttl
            self._items[key] = (value, expires_at)

    def add(self, key, value, ttl: Optional[float] = None) -> bool:
        """Set only if absent (or expired). True when this call stored the value."""
        with self._lock:
            self._maybe_purge_locked()
            if self._live(key) is not None:
                return False
            expires_at = None if ttl is None else self._clock() + ttl
            self._items[key] = (value, expires_at)
            return True

    def purge(self):
        with self._lock:
            self._purge_locked()

    def __len__(self):
        with self._lock:
            return len(self._items)


class TypedStore(Generic[T]):
    """
    A named slot holding one structure of a known shape. Reading it before it is loaded,
    or after something of the wrong shape was put there, is a fatal internal error.
    """

    def __init__(self, name: str, shape: Type):
        self.name = name
        self.shape = shape
        self._value = None

    def put(self, value: T):
        if not isinstance(value, self.shape):
            raise TypeError(f"{self.name} expects {self.shape.__name__}, got {type(value).__name__}")
        self._value = value

    def get(self) -> T:
        value = self._value
        if value is None:
            raise CacheStructureMissingError(f"Could not get {self.name}, not found")
        if not isinstance(value, self.shape):
            raise CacheStructureMissingError(f"{self.name} holds {type(value).__name__}")
        return value

    def loaded(self) -> bool:
        return self._value is not None


class CacheSuite:
    def __init__(self, clock=time.time):
        self._clock = clock
        self._token_caches: Dict[str, ExpiringCache] = {}
        self._namespace_locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self.si_mapping: TypedStore[Dict[int, SiStore]] = TypedStore("Si_MAPPING", dict)
        self.user_pub_keys: TypedStore[Dict[int, Point]] = TypedStore("FinalUserPubKey_MAPPING", dict)

    def _namespace_lock(self, namespace: str) -> threading.Lock:
        with self._locks_guard:
            return self._namespace_locks.setdefault(namespace, threading.Lock())

    def token_cache(self, verifier_identifier: str) -> ExpiringCache:
        cache = self._token_caches.get(verifier_identifier)
        if cache is not None:
            return cache
        with self._namespace_lock(verifier_identifier):
            cache = self._token_caches.get(verifier_identifier)
            if cache is None:
                logger.debug("creating token cache for verifier %s", verifier_identifier)
                cache = ExpiringCache(clock=self._clock)
                self._token_caches[verifier_identifier] = cache
            return cache

    def verifier_namespaces(self):
        return sorted(self._token_caches)

    def load_dkg_output(self, si_mapping: Dict[int, SiStore], user_pub_keys: Dict[int, Point]):
        self.si_mapping.put(dict(si_mapping))
        self.user_pub_keys.put(dict(user_pub_keys))
