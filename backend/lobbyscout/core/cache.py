"""
Namespaced TTL + LRU cache sitting in front of every Riot API call.

Each namespace is an independent store with its own capacity bound; keys in
different namespaces never collide. Entries carry their own expiry, so a read
after the TTL has elapsed never returns the stale value.
"""

import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional, Tuple
import structlog

logger = structlog.get_logger(__name__)


class CacheTTL:
    """TTL values in seconds per logical resource type."""

    RIOT_ID = 24 * 60 * 60  # account identity rarely changes
    ACCOUNT_BY_PUUID = 24 * 60 * 60
    SUMMONER = 24 * 60 * 60
    LEAGUE = 30 * 60
    MASTERY = 30 * 60
    LIVE_GAME = 10
    MATCH_IDS = 15 * 60
    MATCH_DETAIL = 7 * 24 * 60 * 60  # finished matches are immutable
    INSIGHT_SIGNALS = 6 * 60 * 60
    CHAMP_STATS = 6 * 60 * 60


class CacheNamespace:
    """A single LRU store whose entries expire individually."""

    def __init__(self, name: str, maxsize: int, clock: Callable[[], float]):
        """
        Initialize a namespace.

        :param name: Namespace name, used for logging and stats
        :param maxsize: Maximum number of live entries
        :param clock: Monotonic time source in seconds
        """
        self.name = name
        self.maxsize = maxsize
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        value, expiry = entry
        if self._clock() >= expiry:
            del self._entries[key]
            self._misses += 1
            logger.debug("Cache expired", namespace=self.name, key=key)
            return None

        self._entries.move_to_end(key)
        self._hits += 1
        logger.debug("Cache hit", namespace=self.name, key=key)
        return value

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store a value, overwriting any previous entry for the key."""
        if key in self._entries:
            del self._entries[key]
        self._entries[key] = (value, self._clock() + ttl)

        while len(self._entries) > self.maxsize:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(
                "Cache eviction", namespace=self.name, key=evicted, reason="full"
            )

    def clear(self) -> int:
        """Drop every entry and reset counters; returns the number removed."""
        count = len(self._entries)
        self._entries.clear()
        self._hits = 0
        self._misses = 0
        return count

    def stats(self) -> Dict[str, Any]:
        """Get namespace statistics."""
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "maxsize": self.maxsize,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total > 0 else 0.0,
        }

    def __len__(self) -> int:
        return len(self._entries)


class CacheStore:
    """
    Cache service shared by every endpoint wrapper.

    Constructed once per process (or per test) and passed to its users;
    namespaces are created on first use.
    """

    def __init__(
        self,
        max_entries: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache store.

        :param max_entries: Capacity of each namespace
        :param clock: Monotonic time source in seconds
        """
        self.max_entries = max_entries
        self._clock = clock
        self._namespaces: Dict[str, CacheNamespace] = {}

    def _namespace(self, namespace: str) -> CacheNamespace:
        store = self._namespaces.get(namespace)
        if store is None:
            store = CacheNamespace(namespace, self.max_entries, self._clock)
            self._namespaces[namespace] = store
        return store

    def get(self, namespace: str, key: str) -> Optional[Any]:
        """Get a live value from a namespace; misses are not errors."""
        return self._namespace(namespace).get(key)

    def set(self, namespace: str, key: str, value: Any, ttl: float) -> None:
        """Set a value in a namespace with the given TTL in seconds."""
        self._namespace(namespace).set(key, value, ttl)
        logger.debug("Cache set", namespace=namespace, key=key, ttl=ttl)

    def clear(self, namespace: str) -> None:
        """Clear a single namespace."""
        store = self._namespaces.get(namespace)
        if store is None:
            return
        removed = store.clear()
        logger.info("Cache cleared", namespace=namespace, entries_removed=removed)

    def clear_all(self) -> None:
        """Clear all namespaces."""
        for name in list(self._namespaces):
            self.clear(name)
        logger.info("All caches cleared")

    def stats(self) -> Dict[str, Dict[str, Any]]:
        """Get statistics from every namespace."""
        return {name: store.stats() for name, store in self._namespaces.items()}
