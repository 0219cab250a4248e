"""
In-memory roster cache.

Drilling into several households of one booth would otherwise refetch the
whole roster each time. Entries expire after a fixed TTL; writes made
elsewhere do not invalidate them, so a cached roster can be up to one TTL
out of date unless ``invalidate`` is called.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_TTL_SEC = 5 * 60


@dataclass
class CacheEntry:
    """Cached payload with the time it was fetched."""
    data: Any
    fetched_at: float

    def age(self, now: float) -> float:
        return now - self.fetched_at

    def is_stale(self, now: float, ttl_sec: float) -> bool:
        return self.age(now) >= ttl_sec


class RosterCache:
    """
    Time-stamped cache of booth rosters keyed by ``(aci_id, booth_id)``.

    Usage:
        cache = RosterCache(ttl_sec=300)
        cache.put(("119", "5"), voters)
        voters = cache.get(("119", "5"))  # None once stale
    """

    def __init__(self, ttl_sec: float = DEFAULT_TTL_SEC, clock: Callable[[], float] = time.time):
        self.ttl_sec = ttl_sec
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def is_stale(self, key: Hashable, now: Optional[float] = None) -> bool:
        """True when nothing is cached for ``key`` or the entry has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return True
        return entry.is_stale(self._clock() if now is None else now, self.ttl_sec)

    def get(self, key: Hashable, now: Optional[float] = None) -> Optional[Any]:
        """Cached data for ``key``, or None when absent or stale. Stale entries are dropped."""
        if self.is_stale(key, now):
            if self._entries.pop(key, None) is not None:
                logger.debug(f"Roster cache expired: {key}")
            return None
        logger.debug(f"Roster cache hit: {key}")
        return self._entries[key].data

    def put(self, key: Hashable, data: Any, now: Optional[float] = None) -> CacheEntry:
        entry = CacheEntry(data=data, fetched_at=self._clock() if now is None else now)
        self._entries[key] = entry
        return entry

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        """Drop one entry, or everything when ``key`` is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
