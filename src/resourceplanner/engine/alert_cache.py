"""
Alert payload cache.

Short-lived, bounded cache for computed alert payloads. The owner decides
when data changed and calls `invalidate()`; nothing here watches storage.
Keys include the current ISO week so a cached payload never outlives the
week it was computed for.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Hashable, Optional, Tuple

from resourceplanner.engine.iso_week import week_key
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    invalidations: int = 0


class AlertCache:
    """
    TTL + size bounded cache.

    Args:
        ttl_seconds: Entry lifetime; 0 or less disables caching
        max_entries: Oldest entries are evicted beyond this size
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 128,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: "OrderedDict[Hashable, Tuple[Any, float]]" = OrderedDict()
        self.stats = CacheStats()
        self.generation = 0

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_key(
        department: Optional[str],
        start_date: Any,
        end_date: Any,
        severity: Optional[str],
        now: datetime,
    ) -> Tuple:
        return (
            department or "all",
            None if start_date is None else str(start_date),
            None if end_date is None else str(end_date),
            severity or "all",
            week_key(now),
        )

    def get(self, key: Hashable) -> Optional[Any]:
        if not self.enabled:
            return None
        entry = self._entries.get(key)
        if entry is None:
            self.stats.misses += 1
            return None
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            self.stats.misses += 1
            return None
        self.stats.hits += 1
        return value

    def set(self, key: Hashable, value: Any, generation: Optional[int] = None) -> None:
        """
        Store a value.

        `generation` is the value of `self.generation` read before the data
        behind `value` was loaded; if an invalidation happened since, the
        value may predate a write and is dropped.
        """
        if not self.enabled:
            return
        if generation is not None and generation != self.generation:
            logger.debug("Discarding alert payload computed before invalidation")
            return
        self._entries[key] = (value, self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            self.stats.evictions += 1

    def invalidate(self) -> None:
        """Drop every entry."""
        if self._entries:
            logger.info("Alert cache invalidated", entries=len(self._entries))
        self._entries.clear()
        self.generation += 1
        self.stats.invalidations += 1
