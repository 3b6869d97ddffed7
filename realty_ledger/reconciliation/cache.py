"""Memoization of report computations between re-renders.

Results are keyed on the caller's key (typically the store version plus
the filter parameters) and on ``now`` rounded down to a fixed bucket, so a
dashboard refreshing every second recomputes at most once per bucket. The
computation is handed the bucket start instead of the raw ``now``, which
keeps a cached value identical to a fresh one for any ``now`` in the bucket.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Callable, Hashable, TypeVar

from realty_ledger.config import ReportingConfig
from realty_ledger.reconciliation.status import resolve_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

EPOCH = datetime(1970, 1, 1)


class ReportCache:
    """Small LRU cache for pure report functions.

    Parameters
    ----------
    granularity_seconds : int
        Width of a ``now`` bucket.
    max_entries : int
        Entries kept before the least recently used one is evicted.
    """

    def __init__(self, granularity_seconds: int = 60, max_entries: int = 128) -> None:
        self.granularity_seconds = max(1, granularity_seconds)
        self.max_entries = max(1, max_entries)
        self._entries: OrderedDict[tuple[Any, ...], Any] = OrderedDict()
        self.hits = 0
        self.misses = 0

    @classmethod
    def from_config(cls, config: ReportingConfig, max_entries: int = 128) -> "ReportCache":
        """Create a cache using the configured bucket width."""
        return cls(granularity_seconds=config.cache_granularity_seconds, max_entries=max_entries)

    def bucket_start(self, now: datetime | None = None) -> datetime:
        """Start of the bucket containing ``now``."""
        elapsed = (resolve_now(now) - EPOCH).total_seconds()
        bucket = int(elapsed // self.granularity_seconds)
        return EPOCH + timedelta(seconds=bucket * self.granularity_seconds)

    def get_or_compute(
        self,
        key: Hashable,
        compute: Callable[[datetime], T],
        now: datetime | None = None,
    ) -> T:
        """Return the cached result for ``key`` in the current bucket.

        ``compute`` is called with the bucket start on a miss.
        """
        start = self.bucket_start(now)
        cache_key = (key, start)
        if cache_key in self._entries:
            self.hits += 1
            self._entries.move_to_end(cache_key)
            logger.debug("Report cache hit for %r at %s", key, start.isoformat())
            return self._entries[cache_key]

        self.misses += 1
        result = compute(start)
        self._entries[cache_key] = result
        if len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return result

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
