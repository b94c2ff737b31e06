"""In-memory DOM query result cache with lazy expiration.

Entries are keyed by page URL plus query shape and live for ``max_age_seconds``.
Expired entries are only removed when a read touches them, when capacity
eviction picks them, or when ``invalidate_older_than`` sweeps them, so
``size()`` may count entries that no read would return.

All methods are synchronous and never await: on a single event loop they run
to completion without interleaving with other tool calls.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog

from pagequery.models.cache import QueryCacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

    from pagequery.models.cache import QueryShape

log = structlog.get_logger()

KEY_DELIMITER = ":"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def cache_key(page_identity: str, shape: QueryShape) -> str:
    """Derive the slot key for a query.

    ``include_attributes`` and ``max_text_length`` are deliberately not part
    of the key: queries differing only in those share a slot.
    """
    return KEY_DELIMITER.join(
        [
            page_identity,
            shape.selector or "",
            shape.search_text or "",
            str(shape.offset),
            str(shape.limit),
        ]
    )


class QueryCache:
    """Bounded, time-expiring store of query results."""

    def __init__(
        self,
        max_age_seconds: float = 60.0,
        max_entries: int = 100,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.max_age = timedelta(seconds=max_age_seconds)
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, QueryCacheEntry] = {}

    def get(self, page_identity: str, shape: QueryShape) -> dict[str, Any] | None:
        """Return the stored result, or ``None`` on miss or expiry."""
        key = cache_key(page_identity, shape)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.created_at > self.max_age:
            del self._entries[key]
            log.debug("cache_expired", key=key)
            return None

        return entry.data

    def set(self, page_identity: str, shape: QueryShape, data: dict[str, Any]) -> None:
        """Store a result, evicting the oldest entry if the store is full."""
        key = cache_key(page_identity, shape)

        if len(self._entries) >= self.max_entries and key not in self._entries:
            self._evict_oldest()

        self._entries[key] = QueryCacheEntry(
            data=data,
            created_at=self._clock(),
            page_identity=page_identity,
            selector=shape.selector,
            search_text=shape.search_text,
        )

    def _evict_oldest(self) -> None:
        if not self._entries:
            return
        # min() keeps the first of equal timestamps in insertion order
        oldest_key = min(self._entries, key=lambda k: self._entries[k].created_at)
        del self._entries[oldest_key]
        log.debug("cache_evicted", key=oldest_key, reason="capacity")

    def invalidate(self, page_identity: str | None = None) -> None:
        """Drop every entry for ``page_identity``, or everything if omitted."""
        if page_identity is None:
            removed = len(self._entries)
            self._entries.clear()
        else:
            stale_keys = [
                key
                for key, entry in self._entries.items()
                if entry.page_identity == page_identity
            ]
            for key in stale_keys:
                del self._entries[key]
            removed = len(stale_keys)
        log.info("cache_invalidated", url=page_identity, removed=removed)

    def invalidate_older_than(self, age_seconds: float) -> None:
        """Drop every entry older than ``age_seconds``, regardless of ``max_age``."""
        now = self._clock()
        threshold = timedelta(seconds=age_seconds)
        stale_keys = [
            key for key, entry in self._entries.items() if now - entry.created_at > threshold
        ]
        for key in stale_keys:
            del self._entries[key]
        log.info("cache_invalidated", older_than_seconds=age_seconds, removed=len(stale_keys))

    def size(self) -> int:
        return len(self._entries)
