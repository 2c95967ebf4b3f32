"""
cache.py -- Recent verse match responses, bounded by age and count.

Entries older than the TTL are treated as absent; once the cache is full the
least recently used entry is dropped.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable, Optional

from engine.models import UserPreferences, VerseMatchResponse

logger = logging.getLogger(__name__)


def cache_key(processed_text: str, preferences: UserPreferences) -> str:
    """Key a response by the normalized text and every preference that shapes it."""
    return processed_text + "\x1f" + preferences.model_dump_json()


class ResponseCache:
    """TTL + LRU cache of VerseMatchResponse objects."""

    def __init__(
        self,
        ttl_ms: int = 300000,
        max_size: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = max(ttl_ms, 0) / 1000.0
        self.max_size = max(max_size, 0)
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, VerseMatchResponse]] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[VerseMatchResponse]:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        stored_at, response = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return response

    def put(self, key: str, response: VerseMatchResponse) -> None:
        if self.max_size == 0 or self.ttl_seconds == 0:
            return
        self._entries[key] = (self._clock(), response)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cached response for key of %d chars", len(evicted))

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
