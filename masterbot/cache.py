"""
Fingerprint -> best-move memo with a time-to-live and a coarse size bound.

Entries are written after a completed root search and read at the start of
every orchestration call. Expired entries are never served, but they are only
removed when ``cleanup()`` runs (on a cache miss, and after every write).
When the table still holds more than ``max_size`` entries after cleanup, the
single entry with the oldest timestamp is evicted. This is not an LRU: reads
do not refresh timestamps.

The key is the position fingerprint alone. A move cached at one power level
is served unchanged at any other power level.
"""

import logging
from dataclasses import dataclass
from typing import Callable

import chess

from masterbot.constants import CACHE_MAX_SIZE, CACHE_TTL_MS
from masterbot.search import now_ms

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedEvaluation:
    best_move: chess.Move
    score: int
    timestamp: float


class MoveCache:
    """
    Bounded TTL table of root search results.

    Args:
        ttl_ms:   Maximum age of a servable entry.
        max_size: Size above which the oldest entry is evicted on write.
        clock:    Millisecond clock; injectable for tests.
    """

    def __init__(
        self,
        ttl_ms: float = CACHE_TTL_MS,
        max_size: int = CACHE_MAX_SIZE,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self.ttl_ms = ttl_ms
        self.max_size = max_size
        self._clock = clock
        self._entries: dict[str, CachedEvaluation] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._entries

    def get(self, fingerprint: str) -> CachedEvaluation | None:
        """Return the live entry for ``fingerprint``, or None on a miss."""
        entry = self._entries.get(fingerprint)
        if entry is None:
            return None
        if self._clock() - entry.timestamp > self.ttl_ms:
            return None
        return entry

    def put(self, fingerprint: str, move: chess.Move, score: int) -> None:
        """Store a result, then purge expired entries and enforce the bound."""
        self._entries[fingerprint] = CachedEvaluation(move, score, self._clock())
        self.cleanup()
        if len(self._entries) > self.max_size:
            oldest = min(self._entries, key=lambda k: self._entries[k].timestamp)
            del self._entries[oldest]
            _log.debug("cache evicted %s", oldest)

    def cleanup(self) -> int:
        """Delete every entry older than the TTL. Returns the number removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now - e.timestamp > self.ttl_ms]
        for key in expired:
            del self._entries[key]
        if expired:
            _log.debug("cache purged %d expired entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
