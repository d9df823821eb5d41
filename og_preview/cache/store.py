"""In-memory metadata cache with a fixed TTL and capacity.

Expired entries are dropped lazily when looked up; there is no background
sweep. At capacity, the oldest inserted entry is evicted (insertion order,
not least recently used).
"""

import threading
import time
from typing import Callable, Optional

from og_preview.config import CACHE_TTL_SECONDS, MAX_CACHE_ENTRIES
from og_preview.models import CacheEntry, Metadata


class MetadataCache:
    """Maps the validated URL string used at fetch time to parsed metadata."""

    def __init__(
        self,
        ttl: float = CACHE_TTL_SECONDS,
        max_entries: int = MAX_CACHE_ENTRIES,
        clock: Callable[[], float] = time.time,
    ):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}  # insertion ordered
        self._lock = threading.Lock()

    def get(self, url: str) -> Optional[Metadata]:
        """Return cached metadata, or None on a miss. Drops the entry if expired."""
        with self._lock:
            entry = self._entries.get(url)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[url]
                return None
            return entry.value

    def put(self, url: str, data: Metadata) -> None:
        """Store metadata, evicting the oldest entry if the cache is full."""
        with self._lock:
            if url in self._entries:
                # Re-inserting moves the key to the newest position
                del self._entries[url]
            elif len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]

            now = self._clock()
            self._entries[url] = CacheEntry(
                key=url,
                value=data,
                created_at=now,
                expires_at=now + self.ttl,
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def keys(self) -> list[str]:
        """Cached keys, oldest inserted first. Includes not-yet-purged expired ones."""
        with self._lock:
            return list(self._entries)

    def stats(self) -> dict:
        with self._lock:
            now = self._clock()
            expired = sum(1 for e in self._entries.values() if e.is_expired(now))
            return {
                "size": len(self._entries),
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl,
                "expired": expired,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries
