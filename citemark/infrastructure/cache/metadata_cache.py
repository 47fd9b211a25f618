"""
Freshness cache for source metadata lookups.

Thread-safe wrapper that serves repeated lookups for the same notebook and
source list from memory until the entry goes stale.
"""
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from citemark.domain.interfaces.source_metadata_provider import SourceMetadataProvider
from citemark.domain.models.citation import SourceMetadata
from citemark.utils.logger import step_logger

CacheKey = Tuple[Optional[str], Tuple[str, ...]]


class CachedMetadataProvider(SourceMetadataProvider):
    """
    Caches another provider's lookups for a fixed freshness window.

    Example:
        provider = CachedMetadataProvider(SQLiteSourceRepository(conn), ttl_seconds=300)
        provider.lookup("nb-1", ["11111111-2222-3333-4444-555555555555"])
    """

    def __init__(
        self,
        provider: SourceMetadataProvider,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the cache.

        Args:
            provider: Provider performing the real lookups
            ttl_seconds: How long a lookup result stays fresh (default: 5 minutes)
            clock: Time source, injectable for tests
        """
        self.provider = provider
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, Tuple[float, Dict[str, SourceMetadata]]] = {}
        # Bumped by invalidate(); a lookup only stores its result if neither moved meanwhile
        self._generations: Dict[str, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()

    def lookup(
        self,
        notebook_id: Optional[str],
        source_ids: List[str]
    ) -> Dict[str, SourceMetadata]:
        if not notebook_id or not source_ids:
            return {}

        key: CacheKey = (notebook_id, tuple(source_ids))
        now = self._clock()

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and now - entry[0] < self.ttl_seconds:
                return dict(entry[1])
            started = (self._epoch, self._generations.get(notebook_id, 0))

        result = self.provider.lookup(notebook_id, source_ids)

        with self._lock:
            self._prune(self._clock())
            if started != (self._epoch, self._generations.get(notebook_id, 0)):
                step_logger.info(f"[MetadataCache] Notebook {notebook_id} invalidated during lookup, not caching")
                return result
            self._entries[key] = (now, dict(result))
        step_logger.info(f"[MetadataCache] Cached {len(result)} sources for notebook: {notebook_id}")
        return result

    def invalidate(self, notebook_id: Optional[str] = None) -> None:
        """Drop cached entries, for one notebook or all of them."""
        with self._lock:
            if notebook_id is None:
                self._entries.clear()
                self._epoch += 1
            else:
                self._entries = {k: v for k, v in self._entries.items() if k[0] != notebook_id}
                self._generations[notebook_id] = self._generations.get(notebook_id, 0) + 1

    @property
    def size(self) -> int:
        """Number of cached lookups currently held."""
        with self._lock:
            return len(self._entries)

    def _prune(self, now: float) -> None:
        """Drop stale entries. Caller holds the lock."""
        stale = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl_seconds]
        for key in stale:
            del self._entries[key]
