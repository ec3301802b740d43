# tiermedia/services/delivery/cache_manager.py
from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from tiermedia.common.logging import get_logger
from tiermedia.common.settings import CacheConfig, get_settings
from tiermedia.domain.dataclasses.reports import CacheStats
from tiermedia.domain.entities.cache_entry import CacheEntry, CacheKey
from tiermedia.domain.entities.media_descriptor import MediaDescriptor
from tiermedia.domain.enums.quality_tier import NOMINAL_SIZE_KB, QualityTier
from tiermedia.domain.errors import MediaDeliveryError, MediaNotFoundError, ResolutionError
from tiermedia.domain.ports.metadata import MediaMetadataPort
from tiermedia.services.delivery.url_resolver import UrlResolver

log = get_logger(__name__)


class MediaCacheManager:
    """
    In-memory (media_id, tier) -> signed URL cache with age and size bounds.

    Rules
    -----
    - A fresh entry (``now - timestamp < max_age``) is returned without any
      metadata or signing call.
    - A stale entry is dropped before re-resolving, so a failed refetch never
      leaves stale data behind.
    - After each insert, entries are evicted oldest-timestamp-first while the
      aggregate nominal size exceeds the budget. Hits do not bump timestamps.
    - Every successful resolve schedules a detached ``touch`` on the metadata
      store; its failure is logged and never reaches the caller.

    All state lives on one event loop; map reads/writes between awaits need no
    locking. Concurrent misses on the same key are not coalesced: both fetch,
    and the last one to finish owns the slot.
    """

    def __init__(
        self,
        metadata: MediaMetadataPort,
        resolver: UrlResolver,
        config: Optional[CacheConfig] = None,
        *,
        clock: Callable[[], float] = time.time,
        touch_enabled: bool = True,
    ) -> None:
        cfg = config or get_settings().cache
        self.metadata = metadata
        self.resolver = resolver
        self.max_size_kb: float = cfg.max_size_kb
        self.max_age_seconds: float = cfg.max_age_seconds
        self._sizes: Dict[QualityTier, int] = dict(NOMINAL_SIZE_KB)
        self._sizes.update({QualityTier(k): int(v) for k, v in cfg.tier_sizes_kb.items()})
        self._clock = clock
        self._touch_enabled = touch_enabled

        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._background: Set[asyncio.Task] = set()

    # --- lookups --------------------------------------------------------------

    async def resolve(
        self,
        media_id: str,
        tier: QualityTier = QualityTier.thumbnail,
        force_refresh: bool = False,
    ) -> str:
        tier = QualityTier(tier)
        key = CacheKey(str(media_id), tier)

        if not force_refresh:
            entry = self._fresh_entry(key)
            if entry is not None:
                self._hits += 1
                self._schedule_touch(key.media_id)
                return entry.url

        self._misses += 1
        # failures are logged by the caller
        descriptor = await self._fetch_descriptor(key.media_id)
        url = await self.resolver.resolve_url(descriptor, tier)

        self._store(
            key,
            CacheEntry(
                url=url,
                tier=tier,
                timestamp=self._clock(),
                size_kb=self.nominal_size_kb(tier),
                encrypted=bool(descriptor.encrypted),
            ),
        )
        self._schedule_touch(key.media_id)
        return url

    def entry_for(self, media_id: str, tier: QualityTier) -> Optional[CacheEntry]:
        """Fresh entry for the key, or None. Does not count as a hit."""
        return self._fresh_entry(CacheKey(str(media_id), QualityTier(tier)))

    def nominal_size_kb(self, tier: QualityTier) -> int:
        return self._sizes[QualityTier(tier)]

    # --- maintenance ----------------------------------------------------------

    def clear_cache(self, media_id: Optional[str] = None) -> int:
        """
        Drop every tier cached for ``media_id``, or everything when no id is
        given. Returns how many entries were removed. Resolves already in
        flight are unaffected and may repopulate the cache afterwards.
        """
        if media_id is None:
            n = len(self._entries)
            self._entries.clear()
            return n
        doomed = [k for k in self._entries if k.media_id == str(media_id)]
        for k in doomed:
            del self._entries[k]
        return len(doomed)

    def stats(self) -> CacheStats:
        return CacheStats(
            size_kb=self.total_size_kb(),
            entries=len(self._entries),
            hits=self._hits,
            misses=self._misses,
        )

    def total_size_kb(self) -> int:
        return sum(e.size_kb for e in self._entries.values())

    def keys(self) -> List[CacheKey]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    async def flush_background(self) -> None:
        """Wait for pending last-accessed updates (shutdown, tests)."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # --- internals ------------------------------------------------------------

    def _fresh_entry(self, key: CacheKey) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_fresh(self._clock(), self.max_age_seconds):
            return entry
        del self._entries[key]
        return None

    def _store(self, key: CacheKey, entry: CacheEntry) -> None:
        # re-insert at the end so dict order follows insertion time
        self._entries.pop(key, None)
        self._entries[key] = entry
        self._evict()

    def _evict(self) -> None:
        total = self.total_size_kb()
        if total <= self.max_size_kb:
            return
        oldest_first = sorted(self._entries.items(), key=lambda kv: kv[1].timestamp)
        for key, entry in oldest_first:
            if total <= self.max_size_kb:
                break
            del self._entries[key]
            total -= entry.size_kb
            log.debug("evicted %s/%s (%d KB)", key.media_id, key.tier, entry.size_kb)

    async def _fetch_descriptor(self, media_id: str) -> MediaDescriptor:
        try:
            descriptor = await self.metadata.get_descriptor(media_id)
        except MediaDeliveryError:
            raise
        except Exception as e:
            raise ResolutionError("Could not load media metadata", details=str(e), media_id=media_id) from e
        if descriptor is None:
            raise MediaNotFoundError(media_id)
        return descriptor

    def _schedule_touch(self, media_id: str) -> None:
        if not self._touch_enabled:
            return
        task = asyncio.get_running_loop().create_task(self._touch(media_id))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _touch(self, media_id: str) -> None:
        try:
            await self.metadata.touch(media_id, datetime.now(timezone.utc))
        except Exception as e:
            log.error("Error updating access time for %s: %s", media_id, e)
