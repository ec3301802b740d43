# tiermedia/services/delivery/preloader.py
from __future__ import annotations

import asyncio
from typing import Iterable

from tiermedia.common.logging import get_logger
from tiermedia.domain.dataclasses.reports import PreloadReport
from tiermedia.domain.enums.quality_tier import QualityTier
from tiermedia.services.delivery.cache_manager import MediaCacheManager

log = get_logger(__name__)


class Preloader:
    """Best-effort cache warm-up for a batch of media ids at a single tier."""

    def __init__(self, cache: MediaCacheManager) -> None:
        self.cache = cache

    async def preload_media(
        self,
        media_ids: Iterable[str],
        tier: QualityTier = QualityTier.thumbnail,
    ) -> PreloadReport:
        tier = QualityTier(tier)
        ids = [str(m) for m in media_ids]

        rep = PreloadReport(tier=tier, requested=len(ids))
        rep.start()
        if not ids:
            rep.stop()
            return rep

        # Fan out; every attempt settles on its own
        results = await asyncio.gather(
            *(self.cache.resolve(mid, tier) for mid in ids),
            return_exceptions=True,
        )
        for mid, r in zip(ids, results):
            if isinstance(r, BaseException):
                if not isinstance(r, Exception):
                    raise r
                log.warning("Failed to preload media %s: %s", mid, r)
                rep.failed[mid] = str(r)
            else:
                rep.loaded.append(mid)

        rep.stop()
        return rep
