# tiermedia/services/delivery/progressive.py
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable, List, Optional

from tiermedia.common.logging import get_logger
from tiermedia.domain.dataclasses.reports import TierResult
from tiermedia.domain.enums.quality_tier import QualityTier
from tiermedia.services.delivery.cache_manager import MediaCacheManager

log = get_logger(__name__)

OnTierReady = Callable[[str, QualityTier], None]


class ProgressiveLoader:
    """
    Upgrades one media item through thumbnail -> preview -> medium -> full.

    ``iter_tiers`` yields one ``TierResult`` per tier, strictly ascending, and
    stops at the first tier that fails to resolve. Tiers already yielded stay
    valid; the failure is logged, not raised.
    """

    def __init__(self, cache: MediaCacheManager, delay_ms: int = 100) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self.cache = cache
        self.delay_sec = delay_ms / 1000.0

    async def iter_tiers(
        self,
        media_id: str,
        tiers: Optional[List[QualityTier]] = None,
    ) -> AsyncIterator[TierResult]:
        order = sorted((QualityTier(t) for t in tiers), key=lambda t: t.rank) if tiers else list(QualityTier.ascending())
        for i, tier in enumerate(order):
            try:
                url = await self.cache.resolve(media_id, tier)
            except Exception as e:
                log.error("Error loading %s quality for %s: %s", tier, media_id, e)
                return
            yield TierResult(tier=tier, url=url)

            # spread the requests out; nothing to wait for after the last tier
            if self.delay_sec and i < len(order) - 1:
                await asyncio.sleep(self.delay_sec)

    async def progressive_load(self, media_id: str, on_tier_ready: OnTierReady) -> List[QualityTier]:
        """
        Callback flavour of ``iter_tiers``: calls ``on_tier_ready(url, tier)``
        once per delivered tier and returns the tiers delivered, in order.
        """
        delivered: List[QualityTier] = []
        async for step in self.iter_tiers(media_id):
            on_tier_ready(step.url, step.tier)
            delivered.append(step.tier)
        return delivered
