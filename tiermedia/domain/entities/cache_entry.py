# tiermedia/domain/entities/cache_entry.py
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from tiermedia.domain.enums.quality_tier import QualityTier


class CacheKey(NamedTuple):
    media_id: str
    tier: QualityTier


@dataclass(frozen=True)
class CacheEntry:
    """
    A resolved signed URL for one (media_id, tier). Owned by the cache manager.
    ``timestamp`` is the insertion time in epoch seconds and is never bumped on
    later hits.
    """
    url: str
    tier: QualityTier
    timestamp: float
    size_kb: int
    encrypted: bool = False

    def age(self, now: float) -> float:
        return now - self.timestamp

    def is_fresh(self, now: float, max_age_seconds: float) -> bool:
        return self.age(now) < max_age_seconds
