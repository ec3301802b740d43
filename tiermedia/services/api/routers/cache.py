from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from tiermedia.services.api.deps import get_delivery_service
from tiermedia.services.delivery.service import MediaDeliveryService
from tiermedia.services.schemas.delivery import CacheClearRead, CacheStatsRead

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.get("/stats", response_model=CacheStatsRead)
def cache_stats(svc: MediaDeliveryService = Depends(get_delivery_service)) -> CacheStatsRead:
    s = svc.cache_stats()
    return CacheStatsRead(
        size_kb=s.size_kb,
        entries=s.entries,
        hits=s.hits,
        misses=s.misses,
        hit_rate=s.hit_rate,
    )


@router.delete("", response_model=CacheClearRead)
def clear_cache(
    media_id: Optional[str] = Query(None, min_length=1),
    svc: MediaDeliveryService = Depends(get_delivery_service),
) -> CacheClearRead:
    removed = svc.clear_cache(media_id)
    return CacheClearRead(media_id=media_id, removed=removed)
