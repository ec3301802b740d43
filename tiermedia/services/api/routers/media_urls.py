from __future__ import annotations

from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from tiermedia.domain.enums.connection_speed import ConnectionSpeed
from tiermedia.domain.enums.quality_tier import QualityTier
from tiermedia.domain.errors import MediaDeliveryError, MediaNotFoundError
from tiermedia.services.api.deps import get_delivery_service
from tiermedia.services.delivery.service import MediaDeliveryService
from tiermedia.services.schemas.delivery import MediaUrlRead, PreloadReportRead, PreloadRequest

router = APIRouter(prefix="/api/media", tags=["media"])


def _http_error(e: MediaDeliveryError) -> HTTPException:
    if isinstance(e, MediaNotFoundError):
        return HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Media not found")
    return HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=e.message)


@router.get("/{media_id}/url", response_model=MediaUrlRead)
async def get_media_url(
    media_id: str = Path(..., min_length=1),
    quality: QualityTier = Query(QualityTier.thumbnail),
    force_refresh: bool = Query(False),
    svc: MediaDeliveryService = Depends(get_delivery_service),
) -> MediaUrlRead:
    try:
        url = await svc.get_media_url(media_id, quality, force_refresh=force_refresh)
    except MediaDeliveryError as e:
        raise _http_error(e) from e
    return MediaUrlRead(media_id=media_id, quality=quality, url=url)


@router.get("/{media_id}/optimized", response_model=MediaUrlRead)
async def get_optimized_media_url(
    media_id: str = Path(..., min_length=1),
    speed: ConnectionSpeed = Query(ConnectionSpeed.medium),
    svc: MediaDeliveryService = Depends(get_delivery_service),
) -> MediaUrlRead:
    try:
        tier, url = await svc.get_optimized_media_url(media_id, speed)
    except MediaDeliveryError as e:
        raise _http_error(e) from e
    return MediaUrlRead(media_id=media_id, quality=tier, url=url)


@router.post("/preload", response_model=PreloadReportRead)
async def preload_media(
    payload: PreloadRequest,
    svc: MediaDeliveryService = Depends(get_delivery_service),
) -> PreloadReportRead:
    rep = await svc.preload_media(payload.media_ids, payload.quality)
    return PreloadReportRead.model_validate(rep)
