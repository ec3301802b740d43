# tiermedia/services/delivery/service.py
from __future__ import annotations

import asyncio
import time
from typing import Callable, Iterable, List, Optional, Tuple

from tiermedia.common.logging import get_logger
from tiermedia.common.settings import Settings, get_settings
from tiermedia.domain.dataclasses.derivatives import DerivedPaths
from tiermedia.domain.dataclasses.reports import CacheStats, PreloadReport
from tiermedia.domain.enums.connection_speed import ConnectionSpeed
from tiermedia.domain.enums.quality_tier import QualityTier
from tiermedia.domain.errors import MediaDeliveryError, MediaIntegrityError, MediaNotFoundError
from tiermedia.domain.policies.tier_paths import derivative_sizes, tier_for_speed
from tiermedia.domain.ports.metadata import MediaMetadataPort
from tiermedia.domain.ports.signing import UrlSignerPort
from tiermedia.domain.ports.thumbs import ThumbnailGenerationPort
from tiermedia.services.crypto.media_cipher import MediaCipher
from tiermedia.services.delivery.cache_manager import MediaCacheManager
from tiermedia.services.delivery.preloader import Preloader
from tiermedia.services.delivery.progressive import OnTierReady, ProgressiveLoader
from tiermedia.services.delivery.url_resolver import UrlResolver

log = get_logger(__name__)


class MediaDeliveryService:
    """
    Entry point for callers (API routes, UI glue). Wires the metadata store,
    URL signer and optional derivative generator into one cache and exposes
    the delivery operations on top of it.
    """

    def __init__(
        self,
        metadata: MediaMetadataPort,
        signer: UrlSignerPort,
        *,
        thumbnailer: Optional[ThumbnailGenerationPort] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cfg = settings or get_settings()
        self.metadata = metadata
        self.thumbnailer = thumbnailer
        self.cipher = MediaCipher()

        self.resolver = UrlResolver(signer, ttl_seconds=self.cfg.storage.signed_url_ttl_sec)
        self.cache = MediaCacheManager(
            metadata,
            self.resolver,
            self.cfg.cache,
            clock=clock,
            touch_enabled=self.cfg.delivery.touch_enabled,
        )
        self.progressive = ProgressiveLoader(self.cache, delay_ms=self.cfg.delivery.progressive_delay_ms)
        self.preloader = Preloader(self.cache)

    # --- URLs -----------------------------------------------------------------

    async def get_media_url(
        self,
        media_id: str,
        quality: QualityTier = QualityTier.thumbnail,
        force_refresh: bool = False,
    ) -> str:
        try:
            return await self.cache.resolve(media_id, quality, force_refresh=force_refresh)
        except MediaDeliveryError as e:
            log.warning("Error getting media URL for %s (%s): %s", media_id, quality, e)
            raise

    async def get_optimized_media_url(
        self,
        media_id: str,
        speed: ConnectionSpeed = ConnectionSpeed.medium,
    ) -> Tuple[QualityTier, str]:
        tier = tier_for_speed(speed)
        return tier, await self.get_media_url(media_id, tier)

    async def progressive_load(self, media_id: str, on_tier_ready: OnTierReady) -> List[QualityTier]:
        return await self.progressive.progressive_load(media_id, on_tier_ready)

    async def preload_media(
        self,
        media_ids: Iterable[str],
        quality: QualityTier = QualityTier.thumbnail,
    ) -> PreloadReport:
        return await self.preloader.preload_media(media_ids, quality)

    def clear_cache(self, media_id: Optional[str] = None) -> int:
        return self.cache.clear_cache(media_id)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    async def aclose(self) -> None:
        await self.cache.flush_background()

    # --- derivatives ----------------------------------------------------------

    async def generate_derivatives(self, media_id: str, *, regenerate: bool = False) -> DerivedPaths:
        """
        Ask the generation job for thumbnail/preview/medium renditions of the
        original, persist the returned paths, and drop this item's cached URLs
        so the next resolve picks up the real derivatives instead of the
        original fallback.
        """
        if self.thumbnailer is None:
            raise RuntimeError("no thumbnail generator configured")

        descriptor = await self.metadata.get_descriptor(media_id)
        if descriptor is None:
            raise MediaNotFoundError(media_id)
        if descriptor.has_derivatives() and not regenerate:
            return DerivedPaths(
                thumbnail_path=descriptor.thumbnail_path,  # type: ignore[arg-type]
                preview_path=descriptor.preview_path,      # type: ignore[arg-type]
                medium_path=descriptor.medium_path,        # type: ignore[arg-type]
            )

        try:
            paths = await self.thumbnailer.generate_thumbnails(
                descriptor.original_path,
                sizes=derivative_sizes(self.cfg.delivery.derivative_sizes),
                compression_level=self.cfg.cache.compression_level,
            )
            await self.metadata.record_derivatives(media_id, paths)
        except Exception as e:
            log.error("Error generating thumbnails for %s: %s", media_id, e)
            raise

        self.cache.clear_cache(media_id)
        return paths

    # --- payload encryption ---------------------------------------------------

    async def seal_payload(self, encrypted: bool, data: bytes, key: Optional[bytes] = None) -> Tuple[bytes, Optional[bytes]]:
        """
        Encrypt bytes for media flagged ``encrypted``; pass them through
        untouched otherwise. Returns ``(payload, iv)`` with ``iv`` None when no
        encryption happened.
        """
        if not encrypted:
            return data, None
        if key is None:
            raise ValueError("encrypted media requires a key")
        sealed = await asyncio.to_thread(self.cipher.encrypt, data, key)
        return sealed.ciphertext, sealed.iv

    async def open_payload(
        self,
        encrypted: bool,
        data: bytes,
        *,
        iv: bytes | str | None = None,
        key: Optional[bytes] = None,
        media_id: Optional[str] = None,
    ) -> bytes:
        """
        Decrypt bytes of media flagged ``encrypted``. On an integrity failure
        the cached URLs of ``media_id`` (when given) are dropped before the
        error propagates.
        """
        if not encrypted:
            return data
        if iv is None or key is None:
            raise ValueError("encrypted media requires both iv and key")
        try:
            return await asyncio.to_thread(self.cipher.decrypt, data, iv, key)
        except MediaIntegrityError:
            if media_id is not None:
                self.cache.clear_cache(media_id)
            raise
