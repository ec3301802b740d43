# tiermedia/services/delivery/url_resolver.py
from __future__ import annotations

from tiermedia.common.logging import get_logger
from tiermedia.domain.entities.media_descriptor import MediaDescriptor
from tiermedia.domain.enums.quality_tier import QualityTier
from tiermedia.domain.errors import MediaDeliveryError, ResolutionError
from tiermedia.domain.policies.tier_paths import path_for_tier
from tiermedia.domain.ports.signing import UrlSignerPort

log = get_logger(__name__)

DEFAULT_SIGNED_URL_TTL_SEC = 3600


class UrlResolver:
    """
    Picks the stored object for a tier (see ``path_for_tier``) and asks the
    storage signer for a time-limited URL to it.
    """

    def __init__(self, signer: UrlSignerPort, ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SEC) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self.signer = signer
        self.ttl_seconds = ttl_seconds

    async def resolve_url(self, descriptor: MediaDescriptor, tier: QualityTier) -> str:
        tier = QualityTier(tier)
        path = path_for_tier(descriptor, tier)
        if not path:
            raise ResolutionError(f"No path available for quality {tier}", media_id=descriptor.id)

        if tier.is_derived and path == descriptor.original_path:
            log.debug("media %s has no %s derivative yet; serving original", descriptor.id, tier)

        try:
            url = await self.signer.sign_url(path, self.ttl_seconds)
        except MediaDeliveryError:
            raise
        except Exception as e:
            raise ResolutionError(
                f"Could not sign URL for quality {tier}", details=str(e), media_id=descriptor.id
            ) from e

        if not url:
            raise ResolutionError(f"Signer returned an empty URL for quality {tier}", media_id=descriptor.id)
        return url
