from __future__ import annotations

from typing import Dict, Optional

from tiermedia.domain.entities.media_descriptor import MediaDescriptor
from tiermedia.domain.enums.connection_speed import ConnectionSpeed
from tiermedia.domain.enums.quality_tier import QualityTier


def path_for_tier(descriptor: MediaDescriptor, tier: QualityTier) -> Optional[str]:
    """
    Domain policy for which stored object serves a tier.

    Derived tiers fall back to the original when their derivative has not been
    generated yet, so a low-tier request still gets a (heavier) usable image.
    Returns None only when nothing usable is recorded at all.
    """
    tier = QualityTier(tier)
    path = descriptor.stored_path(tier)
    if not path and tier.is_derived:
        path = descriptor.original_path
    return path or None


_SPEED_TIERS: Dict[ConnectionSpeed, QualityTier] = {
    ConnectionSpeed.slow: QualityTier.thumbnail,
    ConnectionSpeed.medium: QualityTier.preview,
    ConnectionSpeed.fast: QualityTier.medium,
}


def tier_for_speed(speed: ConnectionSpeed = ConnectionSpeed.medium) -> QualityTier:
    """Bandwidth-optimized tier for a connection class. Never picks ``full``."""
    return _SPEED_TIERS[ConnectionSpeed(speed)]


def derivative_sizes(configured: Dict[str, int]) -> Dict[QualityTier, int]:
    """
    Pixel edge per derived tier, validated against the tier enum. ``full`` is
    never generated (it is the original).
    """
    out: Dict[QualityTier, int] = {}
    for name, edge in configured.items():
        tier = QualityTier(name)
        if not tier.is_derived:
            raise ValueError("the full tier is the original and has no derivative size")
        if int(edge) <= 0:
            raise ValueError(f"derivative size for {tier} must be > 0")
        out[tier] = int(edge)
    return dict(sorted(out.items(), key=lambda kv: kv[0].rank))
