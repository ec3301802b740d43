from tiermedia.domain.enums.quality_tier import QualityTier, NOMINAL_SIZE_KB
from tiermedia.domain.enums.connection_speed import ConnectionSpeed
__all__ = [
    "QualityTier",
    "NOMINAL_SIZE_KB",
    "ConnectionSpeed",
]
