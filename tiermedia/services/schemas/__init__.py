from tiermedia.services.schemas.delivery import (
    MediaUrlRead,
    PreloadRequest,
    PreloadReportRead,
    CacheStatsRead,
    CacheClearRead,
)
__all__ = [
    "MediaUrlRead",
    "PreloadRequest",
    "PreloadReportRead",
    "CacheStatsRead",
    "CacheClearRead",
]
