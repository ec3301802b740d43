from __future__ import annotations

from typing import Mapping, Protocol

from tiermedia.domain.dataclasses.derivatives import DerivedPaths
from tiermedia.domain.enums.quality_tier import QualityTier


class ThumbnailGenerationPort(Protocol):
    async def generate_thumbnails(
        self,
        original_path: str,
        *,
        sizes: Mapping[QualityTier, int],   # e.g. {thumbnail: 150, preview: 300, medium: 800}
        compression_level: int,             # 1..10, advisory
    ) -> DerivedPaths: ...
