from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from tiermedia.domain.enums.quality_tier import QualityTier


class MediaUrlRead(BaseModel):
    media_id: str
    quality: QualityTier
    url: str


class PreloadRequest(BaseModel):
    media_ids: List[str] = Field(default_factory=list, max_length=500)
    quality: QualityTier = QualityTier.thumbnail


class PreloadReportRead(BaseModel):
    tier: QualityTier
    requested: int
    loaded: List[str]
    failed: Dict[str, str]
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CacheStatsRead(BaseModel):
    size_kb: int
    entries: int
    hits: int
    misses: int
    hit_rate: float

    model_config = ConfigDict(from_attributes=True)


class CacheClearRead(BaseModel):
    media_id: Optional[str] = None
    removed: int
