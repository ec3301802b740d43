# tiermedia/domain/entities/media_descriptor.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

from tiermedia.domain.enums.quality_tier import QualityTier


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError("dimensions must be >= 0")


@dataclass
class MediaDescriptor:
    """
    Authoritative record for one stored media item: where each quality tier's
    bytes live in the bucket, plus descriptive metadata.

    Invariants that we keep here:
      - id and original_path are non-empty
      - file_size non-negative when provided

    The derived paths (thumbnail/preview/medium) are produced asynchronously
    after upload and may be missing for an arbitrary time; that is a valid
    state, not an error.
    """

    id: str = ""
    original_path: str = ""

    thumbnail_path: Optional[str] = None
    preview_path: Optional[str] = None
    medium_path: Optional[str] = None

    file_size: Optional[int] = None
    dimensions: Optional[Dimensions] = None
    mime_type: Optional[str] = None
    checksum: Optional[str] = None
    encrypted: bool = False

    created_at: Optional[datetime] = None
    last_accessed: Optional[datetime] = None

    def __post_init__(self):
        if not self.id or not str(self.id).strip():
            raise ValueError("id is required")
        if not self.original_path or not self.original_path.strip():
            raise ValueError("original_path is required")
        if self.file_size is not None and self.file_size < 0:
            raise ValueError("file_size must be >= 0")

    def stored_path(self, tier: QualityTier) -> Optional[str]:
        """Path recorded for exactly this tier, without any fallback."""
        tier = QualityTier(tier)
        if tier is QualityTier.full:
            return self.original_path
        return {
            QualityTier.thumbnail: self.thumbnail_path,
            QualityTier.preview: self.preview_path,
            QualityTier.medium: self.medium_path,
        }[tier] or None

    def has_derivatives(self) -> bool:
        return all(self.stored_path(t) for t in QualityTier.ascending() if t.is_derived)

    def as_dict(self):
        return asdict(self)
