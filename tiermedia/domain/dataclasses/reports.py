from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from tiermedia.domain.enums.quality_tier import QualityTier


@dataclass
class PreloadReport:
    tier: QualityTier = QualityTier.thumbnail
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    requested: int = 0
    loaded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    def start(self): self.started_at = datetime.now()
    def stop(self): self.finished_at = datetime.now()

    @property
    def duration_sec(self) -> float:
        if not self.started_at or not self.finished_at:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()


@dataclass(frozen=True)
class CacheStats:
    size_kb: int = 0
    entries: int = 0
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


@dataclass(frozen=True)
class TierResult:
    """One step of a progressive load."""
    tier: QualityTier
    url: str
