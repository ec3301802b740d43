# tests/fakes.py
from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from tiermedia.common.settings import CacheConfig, DeliveryConfig, Settings
from tiermedia.domain.dataclasses.derivatives import DerivedPaths
from tiermedia.domain.entities.media_descriptor import MediaDescriptor
from tiermedia.domain.enums.quality_tier import QualityTier


# ----- Fakes for the ports ----------------------------------------------------

class FakeMetadataStore:
    def __init__(self, *descriptors: MediaDescriptor) -> None:
        self.descriptors: Dict[str, MediaDescriptor] = {d.id: d for d in descriptors}
        self.get_calls: List[str] = []
        self.touches: List[Tuple[str, datetime]] = []
        self.recorded: Dict[str, DerivedPaths] = {}
        self.fail_get: Optional[Exception] = None
        self.fail_touch = False

    def add(self, descriptor: MediaDescriptor) -> None:
        self.descriptors[descriptor.id] = descriptor

    async def get_descriptor(self, media_id: str) -> Optional[MediaDescriptor]:
        self.get_calls.append(media_id)
        if self.fail_get is not None:
            raise self.fail_get
        return self.descriptors.get(media_id)

    async def touch(self, media_id: str, when: datetime) -> None:
        if self.fail_touch:
            raise RuntimeError("touch failed")
        self.touches.append((media_id, when))

    async def record_derivatives(self, media_id: str, paths: DerivedPaths) -> None:
        self.recorded[media_id] = paths
        self.descriptors[media_id] = replace(
            self.descriptors[media_id],
            thumbnail_path=paths.thumbnail_path,
            preview_path=paths.preview_path,
            medium_path=paths.medium_path,
        )


class FakeSigner:
    """Returns a distinct URL per call so re-resolves are observable."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, int]] = []
        self.fail_paths: Set[str] = set()
        self.fail_all = False

    @property
    def signed_paths(self) -> List[str]:
        return [p for p, _ in self.calls]

    async def sign_url(self, path: str, ttl_seconds: int) -> str:
        self.calls.append((path, ttl_seconds))
        if self.fail_all or path in self.fail_paths:
            raise RuntimeError(f"signing failed for {path}")
        return f"https://signed.test/{path}?ttl={ttl_seconds}&n={len(self.calls)}"


class GatedSigner(FakeSigner):
    """Blocks every signing call until ``gate`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()

    async def sign_url(self, path: str, ttl_seconds: int) -> str:
        await self.gate.wait()
        return await super().sign_url(path, ttl_seconds)


class FakeThumbnailer:
    def __init__(self) -> None:
        self.calls: List[Dict[str, object]] = []
        self.fail: Optional[Exception] = None

    async def generate_thumbnails(self, original_path, *, sizes, compression_level) -> DerivedPaths:
        self.calls.append({"original_path": original_path, "sizes": dict(sizes), "compression_level": compression_level})
        if self.fail is not None:
            raise self.fail
        stem, _, ext = original_path.rpartition(".")
        return DerivedPaths(
            thumbnail_path=f"{stem}_thumb.{ext}",
            preview_path=f"{stem}_preview.{ext}",
            medium_path=f"{stem}_medium.{ext}",
        )


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ----- Builders ---------------------------------------------------------------

def make_descriptor(media_id: str = "p1", **kw) -> MediaDescriptor:
    base = dict(
        id=media_id,
        original_path="u1/b1/x.jpg",
        thumbnail_path="u1/b1/x_thumb.jpg",
        preview_path="u1/b1/x_preview.jpg",
        medium_path="u1/b1/x_medium.jpg",
        encrypted=False,
    )
    base.update(kw)
    return MediaDescriptor(**base)


def make_settings(*, cache: Optional[CacheConfig] = None, touch_enabled: bool = True) -> Settings:
    return Settings(
        cache=cache or CacheConfig(),
        delivery=DeliveryConfig(progressive_delay_ms=0, touch_enabled=touch_enabled),
    )


ALL_TIERS = list(QualityTier.ascending())


