from __future__ import annotations
from datetime import datetime
from typing import Optional, Protocol

from tiermedia.domain.dataclasses.derivatives import DerivedPaths
from tiermedia.domain.entities.media_descriptor import MediaDescriptor

class MediaMetadataPort(Protocol):
    # None means "no such media"; any raised exception is a store failure
    async def get_descriptor(self, media_id: str) -> Optional[MediaDescriptor]: ...

    async def touch(self, media_id: str, when: datetime) -> None: ...

    async def record_derivatives(self, media_id: str, paths: DerivedPaths) -> None: ...
