from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from tiermedia.common.logging import get_logger
from tiermedia.database.repos._mapping import to_descriptor
from tiermedia.database.repos.photo_repo import SqlAlchemyPhotoRepo
from tiermedia.domain.dataclasses.derivatives import DerivedPaths
from tiermedia.domain.entities.media_descriptor import MediaDescriptor
from tiermedia.domain.errors import MediaNotFoundError
from tiermedia.domain.ports.metadata import MediaMetadataPort

log = get_logger(__name__)


class SqlAlchemyMetadataAdapter(MediaMetadataPort):
    """
    MediaMetadataPort over the ``photos`` table. Each call opens its own
    session and runs in a worker thread so the event loop is never blocked.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def get_descriptor(self, media_id: str) -> Optional[MediaDescriptor]:
        return await asyncio.to_thread(self._get_descriptor, media_id)

    async def touch(self, media_id: str, when: datetime) -> None:
        await asyncio.to_thread(self._touch, media_id, when)

    async def record_derivatives(self, media_id: str, paths: DerivedPaths) -> None:
        await asyncio.to_thread(self._record_derivatives, media_id, paths)

    # --- blocking halves ------------------------------------------------------

    def _get_descriptor(self, media_id: str) -> Optional[MediaDescriptor]:
        with self._session_factory() as db:
            row = SqlAlchemyPhotoRepo(db).get(media_id)
            return to_descriptor(row) if row is not None else None

    def _touch(self, media_id: str, when: datetime) -> None:
        with self._session_factory() as db, db.begin():
            n = SqlAlchemyPhotoRepo(db).touch(media_id, when)
        if not n:
            log.debug("touch: no photo row for %s", media_id)

    def _record_derivatives(self, media_id: str, paths: DerivedPaths) -> None:
        with self._session_factory() as db, db.begin():
            try:
                SqlAlchemyPhotoRepo(db).set_derivatives(
                    media_id,
                    thumbnail_path=paths.thumbnail_path,
                    preview_path=paths.preview_path,
                    medium_path=paths.medium_path,
                )
            except ValueError as e:
                raise MediaNotFoundError(media_id, details=str(e)) from e
