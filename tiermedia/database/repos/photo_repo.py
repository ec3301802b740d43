from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from tiermedia.database.models.photo import Photo as DBPhoto


class SqlAlchemyPhotoRepo:
    def __init__(self, session: Session) -> None:
        self.db = session

    # --------- Reads ---------

    def get(self, photo_id: str) -> Optional[DBPhoto]:
        return self.db.get(DBPhoto, photo_id)

    # --------- Writes ---------

    def create(
        self,
        *,
        path: str,
        photo_id: str | None = None,
        thumbnail_path: str | None = None,
        preview_path: str | None = None,
        medium_path: str | None = None,
        file_size: int | None = None,
        width: int | None = None,
        height: int | None = None,
        mime_type: str | None = None,
        checksum: str | None = None,
        encrypted: bool = False,
    ) -> DBPhoto:
        obj = DBPhoto(
            path=path,
            thumbnail_path=thumbnail_path,
            preview_path=preview_path,
            medium_path=medium_path,
            file_size=file_size,
            width=width,
            height=height,
            mime_type=mime_type,
            checksum=checksum,
            encrypted=encrypted,
        )
        if photo_id:
            obj.id = photo_id
        self.db.add(obj)
        # let caller control flush/commit when used transactionally
        return obj

    def touch(self, photo_id: str, when: datetime) -> int:
        """Set last_accessed without loading the row. Returns affected row count."""
        res = self.db.execute(
            update(DBPhoto).where(DBPhoto.id == photo_id).values(last_accessed=when)
        )
        return res.rowcount or 0

    def set_derivatives(
        self,
        photo_id: str,
        *,
        thumbnail_path: str,
        preview_path: str,
        medium_path: str,
    ) -> DBPhoto:
        obj = self.get(photo_id)
        if not obj:
            raise ValueError("Photo not found")
        obj.thumbnail_path = thumbnail_path
        obj.preview_path = preview_path
        obj.medium_path = medium_path
        return obj
