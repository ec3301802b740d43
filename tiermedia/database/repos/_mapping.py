# tiermedia/database/repos/_mapping.py
from __future__ import annotations
from tiermedia.database.models.photo import Photo as DBPhoto
from tiermedia.domain.entities.media_descriptor import Dimensions, MediaDescriptor

def to_descriptor(row: DBPhoto) -> MediaDescriptor:
    dims = None
    if row.width is not None and row.height is not None:
        dims = Dimensions(width=row.width, height=row.height)
    return MediaDescriptor(
        id=row.id,
        original_path=row.path,
        thumbnail_path=row.thumbnail_path or None,
        preview_path=row.preview_path or None,
        medium_path=row.medium_path or None,
        file_size=row.file_size,
        dimensions=dims,
        mime_type=row.mime_type,
        checksum=row.checksum,
        encrypted=bool(row.encrypted),
        created_at=row.created_at,
        last_accessed=row.last_accessed,
    )
