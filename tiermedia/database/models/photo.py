from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column

from tiermedia.database.core.main import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Photo(Base):
    __tablename__ = "photos"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)

    # bucket object paths; derivatives are filled in by the generation job
    path: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_path: Mapped[Optional[str]] = mapped_column(Text)
    preview_path: Mapped[Optional[str]] = mapped_column(Text)
    medium_path: Mapped[Optional[str]] = mapped_column(Text)

    file_size: Mapped[Optional[int]] = mapped_column(BigInteger)
    width: Mapped[Optional[int]] = mapped_column(Integer)
    height: Mapped[Optional[int]] = mapped_column(Integer)
    mime_type: Mapped[Optional[str]] = mapped_column(String(128))
    checksum: Mapped[Optional[str]] = mapped_column(String(128))
    encrypted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("false"))

    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), server_default=func.now())
    last_accessed: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
