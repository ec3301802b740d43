# tiermedia/database/models/__init__.py

from tiermedia.database.core.main import Base
from tiermedia.database.models.photo import Photo

__all__ = [
    "Base",
    "Photo",
]
