from __future__ import annotations
from enum import StrEnum
from typing import Tuple


class QualityTier(StrEnum):
    """
    Fidelity levels a media item can be served at, lowest first.

    Members are strings (so they round-trip through query params and JSON),
    which means the built-in comparison is alphabetical. Use ``rank`` or
    ``ascending()`` when order matters.
    """
    thumbnail = "thumbnail"
    preview = "preview"
    medium = "medium"
    full = "full"

    @classmethod
    def ascending(cls) -> Tuple["QualityTier", ...]:
        return (cls.thumbnail, cls.preview, cls.medium, cls.full)

    @property
    def rank(self) -> int:
        return QualityTier.ascending().index(self)

    @property
    def is_derived(self) -> bool:
        """True for tiers served from a generated derivative rather than the original."""
        return self is not QualityTier.full

    @property
    def nominal_size_kb(self) -> int:
        return NOMINAL_SIZE_KB[self]


# Cache accounting estimates, not measurements.
NOMINAL_SIZE_KB = {
    QualityTier.thumbnail: 10,
    QualityTier.preview: 30,
    QualityTier.medium: 200,
    QualityTier.full: 2000,
}
