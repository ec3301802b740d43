from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DerivedPaths:
    """Bucket paths produced by the derivative generation job."""
    thumbnail_path: str
    preview_path: str
    medium_path: str

    def __post_init__(self):
        for name in ("thumbnail_path", "preview_path", "medium_path"):
            if not getattr(self, name) or not getattr(self, name).strip():
                raise ValueError(f"{name} is required")
