"""
Error kinds raised by the media delivery core.

Every error carries a ``retryable`` hint so callers (API layer, UI glue) can
decide between showing a placeholder and retrying with ``force_refresh``.
"""
from __future__ import annotations

from typing import Optional


class MediaDeliveryError(Exception):
    """Base exception for all media delivery errors"""

    retryable: bool = False

    def __init__(self, message: str, details: Optional[str] = None, media_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.media_id = media_id

    def __str__(self):
        parts = [self.message]
        if self.media_id:
            parts.append(f"Media: {self.media_id}")
        if self.details:
            parts.append(f"Details: {self.details}")
        return " | ".join(parts)


class MediaNotFoundError(MediaDeliveryError):
    """Raised when the metadata store has no descriptor for the requested id"""

    def __init__(self, media_id: str, details: Optional[str] = None):
        super().__init__("Media not found", details, media_id)


class ResolutionError(MediaDeliveryError):
    """Raised when no usable path exists for a tier or a signed URL cannot be minted"""

    retryable = True


class MediaIntegrityError(MediaDeliveryError):
    """Raised when an encrypted payload fails authentication (tampered data, wrong IV or key)"""
