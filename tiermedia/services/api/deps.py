# tiermedia/services/api/deps.py
from __future__ import annotations

from functools import lru_cache

from tiermedia.common.settings import get_settings
from tiermedia.database.core.main import SessionLocal
from tiermedia.services.delivery.service import MediaDeliveryService
from tiermedia.services.metadata.sqlalchemy_adapter import SqlAlchemyMetadataAdapter
from tiermedia.services.storage.hmac_signer import HmacUrlSigner


@lru_cache(maxsize=1)
def get_url_signer() -> HmacUrlSigner:
    """
    Provide the storage signer via DI. The storage route verifies with the
    same instance that minted the URLs.
    """
    cfg = get_settings()
    return HmacUrlSigner(
        secret=cfg.storage.signing_secret,
        base_url=cfg.storage.public_base_url,
        bucket=cfg.storage.bucket,
    )


@lru_cache(maxsize=1)
def get_delivery_service() -> MediaDeliveryService:
    """
    Process-wide delivery service (one URL cache per process). Tests override
    this dependency with a service built on fakes.
    """
    return MediaDeliveryService(
        metadata=SqlAlchemyMetadataAdapter(SessionLocal),
        signer=get_url_signer(),
    )
