# tests/conftest.py
from __future__ import annotations

import os
import tempfile

# Keep settings side effects (data/storage dirs, SQLite file) out of the repo.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATA_ROOT", tempfile.mkdtemp(prefix="tiermedia-tests-"))

import pytest

from tiermedia.services.delivery.service import MediaDeliveryService
from tests.fakes import (
    FakeClock,
    FakeMetadataStore,
    FakeSigner,
    FakeThumbnailer,
    make_descriptor,
    make_settings,
)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def metadata() -> FakeMetadataStore:
    return FakeMetadataStore(make_descriptor("p1"))


@pytest.fixture()
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture()
def thumbnailer() -> FakeThumbnailer:
    return FakeThumbnailer()


@pytest.fixture()
def service(metadata, signer, thumbnailer, clock) -> MediaDeliveryService:
    return MediaDeliveryService(
        metadata,
        signer,
        thumbnailer=thumbnailer,
        settings=make_settings(),
        clock=clock,
    )


@pytest.fixture()
def cache(service):
    return service.cache


# ----- database ---------------------------------------------------------------

@pytest.fixture()
def db_engine():
    from tiermedia.database.core.main import init_db, make_engine

    engine = make_engine("sqlite+pysqlite:///:memory:")
    init_db(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    from sqlalchemy.orm import sessionmaker

    return sessionmaker(bind=db_engine, expire_on_commit=False, future=True, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
