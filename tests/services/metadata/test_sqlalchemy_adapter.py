from datetime import datetime, timezone

import pytest

from tiermedia.database.repos.photo_repo import SqlAlchemyPhotoRepo
from tiermedia.domain.dataclasses.derivatives import DerivedPaths
from tiermedia.domain.enums.quality_tier import QualityTier
from tiermedia.domain.errors import MediaNotFoundError
from tiermedia.services.delivery.service import MediaDeliveryService
from tiermedia.services.metadata.sqlalchemy_adapter import SqlAlchemyMetadataAdapter
from tests.fakes import FakeSigner, make_settings

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def adapter(session_factory):
    with session_factory() as db, db.begin():
        SqlAlchemyPhotoRepo(db).create(path="u1/b1/x.jpg", photo_id="p1", mime_type="image/jpeg")
    return SqlAlchemyMetadataAdapter(session_factory)


async def test_get_descriptor(adapter):
    d = await adapter.get_descriptor("p1")

    assert d is not None
    assert d.original_path == "u1/b1/x.jpg"
    assert d.mime_type == "image/jpeg"
    assert await adapter.get_descriptor("missing") is None


async def test_touch_persists_and_ignores_unknown_ids(adapter):
    when = datetime(2024, 5, 1, tzinfo=timezone.utc)

    await adapter.touch("p1", when)
    await adapter.touch("missing", when)

    d = await adapter.get_descriptor("p1")
    assert d.last_accessed.replace(tzinfo=None) == when.replace(tzinfo=None)


async def test_record_derivatives(adapter):
    await adapter.record_derivatives("p1", DerivedPaths("t.jpg", "p.jpg", "m.jpg"))

    d = await adapter.get_descriptor("p1")
    assert (d.thumbnail_path, d.preview_path, d.medium_path) == ("t.jpg", "p.jpg", "m.jpg")

    with pytest.raises(MediaNotFoundError):
        await adapter.record_derivatives("missing", DerivedPaths("t.jpg", "p.jpg", "m.jpg"))


async def test_delivery_over_the_database(adapter):
    signer = FakeSigner()
    svc = MediaDeliveryService(adapter, signer, settings=make_settings())

    url = await svc.get_media_url("p1", QualityTier.preview)
    await svc.aclose()

    # no derivatives recorded yet, so the original is signed
    assert signer.signed_paths == ["u1/b1/x.jpg"]
    assert url == svc.cache.entry_for("p1", QualityTier.preview).url
    assert (await adapter.get_descriptor("p1")).last_accessed is not None
