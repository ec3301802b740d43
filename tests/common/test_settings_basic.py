from pathlib import Path

import pytest

from tiermedia.common.settings import CacheConfig, Settings, StorageConfig, get_settings


@pytest.fixture()
def fresh_settings():
    # ensure a clean cache per test
    from tiermedia.common import settings as s
    s.get_settings.cache_clear()
    yield
    s.get_settings.cache_clear()


def test_settings_dirs_created(tmp_path, monkeypatch, fresh_settings):
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("DATA_ROOT", str(tmp_path))

    cfg = get_settings()
    assert cfg.data_root == tmp_path
    assert cfg.storage_root == tmp_path / "storage"
    assert cfg.storage_root.exists()
    assert cfg.database_url == f"sqlite:///{tmp_path / 'tiermedia.db'}"

    # spot-check a couple defaults
    assert cfg.cache.max_size_mb == 100
    assert cfg.cache.max_age_hours == 24
    assert cfg.cache.compression_level == 8
    assert cfg.storage.signed_url_ttl_sec == 3600
    assert cfg.delivery.progressive_delay_ms == 100


def test_nested_env_overrides(tmp_path, monkeypatch, fresh_settings):
    monkeypatch.setenv("DATA_ROOT", str(tmp_path))
    monkeypatch.setenv("CACHE__MAX_SIZE_MB", "0.5")
    monkeypatch.setenv("CACHE__MAX_AGE_HOURS", "2")
    monkeypatch.setenv("DELIVERY__TOUCH_ENABLED", "off")
    monkeypatch.setenv("DB__DATABASE_URL", "sqlite+pysqlite:///:memory:")

    cfg = get_settings()
    assert cfg.cache.max_size_kb == 512
    assert cfg.cache.max_age_seconds == 7200
    assert cfg.delivery.touch_enabled is False
    assert cfg.database_url == "sqlite+pysqlite:///:memory:"


def test_cache_config_bounds():
    with pytest.raises(ValueError):
        CacheConfig(max_size_mb=0)
    with pytest.raises(ValueError):
        CacheConfig(compression_level=11)


def test_storage_root_override(tmp_path):
    cfg = Settings(data_root=tmp_path / "data", storage=StorageConfig(root_override=tmp_path / "bucket"))
    assert cfg.storage_root == Path(tmp_path / "bucket")
