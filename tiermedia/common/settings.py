# tiermedia/common/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class APIConfig(BaseModel):
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "DELETE", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False


class DBConfig(BaseModel):
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    pool_pre_ping: bool = True
    pool_recycle: int = 1800

    # Optional single URL (if set, it takes precedence over the SQLite file under data_root)
    url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
    )


class CacheConfig(BaseModel):
    max_size_mb: float = Field(100, gt=0, description="Aggregate nominal-size budget of the URL cache")
    max_age_hours: float = Field(24, gt=0, description="Lifetime of a cache entry")
    compression_level: int = Field(8, ge=1, le=10, description="Advisory; forwarded to derivative generation")
    tier_sizes_kb: Dict[str, int] = Field(
        default_factory=lambda: {"thumbnail": 10, "preview": 30, "medium": 200, "full": 2000},
        description="Nominal per-tier sizes used for cache accounting",
    )

    @computed_field  # type: ignore[misc]
    @property
    def max_size_kb(self) -> float:
        return self.max_size_mb * 1024

    @computed_field  # type: ignore[misc]
    @property
    def max_age_seconds(self) -> float:
        return self.max_age_hours * 60 * 60


class StorageConfig(BaseModel):
    bucket: str = "photos"
    public_base_url: str = "http://localhost:8000/api/storage"
    signing_secret: str = "dev-only-secret"
    signed_url_ttl_sec: int = Field(3600, ge=1)

    # Absolute override for the bucket root (defaults to DATA_ROOT/storage)
    root_override: Optional[Path] = Field(default=None, alias="STORAGE_ROOT")

    model_config = ConfigDict(populate_by_name=True)


class DeliveryConfig(BaseModel):
    progressive_delay_ms: int = Field(100, ge=0, description="Pause between progressive tier loads")
    # Pixel edge per derived tier requested from the generation job
    derivative_sizes: Dict[str, int] = Field(
        default_factory=lambda: {"thumbnail": 150, "preview": 300, "medium": 800},
    )
    touch_enabled: bool = True

    @field_validator("touch_enabled", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v, default=True)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "tiermedia"
    app_env: str = "development"  # development|test|staging|production

    # -------- Paths & layout --------
    data_root: Path = Path("./.tiermedia")
    storage_subdir: str = "storage"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    db: DBConfig = DBConfig()
    cache: CacheConfig = CacheConfig()
    storage: StorageConfig = StorageConfig()
    delivery: DeliveryConfig = DeliveryConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Derived paths =====
    @computed_field  # type: ignore[misc]
    @property
    def storage_root(self) -> Path:
        if self.storage.root_override:
            return Path(self.storage.root_override)
        return self.data_root / self.storage_subdir

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        if self.db.url:
            return self.db.url
        return f"sqlite:///{self.data_root / 'tiermedia.db'}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from tiermedia.common.settings import get_settings
        cfg = get_settings()
    """
    s = Settings()  # pydantic_settings will read from .env automatically
    if s.app_env in ("development", "test"):
        for p in (s.data_root, s.storage_root):
            p.mkdir(parents=True, exist_ok=True)
    return s
