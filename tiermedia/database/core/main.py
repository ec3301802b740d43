# tiermedia/database/core/main.py
from __future__ import annotations

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from tiermedia.common.settings import get_settings

_settings = get_settings()

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def make_engine(url: str, *, echo: bool = False) -> Engine:
    """
    Build an engine for ``url``. SQLite gets a thread-shareable connection
    (the async adapters run queries in worker threads); server databases get
    the pooled settings from ``DBConfig``.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, future=True, **kwargs)
    return create_engine(
        url,
        echo=echo,
        pool_size=_settings.db.pool_size,
        max_overflow=_settings.db.max_overflow,
        pool_pre_ping=_settings.db.pool_pre_ping,
        pool_recycle=_settings.db.pool_recycle,
        future=True,
    )


engine = make_engine(_settings.database_url, echo=_settings.db.echo)

SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, future=True, autoflush=False)


def init_db(bind: Engine | None = None) -> None:
    """Create missing tables (no migrations for a single-table schema)."""
    from tiermedia.database.models import photo  # noqa: F401  registers the model

    Base.metadata.create_all(bind=bind or engine)

