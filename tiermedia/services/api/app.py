from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tiermedia.common.settings import get_settings
from tiermedia.database.core.main import init_db
from tiermedia.services.api.deps import get_delivery_service
from tiermedia.services.api.routers import cache, health, media_urls, storage

cfg = get_settings()
dev = cfg.app_env.lower() == "development"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield
    # let pending last-accessed updates land before the loop goes away
    if get_delivery_service.cache_info().currsize:
        await get_delivery_service().aclose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Tiermedia API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
        lifespan=lifespan,
    )

    allow_origins = ["*"] if dev else cfg.api.cors_allow_origins
    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
        allow_credentials=cfg.api.cors_allow_credentials,
    )

    # Routers
    app.include_router(health.router)
    app.include_router(media_urls.router)
    app.include_router(cache.router)
    app.include_router(storage.router)
    return app

app = create_app()
