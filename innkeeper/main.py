from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from innkeeper.api.v1.router import router as api_v1_router
from innkeeper.config.settings import settings
from innkeeper.core.exception_handlers import register_exception_handlers
from innkeeper.core.logging import setup_logging
from innkeeper.core.middleware import register_middlewares
from innkeeper.db.init_db import init_db


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Schema bootstrap outside production; production schemas are migrated
    if not settings.is_production():
        init_db()
    yield


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers core middleware and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "version": settings.API_VERSION}

    return app


app = create_app()
