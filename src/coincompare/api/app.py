"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coincompare.api.routes import cache, health, metrics, search
from coincompare.config.logging import configure_logging
from coincompare.config.settings import get_settings
from coincompare.services.container import build_services

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    configure_logging()
    log.info("application_starting")

    services = build_services(get_settings())
    app.state.services = services

    log.info("application_started", cache_backend=services.cache_backend)

    yield

    # Shutdown
    log.info("application_stopping")
    await services.close()
    log.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Side-by-side cryptocurrency comparison backend",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(health.router)
    app.include_router(search.router, prefix="/api")
    app.include_router(metrics.router, prefix="/api")
    app.include_router(cache.router, prefix="/api")

    return app
