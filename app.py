"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires all services, registers routers, and runs startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from venue_pricing.controllers.pricing_controller import router as pricing_router
from venue_pricing.repository.data_repository import DataRepository
from venue_pricing.services.catalog_service import CatalogService
from venue_pricing.services.pricing_service import PricingService
from venue_pricing.utils.config import get_settings
from venue_pricing.utils.logger import get_logger


logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Build and wire the FastAPI application.

    Services are injected through app.state so every dependency is traceable
    from this function.
    """
    settings = get_settings()

    # --- Repository (SQLite catalog and estimate store) ---
    repository = DataRepository(settings)

    # --- Services ---
    catalog_service = CatalogService(repository=repository, settings=settings)
    pricing_service = PricingService(
        repository=repository,
        settings=settings,
        catalog_service=catalog_service,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(pricing_router)

    app.state.repository = repository
    app.state.catalog_service = catalog_service
    app.state.pricing_service = pricing_service

    return app


def _startup(app: FastAPI) -> None:
    """
    Idempotent startup sequence. Safe to re-run on server restarts.

    Schema must exist before seeding, and the catalog snapshot is loaded last
    so a broken catalog is reported at boot rather than on the first request.
    """
    repository: DataRepository = app.state.repository
    catalog_service: CatalogService = app.state.catalog_service

    logger.info("Startup: initializing database schema")
    repository.initialize_database()

    logger.info("Startup: seeding default venue catalog (skipped if present)")
    repository.seed_default_catalog()

    logger.info("Startup: loading pricing catalog snapshot")
    catalog_service.get_catalog(refresh=True)

    logger.info("Startup complete | system ready")


# Module-level app object for uvicorn
app = create_app()
