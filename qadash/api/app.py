"""
FastAPI application for the QA team dashboard.

This is the JSON API the dashboard frontend talks to.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qadash.api.errors import register_exception_handlers
from qadash.api.routes import router as dashboard_router
from qadash.auth.routes import router as auth_router
from qadash.config import Settings, get_settings
from qadash.integrations.sentry import init_sentry
from qadash.services import build_services, reconcile
from qadash.storage import StorageProvider, create_local_storage, seed_default_data

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare storage and run the startup checks."""
    settings: Settings = app.state.settings
    services = app.state.services
    configure_logging(settings)

    if init_sentry(settings):
        logger.info("Sentry error tracking enabled")

    records = services.storage.records
    if settings.seed_demo_data:
        seeded = await seed_default_data(records)
        if seeded:
            logger.info("Seeded demo data: %s", ", ".join(seeded))

    if settings.reconcile_on_startup:
        await reconcile(records, settings)

    logger.info("QA dashboard API starting in %s mode", settings.environment)

    yield

    logger.info("QA dashboard API shutting down")


# =============================================================================
# App Setup
# =============================================================================


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
) -> FastAPI:
    """
    Build the application.

    Tests pass their own settings (a temporary data dir) or a ready storage
    provider; the module-level ``app`` uses the environment.
    """
    settings = settings or get_settings()
    storage = storage or create_local_storage(settings.data_dir)

    application = FastAPI(
        title="QA Dashboard API",
        description="Team members, tasks, work logs and analytics for a QA team",
        version="1.0.0",
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.services = build_services(storage, settings)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)
    application.include_router(auth_router)
    application.include_router(dashboard_router)

    @application.get("/health")
    async def health():
        return {"status": "healthy", "service": "qadash-api"}

    return application


app = create_app()
