"""SUVIDHA kiosk FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from suvidha.api.admin import router as admin_router
from suvidha.api.errors import register_exception_handlers
from suvidha.api.meter_readings import router as meter_readings_router
from suvidha.config import get_settings
from suvidha.models import Base
from suvidha.services import async_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    # Startup: create missing tables (migrations remain the source of truth)
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")
    yield
    # Shutdown: release pooled connections
    await async_engine.dispose()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """Build the API application with routers and error handlers."""
    settings = get_settings()
    application = FastAPI(
        title=settings.api_title,
        description="Utility services kiosk: meter readings, payments and admin reporting",
        version=settings.api_version,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    application.include_router(meter_readings_router)
    application.include_router(admin_router)

    @application.get("/health")
    async def health_check() -> dict:
        """Health check endpoint for monitoring."""
        return {"status": "ok"}

    return application


app = create_app()

__all__ = ["app", "create_app"]
