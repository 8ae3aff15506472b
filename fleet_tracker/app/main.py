"""
FastAPI Application Entry Point.

This is the main application file for the Fleet Tracker Backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from fleet_tracker.app.core.config import settings
from fleet_tracker.app.api.v1.router import router as api_v1_router
from fleet_tracker.app.db.session import engine, Base
from fleet_tracker.app.core.observability import ObservabilityMiddleware, configure_logging, logger
from fleet_tracker.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from fleet_tracker.app.models.role import Role
from fleet_tracker.app.models.user import User
from fleet_tracker.app.models.dropdown_option import DropdownOption
from fleet_tracker.app.models.qr_vehicle import QRVehicle
from fleet_tracker.app.models.trip import Trip
from fleet_tracker.app.models.way_bridge_data import WayBridgeData
from fleet_tracker.app.models.loading_point_data import LoadingPointData
from fleet_tracker.app.models.unloading_point_data import UnloadingPointData
from fleet_tracker.app.models.missing_entries import MissingLoadingPointEntry, MissingUnloadingPointEntry
from fleet_tracker.app.models.location import Location
from fleet_tracker.app.models.user_selection import UserSelection


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Configures logging.
    2. Creates database tables on startup.
    """
    configure_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started", settings.app_name)
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Vehicle trip tracking backend: QR association, stage capture and telemetry",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Fleet Tracker Backend API",
        "docs": "/docs",
        "health": "/health",
    }
