"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from fleet_tracker.app.api.v1.endpoints import (
    auth, admin, roles, dropdown_options,
    qr, trips, stages,
    images, telemetry, selection
)

router = APIRouter()

# Authentication
router.include_router(auth.router)

# Admin console
router.include_router(admin.router)
router.include_router(roles.router)
router.include_router(dropdown_options.router)

# Vehicle association, trips and stage capture
router.include_router(qr.router)
router.include_router(trips.router)
router.include_router(stages.router)

# Unloading point photos
router.include_router(images.router)

# Device telemetry and saved selections
router.include_router(telemetry.router)
router.include_router(selection.router)
