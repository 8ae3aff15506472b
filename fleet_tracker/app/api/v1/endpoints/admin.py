"""
Admin console endpoints.

Admin authentication, dashboard, user management, administrator creation
and the anomaly reports. Every route except login requires an admin token.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.config import settings
from fleet_tracker.app.core.guards import require_admin, require_super_admin
from fleet_tracker.app.core.jwt import create_admin_token
from fleet_tracker.app.core.observability import logger
from fleet_tracker.app.schemas.admin import (
    AdminCreate,
    AdminLoginResult,
    AdminUserCreate,
    AdminUserUpdate,
    Dashboard,
    DashboardStats,
    PasswordReset,
    UserStats,
)
from fleet_tracker.app.schemas.auth import UserLogin, UserResponse
from fleet_tracker.app.schemas.common import dump, envelope
from fleet_tracker.app.schemas.telemetry import LocationResponse
from fleet_tracker.app.services import anomalies
from fleet_tracker.app.services import users as user_service

router = APIRouter(prefix="/admin", tags=["Admin"])


def _user(user) -> dict:
    return dump(UserResponse.model_validate(user))


@router.post("/login")
async def admin_login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login for console administrators. Regular users are rejected."""
    user = await user_service.authenticate(db, credentials.email, credentials.password, admin=True)
    token = create_admin_token(user.id, user.email)
    logger.info("Admin logged in: id=%s", user.id)
    return envelope(
        "Login successful",
        dump(AdminLoginResult(admin=UserResponse.model_validate(user), token=token)),
    )


@router.get("/profile")
async def get_admin_profile(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.get_user(db, admin["user_id"])
    return envelope("Profile retrieved successfully", {"admin": _user(user)})


@router.get("/dashboard")
async def get_dashboard(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    stats, recent_users = await user_service.dashboard_stats(db)
    dashboard = Dashboard(
        stats=DashboardStats(**stats),
        recent_users=[UserResponse.model_validate(u) for u in recent_users],
    )
    return envelope("Dashboard stats retrieved successfully", dump(dashboard))


# User management

@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: AdminUserCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.create_user(
        db, email=body.email, password=body.password, name=body.name, role_id=body.role_id
    )
    return envelope("User created successfully", {"user": _user(user)})


@router.get("/users")
async def list_users(
    limit: int = Query(settings.default_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    users, pagination = await user_service.list_users(db, search, is_active, limit, skip)
    return envelope(
        "Users retrieved successfully",
        {"users": [_user(u) for u in users], "pagination": dump(pagination)},
    )


@router.get("/users/{user_id}")
async def get_user(
    user_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """User detail with telemetry count and last known location."""
    user = await user_service.get_user(db, user_id)
    count, last_location = await user_service.user_location_stats(db, user_id)
    stats = UserStats(
        location_count=count,
        last_location=LocationResponse.model_validate(last_location) if last_location else None,
    )
    return envelope("User retrieved successfully", {"user": _user(user), "stats": dump(stats)})


@router.put("/users/{user_id}")
async def update_user(
    user_id: int,
    body: AdminUserUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.update_user(db, user_id, body)
    return envelope("User updated successfully", {"user": _user(user)})


@router.post("/users/{user_id}/reset-password")
async def reset_user_password(
    user_id: int,
    body: PasswordReset,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await user_service.reset_password(db, user_id, body.password)
    return envelope("Password reset successfully")


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a user and all of their telemetry."""
    await user_service.delete_user(db, user_id)
    return envelope("User deleted successfully")


@router.post("/admins", status_code=status.HTTP_201_CREATED)
async def create_admin(
    body: AdminCreate,
    admin: dict = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a console administrator. Super admins only."""
    user = await user_service.create_user(
        db,
        email=body.email,
        password=body.password,
        name=body.name,
        role_id=body.role_id,
        is_admin=True,
        is_super_admin=body.is_super_admin,
    )
    logger.info("Admin created: id=%s by admin_id=%s", user.id, admin["user_id"])
    return envelope("Admin created successfully", {"admin": _user(user)})


# Anomaly reports

@router.get("/missing-loading-points")
async def list_missing_loading_points(
    limit: int = Query(settings.anomaly_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    entries, pagination = await anomalies.list_missing_loading_entries(db, limit, skip)
    return envelope(
        "Missing loading point entries retrieved",
        {"entries": [dump(e) for e in entries], "pagination": dump(pagination)},
    )


@router.get("/missing-unloading-points")
async def list_missing_unloading_points(
    limit: int = Query(settings.anomaly_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    entries, pagination = await anomalies.list_missing_unloading_entries(db, limit, skip)
    return envelope(
        "Missing unloading point entries retrieved",
        {"entries": [dump(e) for e in entries], "pagination": dump(pagination)},
    )
