"""
Role management endpoints for the admin console.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.guards import require_admin
from fleet_tracker.app.schemas.auth import UserResponse
from fleet_tracker.app.schemas.common import dump, envelope
from fleet_tracker.app.schemas.role import AvailablePermissions, RoleCreate, RoleResponse, RoleUpdate
from fleet_tracker.app.services import roles as role_service

router = APIRouter(prefix="/admin/roles", tags=["Roles"])


def _role(role):
    return dump(RoleResponse.model_validate(role)) if role is not None else None


# Static paths are declared before /{role_id}

@router.get("/permissions")
async def get_available_permissions(admin: dict = Depends(require_admin)):
    permissions = AvailablePermissions(**role_service.available_permissions())
    return envelope("Permissions retrieved", dump(permissions))


@router.get("/default")
async def get_default_role(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    role = await role_service.get_default_role(db)
    return envelope("Default role retrieved", {"role": _role(role)})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(
    body: RoleCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    role = await role_service.create_role(db, body)
    return envelope("Role created successfully", {"role": _role(role)})


@router.get("")
async def list_roles(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    roles = await role_service.list_roles(db)
    return envelope("Roles retrieved", {"roles": [_role(r) for r in roles]})


@router.get("/{role_id}")
async def get_role(
    role_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    role = await role_service.get_role(db, role_id)
    return envelope("Role retrieved", {"role": _role(role)})


@router.put("/{role_id}")
async def update_role(
    role_id: int,
    body: RoleUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    role = await role_service.update_role(db, role_id, body)
    return envelope("Role updated successfully", {"role": _role(role)})


@router.delete("/{role_id}")
async def delete_role(
    role_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await role_service.delete_role(db, role_id)
    return envelope("Role deleted successfully")


@router.get("/{role_id}/users")
async def get_users_by_role(
    role_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    role, users = await role_service.users_by_role(db, role_id)
    return envelope(
        "Users retrieved",
        {
            "role": _role(role),
            "users": [dump(UserResponse.model_validate(u)) for u in users],
            "count": len(users),
        },
    )
