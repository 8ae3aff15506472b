"""
Role and permission store.

Name uniqueness is case-insensitive, at most one role is the default, and
system roles are read-only.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.core.exceptions import (
    DomainError,
    InsufficientPermissionsError,
    ResourceNotFoundError,
)
from fleet_tracker.app.models.enums import Permission
from fleet_tracker.app.models.role import Role
from fleet_tracker.app.models.user import User
from fleet_tracker.app.schemas.role import RoleCreate, RoleUpdate

logger = logging.getLogger("fleet_tracker")

ROLE_NAME_TAKEN = "Role with this name already exists"


async def _name_taken(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Role.id).where(func.lower(Role.name) == name.lower())
    if exclude_id is not None:
        query = query.where(Role.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def _clear_default(db: AsyncSession, exclude_id: Optional[int] = None) -> None:
    result = await db.execute(select(Role).where(Role.is_default.is_(True)))
    for role in result.scalars().all():
        if role.id != exclude_id:
            role.is_default = False


async def create_role(db: AsyncSession, data: RoleCreate) -> Role:
    if await _name_taken(db, data.name):
        raise DomainError(ROLE_NAME_TAKEN)

    if data.is_default:
        await _clear_default(db)

    role = Role(
        name=data.name,
        description=data.description,
        permissions=[p.value for p in data.permissions],
        is_default=data.is_default,
    )
    db.add(role)
    await db.commit()
    await db.refresh(role)
    logger.info("Role created: id=%s name=%s default=%s", role.id, role.name, role.is_default)
    return role


async def list_roles(db: AsyncSession) -> List[Role]:
    result = await db.execute(select(Role).order_by(Role.name))
    return list(result.scalars().all())


async def get_role(db: AsyncSession, role_id: int) -> Role:
    result = await db.execute(select(Role).where(Role.id == role_id))
    role = result.scalar_one_or_none()
    if role is None:
        raise ResourceNotFoundError("Role not found")
    return role


async def update_role(db: AsyncSession, role_id: int, data: RoleUpdate) -> Role:
    role = await get_role(db, role_id)
    if role.is_system:
        raise InsufficientPermissionsError("Cannot modify system role")

    if data.name is not None and data.name != role.name:
        if await _name_taken(db, data.name, exclude_id=role.id):
            raise DomainError(ROLE_NAME_TAKEN)
        role.name = data.name

    if data.description is not None:
        role.description = data.description
    if data.permissions is not None:
        role.permissions = [p.value for p in data.permissions]

    if data.is_default is not None:
        if data.is_default:
            await _clear_default(db, exclude_id=role.id)
            logger.info("Default role switched to id=%s", role.id)
        role.is_default = data.is_default

    await db.commit()
    await db.refresh(role)
    return role


async def delete_role(db: AsyncSession, role_id: int) -> None:
    role = await get_role(db, role_id)
    if role.is_system:
        raise InsufficientPermissionsError("Cannot delete system role")

    assigned = await db.scalar(select(func.count()).select_from(User).where(User.role_id == role.id))
    if assigned:
        raise DomainError(f"Cannot delete role. {assigned} user(s) are assigned to this role.")

    await db.delete(role)
    await db.commit()
    logger.info("Role deleted: id=%s", role_id)


def available_permissions() -> Dict:
    """The permission vocabulary, flat and grouped by resource."""
    permissions = [p.value for p in Permission]
    grouped: Dict[str, List[str]] = defaultdict(list)
    for permission in permissions:
        resource, _ = permission.split(":", 1)
        grouped[resource].append(permission)
    return {"permissions": permissions, "grouped": dict(grouped)}


async def get_default_role(db: AsyncSession) -> Optional[Role]:
    result = await db.execute(select(Role).where(Role.is_default.is_(True)).order_by(Role.id))
    return result.scalars().first()


async def users_by_role(db: AsyncSession, role_id: int) -> Tuple[Role, List[User]]:
    role = await get_role(db, role_id)
    result = await db.execute(select(User).where(User.role_id == role.id).order_by(User.name))
    return role, list(result.scalars().all())
