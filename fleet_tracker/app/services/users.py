"""
User accounts: registration, credential checks and admin management.
"""

import logging
from datetime import datetime, time
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.core.exceptions import AuthenticationError, DomainError, ResourceNotFoundError
from fleet_tracker.app.core.security import get_password_hash, verify_password
from fleet_tracker.app.core.token_revocation import clear_user_token_revocation, revoke_all_user_tokens
from fleet_tracker.app.models.location import Location
from fleet_tracker.app.models.role import Role
from fleet_tracker.app.models.user import User
from fleet_tracker.app.schemas.admin import AdminUserUpdate
from fleet_tracker.app.schemas.common import Pagination
from fleet_tracker.app.services.pagination import paginate
from fleet_tracker.app.services.roles import get_default_role

logger = logging.getLogger("fleet_tracker")

EMAIL_TAKEN = "User with this email already exists"
INVALID_CREDENTIALS = "Invalid credentials"


async def get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User not found")
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def _check_role(db: AsyncSession, role_id: Optional[int]) -> None:
    if role_id is None:
        return
    if await db.scalar(select(Role.id).where(Role.id == role_id)) is None:
        raise DomainError("Invalid role")


async def create_user(
    db: AsyncSession,
    email: str,
    password: str,
    name: str,
    role_id: Optional[int] = None,
    is_admin: bool = False,
    is_super_admin: bool = False,
    use_default_role: bool = False,
) -> User:
    """
    Create an account.

    With ``use_default_role`` and no explicit ``role_id``, the current
    default role (if any) is assigned.
    """
    if await get_user_by_email(db, email) is not None:
        raise DomainError(EMAIL_TAKEN)

    await _check_role(db, role_id)
    if role_id is None and use_default_role:
        default_role = await get_default_role(db)
        role_id = default_role.id if default_role else None

    user = User(
        email=email.lower(),
        hashed_password=get_password_hash(password),
        name=name,
        role_id=role_id,
        is_admin=is_admin or is_super_admin,
        is_super_admin=is_super_admin,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User created: id=%s admin=%s", user.id, user.is_admin)
    return user


async def authenticate(db: AsyncSession, email: str, password: str, admin: bool = False) -> User:
    """
    Verify credentials and stamp ``last_login``.

    Raises:
        AuthenticationError: unknown email, wrong password, non-admin on the
            admin path, or deactivated account
    """
    user = await get_user_by_email(db, email)
    if user is None or (admin and not user.is_admin):
        logger.warning("Failed login attempt: email=%s admin=%s", email, admin)
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    if not verify_password(password, user.hashed_password):
        logger.warning("Failed login attempt: email=%s admin=%s", email, admin)
        raise AuthenticationError(INVALID_CREDENTIALS)

    user.last_login = datetime.utcnow()
    await db.commit()
    await db.refresh(user)
    return user


async def list_users(
    db: AsyncSession,
    search: Optional[str],
    is_active: Optional[bool],
    limit: int,
    skip: int,
) -> Tuple[List[User], Pagination]:
    query = select(User)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(or_(func.lower(User.email).like(pattern), func.lower(User.name).like(pattern)))
    if is_active is not None:
        query = query.where(User.is_active.is_(is_active))
    query = query.order_by(User.created_at.desc(), User.id.desc())
    return await paginate(db, query, limit, skip)


async def user_location_stats(db: AsyncSession, user_id: int) -> Tuple[int, Optional[Location]]:
    count = await db.scalar(select(func.count()).select_from(Location).where(Location.user_id == user_id))
    result = await db.execute(
        select(Location)
        .where(Location.user_id == user_id)
        .order_by(Location.timestamp.desc(), Location.id.desc())
    )
    return count or 0, result.scalars().first()


async def update_user(db: AsyncSession, user_id: int, data: AdminUserUpdate) -> User:
    """
    Apply an admin edit. Deactivation revokes every token of the user;
    reactivation lifts that revocation.
    """
    user = await get_user(db, user_id)

    if data.email and data.email != user.email:
        if await get_user_by_email(db, data.email) is not None:
            raise DomainError("Email already in use")
        user.email = data.email

    if data.name:
        user.name = data.name

    if "role_id" in data.model_fields_set:
        await _check_role(db, data.role_id)
        user.role_id = data.role_id

    was_active = user.is_active
    if data.is_active is not None:
        user.is_active = data.is_active

    await db.commit()
    await db.refresh(user)

    if was_active and not user.is_active:
        await revoke_all_user_tokens(user.id)
        logger.info("User deactivated: id=%s", user.id)
    elif not was_active and user.is_active:
        await clear_user_token_revocation(user.id)
        logger.info("User reactivated: id=%s", user.id)
    return user


async def reset_password(db: AsyncSession, user_id: int, password: str) -> None:
    user = await get_user(db, user_id)
    user.hashed_password = get_password_hash(password)
    await db.commit()
    logger.info("Password reset: user_id=%s", user_id)


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """
    Delete a user together with their telemetry.

    Trips, stage records and anomaly rows stay; their ``user_id`` is nulled
    by the foreign key.
    """
    user = await get_user(db, user_id)
    await db.execute(delete(Location).where(Location.user_id == user.id))
    await db.delete(user)
    await db.commit()
    await revoke_all_user_tokens(user_id)
    logger.info("User deleted: id=%s", user_id)


async def dashboard_stats(db: AsyncSession) -> Tuple[dict, List[User]]:
    total_users = await db.scalar(select(func.count()).select_from(User)) or 0
    active_users = await db.scalar(
        select(func.count()).select_from(User).where(User.is_active.is_(True))
    ) or 0
    total_locations = await db.scalar(select(func.count()).select_from(Location)) or 0

    start_of_day = datetime.combine(datetime.utcnow().date(), time.min)
    locations_today = await db.scalar(
        select(func.count()).select_from(Location).where(Location.timestamp >= start_of_day)
    ) or 0

    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()).limit(5))

    stats = {
        "total_users": total_users,
        "active_users": active_users,
        "inactive_users": total_users - active_users,
        "total_locations": total_locations,
        "locations_today": locations_today,
    }
    return stats, list(result.scalars().all())
