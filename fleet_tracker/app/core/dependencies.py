"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fleet_tracker.app.core.exceptions import AuthenticationError, TokenRevokedError
from fleet_tracker.app.core.jwt import decode_access_token
from fleet_tracker.app.core.token_revocation import is_token_revoked, are_user_tokens_revoked
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.models.user import User

# Missing credentials are reported by get_current_user as 401
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    Checks, in order:
    1. Token signature and expiry
    2. Revocation of this token (logout)
    3. Revocation of every token of the user (deactivation, deletion)
    4. The user still exists and is active

    Returns:
        Decoded token payload, refreshed with the user's live ``email``,
        ``is_admin`` and ``is_super_admin`` values

    Raises:
        AuthenticationError / TokenRevokedError: 401 on any failure
    """
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")

    token = credentials.credentials

    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Not authorized, invalid token")

    user_id = payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    if await is_token_revoked(token):
        raise TokenRevokedError()

    if await are_user_tokens_revoked(user_id):
        raise TokenRevokedError("User access has been revoked")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    payload.update(
        email=user.email,
        is_admin=user.is_admin,
        is_super_admin=user.is_super_admin,
        token=token,
    )
    return payload
