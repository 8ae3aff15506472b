"""
Authentication API endpoints.

Provides register, login, logout and current-user endpoints for mobile and
other clients.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.schemas.auth import UserRegister, UserLogin, UserResponse
from fleet_tracker.app.schemas.common import dump, envelope
from fleet_tracker.app.core.dependencies import get_current_user
from fleet_tracker.app.core.jwt import create_user_token
from fleet_tracker.app.core.observability import logger
from fleet_tracker.app.core.token_revocation import revoke_token
from fleet_tracker.app.services import users as user_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user.

    The new account receives the default role when one is configured.
    """
    user = await user_service.create_user(
        db,
        email=user_data.email,
        password=user_data.password,
        name=user_data.name,
        use_default_role=True,
    )
    token = create_user_token(user.id, user.email)

    return envelope(
        "User registered successfully",
        {"user": dump(UserResponse.model_validate(user)), "token": token},
    )


@router.post("/login")
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login user and return a JWT token."""
    user = await user_service.authenticate(db, credentials.email, credentials.password)
    token = create_user_token(user.id, user.email)
    logger.info("User logged in: id=%s", user.id)

    return envelope(
        "Login successful",
        {"user": dump(UserResponse.model_validate(user)), "token": token},
    )


@router.get("/me")
async def get_me(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the current authenticated user."""
    user = await user_service.get_user(db, current_user["user_id"])
    return envelope("User retrieved successfully", {"user": dump(UserResponse.model_validate(user))})


@router.post("/logout")
async def logout(current_user: dict = Depends(get_current_user)):
    """Revoke the presented token."""
    await revoke_token(current_user["token"], current_user["user_id"])
    logger.info("User logged out: id=%s", current_user["user_id"])
    return envelope("Logged out successfully")
