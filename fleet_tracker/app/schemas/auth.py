"""
Authentication Pydantic schemas.
"""

from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field, field_validator
from fleet_tracker.app.schemas.common import CamelModel


class UserRegister(CamelModel):
    """Schema for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserLogin(CamelModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(CamelModel):
    """Public view of a user. Never carries the password hash."""
    id: int
    email: str
    name: str
    role_id: Optional[int] = None
    is_admin: bool
    is_super_admin: bool = False
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
