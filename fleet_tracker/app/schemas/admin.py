"""
Admin console schemas.
"""

from typing import List, Optional
from pydantic import EmailStr, Field, field_validator
from fleet_tracker.app.schemas.auth import UserResponse
from fleet_tracker.app.schemas.common import CamelModel
from fleet_tracker.app.schemas.telemetry import LocationResponse


class AdminUserCreate(CamelModel):
    """Admin-created regular user."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)
    role_id: Optional[int] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class AdminUserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role_id: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class PasswordReset(CamelModel):
    password: str = Field(..., min_length=6)


class AdminCreate(CamelModel):
    """New console administrator. Super admins only."""
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=100)
    role_id: Optional[int] = None
    is_super_admin: bool = False

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserStats(CamelModel):
    location_count: int
    last_location: Optional[LocationResponse] = None


class DashboardStats(CamelModel):
    total_users: int
    active_users: int
    inactive_users: int
    total_locations: int
    locations_today: int


class Dashboard(CamelModel):
    stats: DashboardStats
    recent_users: List[UserResponse]


class AdminLoginResult(CamelModel):
    admin: UserResponse
    token: str
