"""
Role and permission Pydantic schemas.

Permissions are validated against the closed ``Permission`` vocabulary.
"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import Field
from fleet_tracker.app.models.enums import Permission
from fleet_tracker.app.schemas.common import CamelModel


class RoleCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    permissions: List[Permission] = Field(default_factory=list)
    is_default: bool = False


class RoleUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    permissions: Optional[List[Permission]] = None
    is_default: Optional[bool] = None


class RoleResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    permissions: List[str]
    is_default: bool
    is_system: bool
    created_at: datetime
    updated_at: datetime


class AvailablePermissions(CamelModel):
    permissions: List[str]
    grouped: Dict[str, List[str]]
