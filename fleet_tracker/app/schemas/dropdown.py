"""
Dropdown option Pydantic schemas.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field
from fleet_tracker.app.models.enums import DropdownType
from fleet_tracker.app.schemas.common import CamelModel


class DropdownOptionCreate(CamelModel):
    type: DropdownType
    name: str = Field(..., min_length=1, max_length=200)
    code: Optional[str] = Field(None, max_length=50)
    order: int = 0
    is_active: bool = True


class DropdownOptionUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    code: Optional[str] = Field(None, max_length=50)
    order: Optional[int] = None
    is_active: Optional[bool] = None


class DropdownOptionResponse(CamelModel):
    id: int
    type: DropdownType
    name: str
    code: Optional[str] = None
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime


class ReorderItem(CamelModel):
    id: int
    order: int


class DropdownReorder(CamelModel):
    options: List[ReorderItem] = Field(..., min_length=1)


class GroupedOptions(CamelModel):
    """Active options bucketed by type, each bucket ordered by (order, name)."""
    projects: List[DropdownOptionResponse] = Field(default_factory=list)
    way_bridges: List[DropdownOptionResponse] = Field(default_factory=list)
    loading_points: List[DropdownOptionResponse] = Field(default_factory=list)
    unloading_points: List[DropdownOptionResponse] = Field(default_factory=list)
    transporters: List[DropdownOptionResponse] = Field(default_factory=list)
    wb_loading_points: List[DropdownOptionResponse] = Field(default_factory=list)
