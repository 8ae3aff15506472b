"""
Saved selection schemas.
"""

from datetime import datetime
from typing import Optional
from fleet_tracker.app.models.enums import SelectionType
from fleet_tracker.app.schemas.common import CamelModel


class SelectionCreate(CamelModel):
    project_id: int
    selection_type: SelectionType
    selection_id: int


class OptionRef(CamelModel):
    id: int
    name: str
    code: Optional[str] = None


class SelectionResponse(CamelModel):
    id: int
    user_id: int
    project_id: int
    project: Optional[OptionRef] = None
    selection_type: SelectionType
    selection_id: int
    selection: Optional[OptionRef] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
