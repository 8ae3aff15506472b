"""
Anomaly report schemas.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator
from fleet_tracker.app.models.enums import SelectionType
from fleet_tracker.app.schemas.common import CamelModel
from fleet_tracker.app.schemas.qr import normalize_vehicle_number


class MissingLoadingPointReport(CamelModel):
    """Client-reported skipped loading stage."""
    vehicle_number: str = Field(..., min_length=1, max_length=50)
    qr_code: Optional[str] = None
    unloading_point_id: Optional[int] = None
    unloading_point_name: Optional[str] = None
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    reason: Optional[str] = None

    @field_validator("vehicle_number")
    @classmethod
    def upper_vehicle_number(cls, v: str) -> str:
        return normalize_vehicle_number(v)


class ReportingUser(CamelModel):
    id: int
    name: str
    email: str


class MissingLoadingPointResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    user: Optional[ReportingUser] = None
    vehicle_number: str
    qr_code: Optional[str] = None
    unloading_point_id: Optional[int] = None
    unloading_point_name: Optional[str] = None
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    reason: str
    timestamp: datetime
    created_at: datetime


class MissingUnloadingPointResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    user: Optional[ReportingUser] = None
    trip_id: Optional[int] = None
    vehicle_number: str
    qr_code: Optional[str] = None
    previous_project_id: Optional[int] = None
    previous_project_name: Optional[str] = None
    previous_selection_type: Optional[SelectionType] = None
    previous_selection_name: Optional[str] = None
    trip_start_time: Optional[datetime] = None
    trip_end_time: Optional[datetime] = None
    reason: str
    timestamp: datetime
    created_at: datetime
