"""
Trip lifecycle schemas.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator
from fleet_tracker.app.models.enums import SelectionType, TripStatus
from fleet_tracker.app.schemas.common import CamelModel
from fleet_tracker.app.schemas.qr import normalize_vehicle_number


class TripStart(CamelModel):
    """Explicit start-trip request from a QR scan."""
    qr_code: str = Field(..., min_length=1)
    vehicle_number: str = Field(..., min_length=1, max_length=50)
    project_id: int
    selection_type: SelectionType
    selection_id: int
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("vehicle_number")
    @classmethod
    def upper_vehicle_number(cls, v: str) -> str:
        return normalize_vehicle_number(v)


class TripEnd(CamelModel):
    trip_id: int
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    notes: Optional[str] = None


class TripCancel(CamelModel):
    trip_id: int


class TripResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    qr_code: Optional[str] = None
    vehicle_number: str
    project_id: int
    project_name: str
    selection_type: SelectionType
    selection_id: int
    selection_name: str
    status: TripStatus
    start_time: datetime
    end_time: Optional[datetime] = None
    start_latitude: Optional[float] = None
    start_longitude: Optional[float] = None
    end_latitude: Optional[float] = None
    end_longitude: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class VehicleTripSummary(CamelModel):
    """Compact view used by the way bridge and loading point screens."""
    id: int
    vehicle_number: str
    project_name: str
    selection_type: SelectionType
    selection_name: str
    start_time: datetime
