"""
Telemetry schemas.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator
from fleet_tracker.app.models.enums import ActivityType
from fleet_tracker.app.schemas.common import CamelModel, to_naive_utc


class LocationCreate(CamelModel):
    """One device sample. Ranges follow GPS conventions."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(None, ge=0)
    altitude: Optional[float] = None
    speed: Optional[float] = Field(None, ge=0)
    heading: Optional[float] = Field(None, ge=0, le=360)
    battery_level: Optional[int] = Field(None, ge=0, le=100)
    battery_charging: Optional[bool] = None
    timestamp: Optional[datetime] = None
    activity: ActivityType = ActivityType.UNKNOWN

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class LocationBatch(CamelModel):
    # Size bounds are checked by the endpoint to report them with their own messages
    locations: List[LocationCreate] = Field(default_factory=list)


class LocationResponse(CamelModel):
    id: int
    user_id: int
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    altitude: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None
    battery_level: Optional[int] = None
    battery_charging: Optional[bool] = None
    activity: ActivityType
    timestamp: datetime
    created_at: datetime
