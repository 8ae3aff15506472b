"""
Stage capture schemas: way bridge, loading point and unloading point.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator, model_validator
from fleet_tracker.app.models.enums import LoadingStatus
from fleet_tracker.app.schemas.common import CamelModel
from fleet_tracker.app.schemas.qr import normalize_vehicle_number


class WayBridgeDataCreate(CamelModel):
    qr_code: Optional[str] = None
    vehicle_number: str = Field(..., min_length=1, max_length=50)
    way_bridge_id: int
    project_id: int
    transporter_id: int
    loading_point_id: int
    weigh_bridge_slip_no: Optional[str] = Field(None, max_length=100)
    loading_point_slip_no: Optional[str] = Field(None, max_length=100)
    gross_weight: float = Field(..., ge=0)
    tare_weight: float = Field(..., ge=0)
    # Required only when the vehicle already has an active trip
    previous_trip_reason: Optional[str] = None

    @field_validator("vehicle_number")
    @classmethod
    def upper_vehicle_number(cls, v: str) -> str:
        return normalize_vehicle_number(v)

    @model_validator(mode="after")
    def check_weights(self):
        if self.tare_weight > self.gross_weight:
            raise ValueError("Tare weight cannot exceed gross weight")
        return self


class LoadingPointDataCreate(CamelModel):
    qr_code: Optional[str] = None
    vehicle_number: str = Field(..., min_length=1, max_length=50)
    loading_point_id: int
    project_id: int
    transporter_id: int
    notes: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    previous_trip_reason: Optional[str] = None

    @field_validator("vehicle_number")
    @classmethod
    def upper_vehicle_number(cls, v: str) -> str:
        return normalize_vehicle_number(v)


class UnloadingPointDataCreate(CamelModel):
    trip_id: int
    qr_code: Optional[str] = None
    vehicle_number: str = Field(..., min_length=1, max_length=50)
    way_bridge_slip_no: Optional[str] = Field(None, max_length=100)
    loading_point_slip_no: Optional[str] = Field(None, max_length=100)
    loading_point_name: Optional[str] = None
    way_bridge_name: Optional[str] = None
    gross_weight: Optional[float] = Field(None, ge=0)
    tare_weight: Optional[float] = Field(None, ge=0)
    net_weight: Optional[float] = Field(None, ge=0)
    unloading_point_id: int
    project_id: int
    notes: Optional[str] = None

    @field_validator("vehicle_number")
    @classmethod
    def upper_vehicle_number(cls, v: str) -> str:
        return normalize_vehicle_number(v)


class WayBridgeDataResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    trip_id: Optional[int] = None
    qr_code: Optional[str] = None
    vehicle_number: str
    way_bridge_id: int
    way_bridge_name: str
    project_id: int
    project_name: str
    transporter_id: int
    transporter_name: str
    loading_point_id: int
    loading_point_name: str
    weigh_bridge_slip_no: Optional[str] = None
    loading_point_slip_no: Optional[str] = None
    gross_weight: float
    tare_weight: float
    net_weight: float
    timestamp: datetime
    created_at: datetime
    updated_at: datetime


class LoadingPointDataResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    trip_id: Optional[int] = None
    qr_code: Optional[str] = None
    vehicle_number: str
    loading_point_id: int
    loading_point_name: str
    project_id: int
    project_name: str
    transporter_id: int
    transporter_name: str
    notes: Optional[str] = None
    status: LoadingStatus
    timestamp: datetime
    created_at: datetime
    updated_at: datetime


class UnloadingPointDataResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    trip_id: Optional[int] = None
    qr_code: Optional[str] = None
    vehicle_number: str
    way_bridge_slip_no: Optional[str] = None
    loading_point_slip_no: Optional[str] = None
    loading_point_name: Optional[str] = None
    way_bridge_name: Optional[str] = None
    gross_weight: Optional[float] = None
    tare_weight: Optional[float] = None
    net_weight: Optional[float] = None
    unloading_point_id: int
    unloading_point_name: str
    project_id: int
    project_name: str
    notes: Optional[str] = None
    image_path: Optional[str] = None
    timestamp: datetime
    created_at: datetime
    updated_at: datetime
