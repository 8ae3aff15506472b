"""
QR code and vehicle association schemas.
"""

from typing import Optional
from pydantic import Field, field_validator
from fleet_tracker.app.schemas.common import CamelModel


def normalize_vehicle_number(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip().upper()


class QRCheckRequest(CamelModel):
    qr_code: str = Field(..., min_length=1)


class QRVehicleAssociate(CamelModel):
    """QR to vehicle only."""
    qr_code: str = Field(..., min_length=1)
    vehicle_number: str = Field(..., min_length=1, max_length=50)

    @field_validator("vehicle_number")
    @classmethod
    def upper_vehicle_number(cls, v: str) -> str:
        return normalize_vehicle_number(v)


class TransporterAssign(CamelModel):
    """Vehicle to transporter, optionally keyed by QR code."""
    vehicle_number: str = Field(..., min_length=1, max_length=50)
    transporter_id: int
    qr_code: Optional[str] = None

    @field_validator("vehicle_number")
    @classmethod
    def upper_vehicle_number(cls, v: str) -> str:
        return normalize_vehicle_number(v)


class VehicleAssociate(CamelModel):
    """Combined QR, vehicle and transporter association."""
    qr_code: str = Field(..., min_length=1)
    vehicle_number: str = Field(..., min_length=1, max_length=50)
    transporter_id: int

    @field_validator("vehicle_number")
    @classmethod
    def upper_vehicle_number(cls, v: str) -> str:
        return normalize_vehicle_number(v)


class AssociationResponse(CamelModel):
    qr_code: str
    vehicle_number: Optional[str] = None
    transporter_id: Optional[int] = None
    transporter_name: Optional[str] = None


class QRCheckResponse(CamelModel):
    has_vehicle: bool
    vehicle_number: Optional[str] = None
    qr_code: str
    transporter_id: Optional[int] = None
    transporter_name: Optional[str] = None


class VehicleCheckResponse(CamelModel):
    has_transporter: bool
    vehicle_number: str
    transporter_id: Optional[int] = None
    transporter_name: Optional[str] = None
    qr_code: Optional[str] = None
