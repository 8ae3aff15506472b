"""
QR code and vehicle association endpoints, plus the dropdown lists the
scanner screens need.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.dependencies import get_current_user
from fleet_tracker.app.models.enums import DropdownType
from fleet_tracker.app.schemas.common import dump, envelope
from fleet_tracker.app.schemas.dropdown import DropdownOptionResponse
from fleet_tracker.app.schemas.qr import (
    AssociationResponse,
    QRCheckRequest,
    QRVehicleAssociate,
    TransporterAssign,
    VehicleAssociate,
    normalize_vehicle_number,
)
from fleet_tracker.app.services import association
from fleet_tracker.app.services.dropdowns import list_active_options

router = APIRouter(prefix="/qr", tags=["QR Codes"])


@router.post("/check")
async def check_qr(
    body: QRCheckRequest,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await association.check_qr(db, body.qr_code)
    message = "Vehicle found for QR code" if result.has_vehicle else "No vehicle associated with this QR code"
    return envelope(message, dump(result))


@router.get("/check-vehicle/{vehicle_number}")
async def check_vehicle(
    vehicle_number: str,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await association.check_vehicle(db, normalize_vehicle_number(vehicle_number))
    message = "Vehicle has transporter" if result.has_transporter else "Vehicle does not have transporter"
    return envelope(message, dump(result))


@router.post("/associate-vehicle")
async def associate_qr_to_vehicle(
    body: QRVehicleAssociate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Associate a vehicle number with a QR code (QR to vehicle only)."""
    qr_vehicle = await association.associate_qr_to_vehicle(
        db, current_user["user_id"], body.qr_code, body.vehicle_number
    )
    return envelope(
        "QR code associated with vehicle successfully",
        dump(AssociationResponse.model_validate(qr_vehicle)),
    )


@router.post("/assign-transporter")
async def assign_transporter(
    body: TransporterAssign,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    qr_vehicle = await association.assign_transporter(
        db, current_user["user_id"], body.vehicle_number, body.transporter_id, body.qr_code
    )
    return envelope(
        "Transporter assigned to vehicle successfully",
        dump(AssociationResponse.model_validate(qr_vehicle)),
    )


@router.post("/associate")
async def associate_vehicle(
    body: VehicleAssociate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Legacy combined association of QR code, vehicle and transporter."""
    qr_vehicle = await association.associate_vehicle(
        db, current_user["user_id"], body.qr_code, body.vehicle_number, body.transporter_id
    )
    return envelope("Vehicle associated successfully", dump(AssociationResponse.model_validate(qr_vehicle)))


async def _options(db: AsyncSession, option_type: DropdownType):
    return [dump(DropdownOptionResponse.model_validate(o)) for o in await list_active_options(db, option_type)]


@router.get("/transporters")
async def get_transporters(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return envelope("Transporters retrieved", {"transporters": await _options(db, DropdownType.TRANSPORTER)})


@router.get("/loading-points")
async def get_loading_points(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return envelope("Loading points retrieved", {"loadingPoints": await _options(db, DropdownType.LOADING_POINT)})


@router.get("/projects")
async def get_projects(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return envelope("Projects retrieved", {"projects": await _options(db, DropdownType.PROJECT)})


@router.get("/unloading-points")
async def get_unloading_points(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return envelope(
        "Unloading points retrieved",
        {"unloadingPoints": await _options(db, DropdownType.UNLOADING_POINT)},
    )
