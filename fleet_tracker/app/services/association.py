"""
QR code, vehicle and transporter association.

Three loosely coupled upserts keyed by QR code (or vehicle number as a
fallback). Vehicle numbers arrive upper-cased from the schema layer.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.models.dropdown_option import DropdownOption
from fleet_tracker.app.models.enums import DropdownType
from fleet_tracker.app.models.qr_vehicle import QRVehicle
from fleet_tracker.app.schemas.qr import QRCheckResponse, VehicleCheckResponse
from fleet_tracker.app.services.dropdowns import get_valid_option


def synthetic_qr_code(vehicle_number: str) -> str:
    """QR code placeholder for a vehicle registered without a physical code."""
    return f"VEHICLE_{vehicle_number}"


async def find_by_qr(db: AsyncSession, qr_code: str, active_only: bool = False) -> Optional[QRVehicle]:
    query = select(QRVehicle).where(QRVehicle.qr_code == qr_code)
    if active_only:
        query = query.where(QRVehicle.is_active.is_(True))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def find_by_vehicle(db: AsyncSession, vehicle_number: str, active_only: bool = False) -> Optional[QRVehicle]:
    query = select(QRVehicle).where(QRVehicle.vehicle_number == vehicle_number)
    if active_only:
        query = query.where(QRVehicle.is_active.is_(True))
    result = await db.execute(query.order_by(QRVehicle.updated_at.desc(), QRVehicle.id.desc()))
    return result.scalars().first()


def _stamp(qr_vehicle: QRVehicle, user_id: int) -> None:
    qr_vehicle.last_used_by = user_id
    qr_vehicle.last_used_at = datetime.utcnow()


def _new_association(qr_code: str, vehicle_number: str, user_id: int) -> QRVehicle:
    now = datetime.utcnow()
    return QRVehicle(
        qr_code=qr_code,
        vehicle_number=vehicle_number,
        created_by=user_id,
        last_used_by=user_id,
        last_used_at=now,
    )


async def check_qr(db: AsyncSession, qr_code: str) -> QRCheckResponse:
    """Pure read. Absence is a valid answer, never an error."""
    qr_vehicle = await find_by_qr(db, qr_code, active_only=True)
    if qr_vehicle is not None and qr_vehicle.vehicle_number:
        return QRCheckResponse(
            has_vehicle=True,
            vehicle_number=qr_vehicle.vehicle_number,
            qr_code=qr_vehicle.qr_code,
            transporter_id=qr_vehicle.transporter_id,
            transporter_name=qr_vehicle.transporter_name,
        )
    return QRCheckResponse(has_vehicle=False, qr_code=qr_code)


async def check_vehicle(db: AsyncSession, vehicle_number: str) -> VehicleCheckResponse:
    qr_vehicle = await find_by_vehicle(db, vehicle_number, active_only=True)
    if qr_vehicle is not None and qr_vehicle.transporter_id:
        return VehicleCheckResponse(
            has_transporter=True,
            vehicle_number=qr_vehicle.vehicle_number,
            transporter_id=qr_vehicle.transporter_id,
            transporter_name=qr_vehicle.transporter_name,
            qr_code=qr_vehicle.qr_code,
        )
    return VehicleCheckResponse(
        has_transporter=False,
        vehicle_number=vehicle_number,
        qr_code=qr_vehicle.qr_code if qr_vehicle else None,
    )


async def touch_association(db: AsyncSession, user_id: int, qr_code: str, vehicle_number: str) -> QRVehicle:
    """Bind ``qr_code`` to ``vehicle_number``. Does not commit."""
    qr_vehicle = await find_by_qr(db, qr_code)
    if qr_vehicle is None:
        qr_vehicle = _new_association(qr_code, vehicle_number, user_id)
        db.add(qr_vehicle)
    else:
        qr_vehicle.vehicle_number = vehicle_number
        _stamp(qr_vehicle, user_id)
    return qr_vehicle


async def associate_qr_to_vehicle(db: AsyncSession, user_id: int, qr_code: str, vehicle_number: str) -> QRVehicle:
    qr_vehicle = await touch_association(db, user_id, qr_code, vehicle_number)
    await db.commit()
    await db.refresh(qr_vehicle)
    return qr_vehicle


async def assign_transporter(
    db: AsyncSession,
    user_id: int,
    vehicle_number: str,
    transporter_id: int,
    qr_code: Optional[str] = None,
) -> QRVehicle:
    """
    Attach a transporter to a vehicle.

    Looks the association up by QR code first, then by vehicle number, and
    creates one (with a synthetic QR code if none was given) when neither
    matches.
    """
    transporter = await get_valid_option(db, transporter_id, DropdownType.TRANSPORTER)

    qr_vehicle = None
    if qr_code:
        qr_vehicle = await find_by_qr(db, qr_code)
    if qr_vehicle is None:
        qr_vehicle = await find_by_vehicle(db, vehicle_number)

    if qr_vehicle is None:
        qr_vehicle = _new_association(qr_code or synthetic_qr_code(vehicle_number), vehicle_number, user_id)
        db.add(qr_vehicle)
    else:
        _stamp(qr_vehicle, user_id)

    qr_vehicle.transporter_id = transporter.id
    qr_vehicle.transporter_name = transporter.name
    await db.commit()
    await db.refresh(qr_vehicle)
    return qr_vehicle


async def associate_vehicle(
    db: AsyncSession,
    user_id: int,
    qr_code: str,
    vehicle_number: str,
    transporter_id: int,
) -> QRVehicle:
    """Legacy combined association of QR code, vehicle and transporter."""
    transporter = await get_valid_option(db, transporter_id, DropdownType.TRANSPORTER)
    qr_vehicle = await touch_association(db, user_id, qr_code, vehicle_number)
    qr_vehicle.transporter_id = transporter.id
    qr_vehicle.transporter_name = transporter.name
    await db.commit()
    await db.refresh(qr_vehicle)
    return qr_vehicle


async def backfill_transporter(
    db: AsyncSession,
    user_id: int,
    qr_code: Optional[str],
    transporter: DropdownOption,
) -> Optional[QRVehicle]:
    """Fill in the transporter of an existing association that has none. Does not commit."""
    if not qr_code:
        return None
    qr_vehicle = await find_by_qr(db, qr_code)
    if qr_vehicle is None or qr_vehicle.transporter_id:
        return None
    qr_vehicle.transporter_id = transporter.id
    qr_vehicle.transporter_name = transporter.name
    _stamp(qr_vehicle, user_id)
    return qr_vehicle
