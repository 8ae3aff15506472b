"""
Trip lifecycle service.

Owns the active -> completed | cancelled state machine. At most one trip per
vehicle may be active; the partial unique index ``uq_trips_active_vehicle``
backs that rule at the store level, and a write that would break it is
rolled back and reported as a conflict.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.core.exceptions import (
    ConflictError,
    DomainError,
    RequestValidationFailed,
    ResourceNotFoundError,
)
from fleet_tracker.app.models.enums import DropdownType, SELECTION_DROPDOWN_TYPES, TripStatus
from fleet_tracker.app.models.trip import Trip
from fleet_tracker.app.models.way_bridge_data import WayBridgeData
from fleet_tracker.app.schemas.common import Pagination
from fleet_tracker.app.schemas.trip import TripEnd, TripStart, VehicleTripSummary
from fleet_tracker.app.services.anomalies import record_missing_unloading
from fleet_tracker.app.services.association import touch_association
from fleet_tracker.app.services.dropdowns import get_valid_option
from fleet_tracker.app.services.pagination import paginate

logger = logging.getLogger("fleet_tracker")

USER_HAS_ACTIVE_TRIP = "You already have an active trip. Please complete or cancel it first."
ACTIVE_TRIP_NOT_FOUND = "Active trip not found"
REASON_REQUIRED = "Reason for ending previous trip is required"


async def commit_or_conflict(db: AsyncSession, vehicle_number: str, flush_only: bool = False) -> None:
    """Commit (or only flush), translating an active-trip uniqueness violation into a 409."""
    try:
        if flush_only:
            await db.flush()
        else:
            await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Concurrent active trip rejected: vehicle=%s", vehicle_number)
        raise ConflictError(f"Vehicle {vehicle_number} already has an active trip")


async def get_active_trip(db: AsyncSession, user_id: int) -> Optional[Trip]:
    result = await db.execute(
        select(Trip)
        .where(Trip.user_id == user_id, Trip.status == TripStatus.ACTIVE)
        .order_by(Trip.start_time.desc())
    )
    return result.scalars().first()


async def find_active_trip_for_vehicle(db: AsyncSession, vehicle_number: str) -> Optional[Trip]:
    result = await db.execute(
        select(Trip)
        .where(Trip.vehicle_number == vehicle_number, Trip.status == TripStatus.ACTIVE)
        .order_by(Trip.start_time.desc())
    )
    return result.scalars().first()


async def start_trip(db: AsyncSession, user_id: int, data: TripStart) -> Trip:
    """
    Start a trip from a QR scan.

    Blocks on an active trip owned by the same user. References are
    validated before any write, and the association upsert and the trip
    insert commit together.

    Raises:
        DomainError: invalid project or selection, or user already on a trip
        ConflictError: the vehicle has an active trip (possibly another user's)
    """
    project = await get_valid_option(db, data.project_id, DropdownType.PROJECT, "project")
    selection = await get_valid_option(
        db, data.selection_id, SELECTION_DROPDOWN_TYPES[data.selection_type], "selection"
    )

    if await get_active_trip(db, user_id) is not None:
        raise DomainError(USER_HAS_ACTIVE_TRIP)

    await touch_association(db, user_id, data.qr_code, data.vehicle_number)

    trip = Trip(
        user_id=user_id,
        qr_code=data.qr_code,
        vehicle_number=data.vehicle_number,
        project_id=project.id,
        project_name=project.name,
        selection_type=data.selection_type,
        selection_id=selection.id,
        selection_name=selection.name,
        status=TripStatus.ACTIVE,
        start_time=datetime.utcnow(),
        start_latitude=data.latitude,
        start_longitude=data.longitude,
    )
    db.add(trip)
    await commit_or_conflict(db, data.vehicle_number)
    await db.refresh(trip)

    logger.info("Trip started: id=%s vehicle=%s user_id=%s", trip.id, trip.vehicle_number, user_id)
    return trip


async def _get_owned_active_trip(db: AsyncSession, user_id: int, trip_id: int) -> Trip:
    # One filter: a missing, foreign or closed trip all read as not found
    result = await db.execute(
        select(Trip).where(
            Trip.id == trip_id,
            Trip.user_id == user_id,
            Trip.status == TripStatus.ACTIVE,
        )
    )
    trip = result.scalar_one_or_none()
    if trip is None:
        raise ResourceNotFoundError(ACTIVE_TRIP_NOT_FOUND)
    return trip


async def end_trip(db: AsyncSession, user_id: int, data: TripEnd) -> Trip:
    trip = await _get_owned_active_trip(db, user_id, data.trip_id)

    trip.status = TripStatus.COMPLETED
    trip.end_time = datetime.utcnow()
    trip.end_latitude = data.latitude
    trip.end_longitude = data.longitude
    if data.notes:
        trip.notes = data.notes

    await db.commit()
    await db.refresh(trip)
    logger.info("Trip completed: id=%s vehicle=%s", trip.id, trip.vehicle_number)
    return trip


async def cancel_trip(db: AsyncSession, user_id: int, trip_id: int) -> Trip:
    trip = await _get_owned_active_trip(db, user_id, trip_id)

    trip.status = TripStatus.CANCELLED
    trip.end_time = datetime.utcnow()

    await db.commit()
    await db.refresh(trip)
    logger.info("Trip cancelled: id=%s vehicle=%s", trip.id, trip.vehicle_number)
    return trip


async def get_trip_history(
    db: AsyncSession,
    user_id: int,
    status: Optional[TripStatus],
    limit: int,
    skip: int,
) -> Tuple[List[Trip], Pagination]:
    query = select(Trip).where(Trip.user_id == user_id)
    if status is not None:
        query = query.where(Trip.status == status)
    query = query.order_by(Trip.created_at.desc(), Trip.id.desc())
    return await paginate(db, query, limit, skip)


async def check_vehicle_active_trip(db: AsyncSession, vehicle_number: str) -> Optional[VehicleTripSummary]:
    trip = await find_active_trip_for_vehicle(db, vehicle_number)
    if trip is None:
        return None
    return VehicleTripSummary.model_validate(trip)


async def get_active_trip_by_vehicle(db: AsyncSession, vehicle_number: str) -> Tuple[Trip, Optional[WayBridgeData]]:
    """
    Active trip for a vehicle plus its most relevant weighbridge reading.

    The reading attached to the trip wins; otherwise the latest reading for
    the vehicle is returned.
    """
    trip = await find_active_trip_for_vehicle(db, vehicle_number)
    if trip is None:
        raise ResourceNotFoundError("No active trip found for this vehicle")

    result = await db.execute(
        select(WayBridgeData)
        .where(WayBridgeData.trip_id == trip.id)
        .order_by(WayBridgeData.created_at.desc())
    )
    way_bridge_data = result.scalars().first()

    if way_bridge_data is None:
        result = await db.execute(
            select(WayBridgeData)
            .where(WayBridgeData.vehicle_number == vehicle_number)
            .order_by(WayBridgeData.created_at.desc(), WayBridgeData.id.desc())
        )
        way_bridge_data = result.scalars().first()

    return trip, way_bridge_data


def require_supersede_reason(reason: Optional[str]) -> str:
    if reason is None or not reason.strip():
        raise RequestValidationFailed(
            REASON_REQUIRED,
            errors=[{"field": "previousTripReason", "message": REASON_REQUIRED}],
        )
    return reason.strip()


async def supersede_active_trip(db: AsyncSession, user_id: int, trip: Trip, reason: str) -> Trip:
    """
    Cancel ``trip`` because a new stage started for its vehicle.

    Writes a missing-unloading anomaly for it first. Flushes so the
    cancellation reaches the store before the replacement trip is inserted;
    the caller commits.
    """
    now = datetime.utcnow()
    await record_missing_unloading(db, user_id, trip, reason, now)

    trip.status = TripStatus.CANCELLED
    trip.end_time = now
    trip.notes = f"Trip ended due to new trip start. Reason: {reason}"
    await db.flush()

    logger.info("Trip superseded: id=%s vehicle=%s", trip.id, trip.vehicle_number)
    return trip
