"""
Stage data recorders.

Way bridge and loading point entries each open a new trip for the vehicle,
superseding any trip still active for it. An unloading entry closes its trip.
Every recorder validates all references before its first write and commits
exactly once, so a rejected request leaves nothing behind.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple, Type

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.core.exceptions import DomainError
from fleet_tracker.app.models.enums import DropdownType, LoadingStatus, SelectionType, TripStatus
from fleet_tracker.app.models.loading_point_data import LoadingPointData
from fleet_tracker.app.models.trip import Trip
from fleet_tracker.app.models.unloading_point_data import UnloadingPointData
from fleet_tracker.app.models.way_bridge_data import WayBridgeData
from fleet_tracker.app.schemas.common import Pagination
from fleet_tracker.app.schemas.stage import (
    LoadingPointDataCreate,
    UnloadingPointDataCreate,
    WayBridgeDataCreate,
)
from fleet_tracker.app.services.anomalies import record_missing_loading
from fleet_tracker.app.services.association import backfill_transporter
from fleet_tracker.app.services.dropdowns import get_valid_option
from fleet_tracker.app.services.pagination import paginate
from fleet_tracker.app.services.trips import (
    commit_or_conflict,
    find_active_trip_for_vehicle,
    require_supersede_reason,
    supersede_active_trip,
)

logger = logging.getLogger("fleet_tracker")

# Trips opened at these stages count as having a loading record
LOADING_STAGES = {SelectionType.WAY_BRIDGE, SelectionType.LOADING_POINT}


async def save_way_bridge_data(
    db: AsyncSession,
    user_id: int,
    data: WayBridgeDataCreate,
) -> Tuple[WayBridgeData, Trip, Optional[Trip]]:
    """
    Record a weighbridge reading and open a way bridge trip.

    Returns:
        (way bridge record, new trip, superseded trip or None)
    """
    previous = await find_active_trip_for_vehicle(db, data.vehicle_number)
    reason = require_supersede_reason(data.previous_trip_reason) if previous else None

    way_bridge = await get_valid_option(db, data.way_bridge_id, DropdownType.WAY_BRIDGE)
    project = await get_valid_option(db, data.project_id, DropdownType.PROJECT)
    transporter = await get_valid_option(db, data.transporter_id, DropdownType.TRANSPORTER)
    loading_point = await get_valid_option(db, data.loading_point_id, DropdownType.LOADING_POINT)

    if previous is not None:
        await supersede_active_trip(db, user_id, previous, reason)

    await backfill_transporter(db, user_id, data.qr_code, transporter)

    now = datetime.utcnow()
    trip = Trip(
        user_id=user_id,
        qr_code=data.qr_code,
        vehicle_number=data.vehicle_number,
        project_id=project.id,
        project_name=project.name,
        selection_type=SelectionType.WAY_BRIDGE,
        selection_id=way_bridge.id,
        selection_name=way_bridge.name,
        status=TripStatus.ACTIVE,
        start_time=now,
    )
    db.add(trip)
    await commit_or_conflict(db, data.vehicle_number, flush_only=True)

    record = WayBridgeData(
        user_id=user_id,
        trip_id=trip.id,
        qr_code=data.qr_code,
        vehicle_number=data.vehicle_number,
        way_bridge_id=way_bridge.id,
        way_bridge_name=way_bridge.name,
        project_id=project.id,
        project_name=project.name,
        transporter_id=transporter.id,
        transporter_name=transporter.name,
        loading_point_id=loading_point.id,
        loading_point_name=loading_point.name,
        weigh_bridge_slip_no=data.weigh_bridge_slip_no,
        loading_point_slip_no=data.loading_point_slip_no,
        gross_weight=data.gross_weight,
        tare_weight=data.tare_weight,
        timestamp=now,
    )
    record.compute_net_weight()
    db.add(record)

    await commit_or_conflict(db, data.vehicle_number)
    await db.refresh(record)
    await db.refresh(trip)

    logger.info("Way bridge data saved: id=%s trip_id=%s vehicle=%s", record.id, trip.id, trip.vehicle_number)
    return record, trip, previous


async def save_loading_point_data(
    db: AsyncSession,
    user_id: int,
    data: LoadingPointDataCreate,
) -> Tuple[LoadingPointData, Trip, Optional[Trip]]:
    """Record a loading point check-in and open a loading point trip."""
    previous = await find_active_trip_for_vehicle(db, data.vehicle_number)
    reason = require_supersede_reason(data.previous_trip_reason) if previous else None

    loading_point = await get_valid_option(db, data.loading_point_id, DropdownType.LOADING_POINT)
    project = await get_valid_option(db, data.project_id, DropdownType.PROJECT)
    transporter = await get_valid_option(db, data.transporter_id, DropdownType.TRANSPORTER)

    if previous is not None:
        await supersede_active_trip(db, user_id, previous, reason)

    await backfill_transporter(db, user_id, data.qr_code, transporter)

    now = datetime.utcnow()
    trip = Trip(
        user_id=user_id,
        qr_code=data.qr_code,
        vehicle_number=data.vehicle_number,
        project_id=project.id,
        project_name=project.name,
        selection_type=SelectionType.LOADING_POINT,
        selection_id=loading_point.id,
        selection_name=loading_point.name,
        status=TripStatus.ACTIVE,
        start_time=now,
        start_latitude=data.latitude,
        start_longitude=data.longitude,
        notes=data.notes,
    )
    db.add(trip)
    await commit_or_conflict(db, data.vehicle_number, flush_only=True)

    record = LoadingPointData(
        user_id=user_id,
        trip_id=trip.id,
        qr_code=data.qr_code,
        vehicle_number=data.vehicle_number,
        loading_point_id=loading_point.id,
        loading_point_name=loading_point.name,
        project_id=project.id,
        project_name=project.name,
        transporter_id=transporter.id,
        transporter_name=transporter.name,
        notes=data.notes,
        status=LoadingStatus.STARTED,
        timestamp=now,
    )
    db.add(record)

    await commit_or_conflict(db, data.vehicle_number)
    await db.refresh(record)
    await db.refresh(trip)

    logger.info("Loading point data saved: id=%s trip_id=%s vehicle=%s", record.id, trip.id, trip.vehicle_number)
    return record, trip, previous


async def _has_loading_record(db: AsyncSession, trip_id: int) -> bool:
    has_loading = await db.scalar(select(exists().where(LoadingPointData.trip_id == trip_id)))
    if has_loading:
        return True
    return bool(await db.scalar(select(exists().where(WayBridgeData.trip_id == trip_id))))


async def save_unloading_point_data(
    db: AsyncSession,
    user_id: int,
    data: UnloadingPointDataCreate,
) -> Tuple[UnloadingPointData, Trip]:
    """
    Record an unloading and complete the trip.

    Any authenticated user may close any active trip by id. A trip with no
    loading-stage record gets a missing-loading anomaly alongside.
    """
    result = await db.execute(
        select(Trip).where(Trip.id == data.trip_id, Trip.status == TripStatus.ACTIVE)
    )
    trip = result.scalar_one_or_none()
    if trip is None:
        raise DomainError("Trip not found or already closed")

    unloading_point = await get_valid_option(db, data.unloading_point_id, DropdownType.UNLOADING_POINT)
    project = await get_valid_option(db, data.project_id, DropdownType.PROJECT)

    if trip.selection_type not in LOADING_STAGES and not await _has_loading_record(db, trip.id):
        await record_missing_loading(
            db,
            user_id,
            data.vehicle_number,
            data.qr_code or trip.qr_code,
            unloading_point=unloading_point,
            project=project,
        )

    net_weight = data.net_weight
    if net_weight is None and data.gross_weight is not None and data.tare_weight is not None:
        net_weight = data.gross_weight - data.tare_weight

    now = datetime.utcnow()
    record = UnloadingPointData(
        user_id=user_id,
        trip_id=trip.id,
        qr_code=data.qr_code,
        vehicle_number=data.vehicle_number,
        way_bridge_slip_no=data.way_bridge_slip_no,
        loading_point_slip_no=data.loading_point_slip_no,
        loading_point_name=data.loading_point_name,
        way_bridge_name=data.way_bridge_name,
        gross_weight=data.gross_weight,
        tare_weight=data.tare_weight,
        net_weight=net_weight,
        unloading_point_id=unloading_point.id,
        unloading_point_name=unloading_point.name,
        project_id=project.id,
        project_name=project.name,
        notes=data.notes,
        timestamp=now,
    )
    db.add(record)

    trip.status = TripStatus.COMPLETED
    trip.end_time = now

    await db.commit()
    await db.refresh(record)
    await db.refresh(trip)

    logger.info("Unloading point data saved: id=%s trip_id=%s completed", record.id, trip.id)
    return record, trip


async def list_stage_history(
    db: AsyncSession,
    model: Type,
    user_id: int,
    limit: int,
    skip: int,
) -> Tuple[List, Pagination]:
    """Caller-scoped, newest-first history of one stage record type."""
    query = (
        select(model)
        .where(model.user_id == user_id)
        .order_by(model.created_at.desc(), model.id.desc())
    )
    return await paginate(db, query, limit, skip)
