"""
Anomaly logging for broken stage sequences.

Writers here never commit; they ride the caller's transaction so the
anomaly and the state change that caused it land together.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.models.dropdown_option import DropdownOption
from fleet_tracker.app.models.missing_entries import (
    DEFAULT_MISSING_LOADING_REASON,
    MissingLoadingPointEntry,
    MissingUnloadingPointEntry,
)
from fleet_tracker.app.models.trip import Trip
from fleet_tracker.app.models.user import User
from fleet_tracker.app.schemas.anomaly import (
    MissingLoadingPointReport,
    MissingLoadingPointResponse,
    MissingUnloadingPointResponse,
    ReportingUser,
)
from fleet_tracker.app.schemas.common import Pagination
from fleet_tracker.app.services.pagination import paginate

logger = logging.getLogger("fleet_tracker")


async def record_missing_unloading(
    db: AsyncSession,
    user_id: int,
    trip: Trip,
    reason: str,
    ended_at: datetime,
) -> MissingUnloadingPointEntry:
    """Snapshot a trip that is being superseded before it was unloaded."""
    entry = MissingUnloadingPointEntry(
        user_id=user_id,
        trip_id=trip.id,
        vehicle_number=trip.vehicle_number,
        qr_code=trip.qr_code,
        previous_project_id=trip.project_id,
        previous_project_name=trip.project_name,
        previous_selection_type=trip.selection_type,
        previous_selection_name=trip.selection_name,
        trip_start_time=trip.start_time,
        trip_end_time=ended_at,
        reason=reason,
    )
    db.add(entry)
    logger.info("Missing unloading recorded: trip_id=%s vehicle=%s", trip.id, trip.vehicle_number)
    return entry


async def record_missing_loading(
    db: AsyncSession,
    user_id: int,
    vehicle_number: str,
    qr_code: Optional[str],
    unloading_point: Optional[DropdownOption] = None,
    project: Optional[DropdownOption] = None,
    reason: Optional[str] = None,
) -> MissingLoadingPointEntry:
    entry = MissingLoadingPointEntry(
        user_id=user_id,
        vehicle_number=vehicle_number,
        qr_code=qr_code,
        unloading_point_id=unloading_point.id if unloading_point else None,
        unloading_point_name=unloading_point.name if unloading_point else None,
        project_id=project.id if project else None,
        project_name=project.name if project else None,
        reason=reason or DEFAULT_MISSING_LOADING_REASON,
    )
    db.add(entry)
    logger.info("Missing loading recorded: vehicle=%s", vehicle_number)
    return entry


async def log_missing_loading_point(
    db: AsyncSession,
    user_id: int,
    data: MissingLoadingPointReport,
) -> MissingLoadingPointEntry:
    """Persist a client-reported skipped loading stage."""
    entry = MissingLoadingPointEntry(
        user_id=user_id,
        vehicle_number=data.vehicle_number,
        qr_code=data.qr_code,
        unloading_point_id=data.unloading_point_id,
        unloading_point_name=data.unloading_point_name,
        project_id=data.project_id,
        project_name=data.project_name,
        reason=data.reason or DEFAULT_MISSING_LOADING_REASON,
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    logger.info("Missing loading reported: id=%s vehicle=%s", entry.id, entry.vehicle_number)
    return entry


def _reporter(user_id: int, name: Optional[str], email: Optional[str]) -> Optional[ReportingUser]:
    if name is None:
        return None
    return ReportingUser(id=user_id, name=name, email=email)


async def list_missing_loading_entries(
    db: AsyncSession,
    limit: int,
    skip: int,
) -> Tuple[List[MissingLoadingPointResponse], Pagination]:
    query = (
        select(MissingLoadingPointEntry, User.name, User.email)
        .outerjoin(User, User.id == MissingLoadingPointEntry.user_id)
        .order_by(MissingLoadingPointEntry.created_at.desc(), MissingLoadingPointEntry.id.desc())
    )
    rows, pagination = await paginate(db, query, limit, skip, scalars=False)
    entries = []
    for entry, name, email in rows:
        item = MissingLoadingPointResponse.model_validate(entry)
        item.user = _reporter(entry.user_id, name, email)
        entries.append(item)
    return entries, pagination


async def list_missing_unloading_entries(
    db: AsyncSession,
    limit: int,
    skip: int,
) -> Tuple[List[MissingUnloadingPointResponse], Pagination]:
    query = (
        select(MissingUnloadingPointEntry, User.name, User.email)
        .outerjoin(User, User.id == MissingUnloadingPointEntry.user_id)
        .order_by(MissingUnloadingPointEntry.created_at.desc(), MissingUnloadingPointEntry.id.desc())
    )
    rows, pagination = await paginate(db, query, limit, skip, scalars=False)
    entries = []
    for entry, name, email in rows:
        item = MissingUnloadingPointResponse.model_validate(entry)
        item.user = _reporter(entry.user_id, name, email)
        entries.append(item)
    return entries, pagination
