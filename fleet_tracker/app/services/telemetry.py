"""
Telemetry ingestion and reads.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.core.config import settings
from fleet_tracker.app.core.exceptions import RequestValidationFailed, ResourceNotFoundError
from fleet_tracker.app.models.location import Location
from fleet_tracker.app.schemas.common import Pagination
from fleet_tracker.app.schemas.telemetry import LocationCreate
from fleet_tracker.app.services.pagination import paginate


def _to_row(user_id: int, sample: LocationCreate) -> Location:
    return Location(
        user_id=user_id,
        latitude=sample.latitude,
        longitude=sample.longitude,
        accuracy=sample.accuracy,
        altitude=sample.altitude,
        speed=sample.speed,
        heading=sample.heading,
        battery_level=sample.battery_level,
        battery_charging=sample.battery_charging,
        activity=sample.activity,
        timestamp=sample.timestamp or datetime.utcnow(),
    )


async def record_location(db: AsyncSession, user_id: int, sample: LocationCreate) -> Location:
    location = _to_row(user_id, sample)
    db.add(location)
    await db.commit()
    await db.refresh(location)
    return location


async def record_batch(db: AsyncSession, user_id: int, samples: Sequence[LocationCreate]) -> int:
    """
    Store up to ``telemetry_batch_limit`` samples in one commit.

    Raises:
        RequestValidationFailed: empty batch or batch over the limit
    """
    if not samples:
        raise RequestValidationFailed("Locations array is required")
    if len(samples) > settings.telemetry_batch_limit:
        raise RequestValidationFailed(f"Maximum {settings.telemetry_batch_limit} locations per batch")

    db.add_all([_to_row(user_id, sample) for sample in samples])
    await db.commit()
    return len(samples)


async def list_locations(
    db: AsyncSession,
    user_id: int,
    limit: int,
    skip: int,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Tuple[List[Location], Pagination]:
    query = select(Location).where(Location.user_id == user_id)
    if start_date is not None:
        query = query.where(Location.timestamp >= start_date)
    if end_date is not None:
        query = query.where(Location.timestamp <= end_date)
    query = query.order_by(Location.timestamp.desc(), Location.id.desc())
    return await paginate(db, query, limit, skip)


async def latest_location(db: AsyncSession, user_id: int) -> Location:
    result = await db.execute(
        select(Location)
        .where(Location.user_id == user_id)
        .order_by(Location.timestamp.desc(), Location.id.desc())
    )
    location = result.scalars().first()
    if location is None:
        raise ResourceNotFoundError("No location data found")
    return location
