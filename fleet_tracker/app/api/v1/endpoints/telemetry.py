"""
Device telemetry endpoints.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.config import settings
from fleet_tracker.app.core.dependencies import get_current_user
from fleet_tracker.app.schemas.common import dump, envelope, to_naive_utc
from fleet_tracker.app.schemas.telemetry import LocationBatch, LocationCreate, LocationResponse
from fleet_tracker.app.services import telemetry

router = APIRouter(prefix="/telemetry", tags=["Telemetry"])


def _location(location) -> dict:
    return dump(LocationResponse.model_validate(location))


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_location(
    body: LocationCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    location = await telemetry.record_location(db, current_user["user_id"], body)
    return envelope("Location recorded", {"location": _location(location)})


@router.post("/batch", status_code=status.HTTP_201_CREATED)
async def record_batch(
    body: LocationBatch,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Store up to ``telemetry_batch_limit`` samples in one transaction."""
    count = await telemetry.record_batch(db, current_user["user_id"], body.locations)
    return envelope(f"{count} locations recorded", {"count": count})


@router.get("")
async def list_locations(
    limit: int = Query(settings.telemetry_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    locations, pagination = await telemetry.list_locations(
        db,
        current_user["user_id"],
        limit,
        skip,
        start_date=to_naive_utc(start_date),
        end_date=to_naive_utc(end_date),
    )
    return envelope(
        "Locations retrieved",
        {"locations": [_location(l) for l in locations], "pagination": dump(pagination)},
    )


@router.get("/latest")
async def latest_location(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    location = await telemetry.latest_location(db, current_user["user_id"])
    return envelope("Latest location retrieved", {"location": _location(location)})
