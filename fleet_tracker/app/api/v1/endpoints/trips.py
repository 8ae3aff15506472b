"""
Trip lifecycle endpoints.

Start, end and cancel trips, list history, and look up the active trip of
a vehicle for the stage screens.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.config import settings
from fleet_tracker.app.core.dependencies import get_current_user
from fleet_tracker.app.models.enums import TripStatus
from fleet_tracker.app.schemas.common import dump, envelope
from fleet_tracker.app.schemas.qr import normalize_vehicle_number
from fleet_tracker.app.schemas.stage import WayBridgeDataResponse
from fleet_tracker.app.schemas.trip import TripCancel, TripEnd, TripResponse, TripStart
from fleet_tracker.app.services import trips as trip_service

router = APIRouter(prefix="/trips", tags=["Trips"])


def _trip(trip) -> Optional[dict]:
    return dump(TripResponse.model_validate(trip)) if trip is not None else None


@router.post("/start", status_code=status.HTTP_201_CREATED)
async def start_trip(
    body: TripStart,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    trip = await trip_service.start_trip(db, current_user["user_id"], body)
    return envelope("Trip started successfully", {"trip": _trip(trip)})


@router.get("/active")
async def get_active_trip(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    trip = await trip_service.get_active_trip(db, current_user["user_id"])
    return envelope("Active trip found" if trip else "No active trip", {"trip": _trip(trip)})


@router.post("/end")
async def end_trip(
    body: TripEnd,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    trip = await trip_service.end_trip(db, current_user["user_id"], body)
    return envelope("Trip completed successfully", {"trip": _trip(trip)})


@router.post("/cancel")
async def cancel_trip(
    body: TripCancel,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    trip = await trip_service.cancel_trip(db, current_user["user_id"], body.trip_id)
    return envelope("Trip cancelled successfully", {"trip": _trip(trip)})


@router.get("")
async def get_trip_history(
    limit: int = Query(settings.default_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    trip_status: Optional[TripStatus] = Query(None, alias="status"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    trips, pagination = await trip_service.get_trip_history(
        db, current_user["user_id"], trip_status, limit, skip
    )
    return envelope(
        "Trip history retrieved",
        {"trips": [_trip(t) for t in trips], "pagination": dump(pagination)},
    )


@router.get("/vehicle/{vehicle_number}/check")
async def check_vehicle_active_trip(
    vehicle_number: str,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Whether the vehicle has an active trip, with a short summary."""
    summary = await trip_service.check_vehicle_active_trip(db, normalize_vehicle_number(vehicle_number))
    if summary is None:
        return envelope("No active trip found", {"hasActiveTrip": False, "trip": None})
    return envelope("Active trip found for vehicle", {"hasActiveTrip": True, "trip": dump(summary)})


@router.get("/vehicle/{vehicle_number}/active")
async def get_active_trip_by_vehicle(
    vehicle_number: str,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Active trip of a vehicle with its weighbridge reading, for unloading."""
    trip, way_bridge_data = await trip_service.get_active_trip_by_vehicle(
        db, normalize_vehicle_number(vehicle_number)
    )
    return envelope(
        "Active trip found",
        {
            "trip": _trip(trip),
            "wayBridgeData": dump(WayBridgeDataResponse.model_validate(way_bridge_data)) if way_bridge_data else None,
        },
    )
