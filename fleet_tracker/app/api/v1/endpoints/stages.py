"""
Stage capture endpoints: way bridge, loading point and unloading point
entries, plus client-reported missing loading points.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.config import settings
from fleet_tracker.app.core.dependencies import get_current_user
from fleet_tracker.app.models.loading_point_data import LoadingPointData
from fleet_tracker.app.models.unloading_point_data import UnloadingPointData
from fleet_tracker.app.models.way_bridge_data import WayBridgeData
from fleet_tracker.app.schemas.anomaly import MissingLoadingPointReport, MissingLoadingPointResponse
from fleet_tracker.app.schemas.common import dump, envelope
from fleet_tracker.app.schemas.stage import (
    LoadingPointDataCreate,
    LoadingPointDataResponse,
    UnloadingPointDataCreate,
    UnloadingPointDataResponse,
    WayBridgeDataCreate,
    WayBridgeDataResponse,
)
from fleet_tracker.app.schemas.trip import TripResponse
from fleet_tracker.app.services import stages as stage_service
from fleet_tracker.app.services.anomalies import log_missing_loading_point

router = APIRouter(prefix="/stage", tags=["Stage Data"])


def _trip(trip):
    return dump(TripResponse.model_validate(trip)) if trip is not None else None


async def _history(db, model, schema, user_id: int, limit: int, skip: int):
    rows, pagination = await stage_service.list_stage_history(db, model, user_id, limit, skip)
    return {"data": [dump(schema.model_validate(r)) for r in rows], "pagination": dump(pagination)}


@router.post("/way-bridge-data", status_code=status.HTTP_201_CREATED)
async def save_way_bridge_data(
    body: WayBridgeDataCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Save a weighbridge reading and start a trip.

    If the vehicle already has an active trip, ``previousTripReason`` is
    required and that trip is cancelled.
    """
    record, trip, previous = await stage_service.save_way_bridge_data(db, current_user["user_id"], body)
    message = (
        "Previous trip ended and new way bridge data saved successfully"
        if previous
        else "Way bridge data saved and trip started successfully"
    )
    return envelope(
        message,
        {
            "wayBridgeData": dump(WayBridgeDataResponse.model_validate(record)),
            "trip": _trip(trip),
            "endedPreviousTrip": _trip(previous),
        },
    )


@router.get("/way-bridge-data")
async def get_way_bridge_data_history(
    limit: int = Query(settings.default_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    data = await _history(db, WayBridgeData, WayBridgeDataResponse, current_user["user_id"], limit, skip)
    return envelope("Way bridge data history retrieved", data)


@router.post("/loading-point-data", status_code=status.HTTP_201_CREATED)
async def save_loading_point_data(
    body: LoadingPointDataCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Save a loading point check-in and start a trip."""
    record, trip, previous = await stage_service.save_loading_point_data(db, current_user["user_id"], body)
    message = (
        "Previous trip ended and new loading point data saved successfully"
        if previous
        else "Loading point data saved and trip started successfully"
    )
    return envelope(
        message,
        {
            "loadingPointData": dump(LoadingPointDataResponse.model_validate(record)),
            "trip": _trip(trip),
            "endedPreviousTrip": _trip(previous),
        },
    )


@router.get("/loading-point-data")
async def get_loading_point_data_history(
    limit: int = Query(settings.default_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    data = await _history(db, LoadingPointData, LoadingPointDataResponse, current_user["user_id"], limit, skip)
    return envelope("Loading point data history retrieved", data)


@router.post("/unloading-point-data", status_code=status.HTTP_201_CREATED)
async def save_unloading_point_data(
    body: UnloadingPointDataCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Save an unloading entry and complete its trip."""
    record, trip = await stage_service.save_unloading_point_data(db, current_user["user_id"], body)
    return envelope(
        "Unloading point data saved and trip completed successfully",
        {
            "unloadingPointData": dump(UnloadingPointDataResponse.model_validate(record)),
            "trip": _trip(trip),
        },
    )


@router.get("/unloading-point-data")
async def get_unloading_point_data_history(
    limit: int = Query(settings.default_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    data = await _history(
        db, UnloadingPointData, UnloadingPointDataResponse, current_user["user_id"], limit, skip
    )
    return envelope("Unloading point data history retrieved", data)


@router.post("/missing-loading-point", status_code=status.HTTP_201_CREATED)
async def report_missing_loading_point(
    body: MissingLoadingPointReport,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    entry = await log_missing_loading_point(db, current_user["user_id"], body)
    return envelope(
        "Missing loading point entry logged",
        {"entry": dump(MissingLoadingPointResponse.model_validate(entry))},
    )
