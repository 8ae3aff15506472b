"""
Saved selection endpoints: the project and stage a user last worked from.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.config import settings
from fleet_tracker.app.core.dependencies import get_current_user
from fleet_tracker.app.schemas.common import dump, envelope
from fleet_tracker.app.schemas.dropdown import GroupedOptions
from fleet_tracker.app.schemas.selection import SelectionCreate
from fleet_tracker.app.services import selection as selection_service
from fleet_tracker.app.services.dropdowns import grouped_active_options

router = APIRouter(prefix="/selection", tags=["Selection"])


@router.get("/options")
async def get_selection_options(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    grouped = GroupedOptions.model_validate(await grouped_active_options(db))
    return envelope("Options retrieved", dump(grouped))


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_selection(
    body: SelectionCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Save a selection; the user's previous active selection is deactivated."""
    selection = await selection_service.save_selection(db, current_user["user_id"], body)
    (response,) = await selection_service.to_responses(db, [selection])
    return envelope("Selection saved successfully", {"selection": dump(response)})


@router.get("/active")
async def get_active_selection(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    selection = await selection_service.get_active_selection(db, current_user["user_id"])
    if selection is None:
        return envelope("No active selection", {"selection": None})
    (response,) = await selection_service.to_responses(db, [selection])
    return envelope("Active selection retrieved", {"selection": dump(response)})


@router.get("/history")
async def get_selection_history(
    limit: int = Query(settings.default_page_limit, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    selections, pagination = await selection_service.selection_history(db, current_user["user_id"], limit, skip)
    responses = await selection_service.to_responses(db, selections)
    return envelope(
        "Selection history retrieved",
        {"selections": [dump(r) for r in responses], "pagination": dump(pagination)},
    )


@router.put("/{selection_id}/deactivate")
async def deactivate_selection(
    selection_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    selection = await selection_service.deactivate_selection(db, current_user["user_id"], selection_id)
    (response,) = await selection_service.to_responses(db, [selection])
    return envelope("Selection deactivated", {"selection": dump(response)})
