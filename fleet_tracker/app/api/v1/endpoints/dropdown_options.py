"""
Dropdown option management endpoints for the admin console.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.guards import require_admin
from fleet_tracker.app.models.enums import DropdownType
from fleet_tracker.app.schemas.common import dump, envelope
from fleet_tracker.app.schemas.dropdown import (
    DropdownOptionCreate,
    DropdownOptionResponse,
    DropdownOptionUpdate,
    DropdownReorder,
    GroupedOptions,
)
from fleet_tracker.app.services import dropdowns

router = APIRouter(prefix="/admin/dropdown-options", tags=["Dropdown Options"])


def _option(option) -> dict:
    return dump(DropdownOptionResponse.model_validate(option))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_option(
    body: DropdownOptionCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    option = await dropdowns.create_option(db, body)
    return envelope("Dropdown option created successfully", {"option": _option(option)})


@router.get("")
async def list_options(
    option_type: Optional[DropdownType] = Query(None, alias="type"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """All options, active or not, optionally filtered by type, plus a grouped view."""
    options = await dropdowns.list_options(db, option_type)
    grouped = GroupedOptions.model_validate(dropdowns.group_options(options))
    return envelope(
        "Dropdown options retrieved successfully",
        {"options": [_option(o) for o in options], "grouped": dump(grouped)},
    )


@router.post("/reorder")
async def reorder_options(
    body: DropdownReorder,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    options = await dropdowns.reorder_options(db, body.options)
    return envelope("Dropdown options reordered successfully", {"options": [_option(o) for o in options]})


@router.get("/{option_id}")
async def get_option(
    option_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    option = await dropdowns.get_option(db, option_id)
    return envelope("Dropdown option retrieved successfully", {"option": _option(option)})


@router.put("/{option_id}")
async def update_option(
    option_id: int,
    body: DropdownOptionUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    option = await dropdowns.update_option(db, option_id, body)
    return envelope("Dropdown option updated successfully", {"option": _option(option)})


@router.delete("/{option_id}")
async def delete_option(
    option_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await dropdowns.delete_option(db, option_id)
    return envelope("Dropdown option deleted successfully")
