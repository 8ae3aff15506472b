"""
Saved project/stage selections.

A lighter parallel to trips: a user keeps one active selection, and saving
a new one retires the previous.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.core.exceptions import ResourceNotFoundError
from fleet_tracker.app.models.dropdown_option import DropdownOption
from fleet_tracker.app.models.enums import DropdownType, SELECTION_DROPDOWN_TYPES
from fleet_tracker.app.models.user_selection import UserSelection
from fleet_tracker.app.schemas.common import Pagination
from fleet_tracker.app.schemas.selection import OptionRef, SelectionCreate, SelectionResponse
from fleet_tracker.app.services.dropdowns import get_valid_option
from fleet_tracker.app.services.pagination import paginate

logger = logging.getLogger("fleet_tracker")


async def _options_by_id(db: AsyncSession, ids: Sequence[int]) -> Dict[int, DropdownOption]:
    if not ids:
        return {}
    result = await db.execute(select(DropdownOption).where(DropdownOption.id.in_(set(ids))))
    return {option.id: option for option in result.scalars().all()}


async def to_responses(db: AsyncSession, selections: Sequence[UserSelection]) -> List[SelectionResponse]:
    """Attach project and selection name/code to each row."""
    ids = [s.project_id for s in selections] + [s.selection_id for s in selections]
    options = await _options_by_id(db, ids)

    responses = []
    for row in selections:
        response = SelectionResponse.model_validate(row)
        project = options.get(row.project_id)
        selection = options.get(row.selection_id)
        response.project = OptionRef.model_validate(project) if project else None
        response.selection = OptionRef.model_validate(selection) if selection else None
        responses.append(response)
    return responses


async def save_selection(db: AsyncSession, user_id: int, data: SelectionCreate) -> UserSelection:
    await get_valid_option(db, data.project_id, DropdownType.PROJECT, "project")
    await get_valid_option(db, data.selection_id, SELECTION_DROPDOWN_TYPES[data.selection_type], "selection")

    result = await db.execute(
        select(UserSelection).where(UserSelection.user_id == user_id, UserSelection.is_active.is_(True))
    )
    for previous in result.scalars().all():
        previous.is_active = False

    selection = UserSelection(
        user_id=user_id,
        project_id=data.project_id,
        selection_type=data.selection_type,
        selection_id=data.selection_id,
        is_active=True,
    )
    db.add(selection)
    await db.commit()
    await db.refresh(selection)
    logger.info("Selection saved: id=%s user_id=%s", selection.id, user_id)
    return selection


async def get_active_selection(db: AsyncSession, user_id: int) -> Optional[UserSelection]:
    result = await db.execute(
        select(UserSelection)
        .where(UserSelection.user_id == user_id, UserSelection.is_active.is_(True))
        .order_by(UserSelection.created_at.desc(), UserSelection.id.desc())
    )
    return result.scalars().first()


async def selection_history(
    db: AsyncSession,
    user_id: int,
    limit: int,
    skip: int,
) -> Tuple[List[UserSelection], Pagination]:
    query = (
        select(UserSelection)
        .where(UserSelection.user_id == user_id)
        .order_by(UserSelection.created_at.desc(), UserSelection.id.desc())
    )
    return await paginate(db, query, limit, skip)


async def deactivate_selection(db: AsyncSession, user_id: int, selection_id: int) -> UserSelection:
    result = await db.execute(
        select(UserSelection).where(UserSelection.id == selection_id, UserSelection.user_id == user_id)
    )
    selection = result.scalar_one_or_none()
    if selection is None:
        raise ResourceNotFoundError("Selection not found")

    selection.is_active = False
    await db.commit()
    await db.refresh(selection)
    return selection
