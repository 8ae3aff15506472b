"""
Dropdown option lookups and admin CRUD.

Workflow code resolves every referenced option through ``get_valid_option``
so that an unknown, inactive or mistyped reference is rejected before any
write happens.
"""

import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.core.exceptions import DomainError, ResourceNotFoundError
from fleet_tracker.app.models.dropdown_option import DropdownOption
from fleet_tracker.app.models.enums import DropdownType
from fleet_tracker.app.schemas.dropdown import DropdownOptionCreate, DropdownOptionUpdate, ReorderItem

logger = logging.getLogger("fleet_tracker")

TYPE_LABELS = {
    DropdownType.PROJECT: "project",
    DropdownType.WAY_BRIDGE: "way bridge",
    DropdownType.LOADING_POINT: "loading point",
    DropdownType.UNLOADING_POINT: "unloading point",
    DropdownType.TRANSPORTER: "transporter",
    DropdownType.WB_LOADING_POINT: "wb loading point",
}

# Keys of the grouped listing, in display order
GROUP_KEYS = {
    DropdownType.PROJECT: "projects",
    DropdownType.WAY_BRIDGE: "way_bridges",
    DropdownType.LOADING_POINT: "loading_points",
    DropdownType.UNLOADING_POINT: "unloading_points",
    DropdownType.TRANSPORTER: "transporters",
    DropdownType.WB_LOADING_POINT: "wb_loading_points",
}


async def get_valid_option(
    db: AsyncSession,
    option_id: Optional[int],
    option_type: DropdownType,
    label: Optional[str] = None,
) -> DropdownOption:
    """
    Resolve an active option of the given type.

    Raises:
        DomainError: "Invalid <label>" when the id does not resolve
    """
    label = label or TYPE_LABELS[option_type]
    if option_id is None:
        raise DomainError(f"Invalid {label}")

    result = await db.execute(
        select(DropdownOption).where(
            DropdownOption.id == option_id,
            DropdownOption.type == option_type,
            DropdownOption.is_active.is_(True),
        )
    )
    option = result.scalar_one_or_none()
    if option is None:
        raise DomainError(f"Invalid {label}")
    return option


async def list_active_options(db: AsyncSession, option_type: DropdownType) -> List[DropdownOption]:
    result = await db.execute(
        select(DropdownOption)
        .where(DropdownOption.type == option_type, DropdownOption.is_active.is_(True))
        .order_by(DropdownOption.order, DropdownOption.name)
    )
    return list(result.scalars().all())


def group_options(options: Sequence[DropdownOption]) -> Dict[str, List[DropdownOption]]:
    grouped: Dict[str, List[DropdownOption]] = {key: [] for key in GROUP_KEYS.values()}
    for option in options:
        grouped[GROUP_KEYS[option.type]].append(option)
    return grouped


async def grouped_active_options(db: AsyncSession) -> Dict[str, List[DropdownOption]]:
    result = await db.execute(
        select(DropdownOption)
        .where(DropdownOption.is_active.is_(True))
        .order_by(DropdownOption.order, DropdownOption.name)
    )
    return group_options(result.scalars().all())


async def list_options(db: AsyncSession, option_type: Optional[DropdownType] = None) -> List[DropdownOption]:
    """All options (active and inactive), optionally filtered by type."""
    query = select(DropdownOption)
    if option_type is not None:
        query = query.where(DropdownOption.type == option_type)
    result = await db.execute(query.order_by(DropdownOption.type, DropdownOption.order, DropdownOption.name))
    return list(result.scalars().all())


async def get_option(db: AsyncSession, option_id: int) -> DropdownOption:
    result = await db.execute(select(DropdownOption).where(DropdownOption.id == option_id))
    option = result.scalar_one_or_none()
    if option is None:
        raise ResourceNotFoundError("Dropdown option not found")
    return option


async def create_option(db: AsyncSession, data: DropdownOptionCreate) -> DropdownOption:
    option = DropdownOption(
        type=data.type,
        name=data.name,
        code=data.code,
        order=data.order,
        is_active=data.is_active,
    )
    db.add(option)
    await db.commit()
    await db.refresh(option)
    logger.info("Dropdown option created: id=%s type=%s", option.id, option.type.value)
    return option


async def update_option(db: AsyncSession, option_id: int, data: DropdownOptionUpdate) -> DropdownOption:
    option = await get_option(db, option_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(option, field, value)
    await db.commit()
    await db.refresh(option)
    return option


async def delete_option(db: AsyncSession, option_id: int) -> None:
    option = await get_option(db, option_id)
    await db.delete(option)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DomainError("Dropdown option is referenced by existing records; deactivate it instead")
    logger.info("Dropdown option deleted: id=%s", option_id)


async def reorder_options(db: AsyncSession, items: Sequence[ReorderItem]) -> List[DropdownOption]:
    ids = [item.id for item in items]
    result = await db.execute(select(DropdownOption).where(DropdownOption.id.in_(ids)))
    options = {option.id: option for option in result.scalars().all()}

    missing = [option_id for option_id in ids if option_id not in options]
    if missing:
        raise ResourceNotFoundError(f"Dropdown option not found: {missing[0]}")

    for item in items:
        options[item.id].order = item.order
    await db.commit()
    return [options[option_id] for option_id in ids]
