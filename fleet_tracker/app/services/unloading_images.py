"""
Unloading point photo management.

Binds files held by ``LocalImageStorage`` to ``UnloadingPointData.image_path``.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from fleet_tracker.app.core.exceptions import DomainError, ResourceNotFoundError
from fleet_tracker.app.models.unloading_point_data import UnloadingPointData
from fleet_tracker.app.services.image_storage import UNLOADING_POINT_CATEGORY, LocalImageStorage

logger = logging.getLogger("fleet_tracker")

ENTRY_NOT_FOUND = "Unloading point data entry not found"


async def _get_entry(db: AsyncSession, entry_id: int) -> Optional[UnloadingPointData]:
    result = await db.execute(select(UnloadingPointData).where(UnloadingPointData.id == entry_id))
    return result.scalar_one_or_none()


async def attach_image(
    db: AsyncSession,
    storage: LocalImageStorage,
    entry_id: int,
    filename: Optional[str],
    stream: BinaryIO,
) -> str:
    """
    Store an uploaded photo and point the entry at it.

    The file is written on a worker thread before the entry is looked up; an unknown entry
    removes it again. A previous photo is deleted once the new key is
    committed.
    """
    key = await run_in_threadpool(storage.save, UNLOADING_POINT_CATEGORY, filename, stream)

    entry = await _get_entry(db, entry_id)
    if entry is None:
        storage.delete(key)
        raise ResourceNotFoundError(ENTRY_NOT_FOUND)

    old_key = entry.image_path
    entry.image_path = key
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        storage.delete(key)
        raise

    if old_key and old_key != key:
        storage.delete(old_key)
    logger.info("Image attached: unloading_point_data_id=%s key=%s", entry_id, key)
    return key


async def image_file_for_entry(db: AsyncSession, storage: LocalImageStorage, entry_id: int) -> Path:
    entry = await _get_entry(db, entry_id)
    if entry is None:
        raise ResourceNotFoundError(ENTRY_NOT_FOUND)
    if not entry.image_path:
        raise ResourceNotFoundError("No image available for this entry")
    if not storage.exists(entry.image_path):
        raise ResourceNotFoundError("Image file not found")
    return storage.resolve(entry.image_path)


async def remove_image(db: AsyncSession, storage: LocalImageStorage, entry_id: int) -> None:
    entry = await _get_entry(db, entry_id)
    if entry is None:
        raise ResourceNotFoundError(ENTRY_NOT_FOUND)
    if not entry.image_path:
        raise DomainError("No image to delete")

    key = entry.image_path
    entry.image_path = None
    await db.commit()
    storage.delete(key)
    logger.info("Image removed: unloading_point_data_id=%s key=%s", entry_id, key)
