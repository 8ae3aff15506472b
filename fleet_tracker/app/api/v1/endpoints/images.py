"""
Unloading point photo endpoints.

Uploads require a user token; fetching by filename is public so the admin
console can embed images directly.
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_tracker.app.db.session import get_db
from fleet_tracker.app.core.dependencies import get_current_user
from fleet_tracker.app.core.exceptions import RequestValidationFailed, ResourceNotFoundError
from fleet_tracker.app.core.guards import require_admin
from fleet_tracker.app.schemas.common import envelope
from fleet_tracker.app.services import unloading_images
from fleet_tracker.app.services.image_storage import (
    UNLOADING_POINT_CATEGORY,
    LocalImageStorage,
    content_type_for,
    get_image_storage,
    is_allowed_image,
)

router = APIRouter(prefix="/images", tags=["Images"])


@router.post("/unloading-point/{entry_id}")
async def upload_unloading_point_image(
    entry_id: int,
    image: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage)
):
    if image is None or not image.filename:
        raise RequestValidationFailed("No image file provided")
    if not is_allowed_image(image.filename, image.content_type):
        raise RequestValidationFailed(
            f"Invalid file type: {image.content_type}. Only JPEG, PNG, GIF, and WebP images are allowed."
        )

    key = await unloading_images.attach_image(db, storage, entry_id, image.filename, image.file)
    return envelope(
        "Image uploaded successfully",
        {"imagePath": key, "unloadingPointDataId": entry_id},
    )


@router.get("/unloading-point/by-id/{entry_id}")
async def get_image_by_entry(
    entry_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage)
):
    path = await unloading_images.image_file_for_entry(db, storage, entry_id)
    return FileResponse(path, media_type=content_type_for(path.name))


@router.get("/unloading-point/{filename}")
async def get_image(
    filename: str,
    storage: LocalImageStorage = Depends(get_image_storage)
):
    path = storage.path_for(UNLOADING_POINT_CATEGORY, filename)
    if not path.is_file():
        raise ResourceNotFoundError("Image not found")
    return FileResponse(path, media_type=content_type_for(path.name))


@router.delete("/unloading-point/{entry_id}")
async def delete_image(
    entry_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage)
):
    await unloading_images.remove_image(db, storage, entry_id)
    return envelope("Image deleted successfully")
