"""
Local filesystem storage for uploaded images.

Files live under ``<base_dir>/<category>/<uuid><ext>``; records store the
key ``<category>/<uuid><ext>`` relative to ``base_dir``.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import BinaryIO, Optional

from fleet_tracker.app.core.config import settings
from fleet_tracker.app.core.exceptions import RequestValidationFailed

logger = logging.getLogger("fleet_tracker")

UNLOADING_POINT_CATEGORY = "unloading_point"

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/heic",
    "image/heif",
    # Some mobile clients send photos untyped
    "application/octet-stream",
}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic", ".heif"}

CONTENT_TYPES_BY_EXTENSION = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

CHUNK_SIZE = 1024 * 1024


def is_allowed_image(filename: Optional[str], content_type: Optional[str]) -> bool:
    ext = os.path.splitext(filename or "")[1].lower()
    return (content_type or "").lower() in ALLOWED_CONTENT_TYPES or ext in ALLOWED_EXTENSIONS


def content_type_for(filename: str) -> str:
    return CONTENT_TYPES_BY_EXTENSION.get(os.path.splitext(filename)[1].lower(), "application/octet-stream")


class LocalImageStorage:
    """Image store rooted at a local directory."""

    def __init__(self, base_dir: str, max_bytes: int = settings.max_upload_size_bytes):
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes

    def _get_path(self, key: str) -> Path:
        # Keys are always "<category>/<basename>"; anything else is flattened
        category, _, name = key.replace("\\", "/").lstrip("/").partition("/")
        return self.base_dir / os.path.basename(category) / os.path.basename(name)

    def path_for(self, category: str, filename: str) -> Path:
        """Resolve a client-supplied filename inside ``category``."""
        return self.base_dir / category / os.path.basename(filename)

    def exists(self, key: str) -> bool:
        return self._get_path(key).is_file()

    def resolve(self, key: str) -> Path:
        return self._get_path(key)

    def save(self, category: str, original_filename: Optional[str], stream: BinaryIO) -> str:
        """
        Copy ``stream`` to a fresh ``<uuid><ext>`` file and return its key.

        Raises:
            RequestValidationFailed: the stream exceeds ``max_bytes``
        """
        ext = os.path.splitext(original_filename or "")[1].lower()
        key = f"{category}/{uuid.uuid4()}{ext}"
        path = self._get_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        written = 0
        with open(path, "wb") as f:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > self.max_bytes:
                    break
                f.write(chunk)

        if written > self.max_bytes:
            self.delete(key)
            limit_mb = self.max_bytes // (1024 * 1024)
            raise RequestValidationFailed(f"File too large. Maximum size is {limit_mb}MB.")

        logger.info("Image stored: key=%s bytes=%s", key, written)
        return key

    def delete(self, key: str) -> bool:
        path = self._get_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True


def get_image_storage() -> LocalImageStorage:
    """FastAPI dependency for the configured image store."""
    return LocalImageStorage(settings.upload_dir)
