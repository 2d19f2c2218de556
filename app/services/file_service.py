"""Disk-backed photo store for meal images."""
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from PIL import Image

from app.config import settings

logger = logging.getLogger(__name__)

# Alphanumeric, hyphen, underscore and dots, e.g. meal-3-<uuid>.webp
SAFE_KEY = re.compile(r"^[a-zA-Z0-9_.-]+$")
# Sidecar holding the content type given to put()
META_SUFFIX = ".meta"
DEFAULT_CONTENT_TYPE = "image/jpeg"
ALLOWED_CONTENT_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"]


@dataclass
class StoredPhoto:
    body: bytes
    content_type: str


def is_safe_key(key: Optional[str]) -> bool:
    return (
        bool(key)
        and key not in (".", "..")
        and not key.endswith(META_SUFFIX)
        and SAFE_KEY.match(key) is not None
    )


class FileService:
    """Opaque key to bytes store. The meal rows only ever hold the key."""

    def __init__(self, upload_dir: str = settings.photo_dir, max_width: int = settings.photo_max_width):
        self.upload_dir = Path(upload_dir)
        self.max_width = max_width
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not is_safe_key(key):
            raise ValueError(f"Invalid photo key: {key!r}")
        return self.upload_dir / key

    def _meta_path_for(self, key: str) -> Path:
        return self.upload_dir / f"{key}{META_SUFFIX}"

    @staticmethod
    def validate_content_type(content_type: Optional[str]) -> None:
        if content_type and content_type not in ALLOWED_CONTENT_TYPES:
            raise ValueError(
                f"Invalid file type: {content_type}. Allowed: {ALLOWED_CONTENT_TYPES}"
            )

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        """
        Store photo bytes under a key, overwriting any previous value.

        Raises:
            ValueError: If the key or content type is not allowed
        """
        self.validate_content_type(content_type)
        file_path = self._path_for(key)
        with open(file_path, "wb") as f:
            f.write(data)

        meta_path = self._meta_path_for(key)
        if content_type:
            meta_path.write_text(content_type, encoding="utf-8")
        elif meta_path.is_file():
            meta_path.unlink()

        self._optimize_image(file_path)

    def get(self, key: str) -> Optional[StoredPhoto]:
        """
        Return the stored photo, or None if the key is unknown or unsafe.

        The content type is the one given to ``put``, image/jpeg if none was.
        """
        if not is_safe_key(key):
            return None
        file_path = self.upload_dir / key
        if not file_path.is_file():
            return None

        meta_path = self._meta_path_for(key)
        content_type = DEFAULT_CONTENT_TYPE
        if meta_path.is_file():
            content_type = meta_path.read_text(encoding="utf-8").strip() or DEFAULT_CONTENT_TYPE
        return StoredPhoto(body=file_path.read_bytes(), content_type=content_type)

    def delete(self, key: str) -> bool:
        """
        Delete a stored photo.

        Returns:
            True if deleted, False if not found
        """
        if not is_safe_key(key):
            return False
        file_path = self.upload_dir / key
        meta_path = self._meta_path_for(key)
        if meta_path.is_file():
            meta_path.unlink()
        if file_path.is_file():
            file_path.unlink()
            return True
        return False

    async def save_meal_photo(self, file: UploadFile, key: str) -> str:
        """
        Store an uploaded meal photo under ``key``.

        Args:
            file: Uploaded file from FastAPI
            key: Photo key chosen by the meal service

        Returns:
            The key, for storing on the meal

        Raises:
            ValueError: If file type is invalid
        """
        contents = await file.read()
        self.put(key, contents, file.content_type or DEFAULT_CONTENT_TYPE)
        return key

    def _optimize_image(self, file_path: Path):
        """
        Shrink oversized images in place, keeping the original on failure.

        Args:
            file_path: Path to image file
        """
        try:
            with Image.open(file_path) as img:
                if img.width <= self.max_width:
                    return

                ratio = self.max_width / img.width
                new_height = int(img.height * ratio)
                resized = img.resize((self.max_width, new_height), Image.Resampling.LANCZOS)
                image_format = img.format

            resized.save(file_path, format=image_format, optimize=True, quality=85)

        except Exception as e:
            # Not an image Pillow understands, keep the original bytes
            logger.warning("Could not optimize image %s: %s", file_path, e)


def has_upload(file: Optional[UploadFile]) -> bool:
    """Browsers send an empty part with no filename when no photo was picked."""
    return bool(file and file.filename and (file.size is None or file.size > 0))


# Singleton instance
file_service = FileService()
