"""
Item Photo Storage

Photos are written as JPEG files under a single directory and referenced
from items by a path relative to the photo base directory
(``Photos/<uuid>.jpg``), so the base directory can move without
rewriting the database.

Size policy: encode at the primary quality; if the result is larger
than the size limit, encode once more at the fallback quality and keep
that, whatever its size.
"""

import uuid
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from homekeep.config import PhotoSettings, get_settings
from homekeep.log import get_logger


logger = get_logger(__name__)


class PhotoStorageError(Exception):
    """Base exception for photo storage errors."""
    pass


class InvalidPhotoPathError(PhotoStorageError):
    """Relative path points outside the photo directory."""
    pass


class PhotoStorageService:
    """
    Saves, loads and deletes item photos.

    None of the public methods raise: failures are logged and reported
    as ``None`` (save/load) or ``False`` (delete).
    """

    def __init__(self, settings: Optional[PhotoSettings] = None):
        self._settings = settings or get_settings().photos
        self._base_dir = Path(self._settings.base_dir).expanduser()

    @property
    def photos_dir(self) -> Path:
        return self._base_dir / self._settings.subdirectory

    def _resolve(self, relative_path: str) -> Path:
        base = self._base_dir.resolve()
        path = (base / relative_path).resolve()
        if base not in path.parents:
            raise InvalidPhotoPathError(f"Photo path outside base directory: {relative_path}")
        return path

    def encode_jpeg(self, image: Image.Image) -> bytes:
        """
        Encode an image as JPEG, re-compressing when it is too large.

        Returns:
            The JPEG bytes
        """
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        data = self._encode(image, self._settings.quality)
        if len(data) > self._settings.max_bytes:
            logger.info(
                "photo_recompressed",
                size=len(data),
                quality=self._settings.fallback_quality,
            )
            data = self._encode(image, self._settings.fallback_quality)
        return data

    def _encode(self, image: Image.Image, quality: int) -> bytes:
        buffer = BytesIO()
        image.save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()

    def save_photo(self, image: Union[Image.Image, bytes]) -> Optional[str]:
        """
        Store a photo under a fresh UUID file name.

        Args:
            image: A PIL image, or raw bytes of any format Pillow can read

        Returns:
            Relative path like ``Photos/<uuid>.jpg``, or None on failure
        """
        try:
            if isinstance(image, bytes):
                image = Image.open(BytesIO(image))
            data = self.encode_jpeg(image)

            filename = f"{uuid.uuid4()}.jpg"
            self.photos_dir.mkdir(parents=True, exist_ok=True)
            (self.photos_dir / filename).write_bytes(data)
        except (OSError, ValueError) as e:
            logger.error("save_photo_failed", error=str(e))
            return None

        relative_path = f"{self._settings.subdirectory}/{filename}"
        logger.info("photo_saved", path=relative_path, size=len(data))
        return relative_path

    def load_photo(self, relative_path: str) -> Optional[Image.Image]:
        try:
            path = self._resolve(relative_path)
            if not path.is_file():
                return None
            with Image.open(path) as img:
                img.load()
                return img.copy()
        except (OSError, UnidentifiedImageError, PhotoStorageError) as e:
            logger.error("load_photo_failed", path=relative_path, error=str(e))
            return None

    def delete_photo(self, relative_path: str) -> bool:
        """Delete a stored photo. A missing file is not an error."""
        try:
            self._resolve(relative_path).unlink(missing_ok=True)
        except (OSError, PhotoStorageError) as e:
            logger.error("delete_photo_failed", path=relative_path, error=str(e))
            return False
        return True
