"""
Photos Package

JPEG storage for item photos.
"""

from homekeep.services.photos.photo_service import (
    InvalidPhotoPathError,
    PhotoStorageError,
    PhotoStorageService,
)

__all__ = [
    "PhotoStorageService",
    "PhotoStorageError",
    "InvalidPhotoPathError",
]
