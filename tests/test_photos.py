"""
Tests for item photo storage.
"""

import os
from io import BytesIO

import pytest
from PIL import Image

from homekeep.config import PhotoSettings
from homekeep.services.photos import PhotoStorageService


def noise_image(size=400) -> Image.Image:
    """Random pixels compress badly, which makes the size limit reachable."""
    return Image.frombytes("RGB", (size, size), os.urandom(size * size * 3))


class TestSavePhoto:
    """Tests for writing photos."""

    def test_save_returns_relative_path(self, photos, tmp_path):
        path = photos.save_photo(Image.new("RGB", (64, 48), "blue"))
        assert path.startswith("Photos/")
        assert path.endswith(".jpg")
        assert (tmp_path / path).is_file()

    def test_each_save_gets_a_new_name(self, photos):
        image = Image.new("RGB", (8, 8))
        assert photos.save_photo(image) != photos.save_photo(image)

    def test_save_from_png_bytes(self, photos):
        buffer = BytesIO()
        Image.new("RGBA", (10, 10), (255, 0, 0, 128)).save(buffer, format="PNG")
        path = photos.save_photo(buffer.getvalue())
        loaded = photos.load_photo(path)
        assert loaded.mode == "RGB"
        assert loaded.size == (10, 10)

    def test_save_garbage_bytes_fails(self, photos):
        assert photos.save_photo(b"not an image") is None

    def test_custom_subdirectory(self, tmp_path):
        service = PhotoStorageService(PhotoSettings(base_dir=str(tmp_path), subdirectory="Pics"))
        path = service.save_photo(Image.new("RGB", (8, 8)))
        assert path.startswith("Pics/")
        assert service.photos_dir == tmp_path / "Pics"


class TestEncodeJpeg:
    """Tests for the size policy."""

    def test_small_image_uses_primary_quality(self, photos):
        image = Image.new("RGB", (32, 32), "green")
        assert photos.encode_jpeg(image) == photos._encode(image, 70)

    def test_large_image_is_recompressed(self, tmp_path):
        settings = PhotoSettings(base_dir=str(tmp_path), max_bytes=10_000, quality=95, fallback_quality=10)
        service = PhotoStorageService(settings)
        image = noise_image()

        data = service.encode_jpeg(image)

        assert data == service._encode(image, 10)
        assert len(data) < len(service._encode(image, 95))


class TestLoadAndDelete:
    """Tests for reading and removing photos."""

    def test_load_missing_returns_none(self, photos):
        assert photos.load_photo("Photos/missing.jpg") is None

    def test_load_outside_base_dir_rejected(self, photos):
        assert photos.load_photo("../../etc/passwd") is None

    def test_delete(self, photos, tmp_path):
        path = photos.save_photo(Image.new("RGB", (8, 8)))
        assert photos.delete_photo(path)
        assert not (tmp_path / path).exists()

    def test_delete_missing_is_not_an_error(self, photos):
        assert photos.delete_photo("Photos/missing.jpg")

    def test_delete_outside_base_dir_fails(self, photos):
        assert photos.delete_photo("../outside.jpg") is False


class TestPhotoSettings:

    @pytest.mark.parametrize("subdirectory", ["", "../up", "/"])
    def test_rejects_unsafe_subdirectory(self, subdirectory):
        with pytest.raises(ValueError):
            PhotoSettings(subdirectory=subdirectory)
