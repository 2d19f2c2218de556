"""
Unit tests for the meal photo store.
"""
from io import BytesIO
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from app.services.file_service import FileService, has_upload, is_safe_key
from tests.factories import make_image_bytes


@pytest.fixture
def store(tmp_path) -> FileService:
    return FileService(upload_dir=str(tmp_path / "photos"), max_width=50)


class TestKeys:
    """Tests for key validation."""

    @pytest.mark.parametrize(
        "key", ["meal-1-abc.webp", "photo_2.JPG", "a-b.c.d"]
    )
    def test_safe_keys(self, key):
        assert is_safe_key(key)

    @pytest.mark.parametrize(
        "key",
        ["", None, "..", ".", "../etc/passwd", "a/b.png", "a b.png", "%2e%2e", "x.png.meta"],
    )
    def test_unsafe_keys(self, key):
        assert not is_safe_key(key)


class TestPutGetDelete:
    """Tests for the key to bytes store."""

    def test_put_then_get(self, store: FileService):
        data = make_image_bytes("PNG", size=(20, 20))

        store.put("meal-1-x.png", data, "image/png")
        photo = store.get("meal-1-x.png")

        assert photo.body == data
        assert photo.content_type == "image/png"

    def test_put_overwrites(self, store: FileService):
        store.put("k.png", make_image_bytes("PNG", size=(10, 10), color="red"))
        second = make_image_bytes("PNG", size=(10, 10), color="blue")

        store.put("k.png", second)

        assert store.get("k.png").body == second

    def test_content_type_kept_from_put(self, store: FileService):
        store.put("meal-1-x.webp", make_image_bytes("PNG"), "image/png")

        assert store.get("meal-1-x.webp").content_type == "image/png"

    def test_no_extension_uses_stored_type(self, store: FileService):
        store.put("IMG_0042", make_image_bytes("PNG"), "image/png")

        assert store.get("IMG_0042").content_type == "image/png"

    def test_overwrite_without_type_drops_old_type(self, store: FileService):
        store.put("k.png", make_image_bytes(), "image/gif")

        store.put("k.png", make_image_bytes())

        assert store.get("k.png").content_type == "image/jpeg"

    def test_unknown_extension_defaults_to_jpeg(self, store: FileService):
        store.put("photo.unknownext", b"not an image")

        assert store.get("photo.unknownext").content_type == "image/jpeg"

    def test_non_image_bytes_kept_as_is(self, store: FileService):
        store.put("meal-2-y.webp", b"plain bytes")

        assert store.get("meal-2-y.webp").body == b"plain bytes"

    def test_get_missing(self, store: FileService):
        assert store.get("missing.png") is None

    def test_get_unsafe_key(self, store: FileService):
        assert store.get("../secret") is None

    def test_put_unsafe_key_rejected(self, store: FileService):
        with pytest.raises(ValueError):
            store.put("../escape.png", b"x")

    def test_put_rejects_disallowed_type(self, store: FileService):
        with pytest.raises(ValueError, match="Invalid file type"):
            store.put("doc.pdf", b"%PDF", "application/pdf")

    def test_delete(self, store: FileService):
        store.put("gone.png", make_image_bytes())

        assert store.delete("gone.png") is True
        assert store.get("gone.png") is None
        assert store.delete("gone.png") is False

    def test_delete_removes_content_type(self, store: FileService):
        store.put("gone.png", make_image_bytes(), "image/png")

        store.delete("gone.png")
        store.put("gone.png", make_image_bytes())

        assert store.get("gone.png").content_type == "image/jpeg"

    def test_delete_unsafe_key(self, store: FileService):
        assert store.delete("..") is False


class TestOptimize:
    """Tests for resizing oversized photos."""

    def test_wide_image_is_resized(self, store: FileService):
        store.put("wide.png", make_image_bytes("PNG", size=(100, 40)))

        with Image.open(BytesIO(store.get("wide.png").body)) as img:
            assert img.size == (50, 20)

    def test_small_image_untouched(self, store: FileService):
        data = make_image_bytes("PNG", size=(30, 30))

        store.put("small.png", data)

        assert store.get("small.png").body == data


class TestUploads:
    """Tests for uploaded files."""

    @pytest.mark.asyncio
    async def test_save_meal_photo(self, store: FileService):
        data = make_image_bytes("JPEG", size=(20, 20))
        upload = MagicMock()
        upload.read = AsyncMock(return_value=data)
        upload.content_type = "image/jpeg"

        key = await store.save_meal_photo(upload, "meal-3-z.jpg")

        assert key == "meal-3-z.jpg"
        assert store.get(key).body == data

    @pytest.mark.asyncio
    async def test_save_meal_photo_rejects_type(self, store: FileService):
        upload = MagicMock()
        upload.read = AsyncMock(return_value=b"text")
        upload.content_type = "text/plain"

        with pytest.raises(ValueError):
            await store.save_meal_photo(upload, "meal-3-z.txt")

    def test_has_upload(self):
        picked = MagicMock(filename="tacos.jpg", size=10)
        empty = MagicMock(filename="", size=0)

        assert has_upload(picked)
        assert not has_upload(empty)
        assert not has_upload(None)
