"""
Record Intake Service — Intake Pipeline Unit Tests
====================================================

What:  IntakeService.save() ordering, validation and response shaping.
How:   BlobStore and RecordStore are replaced with mocks (no disk, no DB).

What we test:
    ✅ Success with and without an image
    ✅ Upload rejection stops the pipeline before any record is written
    ✅ Missing field after a stored upload: 400, file left orphaned
    ✅ Image URL composition and text sanitization
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from intake.exceptions import PersistenceError, UnsupportedTypeError, ValidationError
from intake.services.intake_service import (
    ImageUpload,
    IntakeService,
    build_image_url,
    sanitize_text,
)


@pytest.fixture
def mock_blob_store():
    store = MagicMock()
    store.store = AsyncMock(return_value="1718000000123.png")
    return store


@pytest.fixture
def mock_record_store():
    store = MagicMock()
    store.create = AsyncMock(return_value=MagicMock(id=uuid4()))
    store.list = AsyncMock(return_value=[])
    store.get_by_id = AsyncMock()
    return store


@pytest.fixture
def service(mock_blob_store, mock_record_store):
    return IntakeService(mock_blob_store, mock_record_store)


def _upload(filename="photo.png", content_type="image/png"):
    return ImageUpload(filename=filename, content=b"bytes", content_type=content_type, size=5)


class TestSave:

    @pytest.mark.asyncio
    async def test_save_without_image(self, service, mock_blob_store, mock_record_store):
        result = await service.save("http://test/", "Alice", "555", "Eng")

        assert result.message == "Entry saved successfully!"
        assert result.image is None
        mock_blob_store.store.assert_not_awaited()
        mock_record_store.create.assert_awaited_once_with(
            name="Alice", mobile="555", occupation="Eng", image=None
        )

    @pytest.mark.asyncio
    async def test_save_with_image(self, service, mock_blob_store, mock_record_store):
        result = await service.save("http://test/", "Alice", "555", "Eng", image=_upload())

        assert result.image == "1718000000123.png"
        mock_blob_store.store.assert_awaited_once_with(
            content=b"bytes", filename="photo.png", content_type="image/png", size=5
        )
        kwargs = mock_record_store.create.await_args.kwargs
        assert kwargs["image"] == "http://test/uploads/1718000000123.png"

    @pytest.mark.asyncio
    async def test_rejected_upload_persists_nothing(self, service, mock_blob_store, mock_record_store):
        mock_blob_store.store.side_effect = UnsupportedTypeError("notes.jpg", "text/plain")

        with pytest.raises(UnsupportedTypeError):
            await service.save("http://test/", "Alice", "555", "Eng", image=_upload("notes.jpg", "text/plain"))

        mock_record_store.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_field_after_upload_leaves_file(self, service, mock_blob_store, mock_record_store):
        """The file is stored first; the field check fails afterwards with no rollback."""
        with pytest.raises(ValidationError) as exc_info:
            await service.save("http://test/", "Alice", None, "Eng", image=_upload())

        assert exc_info.value.field == "mobile"
        mock_blob_store.store.assert_awaited_once()
        mock_record_store.create.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name, mobile, occupation",
        [("", "555", "Eng"), ("Alice", "   ", "Eng"), ("Alice", "555", None)],
    )
    async def test_blank_fields_rejected(self, service, mock_record_store, name, mobile, occupation):
        with pytest.raises(ValidationError, match="All fields are required"):
            await service.save("http://test/", name, mobile, occupation)
        mock_record_store.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_persistence_error_propagates(self, service, mock_record_store):
        mock_record_store.create.side_effect = PersistenceError()

        with pytest.raises(PersistenceError):
            await service.save("http://test/", "Alice", "555", "Eng")

    @pytest.mark.asyncio
    async def test_fields_are_sanitized(self, service, mock_record_store):
        await service.save("http://test/", "<b>O'Brien</b>", " 555 ", "R&D")

        kwargs = mock_record_store.create.await_args.kwargs
        assert kwargs["name"] == "&lt;b&gt;O'Brien&lt;/b&gt;"
        assert kwargs["mobile"] == "555"
        assert kwargs["occupation"] == "R&D"


class TestReads:

    @pytest.mark.asyncio
    async def test_list_and_get_delegate(self, service, mock_record_store):
        await service.list_records()
        await service.get_record("abc")

        mock_record_store.list.assert_awaited_once()
        mock_record_store.get_by_id.assert_awaited_once_with("abc")


class TestHelpers:

    def test_build_image_url(self):
        assert build_image_url("http://host:5000/", "1.png") == "http://host:5000/uploads/1.png"
        assert build_image_url("https://host", "1.png") == "https://host/uploads/1.png"

    def test_sanitize_text(self):
        assert sanitize_text(None) is None
        assert sanitize_text("a\x00b") == "ab"
        assert sanitize_text('"x" & y') == '"x" & y'
        assert sanitize_text("<script>") == "&lt;script&gt;"
