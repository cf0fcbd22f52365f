"""
Record Intake Service — Intake Pipeline
=========================================

What:  Orchestrates POST /save: store the image, validate the fields,
       persist the record, shape the response.
Who:   Called by the /save route handler; reads via the list/get pass-throughs.

Orchestration Flow (POST /save):
    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │ Blob Store   │───▶│  Validate    │───▶│ Compose      │───▶│ Persist  │
    │ (if file)    │    │  fields      │    │ image URL    │    │ (DB)     │
    └──────────────┘    └──────────────┘    └──────────────┘    └──────────┘

    Step 1 fails → UnsupportedTypeError / TooLargeError (400), nothing written
    Step 2 fails → ValidationError (400); a file stored in step 1 is left on
                   disk unreferenced (orphaned). No rollback is performed.
    Step 4 fails → PersistenceError (500)

No retries, no compensation: every failure ends the request.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from intake.exceptions import ValidationError
from intake.models.record import Record
from intake.schemas.record import SaveResponse
from intake.services.blob_store import BlobStore
from intake.services.record_store import RecordStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "mobile", "occupation")

UPLOADS_PREFIX = "/uploads/"


@dataclass
class ImageUpload:
    """An image part taken from the multipart request."""
    filename: str
    content: bytes
    content_type: Optional[str] = None
    size: Optional[int] = None


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """
    Make a submitted text value inert for HTML rendering.

    Strips surrounding whitespace and NUL bytes and escapes angle brackets so
    no tag can be formed. Quotes and ampersands are stored as sent.
    `None` passes through.

    >>> sanitize_text("<b>O'Brien & Co</b>")
    "&lt;b&gt;O'Brien & Co&lt;/b&gt;"
    """
    if value is None:
        return None
    cleaned = value.replace("\x00", "").strip()
    return cleaned.replace("<", "&lt;").replace(">", "&gt;")


def build_image_url(base_url: str, filename: str) -> str:
    """
    Compose the absolute URL a stored image is served from.

    >>> build_image_url("http://localhost:5000/", "1718000000123.png")
    'http://localhost:5000/uploads/1718000000123.png'
    """
    return f"{base_url.rstrip('/')}{UPLOADS_PREFIX}{filename}"


class IntakeService:
    """
    Stateless pipeline over a BlobStore and a RecordStore.

    Both collaborators are injected so tests can substitute doubles.
    """

    def __init__(self, blob_store: BlobStore, record_store: RecordStore):
        self.blob_store = blob_store
        self.record_store = record_store

    def validate_fields(
        self,
        name: Optional[str],
        mobile: Optional[str],
        occupation: Optional[str],
    ) -> None:
        """
        Raises:
            ValidationError: any required field is missing or blank.
        """
        values = {"name": name, "mobile": mobile, "occupation": occupation}
        missing = [field for field in REQUIRED_FIELDS if not (values[field] or "").strip()]
        if missing:
            raise ValidationError(
                message=f"All fields are required: {', '.join(missing)}",
                field=missing[0],
                context={"missing": missing},
            )

    async def save(
        self,
        base_url: str,
        name: Optional[str],
        mobile: Optional[str],
        occupation: Optional[str],
        image: Optional[ImageUpload] = None,
    ) -> SaveResponse:
        """
        Run the full intake pipeline for one submission.

        Args:
            base_url: Scheme and host of the incoming request, e.g. "http://host:5000/"
            name / mobile / occupation: Raw form values (may be None)
            image: Uploaded image part, or None

        Returns:
            SaveResponse with the generated image filename (or None).

        Raises:
            UnsupportedTypeError, TooLargeError: upload rejected
            ValidationError: required field missing
            FileStorageError: image could not be written
            PersistenceError: record could not be saved
        """
        # ── Phase 1: validate and store the file ─────────────────────────
        stored_name: Optional[str] = None
        if image is not None:
            stored_name = await self.blob_store.store(
                content=image.content,
                filename=image.filename,
                content_type=image.content_type,
                size=image.size,
            )

        # ── Phase 2: build and persist the record ────────────────────────
        try:
            self.validate_fields(name, mobile, occupation)
        except ValidationError:
            if stored_name:
                logger.warning(
                    "Rejected submission left orphaned upload %s", stored_name
                )
            raise

        image_url = build_image_url(base_url, stored_name) if stored_name else None
        record = await self.record_store.create(
            name=sanitize_text(name),
            mobile=sanitize_text(mobile),
            occupation=sanitize_text(occupation),
            image=image_url,
        )
        logger.info("Entry %s saved (image=%s)", record.id, stored_name)

        return SaveResponse(message="Entry saved successfully!", image=stored_name)

    async def list_records(self) -> List[Record]:
        return await self.record_store.list()

    async def get_record(self, record_id: str) -> Record:
        return await self.record_store.get_by_id(record_id)
