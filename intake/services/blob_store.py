"""
Record Intake Service — Blob Store (Uploaded Images)
======================================================

What:  Validates an uploaded image and writes it to the flat upload directory.
How:   Checks extension AND declared MIME type against the image allow-lists,
       checks size, then writes the bytes under `<ms-timestamp><ext>` with
       async file I/O.
Who:   Called by IntakeService as the first phase of POST /save.

Acceptance rules:
    1. Extension (case-insensitive): .jpg .jpeg .png .gif
    2. Declared MIME type: image/jpeg image/jpg image/png image/gif
    3. Size: declared size and actual byte count must not exceed max_size

    Both 1 and 2 must pass; a matching extension with a non-image MIME type
    (or the reverse) is rejected.

Naming:
    <millisecond-timestamp><original-extension>, e.g. 1718000000123.png.
    Uniqueness is best effort: two uploads in the same millisecond collide.
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional

import aiofiles

from intake.exceptions import FileStorageError, TooLargeError, UnsupportedTypeError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif"})

ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif"})

# 5MB
DEFAULT_MAX_SIZE = 5 * 1024 * 1024


class BlobStore:
    """
    Stores uploaded images on local disk.

    Directory Structure:
        uploads/
        ├── 1718000000123.jpg
        └── 1718000004567.png
    """

    def __init__(self, upload_dir: str, max_size: int = DEFAULT_MAX_SIZE):
        """
        Args:
            upload_dir: Directory that receives uploaded files. Created if missing.
            max_size: Maximum accepted file size in bytes.

        Raises:
            FileStorageError: the directory cannot be created or is not writable.
        """
        self.upload_dir = Path(upload_dir).resolve()
        self.max_size = max_size
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileStorageError(
                message=f"Upload directory {self.upload_dir} could not be created",
                context={"path": str(self.upload_dir), "error": str(e), "error_type": type(e).__name__},
            ) from e
        if not self.is_writable():
            raise FileStorageError(
                message=f"Upload directory {self.upload_dir} is not writable",
                context={"path": str(self.upload_dir)},
            )
        logger.info("BlobStore initialized with upload_dir=%s", self.upload_dir)

    def is_writable(self) -> bool:
        return self.upload_dir.is_dir() and os.access(self.upload_dir, os.W_OK)

    def validate_type(self, filename: str, content_type: Optional[str]) -> str:
        """
        Check extension and declared MIME type together.

        Returns:
            The original extension, case preserved (used in the stored name).

        Raises:
            UnsupportedTypeError: either check fails.
        """
        ext = Path(filename).suffix
        mime = (content_type or "").split(";")[0].strip().lower()
        if ext.lower() not in ALLOWED_EXTENSIONS or mime not in ALLOWED_MIME_TYPES:
            raise UnsupportedTypeError(
                filename=filename,
                content_type=content_type,
                context={"extension": ext},
            )
        return ext

    def validate_size(self, declared_size: Optional[int], actual_size: int) -> None:
        """
        Check the declared size (multipart part header) and the actual byte count.

        Raises:
            TooLargeError: either exceeds max_size.
        """
        if declared_size is not None and declared_size > self.max_size:
            raise TooLargeError(size=declared_size, max_size=self.max_size)
        if actual_size > self.max_size:
            raise TooLargeError(size=actual_size, max_size=self.max_size)

    def generate_name(self, extension: str) -> str:
        return f"{int(time.time() * 1000)}{extension}"

    def path_for(self, filename: str) -> Path:
        """
        Resolve a stored filename to its path inside the upload directory.

        Raises:
            ValueError: the name would resolve outside the upload directory.
        """
        path = (self.upload_dir / filename).resolve()
        if path.parent != self.upload_dir:
            raise ValueError(f"Invalid upload filename: {filename!r}")
        return path

    async def store(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str],
        size: Optional[int] = None,
    ) -> str:
        """
        Validate and write an uploaded image.

        Validation order:
            1. Extension + MIME type (no I/O)
            2. Size (declared, then actual)
            3. Write to disk

        Args:
            content: Raw file bytes
            filename: Original filename from the upload
            content_type: MIME type declared by the client
            size: Size declared by the client, if any

        Returns:
            Generated filename, relative to the upload directory.

        Raises:
            UnsupportedTypeError, TooLargeError: upload rejected (400)
            FileStorageError: write failed (500)
        """
        ext = self.validate_type(filename, content_type)
        self.validate_size(size, len(content))

        stored_name = self.generate_name(ext)
        path = self.upload_dir / stored_name
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(path), "error": str(e), "error_type": type(e).__name__},
            ) from e

        logger.info("File stored: %s (%d bytes, from %s)", stored_name, len(content), filename)
        return stored_name
