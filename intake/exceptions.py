"""
Record Intake Service — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for each failure the request pipeline
       can hit.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) map them to
       HTTP status codes and JSON bodies.

Exception Hierarchy:
    IntakeError (base)                → 500
    ├── ValidationError               → 400 (missing/blank required field)
    │   ├── UnsupportedTypeError      → 400 (extension or MIME not an image)
    │   └── TooLargeError             → 400 (upload over the size limit)
    ├── NotFoundError                 → 404
    │   └── InvalidIdError            → 404 (malformed record id)
    ├── FileStorageError              → 500 (disk write failed)
    └── PersistenceError              → 500 (record store failed)
"""

from typing import Any, Dict, Optional


class IntakeError(Exception):
    """
    Base exception for all intake service errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(IntakeError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnsupportedTypeError(ValidationError):
    """Uploaded file is not an accepted image (extension AND MIME type must match)."""

    def __init__(
        self,
        filename: str,
        content_type: Optional[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"filename": filename, "content_type": content_type})
        super().__init__(
            message="Only image files are allowed (jpg, jpeg, png, gif)",
            field="image",
            context=ctx,
        )


class TooLargeError(ValidationError):
    """Uploaded file exceeds the configured maximum size."""

    def __init__(
        self,
        size: int,
        max_size: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"size": size, "max_size": max_size})
        max_mb = max_size / (1024 * 1024)
        super().__init__(
            message=f"File too large. Maximum allowed size is {max_mb:.0f}MB",
            field="image",
            context=ctx,
        )
        self.size = size
        self.max_size = max_size


class NotFoundError(IntakeError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InvalidIdError(NotFoundError):
    """
    Raised when a record id is not a well-formed identifier.

    Reported as 404, the same as an id that was never issued.
    """

    def __init__(self, resource_id: str, resource: str = "entry"):
        super().__init__(
            resource=resource,
            resource_id=resource_id,
            context={"reason": "malformed_id"},
        )


class FileStorageError(IntakeError):
    """
    Raised when writing or reading an uploaded file fails at the OS level.

    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(IntakeError):
    """
    Raised when the record store fails (connection lost, constraint, etc.).

    HTTP: 500 Internal Server Error. Never retried.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
