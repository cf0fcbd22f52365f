"""
Record Intake Service — Pydantic Response Schemas
===================================================

What:  Pydantic models defining the JSON the API returns.
How:   FastAPI serializes route return values through these models
       (by alias, so `created_at` goes out as `createdAt`) and builds the
       OpenAPI document from them.

Request input is multipart form data and is validated by IntakeService,
not by a Pydantic body model.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RecordResponse(BaseModel):
    """
    Full representation of a saved record.

    Returned as an array by GET /all and singly by GET /entry/{id}.
    """
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID = Field(description="Unique record identifier (UUID)")
    name: str = Field(description="Submitted name")
    mobile: str = Field(description="Submitted mobile number (free text)")
    occupation: str = Field(description="Submitted occupation")
    image: Optional[str] = Field(
        default=None,
        description="Absolute URL of the uploaded image, null if none was sent",
    )
    created_at: datetime = Field(
        alias="createdAt",
        description="When the record was created (UTC ISO 8601)",
    )


class SaveResponse(BaseModel):
    """Returned by POST /save once the record is persisted."""
    message: str = Field(
        default="Entry saved successfully!",
        description="Human-readable success message",
    )
    image: Optional[str] = Field(
        default=None,
        description="Generated filename of the stored image, null if none was sent",
    )


# ══════════════════════════════════════════════════════════════════════════
# Error Response Model
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "All fields are required: mobile",
            "details": {"field": "mobile"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Error code for 4xx, failure detail for 5xx")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    storage: str = Field(description="Upload directory: writable, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
