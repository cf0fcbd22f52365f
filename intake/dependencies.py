"""
Record Intake Service — FastAPI Dependencies
==============================================

What:  Resolve the collaborators `create_app()` attached to `app.state`.
How:   Routes declare `Depends(get_intake_service)` etc.; tests override
       these with `app.dependency_overrides` or by replacing `app.state`.
"""

from fastapi import Request

from intake.services.blob_store import BlobStore
from intake.services.intake_service import IntakeService
from intake.services.record_store import RecordStore


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_intake_service(request: Request) -> IntakeService:
    return request.app.state.intake_service
