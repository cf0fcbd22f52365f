"""
Record Intake Service — Record Route Handlers
===============================================

What:  POST /save, GET /all and GET /entry/{record_id}.
How:   Extract form data / path params, delegate to IntakeService, return
       Pydantic models. Errors propagate as IntakeError subclasses and are
       rendered by the global exception handlers in main.py.

Request Flow (POST /save):
    1. Client sends multipart/form-data: name, mobile, occupation, image?
       (or an application/json object with the three text fields, no image)
    2. The image part is read up to max_size + 1 bytes (enough to detect
       an oversized file without buffering all of it)
    3. IntakeService: store image → validate fields → persist → respond
"""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from intake.dependencies import get_blob_store, get_intake_service
from intake.exceptions import ValidationError
from intake.schemas.record import ErrorResponse, RecordResponse, SaveResponse
from intake.services.blob_store import BlobStore
from intake.services.intake_service import ImageUpload, IntakeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Entries"])

TEXT_FIELDS = ("name", "mobile", "occupation")


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


async def _read_json_fields(request: Request) -> Dict[str, Optional[str]]:
    """
    Text fields from a JSON body. Scalars are taken as their string form;
    absent or null keys come back as None.

    Raises:
        ValidationError: the body is not a JSON object.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError(message="Request body is not valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")

    fields: Dict[str, Optional[str]] = {}
    for field in TEXT_FIELDS:
        value = payload.get(field)
        if isinstance(value, (dict, list)):
            raise ValidationError(message=f"Field '{field}' must be text", field=field)
        fields[field] = None if value is None else str(value)
    return fields


@router.post(
    "/save",
    response_model=SaveResponse,
    responses={
        200: {"description": "Entry saved", "model": SaveResponse},
        400: {"description": "Missing field, invalid file type or size", "model": ErrorResponse},
        500: {"description": "Persistence error", "model": ErrorResponse},
    },
    summary="Save an intake entry",
    description=(
        "Accepts name, mobile and occupation as form fields plus an optional "
        "image (jpg, jpeg, png or gif, max 5MB) and persists a new entry. "
        "A JSON object with the same three fields is accepted without an image."
    ),
)
async def save_entry(
    request: Request,
    name: Optional[str] = Form(default=None),
    mobile: Optional[str] = Form(default=None),
    occupation: Optional[str] = Form(default=None),
    image: Optional[UploadFile] = File(default=None, description="Optional image file"),
    intake_service: IntakeService = Depends(get_intake_service),
    blob_store: BlobStore = Depends(get_blob_store),
) -> SaveResponse:
    if _is_json(request):
        fields = await _read_json_fields(request)
        return await intake_service.save(
            base_url=str(request.base_url),
            name=fields["name"],
            mobile=fields["mobile"],
            occupation=fields["occupation"],
        )

    upload: Optional[ImageUpload] = None
    try:
        # Browsers send an empty part with no filename when nothing is chosen
        if image is not None and image.filename:
            content = await image.read(blob_store.max_size + 1)
            upload = ImageUpload(
                filename=image.filename,
                content=content,
                content_type=image.content_type,
                size=image.size,
            )
            logger.info(
                "Received upload: filename=%s, content_type=%s, size=%d bytes",
                image.filename,
                image.content_type,
                len(content),
            )

        return await intake_service.save(
            base_url=str(request.base_url),
            name=name,
            mobile=mobile,
            occupation=occupation,
            image=upload,
        )
    finally:
        if image is not None:
            await image.close()


@router.get(
    "/all",
    response_model=List[RecordResponse],
    responses={
        200: {"description": "All entries, newest first"},
        500: {"description": "Persistence error", "model": ErrorResponse},
    },
    summary="List all entries",
)
async def list_entries(
    intake_service: IntakeService = Depends(get_intake_service),
) -> List[RecordResponse]:
    records = await intake_service.list_records()
    return [RecordResponse.model_validate(record) for record in records]


@router.get(
    "/entry/{record_id}",
    response_model=RecordResponse,
    responses={
        200: {"description": "The entry", "model": RecordResponse},
        404: {"description": "Entry not found or malformed id", "model": ErrorResponse},
        500: {"description": "Persistence error", "model": ErrorResponse},
    },
    summary="Get a single entry by ID",
)
async def get_entry(
    record_id: str,
    intake_service: IntakeService = Depends(get_intake_service),
) -> RecordResponse:
    """
    Args:
        record_id: Taken as a plain string so a malformed id reaches the
                   record store and is reported as 404, not FastAPI's 422.
    """
    record = await intake_service.get_record(record_id)
    return RecordResponse.model_validate(record)
