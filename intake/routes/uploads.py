"""
Record Intake Service — Uploaded File Serving
===============================================

What:  GET /uploads/{filename} returns a stored image as raw bytes.
How:   Resolves the name inside the BlobStore directory (no path escapes)
       and streams it with FileResponse; the content type is guessed from
       the extension.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from intake.dependencies import get_blob_store
from intake.exceptions import NotFoundError, ValidationError
from intake.services.blob_store import BlobStore

router = APIRouter(tags=["Uploads"])


@router.get(
    "/uploads/{filename}",
    summary="Serve an uploaded image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid file name"},
        404: {"description": "File not found"},
    },
)
async def serve_upload(
    filename: str,
    blob_store: BlobStore = Depends(get_blob_store),
) -> FileResponse:
    try:
        path = blob_store.path_for(filename)
    except ValueError:
        raise ValidationError(message="Invalid file path", field="filename")

    if not path.is_file():
        raise NotFoundError(resource="file", resource_id=filename)

    return FileResponse(
        path=str(path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
