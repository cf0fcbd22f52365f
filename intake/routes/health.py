"""
Record Intake Service — Health Check Route
============================================

What:  GET /health for container health checks and load balancer probes.
How:   Runs `SELECT 1` against the record store and checks the upload
       directory is writable.

Status levels:
    - healthy:   database reachable and upload directory writable (HTTP 200)
    - unhealthy: either dependency down (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from intake import __version__
from intake.dependencies import get_blob_store, get_record_store
from intake.exceptions import PersistenceError
from intake.schemas.record import HealthResponse
from intake.services.blob_store import BlobStore
from intake.services.record_store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "A dependency is down", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    record_store: RecordStore = Depends(get_record_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    db_status = "connected"
    storage_status = "writable"

    try:
        await record_store.ping()
    except PersistenceError as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", e.context.get("error"))

    if not blob_store.is_writable():
        storage_status = "unavailable"
        logger.warning("Health check: upload directory not writable: %s", blob_store.upload_dir)

    healthy = db_status == "connected" and storage_status == "writable"
    body = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        database=db_status,
        storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not healthy:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
