"""
Record Intake Service — FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds the engine, BlobStore, RecordStore and
       IntakeService, attaches them to app.state, and registers middleware,
       exception handlers and routes.
Who:   `python -m intake` (see __main__.py) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Req ID → Logging → Sec Headers → CORS  │
    │                                                     │
    │  Routes:                                            │
    │  POST /save │ GET /all │ GET /entry/{id}            │
    │  GET /uploads/{filename} │ GET /health              │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ NotFound→404 │ Persistence→500    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, database ping, optional schema creation.
              Any failure propagates and the server refuses to start.
    Shutdown: dispose the database engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intake import __version__
from intake.config import Settings, get_settings
from intake.database import build_engine, build_session_factory, create_schema
from intake.exceptions import (
    FileStorageError,
    IntakeError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from intake.middleware.logging import RequestLoggingMiddleware
from intake.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from intake.middleware.security_headers import SecurityHeadersMiddleware
from intake.routes import health, records, uploads
from intake.services.blob_store import BlobStore
from intake.services.intake_service import IntakeService
from intake.services.record_store import RecordStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Per-request access lines come from intake.access instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Verify the database is reachable (PersistenceError aborts startup)
        2. Create the records table when CREATE_SCHEMA is on

    Shutdown sequence:
        1. Dispose the database engine (close pooled connections)
    """
    settings: Settings = app.state.settings
    logger.info("=" * 60)
    logger.info("Record Intake Service %s starting up...", __version__)

    try:
        await app.state.record_store.ping()
        if settings.create_schema:
            await create_schema(app.state.engine)
    except Exception as e:
        logger.critical("Startup failed: %s", e)
        await app.state.engine.dispose()
        raise

    logger.info("Database connected")
    logger.info("Upload directory: %s", app.state.blob_store.upload_dir)
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Record Intake Service shutting down...")
    await app.state.engine.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    """Context request id, or the inbound header outside RequestIDMiddleware."""
    return request_id_var.get("") or request.headers.get(REQUEST_ID_HEADER, "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy onto HTTP responses.

        ValidationError (incl. UnsupportedType/TooLarge) → 400
        RequestValidationError (malformed request parts) → 400
        NotFoundError (incl. InvalidId)                  → 404
        PersistenceError / FileStorageError              → 500
        IntakeError (base) / Exception                   → 500

    Every body carries `error`, `message` and `request_id`. For 5xx the
    `error` field holds the failure type; the full context is logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = _request_id(request)
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = _request_id(request)
        errors = [
            {
                "loc": [str(part) for part in err.get("loc", ())],
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        fields = [err["loc"][-1] for err in errors if err["loc"]]
        logger.warning("[%s] Malformed request: %s", rid, errors)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": f"Invalid request: {', '.join(fields) or 'body'}",
                "details": {"errors": errors},
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = _request_id(request)
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        rid = _request_id(request)
        logger.error("[%s] Persistence error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.context.get("error_type", "persistence_error"),
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        rid = _request_id(request)
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.context.get("error_type", "file_storage_error"),
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(IntakeError)
    async def handle_intake_error(request: Request, exc: IntakeError):
        rid = _request_id(request)
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": type(exc).__name__,
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Stack trace goes to the log only; the client gets the exception type.

        Runs in ServerErrorMiddleware, outside the request id context, so the
        id comes from the inbound header and is echoed back explicitly.
        """
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": type(exc).__name__,
                "message": "Internal Server Error",
                "request_id": rid,
            },
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration (tests); defaults to get_settings().

    Raises:
        pydantic.ValidationError: configuration is missing or invalid.
        FileStorageError: the upload directory is not usable.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Record Intake API",
        description=(
            "Accepts name, mobile number and occupation with an optional image, "
            "and lists or retrieves saved entries."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # ── Collaborators ─────────────────────────────────────────────────────
    engine = build_engine(settings)
    blob_store = BlobStore(settings.upload_dir, max_size=settings.max_file_size)
    record_store = RecordStore(build_session_factory(engine))

    app.state.settings = settings
    app.state.engine = engine
    app.state.blob_store = blob_store
    app.state.record_store = record_store
    app.state.intake_service = IntakeService(blob_store, record_store)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → SecurityHeaders → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(records.router)
    app.include_router(uploads.router)
    app.include_router(health.router)

    return app
