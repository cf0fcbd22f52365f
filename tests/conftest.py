"""
Record Intake Service — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the test suite.
How:   Each test gets its own SQLite database (aiosqlite) and upload
       directory under pytest's tmp_path, and an app built by
       create_app(settings) with the schema already created.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:    Settings pointing at tmp_path
    ├── app:              configured FastAPI app (engine disposed on teardown)
    ├── test_client:      HTTPX AsyncClient over ASGITransport
    ├── blob_store / record_store: the app's real collaborators
    └── sample_png_bytes: 10KB payload with a PNG signature
"""

import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Defaults for anything that calls get_settings() directly; tests that need
# a database build their own Settings below.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="intake_test_"))
os.environ["LOG_LEVEL"] = "WARNING"

from intake.config import Settings  # noqa: E402
from intake.database import create_schema  # noqa: E402
from intake.main import create_app  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(tmp_path, upload_dir):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(upload_dir),
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """
    A fully wired app with the records table created.

    ASGITransport does not run the lifespan, so the schema is created here.
    """
    application = create_app(test_settings)
    await create_schema(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    Usage:
        async def test_all(test_client):
            response = await test_client.get("/all")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def blob_store(app):
    return app.state.blob_store


@pytest.fixture
def record_store(app):
    return app.state.record_store


@pytest.fixture
def sample_png_bytes():
    """PNG signature padded to 10KB; only the declared type is checked."""
    signature = b"\x89PNG\r\n\x1a\n"
    return signature + b"\x00" * (10 * 1024 - len(signature))
