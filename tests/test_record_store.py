"""
Record Intake Service — Record Store Tests
============================================

What:  RecordStore create / list / get_by_id against a real SQLite database.
How:   Uses the `record_store` fixture (aiosqlite file under tmp_path).
"""

import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from intake.exceptions import InvalidIdError, NotFoundError, PersistenceError
from intake.services.record_store import RecordStore


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamp(self, record_store):
        record = await record_store.create(name="Alice", mobile="555", occupation="Eng")

        assert isinstance(record.id, uuid.UUID)
        assert record.created_at is not None
        assert record.image is None

    @pytest.mark.asyncio
    async def test_created_record_is_retrievable(self, record_store):
        created = await record_store.create(
            name="Bob",
            mobile="123",
            occupation="Chef",
            image="http://test/uploads/1.png",
        )

        fetched = await record_store.get_by_id(str(created.id))

        assert fetched.id == created.id
        assert fetched.name == "Bob"
        assert fetched.image == "http://test/uploads/1.png"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, args",
        [
            ("create", {"name": "A", "mobile": "1", "occupation": "X"}),
            ("list", {}),
            ("get_by_id", {"record_id": str(uuid.uuid4())}),
            ("ping", {}),
        ],
    )
    async def test_storage_failure_raises_persistence_error(self, operation, args):
        session = MagicMock()
        session.__aenter__.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        store = RecordStore(MagicMock(return_value=session))

        with pytest.raises(PersistenceError) as exc_info:
            await getattr(store, operation)(**args)

        assert exc_info.value.context["error_type"] == "OperationalError"
        assert "db down" in exc_info.value.context["error"]


class TestList:

    @pytest.mark.asyncio
    async def test_empty(self, record_store):
        assert await record_store.list() == []

    @pytest.mark.asyncio
    async def test_newest_first(self, record_store):
        for name in ("A", "B", "C"):
            await record_store.create(name=name, mobile="1", occupation="X")

        records = await record_store.list()

        assert [r.name for r in records] == ["C", "B", "A"]
        timestamps = [r.created_at for r in records]
        assert timestamps == sorted(timestamps, reverse=True)


class TestGetById:

    @pytest.mark.asyncio
    async def test_unknown_id_not_found(self, record_store):
        with pytest.raises(NotFoundError):
            await record_store.get_by_id(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_malformed_id_is_invalid(self, record_store):
        with pytest.raises(InvalidIdError):
            await record_store.get_by_id("not-a-uuid")

    @pytest.mark.asyncio
    async def test_invalid_id_is_a_not_found(self, record_store):
        """Malformed ids share the 404 path with unknown ids."""
        with pytest.raises(NotFoundError):
            await record_store.get_by_id("12345")


class TestPing:

    @pytest.mark.asyncio
    async def test_ping_succeeds(self, record_store):
        await record_store.ping()
