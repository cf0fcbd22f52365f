"""
Record Intake Service — Record Store
======================================

What:  Thin persistence adapter over async SQLAlchemy for the `records` table.
How:   Opens one session per operation from the injected session factory.
       SQLAlchemy errors are wrapped in PersistenceError and propagated;
       nothing is retried.

Operations:
    create(name, mobile, occupation, image) -> Record
    list()                                  -> [Record], newest first
    get_by_id(record_id)                    -> Record | NotFoundError | InvalidIdError
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from intake.exceptions import InvalidIdError, NotFoundError, PersistenceError
from intake.models.record import Record

logger = logging.getLogger(__name__)

# Driver connection failures (e.g. asyncpg refusing to connect) surface as OSError.
DB_ERRORS = (SQLAlchemyError, OSError)


class RecordStore:
    """Create-then-read-only storage for intake records."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create(
        self,
        name: str,
        mobile: str,
        occupation: str,
        image: Optional[str] = None,
    ) -> Record:
        """
        Insert a new record; `id` and `created_at` are assigned here.

        Returns:
            The persisted Record (its `id` is the identifier issued to clients).

        Raises:
            PersistenceError: the insert or commit failed.
        """
        record = Record(name=name, mobile=mobile, occupation=occupation, image=image)
        try:
            async with self.session_factory() as session:
                session.add(record)
                await session.commit()
        except DB_ERRORS as e:
            logger.error("Database error creating record: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Could not save the entry. Please try again.",
                context={"error": str(e), "error_type": type(e).__name__},
            ) from e

        logger.info("Record created: %s", record.id)
        return record

    async def list(self) -> List[Record]:
        """
        All records ordered by created_at descending.

        Raises:
            PersistenceError: the query failed.
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Record).order_by(desc(Record.created_at))
                )
                return list(result.scalars().all())
        except DB_ERRORS as e:
            logger.error("Database error listing records: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Could not fetch entries. Please try again.",
                context={"error": str(e), "error_type": type(e).__name__},
            ) from e

    async def get_by_id(self, record_id: str) -> Record:
        """
        Fetch a single record.

        Raises:
            InvalidIdError: `record_id` is not a UUID.
            NotFoundError: no record has this id.
            PersistenceError: the query failed.
        """
        try:
            key = uuid.UUID(str(record_id))
        except ValueError:
            raise InvalidIdError(resource_id=str(record_id))

        try:
            async with self.session_factory() as session:
                record = await session.get(Record, key)
        except DB_ERRORS as e:
            logger.error("Database error fetching record %s: %s", record_id, str(e))
            raise PersistenceError(
                message="Could not fetch the entry. Please try again.",
                context={"record_id": str(record_id), "error": str(e), "error_type": type(e).__name__},
            ) from e

        if record is None:
            raise NotFoundError(resource="entry", resource_id=str(record_id))
        return record

    async def ping(self) -> None:
        """
        Run `SELECT 1`; used at startup and by the health check.

        Raises:
            PersistenceError: the database is unreachable.
        """
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except DB_ERRORS as e:
            raise PersistenceError(
                message="Database is unreachable",
                context={"error": str(e), "error_type": type(e).__name__},
            ) from e
