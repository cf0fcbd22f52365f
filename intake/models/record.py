"""
Record Intake Service — Record SQLAlchemy Model
=================================================

What:  ORM model for the `records` table, one row per intake submission.
How:   Inherits from the shared DeclarativeBase; Alembic migration 001
       creates the same table.

Table Design:
    - id: UUID primary key, generated in Python at insert time
    - name / mobile / occupation: required free text (no format checks)
    - image: absolute URL of the uploaded image, NULL when none was sent
    - created_at: UTC timestamp, set once at insert and never updated

    Index on created_at DESC backs GET /all (newest first).
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from intake.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Record(Base):
    """
    A persisted intake entry.

    Lifecycle:
        Created once by RecordStore.create(); read by list() and get_by_id().
        Never updated or deleted.
    """

    __tablename__ = "records"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mobile: Mapped[str] = mapped_column(String(64), nullable=False)
    occupation: Mapped[str] = mapped_column(String(255), nullable=False)

    # Absolute URL, e.g. http://host/uploads/1718000000000.png
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        Index("idx_records_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Record(id={self.id}, name='{self.name}', created_at='{self.created_at}')>"
