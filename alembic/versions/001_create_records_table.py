"""Create records table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `records` table holding intake submissions.
How:   Columns mirror intake/models/record.py; created_at DESC index backs
       the newest-first listing.

Rollback: downgrade() drops the table (all records lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "records",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("mobile", sa.String(64), nullable=False),
        sa.Column("occupation", sa.String(255), nullable=False),
        # Absolute URL of the uploaded image; NULL when none was sent
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_records_created_at",
        "records",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_records_created_at", table_name="records")
    op.drop_table("records")
