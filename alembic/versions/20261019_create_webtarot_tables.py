"""Create user, access_token and reading tables.

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, ENUM

# revision identifiers, used by Alembic.
revision: str = "20261019_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create webtarot tables."""
    backend_enum = ENUM(
        "CHATGPT",
        "GEMINI",
        name="interpretationbackend",
        create_type=True,
    )
    status_enum = ENUM(
        "PENDING",
        "DONE",
        "FAILED",
        name="interpretationstatus",
        create_type=True,
    )

    op.create_table(
        "user",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("self_description", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "access_token",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("last_user_ip", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("last_user_agent", sa.String(length=512), nullable=False, server_default=""),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_access_token_token", "access_token", ["token"], unique=True)
    op.create_index("ix_access_token_user_id", "access_token", ["user_id"])

    # user_id has no foreign key: anonymous owners have no user row
    op.create_table(
        "reading",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("context", sa.Text(), nullable=False, server_default=""),
        sa.Column("cards", sa.JSON(), nullable=False),
        sa.Column("shuffled_times", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("backend", backend_enum, nullable=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=True),
        sa.Column("user_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("user_self_description", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "interpretation_status",
            status_enum,
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("interpretation_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("interpretation_error", sa.Text(), nullable=False, server_default=""),
        sa.Column("interpretation_done_at", sa.DateTime(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reading_created_at", "reading", ["created_at"])
    op.create_index("ix_reading_user_id", "reading", ["user_id"])
    op.create_index("ix_reading_interpretation_status", "reading", ["interpretation_status"])
    op.create_index("ix_reading_deleted_at", "reading", ["deleted_at"])


def downgrade() -> None:
    """Drop webtarot tables."""
    op.drop_index("ix_reading_deleted_at", table_name="reading")
    op.drop_index("ix_reading_interpretation_status", table_name="reading")
    op.drop_index("ix_reading_user_id", table_name="reading")
    op.drop_index("ix_reading_created_at", table_name="reading")
    op.drop_table("reading")

    op.drop_index("ix_access_token_user_id", table_name="access_token")
    op.drop_index("ix_access_token_token", table_name="access_token")
    op.drop_table("access_token")

    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")

    op.execute("DROP TYPE IF EXISTS interpretationstatus")
    op.execute("DROP TYPE IF EXISTS interpretationbackend")
