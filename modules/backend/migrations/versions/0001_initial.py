"""Create users, notes and user_note_access tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Email and (user, note) grant uniqueness apply to non-deleted rows only,
so both use partial unique indexes.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ACTIVE = sa.text("deleted_at IS NULL")


def _lifecycle_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        *_lifecycle_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"])
    op.create_index(
        "uq_users_email_active",
        "users",
        ["email"],
        unique=True,
        postgresql_where=ACTIVE,
        sqlite_where=ACTIVE,
    )

    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("updated_by", sa.Integer(), nullable=False),
        *_lifecycle_columns(),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notes_title", "notes", ["title"])
    op.create_index("ix_notes_owner_id", "notes", ["owner_id"])
    op.create_index("ix_notes_deleted_at", "notes", ["deleted_at"])

    op.create_table(
        "user_note_access",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("note_id", sa.Integer(), nullable=False),
        sa.Column(
            "access_type",
            sa.Enum("VIEW", "EDIT", name="access_type"),
            nullable=False,
        ),
        *_lifecycle_columns(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_note_access_user_id", "user_note_access", ["user_id"])
    op.create_index("ix_user_note_access_note_id", "user_note_access", ["note_id"])
    op.create_index("ix_user_note_access_deleted_at", "user_note_access", ["deleted_at"])
    op.create_index(
        "uq_user_note_access_active",
        "user_note_access",
        ["user_id", "note_id"],
        unique=True,
        postgresql_where=ACTIVE,
        sqlite_where=ACTIVE,
    )


def downgrade() -> None:
    op.drop_table("user_note_access")
    sa.Enum(name="access_type").drop(op.get_bind(), checkfirst=True)
    op.drop_table("notes")
    op.drop_table("users")
