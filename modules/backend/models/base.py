"""
SQLAlchemy Base Model.

Base class for all database models with common fields and utilities.
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from modules.backend.core.utils import utc_now


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class IntegerIDMixin:
    """Mixin that adds an autoincrement integer primary key."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


class SoftDeleteMixin:
    """
    Mixin that adds a nullable deletion timestamp.

    A row is active while deleted_at is NULL. Deleting stamps the time,
    restoring clears it.
    """

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        default=None,
        index=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
