"""
Note Access Model.

Junction between users and notes conferring VIEW or EDIT access to a
non-owner. At most one active grant exists per (user, note); revoked
grants stay in the table with deleted_at set.
"""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modules.backend.models.base import Base, IntegerIDMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from modules.backend.models.note import Note
    from modules.backend.models.user import User


class AccessType(str, enum.Enum):
    """Access level conferred by a grant."""

    VIEW = "VIEW"
    EDIT = "EDIT"


class NoteAccess(IntegerIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Access grant database model."""

    __tablename__ = "user_note_access"
    __table_args__ = (
        Index(
            "uq_user_note_access_active",
            "user_id",
            "note_id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    note_id: Mapped[int] = mapped_column(
        ForeignKey("notes.id"),
        nullable=False,
        index=True,
    )
    access_type: Mapped[AccessType] = mapped_column(
        Enum(AccessType, name="access_type"),
        nullable=False,
    )

    note: Mapped["Note"] = relationship(back_populates="grants", lazy="raise")
    user: Mapped["User"] = relationship(lazy="raise")

    def __repr__(self) -> str:
        return (
            f"<NoteAccess(user_id={self.user_id}, note_id={self.note_id}, "
            f"access_type={self.access_type.value})>"
        )
