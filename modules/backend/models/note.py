"""
Note Model.

A note is owned by exactly one user. Audit columns record who created
and last updated it; ownership never changes after creation.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modules.backend.models.base import Base, IntegerIDMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from modules.backend.models.note_access import NoteAccess
    from modules.backend.models.user import User


class Note(IntegerIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    """
    Note database model.

    Relationships are lazy="raise": callers must eager-load what they
    need (owner for summaries) so no implicit I/O happens in async code.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[int] = mapped_column(nullable=False)
    updated_by: Mapped[int] = mapped_column(nullable=False)

    owner: Mapped["User"] = relationship(lazy="raise")
    grants: Mapped[list["NoteAccess"]] = relationship(
        back_populates="note",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, owner_id={self.owner_id})>"
