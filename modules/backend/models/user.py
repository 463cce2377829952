"""
User Model.

Note owners and share grantees. Email is unique among non-deleted users
only, so a soft-deleted account does not block re-registration.
"""

from sqlalchemy import Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, IntegerIDMixin, SoftDeleteMixin, TimestampMixin


class User(IntegerIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    """User database model."""

    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_email_active",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"
