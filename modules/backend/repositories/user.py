"""
User Repository.

Data access layer for users.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.note import Note
from modules.backend.models.user import User
from modules.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_email(self, email: str, include_deleted: bool = False) -> User | None:
        """
        Find a user by email (case-insensitive).

        Active users are preferred; with include_deleted the most recently
        deleted match is returned when no active one exists.
        """
        condition = func.lower(User.email) == email.strip().lower()
        if not include_deleted:
            condition = condition & self.active()
        users = await self.find_many(
            condition,
            order_by=(User.deleted_at.is_not(None), User.deleted_at.desc()),
            limit=1,
        )
        return users[0] if users else None

    async def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        """Check whether an active user other than exclude_id holds the email."""
        user = await self.get_by_email(email)
        return user is not None and user.id != exclude_id

    async def owns_notes(self, user_id: int) -> bool:
        """Check whether the user owns any note, deleted notes included."""
        result = await self.session.execute(
            select(Note.id).where(Note.owner_id == user_id).limit(1)
        )
        return result.scalar_one_or_none() is not None
