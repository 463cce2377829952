"""
Note Repository.

Data access layer for notes. Adds owner-loaded fetches for the list and
detail projections.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, load_only

from modules.backend.models.note import Note
from modules.backend.models.user import User
from modules.backend.repositories.base import BaseRepository

# The list projection leaves content out to keep payloads small
SUMMARY_COLUMNS = (
    Note.id,
    Note.title,
    Note.is_public,
    Note.owner_id,
    Note.created_at,
    Note.updated_at,
    Note.deleted_at,
)

OWNER_COLUMNS = (User.id, User.name, User.email)


class NoteRepository(BaseRepository[Note]):
    """Repository for Note model."""

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_summaries(
        self,
        where: ColumnElement[bool],
        order_by: Sequence[Any],
        skip: int,
        take: int,
    ) -> list[Note]:
        """
        Fetch a page of notes without content, owner eager-loaded.

        Args:
            where: Filter predicate
            order_by: ORDER BY clauses
            skip: Number of rows to skip
            take: Maximum number of rows

        Returns:
            Notes with only summary columns and owner populated
        """
        return await self.find_many(
            where,
            order_by=order_by,
            offset=skip,
            limit=take,
            options=(
                load_only(*SUMMARY_COLUMNS),
                joinedload(Note.owner).load_only(*OWNER_COLUMNS),
            ),
        )

    async def get_with_owner(self, note_id: int) -> Note | None:
        """Fetch an active note with every column and its owner."""
        return await self.get_by_id_or_none(
            note_id,
            options=(joinedload(Note.owner).load_only(*OWNER_COLUMNS),),
        )
