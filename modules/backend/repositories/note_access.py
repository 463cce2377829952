"""
Note Access Repository.

Grants are never hard-deleted in the note lifecycle: revocation and the
note-delete cascade both stamp deleted_at.
"""

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from modules.backend.core.exceptions import NotFoundError
from modules.backend.models.note_access import AccessType, NoteAccess
from modules.backend.repositories.base import BaseRepository


class NoteAccessRepository(BaseRepository[NoteAccess]):
    """Repository for NoteAccess model."""

    model = NoteAccess

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_active(self, user_id: int, note_id: int) -> NoteAccess | None:
        """Return the active grant for a (user, note) pair, if any."""
        return await self.find_one(
            (NoteAccess.user_id == user_id)
            & (NoteAccess.note_id == note_id)
            & self.active()
        )

    async def get_with_user(self, grant_id: int) -> NoteAccess:
        """
        Fetch a grant, deleted or not, with the grantee eager-loaded.

        Raises:
            NotFoundError: If the grant does not exist
        """
        grant = await self.get_by_id_or_none(
            grant_id,
            include_deleted=True,
            options=(joinedload(NoteAccess.user),),
        )
        if grant is None:
            raise NotFoundError("Access grant not found")
        return grant

    async def list_active_for_note(self, note_id: int) -> list[NoteAccess]:
        """Active grants on a note, grantee eager-loaded, oldest first."""
        return await self.find_many(
            (NoteAccess.note_id == note_id) & self.active(),
            order_by=(NoteAccess.created_at, NoteAccess.id),
            options=(joinedload(NoteAccess.user),),
        )

    async def get_access_map(
        self,
        user_id: int,
        note_ids: Iterable[int],
    ) -> dict[int, AccessType]:
        """
        Map note ID to the user's active access type for the given notes.

        Notes without an active grant for the user are absent from the map.
        """
        ids = list(note_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(NoteAccess.note_id, NoteAccess.access_type).where(
                NoteAccess.user_id == user_id,
                NoteAccess.note_id.in_(ids),
                self.active(),
            )
        )
        return {note_id: access_type for note_id, access_type in result.all()}

    async def soft_delete_for_note(self, note_id: int, at: datetime) -> int:
        """Stamp every active grant on a note as deleted at the given time."""
        return await self.update_where(
            (NoteAccess.note_id == note_id) & self.active(),
            deleted_at=at,
            updated_at=at,
        )

    async def restore_for_note(self, note_id: int, deleted_at: datetime) -> int:
        """Reactivate grants that were deleted together with their note."""
        return await self.update_where(
            (NoteAccess.note_id == note_id) & (NoteAccess.deleted_at == deleted_at),
            deleted_at=None,
        )

    async def hard_delete_for_user(self, user_id: int) -> int:
        """Remove every grant held by a user, active or not."""
        return await self.hard_delete_where(NoteAccess.user_id == user_id)
