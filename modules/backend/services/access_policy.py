"""
Access Policy.

Decides whether a user may own, edit or view a note. Each check is one
query: the note's id and active state AND-ed with a disjunction of the
ways the user can hold the required level. A missing or soft-deleted
note fails exactly like an unauthorized one, so callers cannot learn
whether a note exists.

Permission hierarchy (highest first):

    OWNER > EDIT > VIEW > PUBLIC > NONE

    authorize_own   passes for OWNER
    authorize_edit  passes for OWNER, EDIT
    authorize_view  passes for OWNER, EDIT, VIEW, PUBLIC and returns the level
"""

import enum

from sqlalchemy import ColumnElement, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import PermissionDeniedError
from modules.backend.core.logging import get_logger
from modules.backend.models.note import Note
from modules.backend.models.note_access import AccessType, NoteAccess

logger = get_logger(__name__)


class Permission(enum.IntEnum):
    """Effective permission a user holds over a note, ordered by rank."""

    NONE = 0
    PUBLIC = 1
    VIEW = 2
    EDIT = 3
    OWNER = 4


# =============================================================================
# Predicates
# =============================================================================


def note_is_active() -> ColumnElement[bool]:
    return Note.deleted_at.is_(None)


def owned_by(user_id: int) -> ColumnElement[bool]:
    return Note.owner_id == user_id


def granted_to(user_id: int, access_type: AccessType | None = None) -> ColumnElement[bool]:
    """
    Note has an active grant for the user.

    Args:
        user_id: Grantee
        access_type: Restrict to grants of exactly this type; any type if None
    """
    conditions = [NoteAccess.user_id == user_id, NoteAccess.deleted_at.is_(None)]
    if access_type is not None:
        conditions.append(NoteAccess.access_type == access_type)
    return Note.grants.any(and_(*conditions))


def publicly_visible() -> ColumnElement[bool]:
    return Note.is_public.is_(True)


def can_own(user_id: int) -> ColumnElement[bool]:
    return owned_by(user_id)


def can_edit(user_id: int) -> ColumnElement[bool]:
    return or_(owned_by(user_id), granted_to(user_id, AccessType.EDIT))


def can_view(user_id: int) -> ColumnElement[bool]:
    return or_(owned_by(user_id), granted_to(user_id), publicly_visible())


def permission_for(
    owner_id: int,
    is_public: bool,
    grant: AccessType | None,
    user_id: int,
) -> Permission:
    """
    Rank the access a user holds from the facts about one note.

    Args:
        owner_id: The note's owner
        is_public: The note's public flag
        grant: The user's active grant type on the note, if any
        user_id: The user being evaluated

    Returns:
        The highest Permission that applies
    """
    if owner_id == user_id:
        return Permission.OWNER
    if grant is AccessType.EDIT:
        return Permission.EDIT
    if grant is AccessType.VIEW:
        return Permission.VIEW
    if is_public:
        return Permission.PUBLIC
    return Permission.NONE


# =============================================================================
# Policy
# =============================================================================


class AccessPolicy:
    """
    Evaluates note permissions against the database.

    authorize_own and authorize_edit raise PermissionDeniedError or return
    None; authorize_view also returns the level it found.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _note_matches(self, note_id: int, condition: ColumnElement[bool]) -> bool:
        result = await self.session.execute(
            select(Note.id).where(Note.id == note_id, note_is_active(), condition)
        )
        return result.scalar_one_or_none() is not None

    async def authorize_own(self, note_id: int, user_id: int) -> None:
        """
        Require the user to own the active note.

        Raises:
            PermissionDeniedError: If the note is missing, deleted or owned by someone else
        """
        if not await self._note_matches(note_id, can_own(user_id)):
            logger.info(
                "Owner access denied",
                extra={"note_id": note_id, "user_id": user_id},
            )
            raise PermissionDeniedError("You can only modify notes you own")

    async def authorize_edit(self, note_id: int, user_id: int) -> None:
        """
        Require ownership or an active EDIT grant on the active note.

        Raises:
            PermissionDeniedError: If the user cannot edit the note
        """
        if not await self._note_matches(note_id, can_edit(user_id)):
            logger.info(
                "Edit access denied",
                extra={"note_id": note_id, "user_id": user_id},
            )
            raise PermissionDeniedError("You do not have edit access to this note")

    async def authorize_view(self, note_id: int, user_id: int) -> Permission:
        """
        Require ownership, any active grant, or a public note.

        Returns:
            The permission the user holds, PUBLIC or higher

        Raises:
            PermissionDeniedError: If the user cannot view the note
        """
        permission = await self.effective_permission(note_id, user_id)
        if permission < Permission.PUBLIC:
            logger.info(
                "View access denied",
                extra={"note_id": note_id, "user_id": user_id},
            )
            raise PermissionDeniedError("You do not have access to this note")
        return permission

    async def effective_permission(self, note_id: int, user_id: int) -> Permission:
        """
        Resolve the highest permission the user holds over a note.

        Returns Permission.NONE for missing or soft-deleted notes.
        """
        result = await self.session.execute(
            select(Note.owner_id, Note.is_public, NoteAccess.access_type)
            .outerjoin(
                NoteAccess,
                (NoteAccess.note_id == Note.id)
                & (NoteAccess.user_id == user_id)
                & NoteAccess.deleted_at.is_(None),
            )
            .where(Note.id == note_id, note_is_active())
        )
        row = result.first()
        if row is None:
            return Permission.NONE
        owner_id, is_public, grant = row
        return permission_for(owner_id, is_public, grant, user_id)
