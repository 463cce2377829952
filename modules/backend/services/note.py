"""
Note Service.

Note lifecycle: create, update, soft delete, restore, listing, detail
and sharing. Every operation receives the requester's identity
explicitly and checks the access policy before touching data.

State machine per note:

    Active --delete--> SoftDeleted --restore--> Active

Deleting a note soft-deletes its active grants with the same timestamp;
restoring the note revives exactly those grants.
"""

from sqlalchemy import and_
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from modules.backend.core.pagination import PagedResult
from modules.backend.core.utils import utc_now
from modules.backend.models.note import Note
from modules.backend.models.note_access import AccessType, NoteAccess
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.note_access import NoteAccessRepository
from modules.backend.schemas.note import (
    NoteCreate,
    NoteDetails,
    NoteListItem,
    NoteListParams,
    NoteUpdate,
    UserAccess,
)
from modules.backend.services.access_policy import AccessPolicy, can_edit, note_is_active
from modules.backend.services.base import BaseService
from modules.backend.services.query_criteria import build_note_criteria
from modules.backend.services.user import UserService


def _user_access(access_type: AccessType | None) -> UserAccess | None:
    return UserAccess(access_type=access_type) if access_type is not None else None


class NoteService(BaseService):
    """
    Service for note business logic.

    Authorization always happens before the mutation it guards. Updates
    go one step further and fold the edit check into the UPDATE itself.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.access_repo = NoteAccessRepository(session)
        self.policy = AccessPolicy(session)
        self.users = UserService(session)

    async def create_note(self, owner_id: int, data: NoteCreate) -> Note:
        """
        Create a note owned by owner_id.

        Raises:
            NotFoundError: If the owner is not an active user
        """
        await self.users.ensure_exists(owner_id)

        self._log_operation("Creating note", owner_id=owner_id, is_public=data.is_public)
        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=data.title,
                content=data.content,
                is_public=data.is_public,
                owner_id=owner_id,
                created_by=owner_id,
                updated_by=owner_id,
            ),
        )
        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, note_id: int, requester_id: int, data: NoteUpdate) -> Note:
        """
        Apply a partial update as requester_id.

        The edit check and the write are one conditional UPDATE, so a grant
        revoked between check and write cannot be bypassed.

        Raises:
            PermissionDeniedError: If the requester cannot edit the note
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        if not update_data:
            await self.policy.authorize_edit(note_id, requester_id)
            return await self.repo.get_by_id(note_id)

        self._log_operation(
            "Updating note",
            note_id=note_id,
            requester_id=requester_id,
            fields=sorted(update_data),
        )

        updated = await self._execute_db_operation(
            "update_note",
            self.repo.update_where(
                and_(Note.id == note_id, note_is_active(), can_edit(requester_id)),
                **update_data,
                updated_by=requester_id,
                updated_at=utc_now(),
            ),
        )
        if updated == 0:
            self._log_debug("Edit access denied", note_id=note_id, requester_id=requester_id)
            raise PermissionDeniedError("You do not have edit access to this note")

        return await self.repo.get_by_id(note_id)

    async def set_public(self, note_id: int, requester_id: int, is_public: bool) -> Note:
        """Toggle the public flag; same access rule as update_note."""
        return await self.update_note(note_id, requester_id, NoteUpdate(is_public=is_public))

    async def delete_note(self, note_id: int, requester_id: int) -> Note:
        """
        Soft-delete a note and the active grants on it.

        Raises:
            PermissionDeniedError: If the requester does not own the active note
        """
        await self.policy.authorize_own(note_id, requester_id)

        self._log_operation("Deleting note", note_id=note_id, requester_id=requester_id)
        deleted_at = utc_now()
        note = await self._execute_db_operation(
            "delete_note",
            self.repo.soft_delete(note_id, at=deleted_at),
        )
        revoked = await self._execute_db_operation(
            "cascade_note_grants",
            self.access_repo.soft_delete_for_note(note_id, deleted_at),
        )
        self._log_debug("Grants cascaded", note_id=note_id, count=revoked)
        return note

    async def restore_note(self, note_id: int, requester_id: int) -> Note:
        """
        Restore a soft-deleted note and the grants deleted with it.

        Restoring an active note is a no-op.

        Raises:
            PermissionDeniedError: If the note does not exist or the requester
                is not its owner
        """
        note = await self.repo.get_by_id_or_none(note_id, include_deleted=True)
        if note is None or note.owner_id != requester_id:
            raise PermissionDeniedError("You can only restore notes you own")
        if not note.is_deleted:
            return note

        self._log_operation("Restoring note", note_id=note_id, requester_id=requester_id)
        restored = await self._execute_db_operation(
            "restore_note_grants",
            self.access_repo.restore_for_note(note_id, note.deleted_at),
        )
        self._log_debug("Grants restored", note_id=note_id, count=restored)
        return await self._execute_db_operation(
            "restore_note",
            self.repo.restore(note_id),
        )

    async def list_notes(self, requester_id: int, params: NoteListParams) -> PagedResult[NoteListItem]:
        """
        List notes visible to the requester.

        Each item carries the requester's own active grant as user_access,
        which is absent when access comes only from ownership or the
        public flag.
        """
        criteria = build_note_criteria(requester_id, params)

        notes = await self.repo.list_summaries(
            criteria.where,
            order_by=criteria.order_by,
            skip=criteria.skip,
            take=criteria.take,
        )
        total = await self.repo.count(criteria.where)
        access = await self.access_repo.get_access_map(requester_id, (note.id for note in notes))

        items = [
            NoteListItem.model_validate(note).model_copy(
                update={"user_access": _user_access(access.get(note.id))}
            )
            for note in notes
        ]
        return PagedResult(items=items, total=total, skip=criteria.skip, take=criteria.take)

    async def get_note(self, note_id: int, requester_id: int) -> NoteDetails:
        """
        Full note, content included, for a requester allowed to view it.

        Raises:
            PermissionDeniedError: If the requester cannot view the note
            NotFoundError: If the note vanished after authorization succeeded
        """
        permission = await self.policy.authorize_view(note_id, requester_id)

        note = await self.repo.get_with_owner(note_id)
        if note is None:
            self._logger.warning(
                "Note missing after authorization",
                extra={"note_id": note_id, "requester_id": requester_id},
            )
            raise NotFoundError("Note not found")

        access = await self.access_repo.get_active(requester_id, note_id)
        return NoteDetails.model_validate(note).model_copy(
            update={
                "user_access": _user_access(access.access_type if access else None),
                "permission": permission.name,
            }
        )

    async def share_note(
        self,
        note_id: int,
        requester_id: int,
        grantee: str | int,
        access_type: AccessType,
    ) -> NoteAccess:
        """
        Grant a user VIEW or EDIT access, replacing any existing grant.

        Sharing again with the same access type returns the existing grant.
        A different type revokes the old grant and inserts a new one; the
        partial unique index keeps a single active grant per pair.

        Raises:
            PermissionDeniedError: If the requester does not own the active note
            NotFoundError: If the grantee is not an active user
            ValidationError: If the grantee is the owner
        """
        await self.policy.authorize_own(note_id, requester_id)
        self._validate_required({"grantee": grantee}, ["grantee"])

        user = await self.users.resolve(grantee)
        if user.id == requester_id:
            raise ValidationError("A note cannot be shared with its owner")

        existing = await self.access_repo.get_active(user.id, note_id)
        if existing is not None and existing.access_type == access_type:
            self._log_debug("Grant unchanged", note_id=note_id, user_id=user.id)
            return await self.access_repo.get_with_user(existing.id)

        self._log_operation(
            "Sharing note",
            note_id=note_id,
            grantee_id=user.id,
            access_type=access_type.value,
        )
        if existing is not None:
            await self._execute_db_operation(
                "revoke_previous_grant",
                self.access_repo.soft_delete(existing.id),
            )

        grant = await self._execute_db_operation(
            "share_note",
            self.access_repo.create(
                user_id=user.id,
                note_id=note_id,
                access_type=access_type,
            ),
        )
        return await self.access_repo.get_with_user(grant.id)

    async def revoke_access(self, note_id: int, requester_id: int, user_id: int) -> NoteAccess:
        """
        Revoke a user's active grant on a note.

        Raises:
            PermissionDeniedError: If the requester does not own the active note
            NotFoundError: If the user holds no active grant on the note
        """
        await self.policy.authorize_own(note_id, requester_id)

        grant = await self.access_repo.get_active(user_id, note_id)
        if grant is None:
            raise NotFoundError("Access grant not found")

        self._log_operation("Revoking access", note_id=note_id, grantee_id=user_id)
        return await self._execute_db_operation(
            "revoke_access",
            self.access_repo.soft_delete(grant.id),
        )

    async def list_access(self, note_id: int, requester_id: int) -> list[NoteAccess]:
        """
        Active grants on a note, visible to its owner only.

        Raises:
            PermissionDeniedError: If the requester does not own the active note
        """
        await self.policy.authorize_own(note_id, requester_id)
        return await self.access_repo.list_active_for_note(note_id)
