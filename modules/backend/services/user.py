"""
User Service.

User lifecycle plus the lookups the note service depends on
(ensure_exists, find_by_email, resolve). Soft-deleting a user leaves
their notes untouched so ownership survives for audit and restore.
"""

from typing import Any

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ConflictError, NotFoundError
from modules.backend.core.pagination import PagedResult, normalize_pagination
from modules.backend.core.security import hash_password
from modules.backend.core.utils import escape_like
from modules.backend.models.user import User
from modules.backend.repositories.note_access import NoteAccessRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.user import UserCreate, UserListParams, UserUpdate
from modules.backend.services.base import BaseService

USER_ORDERABLE_FIELDS = {
    "id": User.id,
    "email": User.email,
    "name": User.name,
}


class UserService(BaseService):
    """Service for user business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)
        self.access_repo = NoteAccessRepository(session)

    # -------------------------------------------------------------------------
    # Lookups used by the note service
    # -------------------------------------------------------------------------

    async def ensure_exists(self, user_id: int) -> None:
        """
        Raises:
            NotFoundError: If no active user has this ID
        """
        if not await self.repo.exists(user_id):
            raise NotFoundError("User not found")

    async def get_user(self, user_id: int) -> User:
        """
        Get an active user by ID.

        Raises:
            NotFoundError: If user not found or soft-deleted
        """
        user = await self.repo.get_by_id_or_none(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def find_by_email(self, email: str) -> User:
        """
        Get an active user by email.

        Raises:
            NotFoundError: If no active user has this email
        """
        user = await self.repo.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def resolve(self, identifier: str | int) -> User:
        """
        Resolve an email address or numeric ID to an active user.

        Raises:
            NotFoundError: If the identifier matches no active user
        """
        if isinstance(identifier, int):
            return await self.get_user(identifier)
        value = identifier.strip()
        if value.isdigit():
            return await self.get_user(int(value))
        return await self.find_by_email(value)

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def _list_order_by(self, params: UserListParams) -> tuple[Any, ...]:
        column = USER_ORDERABLE_FIELDS.get(params.order_by or "")
        if column is None:
            return (User.id.asc(),)
        if (params.sort_order or "").lower() == "desc":
            return (column.desc(), User.id.desc())
        return (column.asc(), User.id.asc())

    async def _list(self, params: UserListParams, deleted: bool) -> PagedResult[User]:
        condition = User.deleted_at.is_not(None) if deleted else self.repo.active()
        search = (params.search or "").strip()
        if search:
            pattern = f"%{escape_like(search)}%"
            condition = condition & or_(
                User.email.ilike(pattern, escape="\\"),
                User.name.ilike(pattern, escape="\\"),
            )

        page = normalize_pagination(params.skip, params.take)
        users = await self.repo.find_many(
            condition,
            order_by=self._list_order_by(params),
            offset=page.skip,
            limit=page.take,
        )
        total = await self.repo.count(condition)
        return PagedResult(items=users, total=total, skip=page.skip, take=page.take)

    async def list_users(self, params: UserListParams) -> PagedResult[User]:
        """List active users, searchable by email or name, ordered by id by default."""
        return await self._list(params, deleted=False)

    async def list_deleted_users(self, params: UserListParams) -> PagedResult[User]:
        """List soft-deleted users with the same options as list_users."""
        return await self._list(params, deleted=True)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def create_user(self, data: UserCreate) -> User:
        """
        Register a user.

        A soft-deleted account with the same email is revived with the new
        name and password instead of creating a second row.

        Raises:
            ConflictError: If an active user already has the email
        """
        email = data.email.lower()
        if await self.repo.email_taken(email):
            raise ConflictError("User with this email already exists")

        password_hash = hash_password(data.password)
        previous = await self.repo.get_by_email(email, include_deleted=True)

        if previous is not None and previous.is_deleted:
            self._log_operation("Reviving deleted user", user_id=previous.id)
            return await self._execute_db_operation(
                "revive_user",
                self.repo.update(
                    previous.id,
                    include_deleted=True,
                    name=data.name,
                    password_hash=password_hash,
                    deleted_at=None,
                ),
            )

        self._log_operation("Creating user")
        user = await self._execute_db_operation(
            "create_user",
            self.repo.create(email=email, name=data.name, password_hash=password_hash),
        )
        self._log_debug("User created", user_id=user.id)
        return user

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        """
        Update an active user.

        Raises:
            NotFoundError: If user not found
            ConflictError: If the new email belongs to another active user
        """
        await self.ensure_exists(user_id)

        # name may be cleared with null; email and password may not
        update_data = data.model_dump(exclude_unset=True)
        password = update_data.pop("password", None)
        if password is not None:
            update_data["password_hash"] = hash_password(password)

        email = update_data.pop("email", None)
        if email is not None:
            email = email.lower()
            if await self.repo.email_taken(email, exclude_id=user_id):
                raise ConflictError("User with this email already exists")
            update_data["email"] = email

        if not update_data:
            return await self.get_user(user_id)

        self._log_operation("Updating user", user_id=user_id, fields=sorted(update_data))
        return await self._execute_db_operation(
            "update_user",
            self.repo.update(user_id, **update_data),
        )

    async def delete_user(self, user_id: int) -> User:
        """
        Soft-delete a user. Owned notes are not cascaded.

        Raises:
            NotFoundError: If no active user has this ID
        """
        await self.ensure_exists(user_id)
        self._log_operation("Soft-deleting user", user_id=user_id)
        return await self._execute_db_operation(
            "delete_user",
            self.repo.soft_delete(user_id),
        )

    async def restore_user(self, user_id: int) -> User:
        """
        Restore a soft-deleted user.

        Raises:
            NotFoundError: If the user does not exist at all
            ConflictError: If another active user took the email meanwhile
        """
        user = await self.repo.get_by_id_or_none(user_id, include_deleted=True)
        if user is None:
            raise NotFoundError("User not found")
        if not user.is_deleted:
            return user
        if await self.repo.email_taken(user.email, exclude_id=user_id):
            raise ConflictError("User with this email already exists")

        self._log_operation("Restoring user", user_id=user_id)
        return await self._execute_db_operation(
            "restore_user",
            self.repo.restore(user_id),
        )

    async def permanently_delete_user(self, user_id: int) -> User:
        """
        Remove a user record entirely, deleted or not.

        The user's grants go with it. Users who still own notes (deleted
        notes included) cannot be removed.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the user still owns notes
        """
        user = await self.repo.get_by_id_or_none(user_id, include_deleted=True)
        if user is None:
            raise NotFoundError("User not found")
        if await self.repo.owns_notes(user_id):
            raise ConflictError("User still owns notes")

        self._log_operation("Permanently deleting user", user_id=user_id)
        removed = await self._execute_db_operation(
            "purge_user_grants",
            self.access_repo.hard_delete_for_user(user_id),
        )
        self._log_debug("Grants removed", user_id=user_id, count=removed)
        await self._execute_db_operation(
            "permanently_delete_user",
            self.repo.hard_delete(user_id),
        )
        return user
