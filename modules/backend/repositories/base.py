"""
Base Repository.

Soft-delete aware record store shared by every model. Reads exclude
soft-deleted rows unless include_deleted=True is passed; "delete" stamps
deleted_at and "restore" clears it. Only hard_delete removes a row.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, func, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.base import ExecutableOption

from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now
from modules.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses set the model class, which must carry the soft-delete
    mixin:

        class UserRepository(BaseRepository[User]):
            model = User
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def active(self) -> ColumnElement[bool]:
        """Predicate matching rows that are not soft-deleted."""
        return self.model.deleted_at.is_(None)

    def _visibility(self, include_deleted: bool) -> ColumnElement[bool]:
        return true() if include_deleted else self.active()

    async def get_by_id(self, id: int, include_deleted: bool = False) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id, include_deleted=include_deleted)

        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")

        return instance

    async def get_by_id_or_none(
        self,
        id: int,
        include_deleted: bool = False,
        options: Sequence[ExecutableOption] = (),
    ) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.id == id, self._visibility(include_deleted))
            .options(*options)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_one(
        self,
        where: ColumnElement[bool],
        options: Sequence[ExecutableOption] = (),
    ) -> ModelType | None:
        """Return the first record matching a predicate, or None."""
        result = await self.session.execute(
            select(self.model).where(where).options(*options).limit(1)
        )
        return result.scalars().first()

    async def find_many(
        self,
        where: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        offset: int = 0,
        limit: int | None = None,
        options: Sequence[ExecutableOption] = (),
    ) -> list[ModelType]:
        """Return records matching a predicate with ordering and pagination."""
        stmt = select(self.model).where(where).options(*options).order_by(*order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, where: ColumnElement[bool] | None = None) -> int:
        """Count records matching a predicate (all active records by default)."""
        condition = where if where is not None else self.active()
        result = await self.session.execute(
            select(func.count()).select_from(self.model).where(condition)
        )
        return result.scalar_one()

    async def get_all(self, limit: int = 50, offset: int = 0) -> list[ModelType]:
        """Get all active records with pagination."""
        return await self.find_many(
            self.active(),
            order_by=(self.model.id,),
            offset=offset,
            limit=limit,
        )

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: int, include_deleted: bool = False, **kwargs: Any) -> ModelType:
        """
        Update an existing record.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id, include_deleted=include_deleted)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update_where(self, where: ColumnElement[bool], **values: Any) -> int:
        """
        Apply a patch to every row matching a predicate in one statement.

        Returns:
            Number of rows updated
        """
        result = await self.session.execute(
            update(self.model)
            .where(where)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def soft_delete(self, id: int, at: datetime | None = None) -> ModelType:
        """
        Mark an active record deleted.

        Raises:
            NotFoundError: If no active record has this ID
        """
        return await self.update(id, deleted_at=at or utc_now())

    async def restore(self, id: int) -> ModelType:
        """
        Clear the deletion timestamp of a record.

        Raises:
            NotFoundError: If record not found
        """
        return await self.update(id, include_deleted=True, deleted_at=None)

    async def hard_delete(self, id: int) -> None:
        """
        Permanently remove a record, deleted or not.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id, include_deleted=True)
        await self.session.delete(instance)
        await self.session.flush()

    async def hard_delete_where(self, where: ColumnElement[bool]) -> int:
        """Permanently remove every row matching a predicate."""
        result = await self.session.execute(
            delete(self.model)
            .where(where)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def exists(self, id: int, include_deleted: bool = False) -> bool:
        """Check if a record exists by ID."""
        result = await self.session.execute(
            select(self.model.id).where(
                self.model.id == id,
                self._visibility(include_deleted),
            )
        )
        return result.scalar_one_or_none() is not None
