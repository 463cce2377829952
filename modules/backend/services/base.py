"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, map storage failures into application
errors, and implement business rules.

Usage:
    from modules.backend.services.base import BaseService

    class UserService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = UserRepository(session)
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import (
    ConflictError,
    DatabaseError,
    ValidationError,
)
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session management
    - Logging context
    - Error wrapping for database operations
    - Common validation patterns
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the service with a database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
    ) -> T:
        """
        Execute a database operation with error handling.

        Converts SQLAlchemy exceptions to application exceptions exactly
        once, at the service boundary. Messages never carry constraint
        names or driver text. No retries: a failed write may have
        partially applied.

        Args:
            operation: Description of the operation for logging
            coro: Coroutine to execute

        Returns:
            Result of the coroutine

        Raises:
            ConflictError: For unique constraint violations
            DatabaseError: For other database errors
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e.orig)},
            )
            error_str = str(e).lower()
            if "unique" in error_str or "duplicate" in error_str:
                raise ConflictError("Resource already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """Log a service operation with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
