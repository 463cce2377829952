"""
Unit Tests for Base Service.

Tests the BaseService class methods and error handling.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from modules.backend.core.exceptions import ConflictError, DatabaseError, ValidationError
from modules.backend.services.base import BaseService


class TestBaseServiceInit:
    """Tests for BaseService initialization."""

    def test_init_stores_session(self):
        session = AsyncMock()

        service = BaseService(session)

        assert service.session is session


class TestExecuteDbOperation:
    """Tests for _execute_db_operation."""

    @pytest.fixture
    def service(self):
        return BaseService(AsyncMock())

    @pytest.mark.asyncio
    async def test_returns_result_on_success(self, service):
        async def operation():
            return 42

        assert await service._execute_db_operation("op", operation()) == 42

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "driver_message",
        [
            "UNIQUE constraint failed: users.email",
            'duplicate key value violates unique constraint "uq_users_email_active"',
        ],
    )
    async def test_unique_violation_becomes_conflict(self, service, driver_message):
        async def operation():
            raise IntegrityError("INSERT", {}, Exception(driver_message))

        with pytest.raises(ConflictError) as exc_info:
            await service._execute_db_operation("create_user", operation())

        assert "uq_users_email_active" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_other_integrity_error_becomes_database_error(self, service):
        async def operation():
            raise IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

        with pytest.raises(DatabaseError) as exc_info:
            await service._execute_db_operation("create_note", operation())

        assert "FOREIGN KEY" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_operational_error_becomes_database_error(self, service):
        async def operation():
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(DatabaseError) as exc_info:
            await service._execute_db_operation("list_notes", operation())

        assert exc_info.value.code == "SYS_DATABASE_ERROR"
        assert "connection refused" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_application_errors_pass_through(self, service):
        async def operation():
            raise ValidationError("bad")

        with pytest.raises(ValidationError):
            await service._execute_db_operation("op", operation())


class TestValidateRequired:
    """Tests for _validate_required."""

    @pytest.fixture
    def service(self):
        return BaseService(AsyncMock())

    def test_passes_when_present(self, service):
        service._validate_required({"grantee": "bob@example.com"}, ["grantee"])

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_rejects_missing_or_blank(self, service, value):
        with pytest.raises(ValidationError) as exc_info:
            service._validate_required({"grantee": value}, ["grantee"])

        assert exc_info.value.details == {"missing_fields": ["grantee"]}


class TestLogging:
    def test_log_operation_includes_service_name(self):
        service = BaseService(AsyncMock())
        service._logger = MagicMock()

        service._log_operation("Creating note", owner_id=1)

        service._logger.info.assert_called_once_with(
            "Creating note",
            extra={"service": "BaseService", "owner_id": 1},
        )
