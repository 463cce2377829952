"""
Unit Tests for Exception Handlers.

Tests the exception handler functions in isolation.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError

from modules.backend.core.exception_handlers import (
    EXCEPTION_STATUS_MAP,
    _get_request_id,
    application_error_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from modules.backend.core.exceptions import (
    ApplicationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


def _body(response) -> dict:
    return json.loads(response.body)


@pytest.fixture
def mock_request():
    request = MagicMock(spec=Request)
    request.state = MagicMock()
    request.state.request_id = "req-123"
    request.headers = {}
    request.url = MagicMock()
    request.url.path = "/api/v1/notes/1"
    request.method = "GET"
    return request


class TestExceptionStatusMapping:
    """Tests for exception to HTTP status code mapping."""

    @pytest.mark.parametrize(
        ("exc_type", "status"),
        [
            (PermissionDeniedError, 403),
            (NotFoundError, 404),
            (ConflictError, 409),
            (ValidationError, 400),
            (DatabaseError, 500),
        ],
    )
    def test_status_codes(self, exc_type, status):
        assert EXCEPTION_STATUS_MAP[exc_type] == status


class TestGetRequestId:
    """Tests for request ID extraction."""

    def test_prefers_request_state(self, mock_request):
        assert _get_request_id(mock_request) == "req-123"

    def test_falls_back_to_header(self):
        request = MagicMock(spec=Request)
        request.state = object()
        request.headers = {"x-request-id": "from-header"}

        assert _get_request_id(request) == "from-header"


class TestApplicationErrorHandler:
    """Tests for application_error_handler."""

    @pytest.mark.asyncio
    async def test_permission_denied_returns_403(self, mock_request):
        response = await application_error_handler(
            mock_request,
            PermissionDeniedError("You do not have access to this note"),
        )

        assert response.status_code == 403
        body = _body(response)
        assert body["success"] is False
        assert body["error"]["code"] == "AUTHZ_FORBIDDEN"
        assert body["metadata"]["request_id"] == "req-123"

    @pytest.mark.asyncio
    async def test_validation_error_includes_details(self, mock_request):
        response = await application_error_handler(
            mock_request,
            ValidationError("Required fields missing", details={"missing_fields": ["grantee"]}),
        )

        assert response.status_code == 400
        assert _body(response)["error"]["details"] == {"missing_fields": ["grantee"]}

    @pytest.mark.asyncio
    async def test_database_error_message_is_generic(self, mock_request):
        response = await application_error_handler(
            mock_request,
            DatabaseError("Database operation failed: update_note"),
        )

        assert response.status_code == 500
        body = _body(response)
        assert body["error"]["code"] == "SYS_DATABASE_ERROR"
        assert "uq_" not in body["error"]["message"]

    @pytest.mark.asyncio
    async def test_unmapped_application_error_is_500(self, mock_request):
        response = await application_error_handler(mock_request, ApplicationError("boom"))

        assert response.status_code == 500


class TestValidationErrorHandler:
    """Tests for request validation errors."""

    @pytest.mark.asyncio
    async def test_returns_422_with_field_paths(self, mock_request):
        exc = RequestValidationError(
            [
                {
                    "loc": ("query", "accessFilter"),
                    "msg": "Input should be 'default', 'owned', 'edit', 'view' or 'public'",
                    "type": "enum",
                }
            ]
        )

        response = await validation_error_handler(mock_request, exc)

        assert response.status_code == 422
        body = _body(response)
        assert body["error"]["code"] == "VAL_REQUEST_INVALID"
        errors = body["error"]["details"]["validation_errors"]
        assert errors[0]["field"] == "query.accessFilter"


class TestUnhandledExceptionHandler:
    """Tests for the catch-all handler."""

    @pytest.mark.asyncio
    async def test_hides_exception_text(self, mock_request):
        response = await unhandled_exception_handler(
            mock_request,
            RuntimeError("connection string with secrets"),
        )

        assert response.status_code == 500
        body = _body(response)
        assert body["error"]["code"] == "SYS_INTERNAL_ERROR"
        assert "secrets" not in body["error"]["message"]
