"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database, real services
and the FastAPI app. Builds on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.models.note import Note
from modules.backend.models.note_access import AccessType, NoteAccess
from modules.backend.models.user import User
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.note_access import NoteAccessRepository
from modules.backend.repositories.user import UserRepository


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client whose requests all share the test database session.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from modules.backend.main import create_app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Data Factories
# =============================================================================


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Create users directly through the repository (no password hashing)."""
    repo = UserRepository(db_session)

    async def _make(email: str, name: str | None = None) -> User:
        return await repo.create(email=email.lower(), name=name, password_hash="not-a-real-hash")

    return _make


@pytest.fixture
def make_note(db_session: AsyncSession) -> Callable[..., Awaitable[Note]]:
    repo = NoteRepository(db_session)

    async def _make(owner: User, title: str = "Note", content: str = "", is_public: bool = False) -> Note:
        return await repo.create(
            title=title,
            content=content,
            is_public=is_public,
            owner_id=owner.id,
            created_by=owner.id,
            updated_by=owner.id,
        )

    return _make


@pytest.fixture
def make_grant(db_session: AsyncSession) -> Callable[..., Awaitable[NoteAccess]]:
    repo = NoteAccessRepository(db_session)

    async def _make(note: Note, user: User, access_type: AccessType) -> NoteAccess:
        return await repo.create(note_id=note.id, user_id=user.id, access_type=access_type)

    return _make


@pytest.fixture
async def alice(make_user) -> User:
    return await make_user("alice@example.com", "Alice")


@pytest.fixture
async def bob(make_user) -> User:
    return await make_user("bob@example.com", "Bob")


@pytest.fixture
async def carol(make_user) -> User:
    return await make_user("carol@example.com", "Carol")


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(response: Any, field: str | None = None) -> dict[str, Any]:
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
