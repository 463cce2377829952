"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_repository(mock_db_session: AsyncMock):
            repo = UserRepository(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def mock_db_result() -> MagicMock:
    """
    Mock database query result.

    Usage:
        def test_query(mock_db_session, mock_db_result):
            mock_db_result.scalar_one_or_none.return_value = 1
            mock_db_session.execute.return_value = mock_db_result
    """
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalar_one = MagicMock(return_value=0)
    result.first = MagicMock(return_value=None)
    result.scalars = MagicMock()
    result.scalars.return_value.all = MagicMock(return_value=[])
    result.scalars.return_value.first = MagicMock(return_value=None)
    return result


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                ...
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
