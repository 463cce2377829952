"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

import structlog
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_requester_id(
    x_user_id: int = Header(..., description="Identity of the calling user"),
) -> int:
    """
    Resolve the requester identity.

    The value is trusted as supplied: credential verification belongs to
    the authentication layer in front of this service.
    """
    structlog.contextvars.bind_contextvars(requester_id=x_user_id)
    return x_user_id


RequesterId = Annotated[int, Depends(get_requester_id)]
