"""
Base Schemas.

Standard API response envelopes.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    """Metadata included in all API responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Standard API response envelope.

    All API responses use this structure for consistency.
    """

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class PaginationInfo(BaseModel):
    """Pagination metadata."""

    total: int
    skip: int
    take: int
    has_more: bool = False


class PaginatedResponse(BaseModel, Generic[DataT]):
    """Paginated response envelope."""

    success: bool = True
    data: list[DataT]
    error: None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
    pagination: PaginationInfo
