"""
Pagination Utilities.

Offset-based pagination for list endpoints. Out-of-range values are
clamped, never rejected: `take` is held to 1..MAX_TAKE and `skip` to >= 0.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from modules.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata

T = TypeVar("T")

DEFAULT_TAKE = 10
MAX_TAKE = 100


@dataclass(frozen=True)
class PaginationParams:
    """Normalized skip/take pair."""

    skip: int
    take: int


@dataclass
class PagedResult(Generic[T]):
    """One page of items plus the numbers the response envelope reports."""

    items: list[T]
    total: int
    skip: int
    take: int


def normalize_pagination(skip: int | None = None, take: int | None = None) -> PaginationParams:
    """
    Clamp raw skip/take values into the supported range.

    Args:
        skip: Number of items to skip; None or negative becomes 0
        take: Page size; None becomes DEFAULT_TAKE, values below 1 become 1
            and values above MAX_TAKE become MAX_TAKE

    Returns:
        PaginationParams that are always valid

    Examples:
        >>> normalize_pagination(take=101)
        PaginationParams(skip=0, take=100)
        >>> normalize_pagination(skip=-5, take=0)
        PaginationParams(skip=0, take=1)
    """
    effective_skip = max(skip or 0, 0)
    if take is None:
        effective_take = DEFAULT_TAKE
    else:
        effective_take = min(max(take, 1), MAX_TAKE)
    return PaginationParams(skip=effective_skip, take=effective_take)


def create_paginated_response(
    items: list[Any],
    item_schema: type[BaseModel],
    total: int,
    skip: int,
    take: int,
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Create a standardized paginated response.

    Args:
        items: List of items (model instances, schemas or dicts)
        item_schema: Pydantic schema to validate items
        total: Total count of matching items
        skip: Current offset
        take: Page size
        request_id: Request ID for metadata

    Returns:
        Dict matching PaginatedResponse structure
    """
    validated_items = [
        item_schema.model_validate(item).model_dump(mode="json")
        for item in items
    ]

    pagination = PaginationInfo(
        total=total,
        skip=skip,
        take=take,
        has_more=(skip + len(items)) < total,
    )

    response = PaginatedResponse(
        data=validated_items,
        pagination=pagination,
        metadata=ResponseMetadata(request_id=request_id),
    )

    return response.model_dump(mode="json")
