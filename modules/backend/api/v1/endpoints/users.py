"""
Users API Endpoints.

User registration, lookup and lifecycle (soft delete, restore,
permanent delete).
"""

from typing import Any

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import DbSession, RequestId
from modules.backend.core.pagination import create_paginated_response
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.user import UserCreate, UserListParams, UserResponse, UserUpdate
from modules.backend.services.user import UserService

router = APIRouter()


def _list_params(
    skip: int | None,
    take: int | None,
    search: str | None,
    order_by: str | None,
    sort_order: str | None,
) -> UserListParams:
    return UserListParams(
        skip=skip,
        take=take,
        search=search,
        order_by=order_by,
        sort_order=sort_order,
    )


@router.get(
    "",
    summary="List users (paginated)",
    description="Active users, searchable by email or name. Ordered by id unless orderBy is id, email or name.",
)
async def list_users(
    db: DbSession,
    request_id: RequestId,
    skip: int | None = Query(default=None),
    take: int | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    order_by: str | None = Query(default=None, alias="orderBy"),
    sort_order: str | None = Query(default=None, alias="sortOrder"),
) -> dict[str, Any]:
    """List active users."""
    service = UserService(db)
    page = await service.list_users(_list_params(skip, take, search, order_by, sort_order))
    return create_paginated_response(
        items=page.items,
        item_schema=UserResponse,
        total=page.total,
        skip=page.skip,
        take=page.take,
        request_id=request_id,
    )


@router.get(
    "/deleted",
    summary="List deleted users (paginated)",
)
async def list_deleted_users(
    db: DbSession,
    request_id: RequestId,
    skip: int | None = Query(default=None),
    take: int | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    order_by: str | None = Query(default=None, alias="orderBy"),
    sort_order: str | None = Query(default=None, alias="sortOrder"),
) -> dict[str, Any]:
    """List soft-deleted users."""
    service = UserService(db)
    page = await service.list_deleted_users(_list_params(skip, take, search, order_by, sort_order))
    return create_paginated_response(
        items=page.items,
        item_schema=UserResponse,
        total=page.total,
        skip=page.skip,
        take=page.take,
        request_id=request_id,
    )


@router.get(
    "/email/{email}",
    response_model=ApiResponse[UserResponse],
    summary="Get a user by email",
)
async def get_user_by_email(email: str, db: DbSession) -> ApiResponse[UserResponse]:
    """Get an active user by email."""
    service = UserService(db)
    user = await service.find_by_email(email)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Get a user",
)
async def get_user(user_id: int, db: DbSession) -> ApiResponse[UserResponse]:
    """Get an active user by ID."""
    service = UserService(db)
    user = await service.get_user(user_id)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    status_code=201,
    summary="Register a user",
)
async def create_user(data: UserCreate, db: DbSession) -> ApiResponse[UserResponse]:
    """Register a user."""
    service = UserService(db)
    user = await service.create_user(data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.put(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Update a user",
)
async def update_user(user_id: int, data: UserUpdate, db: DbSession) -> ApiResponse[UserResponse]:
    """Update a user."""
    service = UserService(db)
    user = await service.update_user(user_id, data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.delete(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Soft-delete a user",
    description="Marks the user deleted. Their notes are kept.",
)
async def delete_user(user_id: int, db: DbSession) -> ApiResponse[UserResponse]:
    """Soft-delete a user."""
    service = UserService(db)
    user = await service.delete_user(user_id)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.put(
    "/{user_id}/restore",
    response_model=ApiResponse[UserResponse],
    summary="Restore a user",
)
async def restore_user(user_id: int, db: DbSession) -> ApiResponse[UserResponse]:
    """Restore a soft-deleted user."""
    service = UserService(db)
    user = await service.restore_user(user_id)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.delete(
    "/{user_id}/permanent",
    response_model=ApiResponse[UserResponse],
    summary="Permanently delete a user",
    description="Removes the user row and their grants. Fails while the user owns notes.",
)
async def permanently_delete_user(user_id: int, db: DbSession) -> ApiResponse[UserResponse]:
    """Permanently delete a user."""
    service = UserService(db)
    user = await service.permanently_delete_user(user_id)
    return ApiResponse(data=UserResponse.model_validate(user))
