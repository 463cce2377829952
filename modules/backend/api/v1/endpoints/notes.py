"""
Notes API Endpoints.

REST API endpoints for notes. The caller's identity arrives in the
X-User-Id header and is passed explicitly to every service call.
"""

from typing import Any

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import DbSession, RequesterId, RequestId
from modules.backend.core.pagination import create_paginated_response
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.note import (
    AccessFilter,
    NoteAccessResponse,
    NoteCreate,
    NoteDetails,
    NoteListItem,
    NoteListParams,
    NotePublicUpdate,
    NoteResponse,
    NoteShareRequest,
    NoteUpdate,
)
from modules.backend.services.note import NoteService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note owned by the requester.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    requester_id: RequesterId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    service = NoteService(db)
    note = await service.create_note(requester_id, data)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.get(
    "",
    summary="List notes (paginated)",
    description=(
        "List notes the requester owns, was granted, or that are public. "
        "Content is omitted; take is clamped to 1..100."
    ),
)
async def list_notes(
    db: DbSession,
    requester_id: RequesterId,
    request_id: RequestId,
    skip: int | None = Query(default=None, description="Number of notes to skip"),
    take: int | None = Query(default=None, description="Page size, clamped to 1..100"),
    search: str | None = Query(
        default=None,
        max_length=255,
        description="Case-insensitive match on title, owner name or owner email",
    ),
    order_by: str | None = Query(
        default=None,
        alias="orderBy",
        description="title, createdAt or updatedAt; anything else means createdAt desc",
    ),
    sort_order: str | None = Query(default=None, alias="sortOrder", description="asc or desc"),
    access_filter: AccessFilter = Query(
        default=AccessFilter.DEFAULT,
        alias="accessFilter",
        description="Restrict to one source of access",
    ),
    include_deleted: bool = Query(
        default=False,
        alias="includeDeleted",
        description="Include soft-deleted notes",
    ),
) -> dict[str, Any]:
    """List notes visible to the requester."""
    service = NoteService(db)
    params = NoteListParams(
        skip=skip,
        take=take,
        search=search,
        order_by=order_by,
        sort_order=sort_order,
        access_filter=access_filter,
        include_deleted=include_deleted,
    )
    page = await service.list_notes(requester_id, params)

    return create_paginated_response(
        items=page.items,
        item_schema=NoteListItem,
        total=page.total,
        skip=page.skip,
        take=page.take,
        request_id=request_id,
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteDetails],
    summary="Get a note",
    description="Get a note with content. Missing and forbidden notes both return 403.",
)
async def get_note(
    note_id: int,
    db: DbSession,
    requester_id: RequesterId,
) -> ApiResponse[NoteDetails]:
    """Get a note by ID."""
    service = NoteService(db)
    note = await service.get_note(note_id, requester_id)
    return ApiResponse(data=note)


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update title, content or public flag. Requires ownership or EDIT access.",
)
async def update_note(
    note_id: int,
    data: NoteUpdate,
    db: DbSession,
    requester_id: RequesterId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    service = NoteService(db)
    note = await service.update_note(note_id, requester_id, data)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.patch(
    "/{note_id}/public",
    response_model=ApiResponse[NoteResponse],
    summary="Set public flag",
)
async def update_note_public(
    note_id: int,
    data: NotePublicUpdate,
    db: DbSession,
    requester_id: RequesterId,
) -> ApiResponse[NoteResponse]:
    """Publish or unpublish a note."""
    service = NoteService(db)
    note = await service.set_public(note_id, requester_id, data.is_public)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Delete a note",
    description="Soft-delete a note and revoke its grants. Owner only.",
)
async def delete_note(
    note_id: int,
    db: DbSession,
    requester_id: RequesterId,
) -> ApiResponse[NoteResponse]:
    """Soft-delete a note."""
    service = NoteService(db)
    note = await service.delete_note(note_id, requester_id)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.post(
    "/{note_id}/restore",
    response_model=ApiResponse[NoteResponse],
    summary="Restore a note",
    description="Restore a soft-deleted note and the grants deleted with it. Owner only.",
)
async def restore_note(
    note_id: int,
    db: DbSession,
    requester_id: RequesterId,
) -> ApiResponse[NoteResponse]:
    """Restore a soft-deleted note."""
    service = NoteService(db)
    note = await service.restore_note(note_id, requester_id)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.get(
    "/{note_id}/access",
    response_model=ApiResponse[list[NoteAccessResponse]],
    summary="List grants",
    description="Active grants on a note. Owner only.",
)
async def list_access(
    note_id: int,
    db: DbSession,
    requester_id: RequesterId,
) -> ApiResponse[list[NoteAccessResponse]]:
    """List who a note is shared with."""
    service = NoteService(db)
    grants = await service.list_access(note_id, requester_id)
    return ApiResponse(data=[NoteAccessResponse.model_validate(grant) for grant in grants])


@router.post(
    "/{note_id}/share",
    response_model=ApiResponse[NoteAccessResponse],
    summary="Share a note",
    description="Grant VIEW or EDIT access to a user by email or ID. Owner only.",
)
async def share_note(
    note_id: int,
    data: NoteShareRequest,
    db: DbSession,
    requester_id: RequesterId,
) -> ApiResponse[NoteAccessResponse]:
    """Share a note."""
    service = NoteService(db)
    grant = await service.share_note(note_id, requester_id, data.grantee, data.access_type)
    return ApiResponse(data=NoteAccessResponse.model_validate(grant))


@router.delete(
    "/{note_id}/access/{user_id}",
    status_code=204,
    summary="Revoke access",
    description="Revoke a user's grant on a note. Owner only.",
)
async def revoke_access(
    note_id: int,
    user_id: int,
    db: DbSession,
    requester_id: RequesterId,
) -> None:
    """Revoke a grant."""
    service = NoteService(db)
    await service.revoke_access(note_id, requester_id, user_id)
