"""
Note Query Criteria.

Translates a listing request into a filter predicate, ordering and page
window for the note store. The predicate is always a top-level AND of:

    visibility (deleted_at IS NULL, unless deleted notes are included)
    access     (one branch, or the OR of all three for the default filter)
    search     (only when a non-blank search term was given)

Ordering and pagination never raise: unknown sort fields fall back to
newest-first, and skip/take are clamped by normalize_pagination.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, and_, or_, true

from modules.backend.core.pagination import normalize_pagination
from modules.backend.core.utils import escape_like
from modules.backend.models.note import Note
from modules.backend.models.note_access import AccessType
from modules.backend.models.user import User
from modules.backend.schemas.note import AccessFilter, NoteListParams
from modules.backend.services.access_policy import (
    can_view,
    granted_to,
    note_is_active,
    owned_by,
    publicly_visible,
)

ORDERABLE_FIELDS = {
    "title": Note.title,
    "createdAt": Note.created_at,
    "updatedAt": Note.updated_at,
}


@dataclass(frozen=True)
class NoteCriteria:
    """Everything the store needs to run one listing query."""

    where: ColumnElement[bool]
    order_by: tuple[Any, ...]
    skip: int
    take: int


def visibility_predicate(include_deleted: bool) -> ColumnElement[bool]:
    return true() if include_deleted else note_is_active()


def access_predicate(access_filter: AccessFilter, requester_id: int) -> ColumnElement[bool]:
    """
    Access branch of the listing predicate for the requester.

    owned/edit/view/public select a single source of access; the default
    filter is the union of ownership, any active grant, and public notes.
    """
    if access_filter is AccessFilter.OWNED:
        return owned_by(requester_id)
    if access_filter is AccessFilter.EDIT:
        return granted_to(requester_id, AccessType.EDIT)
    if access_filter is AccessFilter.VIEW:
        return granted_to(requester_id, AccessType.VIEW)
    if access_filter is AccessFilter.PUBLIC:
        return publicly_visible()
    return can_view(requester_id)


def search_predicate(search: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on title, owner name or owner email."""
    pattern = f"%{escape_like(search)}%"
    return or_(
        Note.title.ilike(pattern, escape="\\"),
        Note.owner.has(
            or_(
                User.name.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
            )
        ),
    )


def build_order_by(order_by: str | None, sort_order: str | None) -> tuple[Any, ...]:
    """
    ORDER BY clauses for a listing.

    A recognized field sorts ascending unless sort_order is "desc".
    Anything else sorts by createdAt descending. Note.id breaks ties in
    the same direction so pages are stable.
    """
    column = ORDERABLE_FIELDS.get(order_by or "")
    if column is None:
        return (Note.created_at.desc(), Note.id.desc())

    descending = (sort_order or "").lower() == "desc"
    if descending:
        return (column.desc(), Note.id.desc())
    return (column.asc(), Note.id.asc())


def build_note_criteria(requester_id: int, params: NoteListParams) -> NoteCriteria:
    """
    Build the listing criteria for a requester.

    Args:
        requester_id: Identity substituted into every ownership/grant reference
        params: Listing request

    Returns:
        NoteCriteria with a conjunctive where clause, ordering and page window
    """
    conditions = [
        visibility_predicate(params.include_deleted),
        access_predicate(params.access_filter, requester_id),
    ]
    if params.search:
        conditions.append(search_predicate(params.search))

    page = normalize_pagination(params.skip, params.take)

    return NoteCriteria(
        where=and_(*conditions),
        order_by=build_order_by(params.order_by, params.sort_order),
        skip=page.skip,
        take=page.take,
    )
