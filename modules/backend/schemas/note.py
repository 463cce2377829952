"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

import enum
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.backend.models.note_access import AccessType
from modules.backend.schemas.user import UserSummary


class AccessFilter(str, enum.Enum):
    """Which source of access a note listing is restricted to."""

    DEFAULT = "default"
    OWNED = "owned"
    EDIT = "edit"
    VIEW = "view"
    PUBLIC = "public"


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title",
        examples=["Draft"],
    )
    content: str = Field(
        default="",
        description="Note content",
        examples=["This is the content of my note."],
    )
    is_public: bool = Field(
        default=False,
        description="Whether any user may read the note",
    )


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. Any subset of fields."""

    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        description="Note content",
    )
    is_public: bool | None = Field(
        default=None,
        description="Public flag",
    )


class NotePublicUpdate(BaseModel):
    """Schema for toggling only the public flag."""

    is_public: bool


class NoteShareRequest(BaseModel):
    """Schema for sharing a note with another user."""

    grantee: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Email or numeric ID of the user to share with",
        examples=["bob@example.com", "2"],
    )
    access_type: AccessType = Field(description="VIEW or EDIT")

    @field_validator("grantee", mode="before")
    @classmethod
    def _coerce_grantee(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value


class NoteListParams(BaseModel):
    """Listing request for notes visible to a requester."""

    skip: int | None = None
    take: int | None = None
    search: str | None = None
    order_by: str | None = None
    sort_order: str | None = None
    access_filter: AccessFilter = AccessFilter.DEFAULT
    include_deleted: bool = False

    @field_validator("search")
    @classmethod
    def _trim_search(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class UserAccess(BaseModel):
    """The requester's own grant on a note."""

    access_type: AccessType

    model_config = ConfigDict(from_attributes=True)


class NoteResponse(BaseModel):
    """Schema for a note row in API responses."""

    id: int = Field(description="Note identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    is_public: bool = Field(description="Whether the note is public")
    owner_id: int = Field(description="Owning user")
    created_by: int = Field(description="User who created the note")
    updated_by: int = Field(description="User who last updated the note")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")
    deleted_at: datetime | None = Field(description="Soft-deletion timestamp")

    model_config = ConfigDict(from_attributes=True)


class NoteListItem(BaseModel):
    """Note summary for listings. Content is deliberately absent."""

    id: int
    title: str
    is_public: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    owner: UserSummary
    user_access: UserAccess | None = None

    model_config = ConfigDict(from_attributes=True)


class NoteDetails(NoteListItem):
    """Full note as seen by a requester allowed to view it."""

    content: str
    permission: Literal["OWNER", "EDIT", "VIEW", "PUBLIC"] | None = None


class NoteAccessResponse(BaseModel):
    """An active grant on a note."""

    id: int
    note_id: int
    access_type: AccessType
    user: UserSummary
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
