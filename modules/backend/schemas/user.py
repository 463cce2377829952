"""
User Schemas.

Pydantic schemas for user API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    """Schema for registering a user."""

    email: EmailStr
    name: str | None = Field(default=None, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)


class UserUpdate(BaseModel):
    """Schema for updating a user. Any subset of fields."""

    email: EmailStr | None = None
    name: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, min_length=8, max_length=128)


class UserListParams(BaseModel):
    """Listing request for users."""

    skip: int | None = None
    take: int | None = None
    search: str | None = None
    order_by: str | None = None
    sort_order: str | None = None


class UserSummary(BaseModel):
    """Owner/grantee projection embedded in note responses."""

    id: int
    name: str | None
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Schema for user in API responses. Never exposes the password hash."""

    id: int
    email: str
    name: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None

    model_config = ConfigDict(from_attributes=True)
