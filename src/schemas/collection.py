"""Pydantic schemas for collection endpoints."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CollectionCreate(BaseModel):
    """
    Schema for creating a collection.

    Fields are deliberately lenient: emptiness, parent ownership and parent id
    type are checked by the service so each maps to its own result status.
    ``parent_id`` accepts any JSON value unchanged; anything other than the id
    of a collection the caller owns is rejected as forbidden, not as malformed.
    """

    name: str | None = None
    description: str = Field(default="", max_length=2000)
    color: str | None = Field(default=None, max_length=50)
    is_public: bool = False
    parent_id: Any = None


class MemberUser(BaseModel):
    """Display fields of a collection member."""

    model_config = ConfigDict(from_attributes=True)

    username: str | None
    name: str


class CollectionMember(BaseModel):
    """A membership row with its nested user display fields."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    collection_id: int
    can_create: bool
    can_update: bool
    can_delete: bool
    user: MemberUser


class CollectionResponse(BaseModel):
    """Schema for a collection with link count and members."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    color: str
    is_public: bool
    owner_id: int
    parent_id: int | None
    created_at: datetime
    updated_at: datetime
    link_count: int = 0
    members: list[CollectionMember] = []
