"""Pydantic schemas for media items."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class MediaItemCreate(BaseModel):
    """Request to create a media item. url may be omitted when a file is uploaded."""
    library_id: UUID | None = None
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    media_type: str = Field("image", max_length=50)
    url: str | None = None
    gallery_id: str | None = Field(None, max_length=255)
    tags: list[str] = Field(default_factory=list)
    is_approved: bool | None = None


class MediaItemUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    media_type: str | None = Field(None, max_length=50)
    url: str | None = None
    gallery_id: str | None = Field(None, max_length=255)
    tags: list[str] | None = None
    is_approved: bool | None = None


class MediaItemRead(BaseModel):
    id: UUID
    library_id: UUID
    title: str
    description: str | None
    media_type: str
    url: str
    gallery_id: str | None
    tags: list[str]
    is_approved: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
