"""Pydantic schemas for stories and their timelines."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class StoryCreate(BaseModel):
    """Request to create a story. library_id is only honored for super admins."""
    library_id: UUID | None = None
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    summary: str = ""
    featured_image_url: str | None = None
    is_published: bool = False
    published_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    # Accepted for client compatibility; creation always resets these
    is_approved: bool | None = None
    is_featured: bool | None = None


class StoryUpdate(BaseModel):
    """Partial story update."""
    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = None
    summary: str | None = None
    featured_image_url: str | None = None
    is_published: bool | None = None
    published_at: datetime | None = None
    tags: list[str] | None = None
    is_approved: bool | None = None
    is_featured: bool | None = None


class StoryRead(BaseModel):
    id: UUID
    library_id: UUID
    title: str
    content: str
    summary: str
    featured_image_url: str | None
    is_published: bool
    is_approved: bool
    is_featured: bool
    published_at: datetime | None
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TimelineCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    timeline_points: list[dict[str, Any]] = Field(default_factory=list)


class TimelineRead(BaseModel):
    id: UUID
    story_id: UUID
    title: str
    description: str | None
    timeline_points: list[dict[str, Any]]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
