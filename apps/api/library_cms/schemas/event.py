"""Pydantic schemas for events."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    """Request to create an event."""
    library_id: UUID | None = None
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    event_date: datetime
    end_date: datetime | None = None
    location: str = ""
    image_url: str | None = None
    is_published: bool | None = None
    is_approved: bool | None = None


class EventUpdate(BaseModel):
    """Partial event update."""
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    event_date: datetime | None = None
    end_date: datetime | None = None
    location: str | None = None
    image_url: str | None = None
    is_published: bool | None = None
    is_approved: bool | None = None


class EventRead(BaseModel):
    id: UUID
    library_id: UUID
    title: str
    description: str
    event_date: datetime
    end_date: datetime | None
    location: str
    image_url: str | None
    is_published: bool
    is_approved: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
