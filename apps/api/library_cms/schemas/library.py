"""Pydantic schemas for libraries."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class LibraryCreate(BaseModel):
    """Request to register a library."""
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    location: str = ""
    city: str = ""
    country: str = ""
    library_type: str = Field("public", max_length=50)
    website: str | None = None
    coordinates: dict[str, float] | None = None
    logo_url: str | None = None
    featured_image_url: str | None = None


class LibraryUpdate(BaseModel):
    """Partial library update. Approval flags only stick for super admins."""
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    location: str | None = None
    city: str | None = None
    country: str | None = None
    library_type: str | None = Field(None, max_length=50)
    website: str | None = None
    coordinates: dict[str, float] | None = None
    logo_url: str | None = None
    featured_image_url: str | None = None
    is_active: bool | None = None
    is_approved: bool | None = None
    is_featured: bool | None = None


class LibraryRead(BaseModel):
    id: UUID
    name: str
    description: str
    location: str
    city: str
    country: str
    library_type: str
    website: str | None
    coordinates: dict | None
    logo_url: str | None
    featured_image_url: str | None
    is_approved: bool
    is_active: bool
    is_featured: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
