"""Pydantic schemas for page-view tracking."""

from uuid import UUID

from pydantic import BaseModel

from library_cms.db.enums import PageType


class TrackViewRequest(BaseModel):
    library_id: UUID
    page_type: PageType
    story_id: UUID | None = None
