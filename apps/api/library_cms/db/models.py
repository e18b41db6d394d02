"""SQLAlchemy ORM models for libraries and their published content."""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON, Boolean, ForeignKey, Index, Integer, String, Text, Uuid
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_cms.db.base import Base
from library_cms.db.enums import DEFAULT_RESPONSE_STATUS
from library_cms.utils.datetime_parsing import utc_now


# =============================================================================
# Tenant
# =============================================================================

class Library(Base):
    """
    A library (tenant). Every piece of content belongs to exactly one.
    
    New libraries start unapproved and stay hidden from the public
    directory until a super admin approves them.
    """
    __tablename__ = "libraries"
    __table_args__ = (
        Index("idx_libraries_approved", "is_approved"),
    )
    
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    library_type: Mapped[str] = mapped_column(String(50), nullable=False, default="public")
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    featured_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(Text, nullable=True)
    coordinates: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )


# =============================================================================
# Content Models
# =============================================================================

class Story(Base):
    """A long-form story. Publicly visible once both published and approved."""
    __tablename__ = "stories"
    __table_args__ = (
        Index("idx_stories_library_created", "library_id", "created_at"),
        Index("idx_stories_public", "is_published", "is_approved"),
    )
    
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    library_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("libraries.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    featured_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    published_at: Mapped[datetime | None] = mapped_column(nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )
    
    # Relationships
    library: Mapped["Library"] = relationship()
    timelines: Mapped[list["Timeline"]] = relationship(
        back_populates="story", cascade="all, delete-orphan"
    )


class Timeline(Base):
    """Ordered list of dated points attached to a story."""
    __tablename__ = "timelines"
    
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    story_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    timeline_points: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )
    
    story: Mapped["Story"] = relationship(back_populates="timelines")


class MediaItem(Base):
    """An image, video or audio file. Galleries are groups sharing a gallery_id."""
    __tablename__ = "media_items"
    __table_args__ = (
        Index("idx_media_library_created", "library_id", "created_at"),
        Index("idx_media_gallery", "gallery_id"),
    )
    
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    library_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("libraries.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    media_type: Mapped[str] = mapped_column(String(50), nullable=False, default="image")
    url: Mapped[str] = mapped_column(Text, nullable=False)
    gallery_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )


class Event(Base):
    """A dated library event."""
    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_library_date", "library_id", "event_date"),
    )
    
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    library_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("libraries.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    event_date: Mapped[datetime] = mapped_column(nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )


# =============================================================================
# Contact & Analytics Models
# =============================================================================

class ContactMessage(Base):
    """Public contact-form submission addressed to a library."""
    __tablename__ = "contact_messages"
    __table_args__ = (
        Index("idx_contact_library_created", "library_id", "created_at"),
    )
    
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    library_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("libraries.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    response_status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_RESPONSE_STATUS.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    
    responses: Mapped[list["MessageResponse"]] = relationship(
        back_populates="contact_message", cascade="all, delete-orphan"
    )


class MessageResponse(Base):
    """An emailed reply to a contact message."""
    __tablename__ = "message_responses"
    
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    contact_message_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("contact_messages.id", ondelete="CASCADE"), nullable=False, index=True
    )
    responded_by: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    email_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email_sent_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    
    contact_message: Mapped["ContactMessage"] = relationship(back_populates="responses")


class AnalyticsEvent(Base):
    """Daily view counter for a public page of a library."""
    __tablename__ = "analytics"
    __table_args__ = (
        Index("idx_analytics_library_date", "library_id", "date"),
    )
    
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    library_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("libraries.id", ondelete="CASCADE"), nullable=False
    )
    story_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("stories.id", ondelete="CASCADE"), nullable=True
    )
    page_type: Mapped[str] = mapped_column(String(50), nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    date: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
