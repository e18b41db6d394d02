"""Persistence primitives for libraries and their content.

Reads return ``None`` for unknown ids and writes return ``None`` when the
database rejects them, so services decide which error the caller sees.
Only mapped columns are ever assigned; unknown keys in a payload are ignored.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete, inspect as sa_inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from library_cms.db.base import Base
from library_cms.db.models import (
    AnalyticsEvent, ContactMessage, Event, Library, MediaItem, MessageResponse,
    Story, Timeline,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

IMMUTABLE_COLUMNS = {"id", "created_at"}


# =============================================================================
# Filters
# =============================================================================

@dataclass
class LibraryFilters:
    approved: bool | None = None
    featured: bool | None = None
    limit: int | None = None
    offset: int = 0


@dataclass
class StoryFilters:
    library_id: UUID | None = None
    published: bool | None = None
    approved: bool | None = None
    featured: bool | None = None
    tags: list[str] | None = None
    limit: int | None = None
    offset: int = 0


@dataclass
class MediaFilters:
    library_id: UUID | None = None
    gallery_id: str | None = None
    approved: bool | None = None
    media_type: str | None = None
    tags: list[str] | None = None
    limit: int | None = None
    offset: int = 0


@dataclass
class EventFilters:
    library_id: UUID | None = None
    published: bool | None = None
    approved: bool | None = None
    limit: int | None = None
    offset: int = 0


@dataclass
class ContactFilters:
    library_id: UUID | None = None
    limit: int | None = None
    offset: int = 0


# =============================================================================
# Helpers
# =============================================================================

def _column_names(model: type[Base]) -> set[str]:
    return {column.key for column in sa_inspect(model).column_attrs}


def _assign(instance: Base, data: dict[str, Any], *, creating: bool) -> None:
    columns = _column_names(type(instance))
    for key, value in data.items():
        if key not in columns:
            continue
        if not creating and key in IMMUTABLE_COLUMNS:
            continue
        setattr(instance, key, value)


def _page(query, limit: int | None, offset: int):
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query


def _page_rows(rows: Sequence[ModelT], limit: int | None, offset: int) -> list[ModelT]:
    rows = list(rows)[offset:]
    return rows if limit is None else rows[:limit]


def _matches_tags(item_tags: list[str] | None, wanted: list[str]) -> bool:
    return bool(set(item_tags or []) & set(wanted))


def _create(db: Session, model: type[ModelT], data: dict[str, Any]) -> ModelT:
    instance = model()
    _assign(instance, data, creating=True)
    db.add(instance)
    db.flush()
    db.refresh(instance)
    return instance


def _update(db: Session, model: type[ModelT], entity_id: UUID, patch: dict[str, Any]) -> ModelT | None:
    instance = db.get(model, entity_id)
    if instance is None:
        return None
    _assign(instance, patch, creating=False)
    try:
        db.flush()
    except SQLAlchemyError:
        logger.exception(
            "store_update_failed",
            extra={"table": model.__tablename__, "entity_id": str(entity_id)},
        )
        db.rollback()
        return None
    db.refresh(instance)
    return instance


# =============================================================================
# Libraries
# =============================================================================

def get_library(db: Session, library_id: UUID) -> Library | None:
    return db.get(Library, library_id)


def list_libraries(db: Session, filters: LibraryFilters | None = None) -> list[Library]:
    filters = filters or LibraryFilters()
    query = select(Library)
    if filters.approved is not None:
        query = query.where(Library.is_approved.is_(filters.approved))
    if filters.featured is not None:
        query = query.where(Library.is_featured.is_(filters.featured))
    query = _page(query.order_by(Library.name), filters.limit, filters.offset)
    return list(db.execute(query).scalars().all())


def create_library(db: Session, data: dict[str, Any]) -> Library:
    return _create(db, Library, data)


def update_library(db: Session, library_id: UUID, patch: dict[str, Any]) -> Library | None:
    return _update(db, Library, library_id, patch)


# =============================================================================
# Stories & Timelines
# =============================================================================

def get_story(db: Session, story_id: UUID) -> Story | None:
    return db.get(Story, story_id)


def list_stories(db: Session, filters: StoryFilters | None = None) -> list[Story]:
    """Stories newest first. Tag filtering keeps stories sharing any requested tag."""
    filters = filters or StoryFilters()
    query = select(Story)
    if filters.library_id:
        query = query.where(Story.library_id == filters.library_id)
    if filters.published is not None:
        query = query.where(Story.is_published.is_(filters.published))
    if filters.approved is not None:
        query = query.where(Story.is_approved.is_(filters.approved))
    if filters.featured is not None:
        query = query.where(Story.is_featured.is_(filters.featured))
    query = query.order_by(Story.created_at.desc())

    if filters.tags:
        rows = db.execute(query).scalars().all()
        matching = [s for s in rows if _matches_tags(s.tags, filters.tags)]
        return _page_rows(matching, filters.limit, filters.offset)

    query = _page(query, filters.limit, filters.offset)
    return list(db.execute(query).scalars().all())


def create_story(db: Session, data: dict[str, Any]) -> Story:
    return _create(db, Story, data)


def update_story(db: Session, story_id: UUID, patch: dict[str, Any]) -> Story | None:
    return _update(db, Story, story_id, patch)


def list_timelines(db: Session, story_id: UUID) -> list[Timeline]:
    query = (
        select(Timeline)
        .where(Timeline.story_id == story_id)
        .order_by(Timeline.created_at)
    )
    return list(db.execute(query).scalars().all())


def create_timeline(db: Session, data: dict[str, Any]) -> Timeline:
    return _create(db, Timeline, data)


# =============================================================================
# Media
# =============================================================================

def get_media_item(db: Session, media_id: UUID) -> MediaItem | None:
    return db.get(MediaItem, media_id)


def list_media_items(db: Session, filters: MediaFilters | None = None) -> list[MediaItem]:
    filters = filters or MediaFilters()
    query = select(MediaItem)
    if filters.library_id:
        query = query.where(MediaItem.library_id == filters.library_id)
    if filters.gallery_id:
        query = query.where(MediaItem.gallery_id == filters.gallery_id)
    if filters.approved is not None:
        query = query.where(MediaItem.is_approved.is_(filters.approved))
    if filters.media_type:
        query = query.where(MediaItem.media_type == filters.media_type)
    query = query.order_by(MediaItem.created_at.desc())

    if filters.tags:
        rows = db.execute(query).scalars().all()
        matching = [m for m in rows if _matches_tags(m.tags, filters.tags)]
        return _page_rows(matching, filters.limit, filters.offset)

    query = _page(query, filters.limit, filters.offset)
    return list(db.execute(query).scalars().all())


def create_media_item(db: Session, data: dict[str, Any]) -> MediaItem:
    return _create(db, MediaItem, data)


def update_media_item(db: Session, media_id: UUID, patch: dict[str, Any]) -> MediaItem | None:
    return _update(db, MediaItem, media_id, patch)


# =============================================================================
# Events
# =============================================================================

def get_event(db: Session, event_id: UUID) -> Event | None:
    return db.get(Event, event_id)


def list_events(db: Session, filters: EventFilters | None = None) -> list[Event]:
    """Events in calendar order (soonest first)."""
    filters = filters or EventFilters()
    query = select(Event)
    if filters.library_id:
        query = query.where(Event.library_id == filters.library_id)
    if filters.published is not None:
        query = query.where(Event.is_published.is_(filters.published))
    if filters.approved is not None:
        query = query.where(Event.is_approved.is_(filters.approved))
    query = _page(query.order_by(Event.event_date), filters.limit, filters.offset)
    return list(db.execute(query).scalars().all())


def create_event(db: Session, data: dict[str, Any]) -> Event:
    return _create(db, Event, data)


def update_event(db: Session, event_id: UUID, patch: dict[str, Any]) -> Event | None:
    return _update(db, Event, event_id, patch)


def delete_event(db: Session, event_id: UUID) -> bool:
    """Delete an event. Returns False when no row matched."""
    result = db.execute(delete(Event).where(Event.id == event_id))
    db.flush()
    return result.rowcount > 0


# =============================================================================
# Contact Messages
# =============================================================================

def get_contact_message(db: Session, message_id: UUID) -> ContactMessage | None:
    return db.get(ContactMessage, message_id)


def list_contact_messages(db: Session, filters: ContactFilters | None = None) -> list[ContactMessage]:
    filters = filters or ContactFilters()
    query = select(ContactMessage)
    if filters.library_id:
        query = query.where(ContactMessage.library_id == filters.library_id)
    query = query.order_by(ContactMessage.created_at.desc())
    query = _page(query, filters.limit, filters.offset)
    return list(db.execute(query).scalars().all())


def create_contact_message(db: Session, data: dict[str, Any]) -> ContactMessage:
    return _create(db, ContactMessage, data)


def update_contact_message(
    db: Session, message_id: UUID, patch: dict[str, Any]
) -> ContactMessage | None:
    return _update(db, ContactMessage, message_id, patch)


def create_message_response(db: Session, data: dict[str, Any]) -> MessageResponse:
    return _create(db, MessageResponse, data)


# =============================================================================
# Analytics
# =============================================================================

def list_analytics(
    db: Session,
    library_id: UUID,
    since: datetime | None = None,
) -> list[AnalyticsEvent]:
    query = select(AnalyticsEvent).where(AnalyticsEvent.library_id == library_id)
    if since is not None:
        query = query.where(AnalyticsEvent.date >= since)
    query = query.order_by(AnalyticsEvent.date)
    return list(db.execute(query).scalars().all())


def create_analytics_event(db: Session, data: dict[str, Any]) -> AnalyticsEvent:
    return _create(db, AnalyticsEvent, data)


def get_daily_analytics(
    db: Session,
    library_id: UUID,
    page_type: str,
    story_id: UUID | None,
    day: datetime,
) -> AnalyticsEvent | None:
    """The counter row for one page on one day, if it exists."""
    query = select(AnalyticsEvent).where(
        AnalyticsEvent.library_id == library_id,
        AnalyticsEvent.page_type == page_type,
        AnalyticsEvent.date == day,
    )
    if story_id is None:
        query = query.where(AnalyticsEvent.story_id.is_(None))
    else:
        query = query.where(AnalyticsEvent.story_id == story_id)
    return db.execute(query).scalars().first()


def increment_analytics(db: Session, row: AnalyticsEvent) -> AnalyticsEvent:
    row.views = (row.views or 0) + 1
    db.flush()
    return row
