"""Super admin moderation: approval queues, approve/reject, featuring, platform stats.

Approval changes go through the normal update path with super admin rights,
so ownership and workflow rules stay in one place.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.db import store
from library_cms.db.enums import Role
from library_cms.db.models import Library, MediaItem, Story
from library_cms.db.store import EventFilters, LibraryFilters, MediaFilters, StoryFilters
from library_cms.services import library_service, media_service, story_service

logger = logging.getLogger(__name__)

MODERATOR_ROLE = Role.SUPER_ADMIN


def list_pending_stories(db: Session) -> list[Story]:
    return store.list_stories(db, StoryFilters(approved=False))


def list_pending_media(db: Session) -> list[MediaItem]:
    return store.list_media_items(db, MediaFilters(approved=False))


def list_pending_libraries(db: Session) -> list[Library]:
    return store.list_libraries(db, LibraryFilters(approved=False))


def set_story_approval(db: Session, story_id: UUID, approved: bool, actor_id: UUID | None = None) -> Story:
    story = story_service.update_story(
        db, story_id, {"is_approved": approved}, None, MODERATOR_ROLE, actor_id=actor_id
    )
    logger.info("story_approved" if approved else "story_rejected", extra={"entity_id": str(story_id)})
    return story


def set_story_featured(db: Session, story_id: UUID, featured: bool, actor_id: UUID | None = None) -> Story:
    return story_service.update_story(
        db, story_id, {"is_featured": featured}, None, MODERATOR_ROLE, actor_id=actor_id
    )


def set_media_approval(db: Session, media_id: UUID, approved: bool, actor_id: UUID | None = None) -> MediaItem:
    item = media_service.update_media_item(
        db, media_id, {"is_approved": approved}, None, MODERATOR_ROLE, actor_id=actor_id
    )
    logger.info("media_approved" if approved else "media_rejected", extra={"entity_id": str(media_id)})
    return item


def set_library_approval(
    db: Session, library_id: UUID, approved: bool, actor_id: UUID | None = None
) -> Library:
    library = library_service.update_library(
        db, library_id, {"is_approved": approved}, None, MODERATOR_ROLE, actor_id=actor_id
    )
    logger.info(
        "library_approved" if approved else "library_rejected",
        extra={"entity_id": str(library_id)},
    )
    return library


def get_platform_stats(db: Session) -> dict[str, Any]:
    """Platform-wide counts for the super admin dashboard."""
    libraries = store.list_libraries(db)
    stories = store.list_stories(db)
    media = store.list_media_items(db)
    events = store.list_events(db, EventFilters())
    
    return {
        "totalLibraries": len(libraries),
        "pendingLibraries": sum(1 for lib in libraries if not lib.is_approved),
        "totalStories": len(stories),
        "pendingStories": sum(1 for s in stories if not s.is_approved),
        "totalMedia": len(media),
        "pendingMedia": sum(1 for m in media if not m.is_approved),
        "uniqueGalleries": len({m.gallery_id for m in media if m.gallery_id}),
        "totalEvents": len(events),
    }
