"""Story service: library-scoped CRUD, public tag listing, and timelines."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.core.library_access import check_write_access
from library_cms.core.policies import get_policy
from library_cms.core.structured_logging import build_log_context
from library_cms.db import store
from library_cms.db.enums import Role
from library_cms.db.models import Story, Timeline
from library_cms.db.store import StoryFilters
from library_cms.services.asset_upload_service import UploadedAsset
from library_cms.services.scoped_resource import ScopedResourceService, StoreOps

logger = logging.getLogger(__name__)

POLICY = get_policy("stories")

_stories = ScopedResourceService(
    POLICY,
    StoreOps(get=store.get_story, create=store.create_story, update=store.update_story),
)


def create_story(
    db: Session,
    data: dict[str, Any],
    library_id: UUID | None,
    image: UploadedAsset | None = None,
    actor_id: UUID | None = None,
) -> Story:
    """Create a story. Always starts unapproved and unfeatured."""
    return _stories.create(
        db, data, library_id, {"featured_image_url": image}, actor_id=actor_id
    )


def update_story(
    db: Session,
    story_id: UUID,
    patch: dict[str, Any],
    actor_library_id: UUID | None,
    actor_role: Role | str | None,
    image: UploadedAsset | None = None,
    actor_id: UUID | None = None,
) -> Story:
    return _stories.update(
        db,
        story_id,
        patch,
        actor_library_id,
        actor_role,
        {"featured_image_url": image},
        actor_id=actor_id,
    )


def get_story(db: Session, story_id: UUID) -> Story:
    return _stories.get(db, story_id)


def list_stories(db: Session, filters: StoryFilters | None = None) -> list[Story]:
    return store.list_stories(db, filters)


def list_story_tags(db: Session) -> list[str]:
    """Sorted tag union over stories that are both published and approved."""
    stories = store.list_stories(db, StoryFilters(published=True, approved=True))
    return sorted({tag for story in stories for tag in (story.tags or [])})


# =============================================================================
# Timelines
# =============================================================================

def get_timelines(db: Session, story_id: UUID) -> list[Timeline]:
    get_story(db, story_id)
    return store.list_timelines(db, story_id)


def create_timeline(
    db: Session,
    story_id: UUID,
    data: dict[str, Any],
    actor_library_id: UUID | None,
    actor_role: Role | str | None,
    actor_id: UUID | None = None,
) -> Timeline:
    """Attach a timeline to a story the actor may edit."""
    story = get_story(db, story_id)
    check_write_access(POLICY, actor_role, actor_library_id, story)
    
    timeline = store.create_timeline(db, {**data, "story_id": story_id})
    logger.info(
        "timeline_created",
        extra=build_log_context(
            user_id=actor_id, library_id=story.library_id, entity_id=timeline.id
        ),
    )
    return timeline
