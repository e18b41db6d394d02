"""Super admin router - moderation queues and platform stats."""

from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from library_cms.core.deps import get_db, require_roles
from library_cms.db.enums import Role
from library_cms.schemas.auth import UserSession
from library_cms.schemas.library import LibraryRead
from library_cms.schemas.media import MediaItemRead
from library_cms.schemas.story import StoryRead
from library_cms.services import moderation_service

router = APIRouter(prefix="/api/superadmin", tags=["superadmin"])

require_super_admin = require_roles([Role.SUPER_ADMIN])


class PlatformStats(BaseModel):
    totalLibraries: int
    pendingLibraries: int
    totalStories: int
    pendingStories: int
    totalMedia: int
    pendingMedia: int
    uniqueGalleries: int
    totalEvents: int


class FeatureRequest(BaseModel):
    featured: bool = True


@router.get("/stats", response_model=PlatformStats)
def get_platform_stats(
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_super_admin),
):
    return moderation_service.get_platform_stats(db)


# =============================================================================
# Moderation queues
# =============================================================================

@router.get("/moderation/stories", response_model=list[StoryRead])
def pending_stories(db: Session = Depends(get_db), _: UserSession = Depends(require_super_admin)):
    return moderation_service.list_pending_stories(db)


@router.get("/moderation/media", response_model=list[MediaItemRead])
def pending_media(db: Session = Depends(get_db), _: UserSession = Depends(require_super_admin)):
    return moderation_service.list_pending_media(db)


@router.get("/moderation/libraries", response_model=list[LibraryRead])
def pending_libraries(db: Session = Depends(get_db), _: UserSession = Depends(require_super_admin)):
    return moderation_service.list_pending_libraries(db)


@router.post("/stories/{story_id}/approve", response_model=StoryRead)
def approve_story(
    story_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_super_admin),
):
    story = moderation_service.set_story_approval(db, story_id, True, actor_id=session.user_id)
    db.commit()
    return story


@router.post("/stories/{story_id}/reject", response_model=StoryRead)
def reject_story(
    story_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_super_admin),
):
    story = moderation_service.set_story_approval(db, story_id, False, actor_id=session.user_id)
    db.commit()
    return story


@router.post("/stories/{story_id}/feature", response_model=StoryRead)
def feature_story(
    story_id: UUID,
    data: FeatureRequest,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_super_admin),
):
    story = moderation_service.set_story_featured(db, story_id, data.featured, actor_id=session.user_id)
    db.commit()
    return story


@router.post("/media/{media_id}/approve", response_model=MediaItemRead)
def approve_media(
    media_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_super_admin),
):
    item = moderation_service.set_media_approval(db, media_id, True, actor_id=session.user_id)
    db.commit()
    return item


@router.post("/media/{media_id}/reject", response_model=MediaItemRead)
def reject_media(
    media_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_super_admin),
):
    item = moderation_service.set_media_approval(db, media_id, False, actor_id=session.user_id)
    db.commit()
    return item


@router.post("/libraries/{library_id}/approve", response_model=LibraryRead)
def approve_library(
    library_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_super_admin),
):
    library = moderation_service.set_library_approval(db, library_id, True, actor_id=session.user_id)
    db.commit()
    return library


@router.post("/libraries/{library_id}/reject", response_model=LibraryRead)
def reject_library(
    library_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_super_admin),
):
    library = moderation_service.set_library_approval(db, library_id, False, actor_id=session.user_id)
    db.commit()
    return library
