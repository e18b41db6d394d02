"""Stories router - public reads, library-scoped writes, timelines."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from library_cms.core.deps import get_db, require_library_context
from library_cms.db.store import StoryFilters
from library_cms.schemas.auth import UserSession
from library_cms.schemas.story import (
    StoryCreate, StoryRead, StoryUpdate, TimelineCreate, TimelineRead,
)
from library_cms.services import story_service
from library_cms.utils.forms import parse_payload, read_upload, resolve_owner_library

router = APIRouter(prefix="/api/stories", tags=["stories"])


@router.get("", response_model=list[StoryRead])
def list_stories(
    library_id: UUID | None = Query(None),
    published: bool | None = Query(None),
    approved: bool | None = Query(None),
    featured: bool | None = Query(None),
    tags: list[str] | None = Query(None),
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return story_service.list_stories(
        db,
        StoryFilters(
            library_id=library_id,
            published=published,
            approved=approved,
            featured=featured,
            tags=tags,
            limit=limit,
            offset=offset,
        ),
    )


@router.get("/tags", response_model=list[str])
def list_story_tags(db: Session = Depends(get_db)):
    """Tags from published, approved stories only."""
    return story_service.list_story_tags(db)


@router.get("/{story_id}", response_model=StoryRead)
def get_story(story_id: UUID, db: Session = Depends(get_db)):
    return story_service.get_story(db, story_id)


@router.post("", response_model=StoryRead, status_code=201)
async def create_story(
    payload: str = Form("{}"),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    """Create a story. Multipart: ``payload`` (JSON) plus optional ``image``."""
    data = parse_payload(payload, StoryCreate)
    story = story_service.create_story(
        db,
        data.model_dump(exclude_none=True, exclude={"library_id"}),
        resolve_owner_library(session, data.library_id),
        image=await read_upload(image),
        actor_id=session.user_id,
    )
    db.commit()
    return story


@router.patch("/{story_id}", response_model=StoryRead)
async def update_story(
    story_id: UUID,
    payload: str = Form("{}"),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    data = parse_payload(payload, StoryUpdate)
    story = story_service.update_story(
        db,
        story_id,
        data.model_dump(exclude_unset=True, exclude_none=True),
        session.library_id,
        session.role,
        image=await read_upload(image),
        actor_id=session.user_id,
    )
    db.commit()
    return story


# =============================================================================
# Timelines
# =============================================================================

@router.get("/{story_id}/timelines", response_model=list[TimelineRead])
def list_timelines(story_id: UUID, db: Session = Depends(get_db)):
    return story_service.get_timelines(db, story_id)


@router.post("/{story_id}/timelines", response_model=TimelineRead, status_code=201)
def create_timeline(
    story_id: UUID,
    data: TimelineCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    timeline = story_service.create_timeline(
        db,
        story_id,
        data.model_dump(),
        session.library_id,
        session.role,
        actor_id=session.user_id,
    )
    db.commit()
    return timeline
