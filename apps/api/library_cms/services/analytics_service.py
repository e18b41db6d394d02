"""Page-view tracking for public library pages."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.core.errors import NotFoundError
from library_cms.db import store
from library_cms.db.enums import PageType
from library_cms.db.models import AnalyticsEvent
from library_cms.utils.datetime_parsing import utc_now


def record_view(
    db: Session,
    library_id: UUID,
    page_type: PageType | str,
    story_id: UUID | None = None,
    now: datetime | None = None,
) -> AnalyticsEvent:
    """
    Count one view of a page for today.
    
    Views are aggregated per (library, page type, story, day) row.
    """
    if store.get_library(db, library_id) is None:
        raise NotFoundError("Library")
    if story_id is not None and store.get_story(db, story_id) is None:
        raise NotFoundError("Story")
    
    page_value = page_type.value if isinstance(page_type, PageType) else page_type
    now = now or utc_now()
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    
    row = store.get_daily_analytics(db, library_id, page_value, story_id, day_start)
    if row is None:
        return store.create_analytics_event(
            db,
            {
                "library_id": library_id,
                "story_id": story_id,
                "page_type": page_value,
                "views": 1,
                "date": day_start,
            },
        )
    return store.increment_analytics(db, row)
