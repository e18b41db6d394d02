"""Analytics router - public page-view tracking."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from library_cms.core.deps import get_db
from library_cms.schemas.analytics import TrackViewRequest
from library_cms.services import analytics_service

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.post("/track", status_code=204)
def track_view(data: TrackViewRequest, db: Session = Depends(get_db)) -> None:
    analytics_service.record_view(db, data.library_id, data.page_type, data.story_id)
    db.commit()
