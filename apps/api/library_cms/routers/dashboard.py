"""Dashboard router - library admin widgets."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from library_cms.core.deps import get_db, require_roles, require_session_library
from library_cms.core.errors import NotFoundError
from library_cms.db.enums import Role
from library_cms.schemas.auth import UserSession
from library_cms.services import asset_upload_service, dashboard_service

router = APIRouter(prefix="/api/admin", tags=["Dashboard"])


# =============================================================================
# Schemas
# =============================================================================


class DashboardStats(BaseModel):
    totalStories: int
    publishedStories: int
    totalMedia: int
    approvedMedia: int
    totalEvents: int
    upcomingEvents: int
    totalMessages: int
    unreadMessages: int


class ActivityItem(BaseModel):
    type: str
    title: str
    timestamp: datetime | None
    status: str


class VisitorPoint(BaseModel):
    date: str
    visitors: int
    uniqueVisitors: int


class ContentPoint(BaseModel):
    name: str
    views: int
    engagement: int


class EngagementPoint(BaseModel):
    date: str
    avgTimeSpent: int
    interactionRate: int


class TopPerformers(BaseModel):
    topStory: str
    topStoryViews: int
    topGallery: str
    topGalleryViews: int
    avgTimeOnPage: str
    avgTimeIncrease: int


class AnalyticsResponse(BaseModel):
    visitorData: list[VisitorPoint]
    contentData: list[ContentPoint]
    engagementData: list[EngagementPoint]
    topPerformers: TopPerformers


class GallerySummary(BaseModel):
    galleryId: str
    itemCount: int
    approvedCount: int
    coverImage: str | None


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/dashboard/stats", response_model=DashboardStats)
def get_stats(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_session_library),
):
    return dashboard_service.get_stats(db, session.library_id)


@router.get("/dashboard/activity", response_model=list[ActivityItem])
def get_activity(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_session_library),
):
    return dashboard_service.get_activity(db, session.library_id)


@router.get("/dashboard/analytics", response_model=AnalyticsResponse)
def get_analytics(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_session_library),
):
    return dashboard_service.get_analytics(db, session.library_id)


@router.get("/galleries", response_model=list[GallerySummary])
def get_galleries(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_session_library),
):
    return dashboard_service.get_galleries(db, session.library_id)


@router.delete("/images")
def delete_image(
    url: str = Query(..., min_length=1, description="Public URL or storage key"),
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN])),
):
    """Remove an uploaded asset from storage. Super admins only; assets carry no owner."""
    if not asset_upload_service.delete_image(url):
        raise NotFoundError("Image")
    return {"deleted": True}
