"""Library admin dashboard: counts, recent activity, analytics and galleries.

Everything here is a read-only reduction over store list calls; nothing is cached.
"""

import random
from datetime import date, datetime, timedelta
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.db import store
from library_cms.db.enums import PageType
from library_cms.db.store import ContactFilters, EventFilters, MediaFilters, StoryFilters
from library_cms.utils.datetime_parsing import (
    ensure_utc, short_day_label, timestamp_or_epoch, utc_now,
)

ACTIVITY_PER_SOURCE = 5
ACTIVITY_LIMIT = 10
VISITOR_WINDOW_DAYS = 30
ENGAGEMENT_WINDOW_DAYS = 7
UNIQUE_VISITOR_RATIO = 0.7

CONTENT_ENGAGEMENT = {
    "Stories": 75,
    "Gallery": 85,
    "Library Profile": 65,
}


# =============================================================================
# Demo metrics
# =============================================================================

class DemoMetricsGenerator(Protocol):
    """Source of placeholder engagement numbers we do not track yet."""

    def engagement_for_day(self, day: date) -> dict[str, int]: ...


class RandomDemoMetrics:
    """Random filler: 120-419s average time, 60-99% interaction rate."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def engagement_for_day(self, day: date) -> dict[str, int]:
        return {
            "avgTimeSpent": self.rng.randint(120, 419),
            "interactionRate": self.rng.randint(60, 99),
        }


# =============================================================================
# Stats & Activity
# =============================================================================

def get_stats(db: Session, library_id: UUID, now: datetime | None = None) -> dict[str, int]:
    """Content and inbox counts for one library."""
    now = now or utc_now()
    stories = store.list_stories(db, StoryFilters(library_id=library_id))
    media = store.list_media_items(db, MediaFilters(library_id=library_id))
    events = store.list_events(db, EventFilters(library_id=library_id))
    messages = store.list_contact_messages(db, ContactFilters(library_id=library_id))
    
    return {
        "totalStories": len(stories),
        "publishedStories": sum(1 for s in stories if s.is_published),
        "totalMedia": len(media),
        "approvedMedia": sum(1 for m in media if m.is_approved),
        "totalEvents": len(events),
        "upcomingEvents": sum(1 for e in events if ensure_utc(e.event_date) > now),
        "totalMessages": len(messages),
        "unreadMessages": sum(1 for m in messages if not m.is_read),
    }


def get_activity(db: Session, library_id: UUID) -> list[dict[str, Any]]:
    """
    Most recent items across stories, messages and events.
    
    Takes the latest five of each, merges them in that order, then sorts by
    timestamp descending. Equal timestamps keep merge order; missing
    timestamps sort as the epoch.
    """
    stories = store.list_stories(db, StoryFilters(library_id=library_id, limit=ACTIVITY_PER_SOURCE))
    messages = store.list_contact_messages(
        db, ContactFilters(library_id=library_id, limit=ACTIVITY_PER_SOURCE)
    )
    events = store.list_events(db, EventFilters(library_id=library_id, limit=ACTIVITY_PER_SOURCE))
    
    items: list[dict[str, Any]] = []
    for story in stories:
        items.append({
            "type": "story",
            "title": f"Story updated: {story.title}",
            "timestamp": ensure_utc(story.updated_at or story.created_at),
            "status": "published" if story.is_published else "draft",
        })
    for message in messages:
        items.append({
            "type": "message",
            "title": f"New inquiry: {message.subject}",
            "timestamp": ensure_utc(message.created_at),
            "status": "read" if message.is_read else "unread",
        })
    for event in events:
        items.append({
            "type": "event",
            "title": f"Event: {event.title}",
            "timestamp": ensure_utc(event.created_at),
            "status": "published" if event.is_published else "draft",
        })
    
    items.sort(key=lambda item: timestamp_or_epoch(item["timestamp"]), reverse=True)
    return items[:ACTIVITY_LIMIT]


# =============================================================================
# Analytics
# =============================================================================

def _views(rows, predicate) -> list[int]:
    return [row.views or 0 for row in rows if predicate(row)]


def get_analytics(
    db: Session,
    library_id: UUID,
    now: datetime | None = None,
    metrics: DemoMetricsGenerator | None = None,
) -> dict[str, Any]:
    """
    Chart data for the dashboard.
    
    visitorData, contentData and the view counts in topPerformers come from
    recorded page views. engagementData and the time-on-page figures are
    placeholders produced by ``metrics``.
    """
    now = now or utc_now()
    metrics = metrics or RandomDemoMetrics()
    rows = store.list_analytics(db, library_id)
    
    today = now.date()
    window = [today - timedelta(days=offset) for offset in range(VISITOR_WINDOW_DAYS - 1, -1, -1)]
    
    views_by_day: dict[date, int] = {}
    for row in rows:
        row_date = ensure_utc(row.date)
        if row_date is None:
            continue
        views_by_day[row_date.date()] = views_by_day.get(row_date.date(), 0) + (row.views or 0)
    
    visitor_data = []
    for day in window:
        total = views_by_day.get(day, 0)
        visitor_data.append({
            "date": short_day_label(day),
            "visitors": total,
            "uniqueVisitors": int(total * UNIQUE_VISITOR_RATIO),
        })
    
    story_views = _views(rows, lambda r: r.story_id is not None)
    gallery_views = _views(rows, lambda r: r.page_type == PageType.GALLERY.value)
    profile_views = _views(rows, lambda r: r.page_type == PageType.LIBRARY_PROFILE.value)
    
    content_data = [
        {"name": "Stories", "views": sum(story_views), "engagement": CONTENT_ENGAGEMENT["Stories"]},
        {"name": "Gallery", "views": sum(gallery_views), "engagement": CONTENT_ENGAGEMENT["Gallery"]},
        {
            "name": "Library Profile",
            "views": sum(profile_views),
            "engagement": CONTENT_ENGAGEMENT["Library Profile"],
        },
    ]
    
    engagement_data = [
        {"date": short_day_label(day), **metrics.engagement_for_day(day)}
        for day in window[-ENGAGEMENT_WINDOW_DAYS:]
    ]
    
    top_performers = {
        "topStory": "Featured Exhibition",
        "topStoryViews": max(story_views, default=0),
        "topGallery": "Main Collection",
        "topGalleryViews": max(gallery_views, default=0),
        "avgTimeOnPage": "4:32",
        "avgTimeIncrease": 12,
    }
    
    return {
        "visitorData": visitor_data,
        "contentData": content_data,
        "engagementData": engagement_data,
        "topPerformers": top_performers,
    }


# =============================================================================
# Galleries
# =============================================================================

def get_galleries(db: Session, library_id: UUID) -> list[dict[str, Any]]:
    """Media grouped by gallery id, with counts and the newest item as cover."""
    items = store.list_media_items(db, MediaFilters(library_id=library_id))
    galleries: dict[str, dict[str, Any]] = {}
    for item in items:
        if not item.gallery_id:
            continue
        gallery = galleries.setdefault(
            item.gallery_id,
            {"galleryId": item.gallery_id, "itemCount": 0, "approvedCount": 0, "coverImage": item.url},
        )
        gallery["itemCount"] += 1
        if item.is_approved:
            gallery["approvedCount"] += 1
    return [galleries[key] for key in sorted(galleries)]
