"""Tests for the library admin dashboard aggregations."""

from datetime import date, datetime, timedelta, timezone

import pytest

from library_cms.db.enums import PageType
from library_cms.db.models import AnalyticsEvent, ContactMessage, Event, MediaItem, Story
from library_cms.services import dashboard_service

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _story(db, library, title, published=False, at=None):
    story = Story(library_id=library.id, title=title, is_published=published)
    if at is not None:
        story.created_at = at
        story.updated_at = at
    db.add(story)
    db.flush()
    return story


def _media(db, library, title, approved=False, gallery_id=None, at=None):
    item = MediaItem(
        library_id=library.id,
        title=title,
        url=f"https://cdn.test/media/{title}.jpg",
        is_approved=approved,
        gallery_id=gallery_id,
    )
    if at is not None:
        item.created_at = at
    db.add(item)
    db.flush()
    return item


def _event(db, library, title, event_date, at=None):
    event = Event(library_id=library.id, title=title, event_date=event_date)
    if at is not None:
        event.created_at = at
    db.add(event)
    db.flush()
    return event


def _message(db, library, subject, read=False, at=None):
    message = ContactMessage(
        library_id=library.id,
        name="Visitor",
        email="visitor@example.com",
        subject=subject,
        message="Hello",
        is_read=read,
    )
    if at is not None:
        message.created_at = at
    db.add(message)
    db.flush()
    return message


class FixedMetrics:
    def engagement_for_day(self, day: date) -> dict[str, int]:
        return {"avgTimeSpent": 200, "interactionRate": 80}


# =============================================================================
# Stats
# =============================================================================

def test_stats_scenario(db, library, other_library):
    _story(db, library, "Published", published=True)
    _story(db, library, "Draft")
    _media(db, library, "approved", approved=True)
    _media(db, library, "pending")
    _event(db, library, "Upcoming", NOW + timedelta(days=2))
    _event(db, library, "Past", NOW - timedelta(days=2))
    _message(db, library, "Unread")
    _message(db, library, "Read", read=True)
    _story(db, other_library, "Elsewhere", published=True)

    assert dashboard_service.get_stats(db, library.id, now=NOW) == {
        "totalStories": 2,
        "publishedStories": 1,
        "totalMedia": 2,
        "approvedMedia": 1,
        "totalEvents": 2,
        "upcomingEvents": 1,
        "totalMessages": 2,
        "unreadMessages": 1,
    }


def test_stats_empty_library(db, library):
    stats = dashboard_service.get_stats(db, library.id, now=NOW)
    assert set(stats.values()) == {0}


# =============================================================================
# Activity
# =============================================================================

def test_activity_sorted_newest_first(db, library):
    _story(db, library, "Old story", at=NOW - timedelta(hours=3))
    _message(db, library, "Newest inquiry", at=NOW - timedelta(hours=1))
    _event(db, library, "Middle event", NOW + timedelta(days=1), at=NOW - timedelta(hours=2))

    activity = dashboard_service.get_activity(db, library.id)

    assert [item["title"] for item in activity] == [
        "New inquiry: Newest inquiry",
        "Event: Middle event",
        "Story updated: Old story",
    ]
    assert [item["type"] for item in activity] == ["message", "event", "story"]
    assert activity[0]["status"] == "unread"
    assert activity[2]["status"] == "draft"


def test_activity_ties_keep_story_message_event_order(db, library):
    tied = NOW - timedelta(minutes=5)
    _event(db, library, "E", NOW + timedelta(days=1), at=tied)
    _message(db, library, "M", at=tied)
    _story(db, library, "S", published=True, at=tied)

    activity = dashboard_service.get_activity(db, library.id)

    assert [item["type"] for item in activity] == ["story", "message", "event"]
    assert activity[0]["status"] == "published"


def test_activity_takes_five_per_source_and_ten_total(db, library):
    for idx in range(7):
        at = NOW - timedelta(minutes=idx)
        _story(db, library, f"story {idx}", at=at)
        _message(db, library, f"message {idx}", at=at)
        _event(db, library, f"event {idx}", NOW + timedelta(days=idx + 1), at=at)

    activity = dashboard_service.get_activity(db, library.id)

    assert len(activity) == 10
    titles = [item["title"] for item in activity]
    assert "Story updated: story 5" not in titles
    assert titles[:3] == [
        "Story updated: story 0",
        "New inquiry: message 0",
        "Event: event 0",
    ]


# =============================================================================
# Analytics
# =============================================================================

def _views(db, library, page_type, views, day, story_id=None):
    db.add(
        AnalyticsEvent(
            library_id=library.id,
            story_id=story_id,
            page_type=page_type.value,
            views=views,
            date=day,
        )
    )
    db.flush()


def test_analytics_view_counts(db, library):
    story = _story(db, library, "Counted", published=True)
    today = NOW.replace(hour=0)
    yesterday = today - timedelta(days=1)
    _views(db, library, PageType.STORY, 10, today, story_id=story.id)
    _views(db, library, PageType.GALLERY, 4, today)
    _views(db, library, PageType.LIBRARY_PROFILE, 6, yesterday)
    _views(db, library, PageType.GALLERY, 9, today - timedelta(days=45))

    result = dashboard_service.get_analytics(db, library.id, now=NOW, metrics=FixedMetrics())

    visitors = result["visitorData"]
    assert len(visitors) == 30
    assert visitors[-1] == {"date": "Oct 18", "visitors": 14, "uniqueVisitors": 9}
    assert visitors[-2] == {"date": "Oct 17", "visitors": 6, "uniqueVisitors": 4}
    assert visitors[0]["date"] == "Sep 19"

    assert result["contentData"] == [
        {"name": "Stories", "views": 10, "engagement": 75},
        {"name": "Gallery", "views": 13, "engagement": 85},
        {"name": "Library Profile", "views": 6, "engagement": 65},
    ]
    assert result["topPerformers"]["topStoryViews"] == 10
    assert result["topPerformers"]["topGalleryViews"] == 9


def test_analytics_demo_fields_come_from_generator(db, library):
    result = dashboard_service.get_analytics(db, library.id, now=NOW, metrics=FixedMetrics())

    engagement = result["engagementData"]
    assert len(engagement) == 7
    assert engagement[-1] == {"date": "Oct 18", "avgTimeSpent": 200, "interactionRate": 80}
    assert result["topPerformers"]["avgTimeOnPage"] == "4:32"


def test_random_demo_metrics_shape(db, library):
    result = dashboard_service.get_analytics(db, library.id, now=NOW)

    for row in result["engagementData"]:
        assert 120 <= row["avgTimeSpent"] <= 419
        assert 60 <= row["interactionRate"] <= 99


# =============================================================================
# Galleries
# =============================================================================

def test_galleries_grouped_with_counts(db, library):
    _media(db, library, "a1", approved=True, gallery_id="autumn", at=NOW - timedelta(days=2))
    _media(db, library, "a2", gallery_id="autumn", at=NOW - timedelta(days=1))
    _media(db, library, "b1", approved=True, gallery_id="archive")
    _media(db, library, "loose")

    galleries = dashboard_service.get_galleries(db, library.id)

    assert [g["galleryId"] for g in galleries] == ["archive", "autumn"]
    autumn = galleries[1]
    assert autumn["itemCount"] == 2
    assert autumn["approvedCount"] == 1
    assert autumn["coverImage"] == "https://cdn.test/media/a2.jpg"


@pytest.mark.parametrize("views,unique", [(0, 0), (1, 0), (10, 7)])
def test_unique_visitors_ratio(db, library, views, unique):
    if views:
        _views(db, library, PageType.GALLERY, views, NOW.replace(hour=0))

    result = dashboard_service.get_analytics(db, library.id, now=NOW, metrics=FixedMetrics())

    assert result["visitorData"][-1]["uniqueVisitors"] == unique
