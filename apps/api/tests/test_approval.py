"""Tests for the content approval workflow."""

from types import SimpleNamespace

from library_cms.core.approval import apply_update, initial_state
from library_cms.core.policies import get_policy
from library_cms.db.enums import Role


def test_initial_state_forces_unapproved_for_every_resource():
    for key in ("stories", "events", "media", "libraries"):
        state = initial_state(get_policy(key), {"title": "x", "is_approved": True})
        assert state["is_approved"] is False


def test_story_initial_state_defaults():
    policy = get_policy("stories")

    assert initial_state(policy, {})["is_published"] is False
    published = initial_state(policy, {"is_published": True, "is_featured": True})
    assert published["is_published"] is True
    assert published["is_featured"] is False


def test_event_initial_state_keeps_caller_publish_flag():
    policy = get_policy("events")

    assert "is_published" not in initial_state(policy, {"title": "Talk"})
    assert initial_state(policy, {"is_published": True})["is_published"] is True


def test_apply_update_pins_approval_for_library_admin():
    existing = SimpleNamespace(is_approved=False, is_featured=False)
    patch = {"title": "New", "is_approved": True, "is_featured": True, "library_id": "other"}

    result = apply_update(get_policy("stories"), existing, patch, Role.LIBRARY_ADMIN)

    assert result == {"title": "New", "is_approved": False, "is_featured": False}


def test_apply_update_pins_approval_for_media_and_events():
    existing = SimpleNamespace(is_approved=True)
    for key in ("media", "events"):
        result = apply_update(get_policy(key), existing, {"is_approved": False}, Role.LIBRARY_ADMIN)
        assert result["is_approved"] is True


def test_super_admin_may_change_approval_but_not_tenant():
    existing = SimpleNamespace(is_approved=False, is_featured=False)
    patch = {"is_approved": True, "is_featured": True, "library_id": "other"}

    result = apply_update(get_policy("stories"), existing, patch, Role.SUPER_ADMIN)

    assert result == {"is_approved": True, "is_featured": True}
