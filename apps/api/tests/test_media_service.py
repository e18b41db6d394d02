"""Tests for the media service."""

import uuid
from unittest.mock import MagicMock

import pytest

from library_cms.core.errors import (
    AuthorizationError, NotFoundError, UpstreamIOError, ValidationError,
)
from library_cms.db import store
from library_cms.db.enums import Role
from library_cms.services import asset_upload_service, media_service
from library_cms.services.asset_upload_service import UploadedAsset


IMAGE = UploadedAsset(filename="photo.jpg", content_type="image/jpeg", data=b"jpeg-bytes")


def _create(db, library_id, **overrides):
    data = {"title": "Reading Room", "url": "https://cdn.test/media/r.jpg", **overrides}
    return media_service.create_media_item(db, data, library_id)


def test_media_tags_are_sorted_union(db, library):
    _create(db, library.id, tags=["art", "photo"])
    _create(db, library.id, tags=["art", "nature"])

    assert media_service.list_media_tags(db) == ["art", "nature", "photo"]


def test_media_tags_include_unapproved_items(db, library):
    item = _create(db, library.id, tags=["archive"])
    assert item.is_approved is False

    assert media_service.list_media_tags(db) == ["archive"]


def test_create_requires_url_or_file(db, library):
    with pytest.raises(ValidationError, match="Media URL or file is required"):
        media_service.create_media_item(db, {"title": "Nothing"}, library.id)


def test_create_with_file_uploads_to_media_folder(db, library, monkeypatch):
    upload = MagicMock(return_value="https://cdn.test/media/uploaded.jpg")
    monkeypatch.setattr(asset_upload_service, "upload_image", upload)

    item = media_service.create_media_item(db, {"title": "Upload"}, library.id, file=IMAGE)

    upload.assert_called_once_with(IMAGE, "media")
    assert item.url == "https://cdn.test/media/uploaded.jpg"
    assert item.is_approved is False


def test_create_without_library_never_uploads(db, monkeypatch):
    upload = MagicMock()
    monkeypatch.setattr(asset_upload_service, "upload_image", upload)

    with pytest.raises(ValidationError, match="Library ID required"):
        media_service.create_media_item(db, {"title": "x"}, None, file=IMAGE)
    upload.assert_not_called()


def test_upload_failure_message(db, library, monkeypatch):
    monkeypatch.setattr(
        asset_upload_service, "upload_image", MagicMock(side_effect=OSError("disk full"))
    )

    with pytest.raises(UpstreamIOError, match="Failed to upload media file"):
        media_service.create_media_item(db, {"title": "x"}, library.id, file=IMAGE)


def test_rejects_unsupported_file_type(db, library, monkeypatch):
    upload = MagicMock()
    monkeypatch.setattr(asset_upload_service, "upload_image", upload)
    script = UploadedAsset(filename="run.sh", content_type="text/x-shellscript", data=b"echo")

    with pytest.raises(ValidationError):
        media_service.create_media_item(db, {"title": "x"}, library.id, file=script)
    upload.assert_not_called()


def test_update_media_ownership_and_approval(db, library, other_library):
    item = _create(db, library.id)

    with pytest.raises(AuthorizationError, match="You can only edit media for your library"):
        media_service.update_media_item(db, item.id, {"title": "x"}, other_library.id, Role.LIBRARY_ADMIN)

    updated = media_service.update_media_item(
        db, item.id, {"title": "Stacks", "is_approved": True}, library.id, Role.LIBRARY_ADMIN
    )
    assert updated.title == "Stacks"
    assert updated.is_approved is False


def test_update_missing_media(db):
    with pytest.raises(NotFoundError, match="Media item not found"):
        media_service.update_media_item(db, uuid.uuid4(), {}, None, Role.SUPER_ADMIN)


def test_update_cannot_clear_required_url(db, library):
    item = _create(db, library.id)

    with pytest.raises(ValidationError, match="Media URL or file is required"):
        media_service.update_media_item(db, item.id, {"url": ""}, library.id, Role.LIBRARY_ADMIN)

    assert media_service.get_media_item(db, item.id).url == "https://cdn.test/media/r.jpg"


def test_update_without_url_keeps_stored_url(db, library):
    item = _create(db, library.id)

    updated = media_service.update_media_item(
        db, item.id, {"title": "Renamed"}, library.id, Role.LIBRARY_ADMIN
    )

    assert updated.url == "https://cdn.test/media/r.jpg"


def test_list_media_filters_by_tag_before_paging(db, library):
    for idx in range(3):
        _create(db, library.id, title=f"untagged {idx}")
    tagged = _create(db, library.id, title="tagged", tags=["maps"])

    items = media_service.list_media_items(db, store.MediaFilters(tags=["maps"], limit=1))

    assert [i.id for i in items] == [tagged.id]
