"""Tests for asset validation and storage backends."""

from unittest.mock import MagicMock

import pytest

from library_cms.core.config import settings
from library_cms.core.errors import ValidationError
from library_cms.services import asset_upload_service
from library_cms.services.asset_upload_service import UploadedAsset


@pytest.fixture
def local_storage(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "local")
    monkeypatch.setattr(settings, "LOCAL_STORAGE_PATH", str(tmp_path))
    monkeypatch.setattr(settings, "ASSET_PUBLIC_BASE_URL", "http://assets.test/assets")
    return tmp_path


@pytest.mark.parametrize(
    "asset,message",
    [
        (UploadedAsset("notes.txt", "text/plain", b"x"), "File type '.txt' not allowed"),
        (UploadedAsset("fake.png", "application/pdf", b"x"), "Content type 'application/pdf' not allowed"),
        (UploadedAsset("empty.png", "image/png", b""), "Uploaded file is empty"),
    ],
)
def test_validate_asset_rejects(asset, message):
    with pytest.raises(ValidationError) as exc_info:
        asset_upload_service.validate_asset(asset)
    assert exc_info.value.message == message


def test_validate_asset_size_limit(monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 1)
    big = UploadedAsset("big.jpg", "image/jpeg", b"0" * (1024 * 1024 + 1))

    with pytest.raises(ValidationError, match="File exceeds 1 MB limit"):
        asset_upload_service.validate_asset(big)


def test_local_upload_and_delete(local_storage):
    url = asset_upload_service.upload_image(UploadedAsset("Logo.PNG", "image/png", b"png"), "libraries/logos")

    assert url.startswith("http://assets.test/assets/libraries/logos/")
    assert url.endswith(".png")
    stored = local_storage / url.removeprefix("http://assets.test/assets/")
    assert stored.read_bytes() == b"png"

    assert asset_upload_service.delete_image(url) is True
    assert not stored.exists()
    assert asset_upload_service.delete_image(url) is False


def test_local_delete_rejects_traversal(local_storage):
    with pytest.raises(ValidationError, match="Invalid asset path"):
        asset_upload_service.delete_image("../../etc/passwd")


def test_s3_upload(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "s3")
    monkeypatch.setattr(settings, "S3_BUCKET", "bucket")
    monkeypatch.setattr(settings, "S3_REGION", "eu-west-1")
    monkeypatch.setattr(asset_upload_service, "_get_s3_client", lambda: client)

    url = asset_upload_service.upload_image(UploadedAsset("a.jpg", "image/jpeg", b"jpg"), "stories")

    assert url.startswith("https://bucket.s3.eu-west-1.amazonaws.com/stories/")
    args, kwargs = client.upload_fileobj.call_args
    assert args[1] == "bucket"
    assert kwargs["ExtraArgs"] == {"ContentType": "image/jpeg"}

    assert asset_upload_service.delete_image(url) is True
    client.delete_object.assert_called_once_with(Bucket="bucket", Key=url.split(".com/", 1)[1])
