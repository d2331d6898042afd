"""Media store gateway tests"""
import io
from unittest.mock import patch

import pytest
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile

from media_store import MediaStore, coerce_duration, extract_public_id, staged_upload


@pytest.fixture
def store():
    return MediaStore(cloud_name="demo", api_key="key", api_secret="secret", folder="videotube")


@pytest.fixture
def local_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"video-bytes")
    return path


@pytest.mark.critical
class TestExtractPublicId:
    @pytest.mark.parametrize("url,expected", [
        ("https://res.cloudinary.com/demo/video/upload/v123/folder/clip.mp4", "folder/clip"),
        ("https://res.cloudinary.com/demo/video/upload/folder/clip.mp4", "folder/clip"),
        ("https://res.cloudinary.com/demo/image/upload/v1700000000/thumb.png", "thumb"),
        ("https://res.cloudinary.com/demo/image/upload/a/b/c.d.jpg", "a/b/c.d"),
        ("https://res.cloudinary.com/demo/image/upload/v99/no_extension", "no_extension"),
    ])
    def test_extracts(self, url, expected):
        assert extract_public_id(url) == expected

    @pytest.mark.parametrize("url", [
        "https://example.com/files/clip.mp4",
        "https://res.cloudinary.com/demo/video/uploads/clip.mp4",
        "https://res.cloudinary.com/demo/video/upload/",
        "https://res.cloudinary.com/demo/video/upload/v123/",
        "",
        None,
    ])
    def test_malformed_yields_none(self, url):
        assert extract_public_id(url) is None


class TestCoerceDuration:
    @pytest.mark.parametrize("value,expected", [
        (12.6, 13),
        (12.5, 13),
        (0.4, 0),
        (7, 7),
        (None, 0),
        ("12", 0),
        (True, 0),
        (float("nan"), 0),
        (float("inf"), 0),
        (-3.0, 0),
    ])
    def test_coerce(self, value, expected):
        assert coerce_duration(value) == expected


@pytest.mark.critical
class TestUpload:
    def test_success_returns_reference_and_removes_file(self, store, local_file):
        response = {
            "secure_url": "https://res.cloudinary.com/demo/video/upload/v1/videotube/clip.mp4",
            "public_id": "videotube/clip",
            "duration": 4.2,
        }
        with patch("media_store.cloudinary.uploader.upload", return_value=response) as upload:
            result = store.upload(local_file)

        assert result.success is True
        assert result.url == response["secure_url"]
        assert result.public_id == "videotube/clip"
        assert result.duration == 4.2
        assert not local_file.exists()

        args, kwargs = upload.call_args
        assert args == (str(local_file),)
        assert kwargs["resource_type"] == "auto"
        assert kwargs["folder"] == "videotube"
        assert kwargs["cloud_name"] == "demo"
        assert kwargs["api_key"] == "key"
        assert kwargs["api_secret"] == "secret"

    def test_failure_is_returned_not_raised_and_removes_file(self, store, local_file):
        with patch("media_store.cloudinary.uploader.upload", side_effect=CloudinaryError("boom")):
            result = store.upload(local_file)

        assert result.success is False
        assert result.error_message == "boom"
        assert result.url is None
        assert not local_file.exists()

    def test_response_without_url_is_failure(self, store, local_file):
        with patch("media_store.cloudinary.uploader.upload", return_value={"public_id": "x"}):
            result = store.upload(local_file)

        assert result.success is False
        assert not local_file.exists()

    def test_no_path(self, store):
        with patch("media_store.cloudinary.uploader.upload") as upload:
            result = store.upload(None)
        assert result.success is False
        upload.assert_not_called()

    def test_folder_omitted_when_not_configured(self, local_file):
        store = MediaStore(cloud_name="demo", api_key="key", api_secret="secret")
        response = {"secure_url": "https://res.cloudinary.com/demo/image/upload/x.png", "public_id": "x"}
        with patch("media_store.cloudinary.uploader.upload", return_value=response) as upload:
            store.upload(local_file)
        assert "folder" not in upload.call_args.kwargs


class TestDelete:
    def test_ok(self, store):
        with patch("media_store.cloudinary.uploader.destroy", return_value={"result": "ok"}) as destroy:
            result = store.delete("videotube/clip", resource_type="video")

        assert result.success is True
        args, kwargs = destroy.call_args
        assert args == ("videotube/clip",)
        assert kwargs["resource_type"] == "video"
        assert kwargs["cloud_name"] == "demo"

    def test_not_found_is_failure(self, store):
        with patch("media_store.cloudinary.uploader.destroy", return_value={"result": "not found"}):
            result = store.delete("videotube/clip")
        assert result.success is False
        assert result.result == "not found"

    def test_error_is_returned_not_raised(self, store):
        with patch("media_store.cloudinary.uploader.destroy", side_effect=CloudinaryError("down")):
            result = store.delete("videotube/clip")
        assert result.success is False
        assert result.error_message == "down"

    def test_missing_public_id_skips_call(self, store):
        with patch("media_store.cloudinary.uploader.destroy") as destroy:
            result = store.delete(None)
        assert result.success is False
        destroy.assert_not_called()


class TestStagedUpload:
    def test_stages_and_removes(self, tmp_path):
        upload = UploadFile(file=io.BytesIO(b"payload"), filename="My Clip.MP4")
        with staged_upload(upload, tmp_path / "staging") as path:
            assert path.exists()
            assert path.suffix == ".mp4"
            assert path.read_bytes() == b"payload"
        assert not path.exists()

    def test_removed_when_block_raises(self, tmp_path):
        upload = UploadFile(file=io.BytesIO(b"payload"), filename="thumb.png")
        with pytest.raises(RuntimeError):
            with staged_upload(upload, tmp_path) as path:
                raise RuntimeError("handler failed")
        assert not path.exists()

    def test_no_file(self, tmp_path):
        with staged_upload(None, tmp_path) as path:
            assert path is None


@pytest.mark.critical
class TestUnconfiguredStore:
    """Missing credentials make the SDK raise ValueError; the gateway still returns a result"""

    @pytest.fixture
    def unconfigured(self):
        return MediaStore(cloud_name="", api_key="", api_secret="")

    def test_upload_returns_failure(self, unconfigured, local_file):
        result = unconfigured.upload(local_file)
        assert result.success is False
        assert result.error_message
        assert not local_file.exists()

    def test_delete_returns_failure(self, unconfigured):
        result = unconfigured.delete("folder/clip", resource_type="video")
        assert result.success is False
        assert result.error_message

    def test_unexpected_sdk_error_on_upload(self, store, local_file):
        with patch("media_store.cloudinary.uploader.upload", side_effect=ValueError("Must supply api_key")):
            result = store.upload(local_file)
        assert result.success is False
        assert result.error_message == "Must supply api_key"
        assert not local_file.exists()

    def test_unexpected_sdk_error_on_delete(self, store):
        with patch("media_store.cloudinary.uploader.destroy", side_effect=ValueError("Must supply api_key")):
            result = store.delete("videotube/clip")
        assert result.success is False
        assert result.error_message == "Must supply api_key"
