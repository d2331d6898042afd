"""Cloudinary media store gateway

Uploads staged local files to Cloudinary and deletes stored objects by
public_id. Remote failures never raise; they come back as result objects
with success=False and an error message.
"""
import logging
import math
import re
import shutil
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, Optional
from urllib.parse import urlparse

import cloudinary.uploader
from bson import ObjectId
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile

from config import settings

upload_logger = logging.getLogger("upload")
cleanup_logger = logging.getLogger("cleanup")

UPLOAD_MARKER = "upload"
_VERSION_SEGMENT = re.compile(r"^v\d+$")
_EXTENSION = re.compile(r"\.[^/.]+$")


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of an upload to the media store.

    Attributes:
        success: Whether the upload succeeded
        url: Public (https) URL of the stored object
        public_id: Content identifier the store addresses the object by
        duration: Raw duration reported by the store, for videos
        error_message: Human-readable reason (if failed)
    """
    success: bool
    url: Optional[str] = None
    public_id: Optional[str] = None
    duration: Optional[Any] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a delete request against the media store"""
    success: bool
    result: Optional[str] = None
    error_message: Optional[str] = None


def extract_public_id(url: Optional[str]) -> Optional[str]:
    """Derive the Cloudinary public_id from a delivery URL

    "https://res.cloudinary.com/demo/video/upload/v123/folder/clip.mp4" -> "folder/clip"

    Returns None when the URL has no "upload" segment or nothing after it.
    """
    if not url:
        return None

    parts = urlparse(url).path.split("/")
    if UPLOAD_MARKER not in parts:
        return None

    path_parts = [part for part in parts[parts.index(UPLOAD_MARKER) + 1:] if part]
    if path_parts and _VERSION_SEGMENT.match(path_parts[0]):
        path_parts = path_parts[1:]
    if not path_parts:
        return None

    path_parts[-1] = _EXTENSION.sub("", path_parts[-1])
    return "/".join(path_parts) or None


def coerce_duration(value: Any) -> int:
    """Round a reported duration half-up to whole seconds; anything unusable is 0"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value) or value < 0:
        return 0
    return int(math.floor(value + 0.5))


def discard_file(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        cleanup_logger.warning(f"Failed to remove staged file {path}: {e}")
        return
    cleanup_logger.debug(f"Removed staged file {path}")


@contextmanager
def staged_upload(upload: Optional[UploadFile], directory: Path) -> Iterator[Optional[Path]]:
    """Copy an incoming upload to a local temp file for the duration of the block

    Yields None when no file was submitted. The temp file is removed on exit
    whether or not the block succeeded.
    """
    if upload is None or not upload.filename:
        yield None
        return

    directory.mkdir(parents=True, exist_ok=True)
    safe_name = f"{ObjectId()}{Path(upload.filename).suffix.lower()}"
    path = directory / safe_name
    try:
        with open(path, "wb") as f:
            shutil.copyfileobj(upload.file, f)
        upload_logger.debug(f"Staged {upload.filename} as {path}")
        yield path
    finally:
        discard_file(path)


class MediaStore:
    """Gateway to Cloudinary with explicitly injected credentials"""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: Optional[str] = None):
        self.folder = folder or None
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }

    def _options(self, **options) -> Dict[str, Any]:
        merged = dict(self._credentials)
        merged.update(options)
        return merged

    def upload(self, local_path: Optional[Path]) -> UploadResult:
        """Upload a local file; the file is removed afterwards, success or failure"""
        if not local_path:
            return UploadResult(success=False, error_message="No file to upload")

        options = {"resource_type": "auto"}
        if self.folder:
            options["folder"] = self.folder

        try:
            response = cloudinary.uploader.upload(str(local_path), **self._options(**options))
        except (CloudinaryError, OSError) as e:
            upload_logger.error(f"Cloudinary upload failed for {local_path}: {e}")
            return UploadResult(success=False, error_message=str(e))
        except Exception as e:
            upload_logger.error(f"Unexpected error uploading {local_path}: {e}", exc_info=True)
            return UploadResult(success=False, error_message=str(e))
        finally:
            discard_file(Path(local_path))

        url = response.get("secure_url") or response.get("url")
        public_id = response.get("public_id")
        if not url or not public_id:
            upload_logger.error(f"Cloudinary upload for {local_path} returned no URL/public_id")
            return UploadResult(success=False, error_message="Upload response missing URL or public_id")

        upload_logger.info(f"Uploaded {local_path} to Cloudinary as {public_id}")
        return UploadResult(
            success=True,
            url=url,
            public_id=public_id,
            duration=response.get("duration"),
        )

    def delete(self, public_id: Optional[str], resource_type: str = "image") -> DeleteResult:
        """Destroy a stored object by public_id"""
        if not public_id:
            return DeleteResult(success=False, error_message="No public_id given")

        try:
            response = cloudinary.uploader.destroy(public_id, **self._options(resource_type=resource_type))
        except (CloudinaryError, OSError) as e:
            upload_logger.error(f"Cloudinary delete failed for {public_id} ({resource_type}): {e}")
            return DeleteResult(success=False, error_message=str(e))
        except Exception as e:
            upload_logger.error(f"Unexpected error deleting {public_id} ({resource_type}): {e}", exc_info=True)
            return DeleteResult(success=False, error_message=str(e))

        result = response.get("result")
        if result != "ok":
            upload_logger.warning(f"Cloudinary delete for {public_id} ({resource_type}) returned {result!r}")
            return DeleteResult(success=False, result=result, error_message=f"Delete returned {result!r}")

        upload_logger.info(f"Deleted {public_id} ({resource_type}) from Cloudinary")
        return DeleteResult(success=True, result=result)


@lru_cache
def get_media_store() -> MediaStore:
    """Dependency: media store configured from settings"""
    return MediaStore(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        folder=settings.CLOUDINARY_FOLDER,
    )
