"""Shared pytest fixtures for test suite"""
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator, List, Optional, Tuple

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from config import settings
from database import USERS, VIDEOS, get_db
from main import app
from media_store import DeleteResult, UploadResult, get_media_store

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)
VIDEO_EXTENSIONS = {".mp4", ".mov", ".webm"}


class FakeMediaStore:
    """In-memory stand-in for the Cloudinary gateway

    Uploads fail for any extension listed in fail_extensions. Unlike the real
    gateway it leaves staged files alone, so tests can check the request
    scope cleans them up.
    """

    def __init__(self):
        self.uploads: List[Tuple[str, bool]] = []
        self.deleted: List[Tuple[str, str]] = []
        self.fail_extensions = set()
        self.fail_deletes = False
        self.video_duration: Optional[float] = 12.6

    def upload(self, local_path) -> UploadResult:
        path = Path(local_path)
        self.uploads.append((path.name, path.exists()))
        if path.suffix in self.fail_extensions:
            return UploadResult(success=False, error_message="simulated upload failure")

        kind = "video" if path.suffix in VIDEO_EXTENSIONS else "image"
        public_id = f"videotube/{path.stem}"
        return UploadResult(
            success=True,
            url=f"https://res.cloudinary.com/demo/{kind}/upload/v1700000000/{public_id}{path.suffix}",
            public_id=public_id,
            duration=self.video_duration if kind == "video" else None,
        )

    def delete(self, public_id, resource_type="image") -> DeleteResult:
        self.deleted.append((public_id, resource_type))
        if self.fail_deletes:
            return DeleteResult(success=False, error_message="simulated delete failure")
        return DeleteResult(success=True, result="ok")


@pytest.fixture(scope="function")
def mongo_db():
    """Fresh in-memory MongoDB database for each test"""
    return mongomock.MongoClient().get_database("videotube_test")


@pytest.fixture(scope="function")
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture(scope="function")
def upload_dir(tmp_path, monkeypatch) -> Path:
    """Point staged uploads at a per-test directory"""
    directory = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", directory)
    return directory


@pytest.fixture(scope="function")
def client(mongo_db, media_store, upload_dir) -> Generator[TestClient, None, None]:
    """FastAPI test client with the in-memory database and fake media store"""
    app.dependency_overrides[get_db] = lambda: mongo_db
    app.dependency_overrides[get_media_store] = lambda: media_store
    try:
        # Not used as a context manager: the lifespan would talk to a real MongoDB
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_user(mongo_db):
    def _make_user(username: str, **fields) -> str:
        doc = {
            "username": username,
            "full_name": fields.pop("full_name", username.title()),
            "avatar": fields.pop("avatar", f"https://res.cloudinary.com/demo/image/upload/{username}.png"),
            "email": f"{username}@example.com",
            "created_at": BASE_TIME,
        }
        doc.update(fields)
        return str(mongo_db[USERS].insert_one(doc).inserted_id)
    return _make_user


@pytest.fixture(scope="function")
def two_users(make_user) -> Tuple[str, str]:
    return make_user("alice"), make_user("bob")


@pytest.fixture(scope="function")
def make_video(mongo_db):
    """Insert a video document directly; created_at defaults to BASE_TIME + minutes"""
    counter = {"n": 0}

    def _make_video(owner: str, **fields) -> str:
        counter["n"] += 1
        n = counter["n"]
        doc = {
            "title": f"Video {n}",
            "description": f"Description {n}",
            "video_file": f"https://res.cloudinary.com/demo/video/upload/v1700000000/videotube/clip{n}.mp4",
            "thumbnail": f"https://res.cloudinary.com/demo/image/upload/v1700000000/videotube/thumb{n}.png",
            "duration": 60,
            "views": 0,
            "is_published": True,
            "owner": ObjectId(owner),
            "created_at": BASE_TIME + timedelta(minutes=n),
            "updated_at": BASE_TIME + timedelta(minutes=n),
        }
        doc.update(fields)
        return str(mongo_db[VIDEOS].insert_one(doc).inserted_id)

    return _make_video


def auth_headers(user_id: str) -> dict:
    return {"X-User-Id": user_id}
