"""Playlist CRUD and membership"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from database import PLAYLISTS, USERS, VIDEOS, create_document, delete_document, get_document, get_documents, update_document
from errors import InvalidArgument, NotFound
from schemas import Playlist, PlaylistOut
from services.common import ensure_owner, fetch_or_404, is_valid_id, parse_object_id

logger = logging.getLogger(__name__)


def create_playlist(database: Database, actor_id: str, name: Optional[str], description: Optional[str] = None) -> PlaylistOut:
    if not name or not name.strip():
        raise InvalidArgument("Playlist name is required")

    playlist = Playlist(
        name=name.strip(),
        description=description.strip() if description else description,
        owner=ObjectId(actor_id),
    )
    playlist_id = create_document(database, PLAYLISTS, playlist)
    return PlaylistOut.from_document(get_document(database, PLAYLISTS, playlist_id))


def get_user_playlists(database: Database, user_id: str) -> List[PlaylistOut]:
    oid = parse_object_id(user_id, "user")
    fetch_or_404(database, USERS, oid, "User")
    return [PlaylistOut.from_document(doc) for doc in get_documents(database, PLAYLISTS, {"owner": oid})]


def get_playlist(database: Database, playlist_id: str) -> PlaylistOut:
    oid = parse_object_id(playlist_id, "playlist")
    return PlaylistOut.from_document(fetch_or_404(database, PLAYLISTS, oid, "Playlist"))


def update_playlist(
    database: Database,
    playlist_id: str,
    actor_id: Optional[str],
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> PlaylistOut:
    """Name is replaced only when non-blank; description whenever it is supplied"""
    oid = parse_object_id(playlist_id, "playlist")
    playlist = fetch_or_404(database, PLAYLISTS, oid, "Playlist")
    ensure_owner(playlist, actor_id, "update this playlist")

    changes: Dict[str, Any] = {}
    if name and name.strip():
        changes["name"] = name.strip()
    if description is not None:
        changes["description"] = description.strip()
    if not changes:
        raise InvalidArgument("Playlist name or description is required")

    updated = update_document(database, PLAYLISTS, oid, changes)
    if updated is None:
        raise NotFound("Playlist not found")
    return PlaylistOut.from_document(updated)


def delete_playlist(database: Database, playlist_id: str, actor_id: Optional[str]) -> None:
    oid = parse_object_id(playlist_id, "playlist")
    playlist = fetch_or_404(database, PLAYLISTS, oid, "Playlist")
    ensure_owner(playlist, actor_id, "delete this playlist")
    delete_document(database, PLAYLISTS, oid)
    logger.info(f"User {actor_id} deleted playlist {oid}")


def _parse_membership_ids(playlist_id: str, video_id: str):
    if not is_valid_id(playlist_id) or not is_valid_id(video_id):
        raise InvalidArgument("Invalid playlist or video ID")
    return ObjectId(playlist_id), ObjectId(video_id)


def add_video_to_playlist(database: Database, playlist_id: str, video_id: str, actor_id: Optional[str]) -> PlaylistOut:
    playlist_oid, video_oid = _parse_membership_ids(playlist_id, video_id)
    playlist = fetch_or_404(database, PLAYLISTS, playlist_oid, "Playlist")
    ensure_owner(playlist, actor_id, "add videos to this playlist")
    fetch_or_404(database, VIDEOS, video_oid, "Video")

    # The $ne guard keeps the push from ever creating a duplicate entry
    updated = database[PLAYLISTS].find_one_and_update(
        {"_id": playlist_oid, "videos": {"$ne": video_oid}},
        {"$push": {"videos": video_oid}, "$set": {"updated_at": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        if get_document(database, PLAYLISTS, playlist_oid) is None:
            raise NotFound("Playlist not found")
        raise InvalidArgument("Video already in playlist")
    return PlaylistOut.from_document(updated)


def remove_video_from_playlist(database: Database, playlist_id: str, video_id: str, actor_id: Optional[str]) -> PlaylistOut:
    playlist_oid, video_oid = _parse_membership_ids(playlist_id, video_id)
    playlist = fetch_or_404(database, PLAYLISTS, playlist_oid, "Playlist")
    ensure_owner(playlist, actor_id, "remove videos from this playlist")

    updated = database[PLAYLISTS].find_one_and_update(
        {"_id": playlist_oid},
        {"$pull": {"videos": video_oid}, "$set": {"updated_at": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFound("Playlist not found")
    return PlaylistOut.from_document(updated)
