"""Video discovery and media lifecycle

Listing is a single aggregation over the video collection: owner filter,
publish-state filter, substring search, owner lookup, sort, then page.
Publish/update/delete coordinate Cloudinary calls with the database write.
"""
import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from database import USERS, VIDEOS, create_document, delete_document, get_document, update_document
from errors import InternalError, InvalidArgument, NotFound, Unauthorized
from media_store import MediaStore, coerce_duration, extract_public_id
from schemas import PublishState, Video, VideoOut, VideoPage
from services.common import authorize, ensure_owner, fetch_or_404, parse_object_id

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("created_at", "views", "duration", "title")
DEFAULT_SORT_FIELD = "created_at"


def resolve_sort(sort_by: Optional[str], sort_type: Optional[str]) -> Tuple[str, int]:
    """Unknown sort fields fall back to created_at; anything but "asc" sorts descending"""
    field = sort_by if sort_by in SORTABLE_FIELDS else DEFAULT_SORT_FIELD
    direction = 1 if (sort_type or "").lower() == "asc" else -1
    return field, direction


def build_match_stages(
    owner_id: Optional[ObjectId],
    include_unpublished: bool,
    query: Optional[str],
) -> List[Dict[str, Any]]:
    stages: List[Dict[str, Any]] = []
    if owner_id is not None:
        stages.append({"$match": {"owner": owner_id}})
    if not include_unpublished:
        stages.append({"$match": {"is_published": True}})
    if query and query.strip():
        pattern = {"$regex": re.escape(query.strip()), "$options": "i"}
        stages.append({"$match": {"$or": [{"title": pattern}, {"description": pattern}]}})
    return stages


def build_discovery_pipeline(
    owner_id: Optional[ObjectId] = None,
    include_unpublished: bool = False,
    query: Optional[str] = None,
    sort_by: Optional[str] = DEFAULT_SORT_FIELD,
    sort_type: Optional[str] = "desc",
) -> List[Dict[str, Any]]:
    """Filter, enrich and sort stages of the listing, without paging"""
    stages = build_match_stages(owner_id, include_unpublished, query)
    stages.append({
        "$lookup": {
            "from": USERS,
            "localField": "owner",
            "foreignField": "_id",
            "as": "owner_details",
        }
    })
    field, direction = resolve_sort(sort_by, sort_type)
    stages.append({"$sort": {field: direction, "_id": direction}})
    return stages


def _count(database: Database, match_stages: List[Dict[str, Any]]) -> int:
    result = list(database[VIDEOS].aggregate(match_stages + [{"$count": "total"}]))
    return result[0]["total"] if result else 0


def _video_with_owner(doc: Dict[str, Any]) -> VideoOut:
    owners = doc.get("owner_details") or []
    return VideoOut.from_document(doc, owner=owners[0] if owners else None)


def list_videos(
    database: Database,
    page: int = 1,
    limit: int = 10,
    query: Optional[str] = None,
    sort_by: Optional[str] = DEFAULT_SORT_FIELD,
    sort_type: Optional[str] = "desc",
    user_id: Optional[str] = None,
    actor_id: Optional[str] = None,
) -> VideoPage:
    """Page through videos visible to actor_id

    Unpublished videos are only listed when the actor asks for their own channel.
    """
    if page < 1 or limit < 1:
        raise InvalidArgument("page and limit must be positive")

    owner_id = parse_object_id(user_id, "user") if user_id else None
    own_channel = owner_id is not None and authorize(owner_id, actor_id)

    match_stages = build_match_stages(owner_id, own_channel, query)
    total = _count(database, match_stages)

    pipeline = build_discovery_pipeline(owner_id, own_channel, query, sort_by, sort_type)
    pipeline += [{"$skip": (page - 1) * limit}, {"$limit": limit}]
    videos = [_video_with_owner(doc) for doc in database[VIDEOS].aggregate(pipeline)]

    total_pages = max(1, math.ceil(total / limit))
    return VideoPage(
        videos=videos,
        total_videos=total,
        limit=limit,
        page=page,
        total_pages=total_pages,
        has_prev_page=page > 1,
        has_next_page=page < total_pages,
        prev_page=page - 1 if page > 1 else None,
        next_page=page + 1 if page < total_pages else None,
    )


def _discard_remote(store: MediaStore, url: Optional[str], resource_type: str) -> None:
    """Best-effort removal of a stored object; failures are logged only"""
    public_id = extract_public_id(url)
    if not public_id:
        logger.warning(f"No public_id derivable from {url!r}; skipping remote {resource_type} delete")
        return
    result = store.delete(public_id, resource_type=resource_type)
    if not result.success:
        logger.warning(f"Remote {resource_type} delete for {public_id} failed: {result.error_message}")


def publish_video(
    database: Database,
    store: MediaStore,
    actor_id: str,
    title: Optional[str],
    description: Optional[str],
    video_path: Optional[Path],
    thumbnail_path: Optional[Path],
) -> VideoOut:
    """Upload video then thumbnail and create the record

    A thumbnail failure deletes the already uploaded video so no orphan is left.
    """
    if not (title or "").strip() or not (description or "").strip():
        raise InvalidArgument("Title and description are required")
    if not video_path:
        raise InvalidArgument("Video file is required")
    if not thumbnail_path:
        raise InvalidArgument("Thumbnail is required")

    owner_id = ObjectId(actor_id)
    fetch_or_404(database, USERS, owner_id, "User")

    video_upload = store.upload(video_path)
    if not video_upload.success:
        raise InternalError("Failed to upload video")

    thumbnail_upload = store.upload(thumbnail_path)
    if not thumbnail_upload.success:
        compensation = store.delete(video_upload.public_id, resource_type="video")
        if not compensation.success:
            logger.error(f"Orphaned video {video_upload.public_id}: {compensation.error_message}")
        raise InternalError("Failed to upload thumbnail")

    video = Video(
        title=title.strip(),
        description=description.strip(),
        video_file=video_upload.url,
        thumbnail=thumbnail_upload.url,
        duration=coerce_duration(video_upload.duration),
        owner=owner_id,
    )
    video_id = create_document(database, VIDEOS, video)
    logger.info(f"User {actor_id} published video {video_id}")
    return VideoOut.from_document(get_document(database, VIDEOS, video_id))


def get_video(database: Database, video_id: str, actor_id: Optional[str]) -> VideoOut:
    """Fetch one video, counting the view; unpublished videos are owner-only"""
    oid = parse_object_id(video_id, "video")
    video = fetch_or_404(database, VIDEOS, oid, "Video")
    if not video.get("is_published", True) and not authorize(video.get("owner"), actor_id):
        raise Unauthorized("This video is not published")

    video = database[VIDEOS].find_one_and_update(
        {"_id": oid},
        {"$inc": {"views": 1}},
        return_document=ReturnDocument.AFTER,
    )
    if not video:
        raise NotFound("Video not found")

    owner = get_document(database, USERS, video["owner"]) if video.get("owner") else None
    return VideoOut.from_document(video, owner=owner)


def update_video(
    database: Database,
    store: MediaStore,
    video_id: str,
    actor_id: Optional[str],
    title: Optional[str] = None,
    description: Optional[str] = None,
    thumbnail_path: Optional[Path] = None,
) -> VideoOut:
    """Partial update; blank fields are left untouched

    A new thumbnail is uploaded before the old one is removed, so a failed
    upload leaves the record pointing at a thumbnail that still exists.
    """
    oid = parse_object_id(video_id, "video")
    video = fetch_or_404(database, VIDEOS, oid, "Video")
    ensure_owner(video, actor_id, "update this video")

    changes: Dict[str, Any] = {}
    if title and title.strip():
        changes["title"] = title.strip()
    if description and description.strip():
        changes["description"] = description.strip()

    new_thumbnail = None
    if thumbnail_path:
        new_thumbnail = store.upload(thumbnail_path)
        if not new_thumbnail.success:
            raise InternalError("Failed to upload new thumbnail")
        changes["thumbnail"] = new_thumbnail.url

    updated = update_document(database, VIDEOS, oid, changes)
    if updated is None:
        if new_thumbnail:
            store.delete(new_thumbnail.public_id, resource_type="image")
        raise NotFound("Video not found")

    if new_thumbnail:
        _discard_remote(store, video.get("thumbnail"), "image")
    return VideoOut.from_document(updated)


def delete_video(database: Database, store: MediaStore, video_id: str, actor_id: Optional[str]) -> None:
    """Remove both stored media objects (best-effort), then the record"""
    oid = parse_object_id(video_id, "video")
    video = fetch_or_404(database, VIDEOS, oid, "Video")
    ensure_owner(video, actor_id, "delete this video")

    _discard_remote(store, video.get("video_file"), "video")
    _discard_remote(store, video.get("thumbnail"), "image")

    delete_document(database, VIDEOS, oid)
    logger.info(f"User {actor_id} deleted video {oid}")


def toggle_publish_status(database: Database, video_id: str, actor_id: Optional[str]) -> PublishState:
    oid = parse_object_id(video_id, "video")
    video = fetch_or_404(database, VIDEOS, oid, "Video")
    ensure_owner(video, actor_id, "toggle publish status of this video")

    updated = update_document(database, VIDEOS, oid, {"is_published": not video.get("is_published", True)})
    if updated is None:
        raise NotFound("Video not found")
    return PublishState(is_published=updated["is_published"])
