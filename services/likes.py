"""Like toggles and liked-video listing"""
from typing import List

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.database import Database

from database import COMMENTS, LIKES, TWEETS, USERS, VIDEOS, get_documents
from schemas import VideoOut
from services.common import ToggleOutcome, authorize, fetch_or_404, parse_object_id, toggle_relation

# like field -> (collection, label)
LIKE_TARGETS = {
    "video": (VIDEOS, "Video"),
    "comment": (COMMENTS, "Comment"),
    "tweet": (TWEETS, "Tweet"),
}


def toggle_like(database: Database, target: str, target_id: str, actor_id: str) -> ToggleOutcome:
    """Like the target if the actor has not yet, otherwise remove the like"""
    collection_name, label = LIKE_TARGETS[target]
    oid = parse_object_id(target_id, target)
    fetch_or_404(database, collection_name, oid, label)
    return toggle_relation(database, LIKES, {target: oid, "liked_by": ObjectId(actor_id)})


def get_liked_videos(database: Database, actor_id: str) -> List[VideoOut]:
    """Videos the actor liked, most recent like first

    Unpublished videos of other owners are left out.
    """
    likes = get_documents(
        database,
        LIKES,
        {"liked_by": ObjectId(actor_id), "video": {"$exists": True}},
        sort=[("created_at", DESCENDING), ("_id", DESCENDING)],
    )
    video_ids = [like["video"] for like in likes]
    if not video_ids:
        return []

    videos = {video["_id"]: video for video in get_documents(database, VIDEOS, {"_id": {"$in": video_ids}})}
    owner_ids = list({video["owner"] for video in videos.values() if video.get("owner")})
    owners = {user["_id"]: user for user in get_documents(database, USERS, {"_id": {"$in": owner_ids}})}

    liked: List[VideoOut] = []
    for video_id in video_ids:
        video = videos.get(video_id)
        if video is None:
            continue
        if not video.get("is_published", True) and not authorize(video.get("owner"), actor_id):
            continue
        liked.append(VideoOut.from_document(video, owner=owners.get(video.get("owner"))))
    return liked
