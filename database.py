"""
Database access

MongoDB client plus the small set of helpers every service uses to read and
write documents. Collection names are the lowercase entity name:
- Video -> "video"
- Tweet -> "tweet"
- Playlist -> "playlist"
- Like -> "like"
- Subscription -> "subscription"
- User -> "user"
- Comment -> "comment" (read only here)
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.database import Database

from config import settings
from errors import InternalError

logger = logging.getLogger(__name__)

VIDEOS = "video"
TWEETS = "tweet"
PLAYLISTS = "playlist"
LIKES = "like"
SUBSCRIPTIONS = "subscription"
USERS = "user"
COMMENTS = "comment"

# The client connects lazily, so building it here does not need a live server
client: Optional[MongoClient] = None
db: Optional[Database] = None

if settings.DATABASE_URL and settings.DATABASE_NAME:
    client = MongoClient(settings.DATABASE_URL, serverSelectionTimeoutMS=5000)
    db = client[settings.DATABASE_NAME]


def get_db() -> Database:
    """Dependency for FastAPI endpoints"""
    if db is None:
        raise InternalError("Database not available. Check DATABASE_URL and DATABASE_NAME")
    return db


def ensure_indexes(database: Database) -> None:
    """Create the indexes the listing queries and toggle invariants rely on"""
    database[VIDEOS].create_index([("owner", ASCENDING), ("created_at", DESCENDING)])
    database[VIDEOS].create_index([("is_published", ASCENDING), ("created_at", DESCENDING)])
    database[TWEETS].create_index([("owner", ASCENDING)])
    database[PLAYLISTS].create_index([("owner", ASCENDING)])

    # At most one like per (user, target); each index only covers likes of its kind
    for target in ("video", "comment", "tweet"):
        database[LIKES].create_index(
            [("liked_by", ASCENDING), (target, ASCENDING)],
            unique=True,
            partialFilterExpression={target: {"$exists": True}},
            name=f"liked_by_{target}_unique",
        )
    database[SUBSCRIPTIONS].create_index(
        [("subscriber", ASCENDING), ("channel", ASCENDING)],
        unique=True,
        name="subscriber_channel_unique",
    )
    database[SUBSCRIPTIONS].create_index([("channel", ASCENDING)])
    logger.info("Database indexes ensured")


def create_document(database: Database, collection_name: str, data: Union[BaseModel, dict]) -> ObjectId:
    """Insert a single document with timestamps and return its id"""
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = data.copy()

    now = datetime.now(timezone.utc)
    data_dict["created_at"] = now
    data_dict["updated_at"] = now

    result = database[collection_name].insert_one(data_dict)
    return result.inserted_id


def get_document(database: Database, collection_name: str, document_id: ObjectId) -> Optional[Dict[str, Any]]:
    return database[collection_name].find_one({"_id": document_id})


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[dict] = None,
    sort: Optional[List[tuple]] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Get documents from collection"""
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def update_document(
    database: Database,
    collection_name: str,
    document_id: ObjectId,
    changes: dict,
) -> Optional[Dict[str, Any]]:
    """Apply a $set (plus updated_at) and return the updated document"""
    fields = dict(changes)
    fields["updated_at"] = datetime.now(timezone.utc)
    return database[collection_name].find_one_and_update(
        {"_id": document_id},
        {"$set": fields},
        return_document=ReturnDocument.AFTER,
    )


def delete_document(database: Database, collection_name: str, document_id: ObjectId) -> bool:
    result = database[collection_name].delete_one({"_id": document_id})
    return result.deleted_count == 1
