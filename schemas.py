"""
Database Schemas

MongoDB collection schemas and the request/response models built on them.

Each collection model represents a collection in the database; the
collection name is the lowercase class name:
- Video -> "video" collection
- Tweet -> "tweet" collection
- Playlist -> "playlist" collection
- Like -> "like" collection
- Subscription -> "subscription" collection

References are stored as ObjectId and exposed as hex strings in responses.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


def _str_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


class MongoModel(BaseModel):
    """Base for collection schemas holding ObjectId references"""
    model_config = ConfigDict(arbitrary_types_allowed=True)


class Video(MongoModel):
    """
    Videos collection schema
    Collection name: "video" (lowercase of class name)
    """
    title: str = Field(..., min_length=1, description="Video title")
    description: str = Field(..., min_length=1, description="Video description")
    video_file: str = Field(..., description="Delivery URL of the stored video")
    thumbnail: str = Field(..., description="Delivery URL of the stored thumbnail")
    duration: int = Field(0, ge=0, description="Duration in seconds")
    views: int = Field(0, ge=0, description="View count")
    is_published: bool = Field(True, description="Visible to users other than the owner")
    owner: ObjectId = Field(..., description="Owning user")


class Tweet(MongoModel):
    """
    Tweets collection schema
    Collection name: "tweet"
    """
    content: str = Field(..., min_length=1)
    owner: ObjectId


class Playlist(MongoModel):
    """
    Playlists collection schema
    Collection name: "playlist"
    """
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    owner: ObjectId
    videos: List[ObjectId] = Field(default_factory=list, description="Ordered, no duplicates")


class Subscription(MongoModel):
    """
    Subscriptions collection schema
    Collection name: "subscription"
    """
    subscriber: ObjectId
    channel: ObjectId


# Likes carry exactly one target field, so they are built as plain dicts
# keyed by the target name ("video", "comment" or "tweet") plus liked_by.


# --- Requests ---

class TweetContent(BaseModel):
    content: Optional[str] = None


class PlaylistCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


# --- Responses ---

class UserSummary(BaseModel):
    """Public summary of a user, used for owner/channel enrichment"""
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> Optional["UserSummary"]:
        if not doc:
            return None
        return cls(
            id=str(doc["_id"]),
            username=doc.get("username"),
            full_name=doc.get("full_name"),
            avatar=doc.get("avatar"),
        )


class VideoOut(BaseModel):
    id: str
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: int = 0
    views: int = 0
    is_published: bool = True
    owner: Optional[str] = None
    owner_details: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any], owner: Optional[Dict[str, Any]] = None) -> "VideoOut":
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title", ""),
            description=doc.get("description", ""),
            video_file=doc.get("video_file", ""),
            thumbnail=doc.get("thumbnail", ""),
            duration=doc.get("duration", 0),
            views=doc.get("views", 0),
            is_published=doc.get("is_published", True),
            owner=_str_id(doc.get("owner")),
            owner_details=UserSummary.from_document(owner),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )


class VideoPage(BaseModel):
    """One page of the video listing"""
    videos: List[VideoOut]
    total_videos: int
    limit: int
    page: int
    total_pages: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: Optional[int] = None
    next_page: Optional[int] = None


class PublishState(BaseModel):
    is_published: bool


class TweetOut(BaseModel):
    id: str
    content: str
    owner: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "TweetOut":
        return cls(
            id=str(doc["_id"]),
            content=doc.get("content", ""),
            owner=_str_id(doc.get("owner")),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )


class PlaylistOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    owner: Optional[str] = None
    videos: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "PlaylistOut":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            description=doc.get("description"),
            owner=_str_id(doc.get("owner")),
            videos=[str(video_id) for video_id in doc.get("videos", [])],
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )


class LikeState(BaseModel):
    liked: bool


class SubscriptionState(BaseModel):
    subscribed: bool


class SubscriptionOut(BaseModel):
    id: str
    subscriber: str
    channel: str
    subscriber_details: Optional[UserSummary] = None
    channel_details: Optional[UserSummary] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(
        cls,
        doc: Dict[str, Any],
        subscriber: Optional[Dict[str, Any]] = None,
        channel: Optional[Dict[str, Any]] = None,
    ) -> "SubscriptionOut":
        return cls(
            id=str(doc["_id"]),
            subscriber=str(doc["subscriber"]),
            channel=str(doc["channel"]),
            subscriber_details=UserSummary.from_document(subscriber),
            channel_details=UserSummary.from_document(channel),
            created_at=doc.get("created_at"),
        )


class ApiResponse(BaseModel):
    """Success envelope returned by every endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(200, alias="statusCode")
    data: Any = None
    message: str = "Success"
    success: bool = True
