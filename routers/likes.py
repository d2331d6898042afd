"""Likes API routes"""
from fastapi import APIRouter, Depends
from pymongo.database import Database

from auth import require_auth
from database import get_db
from schemas import ApiResponse, LikeState
from services import likes as like_service
from services.common import ToggleOutcome

router = APIRouter(prefix="/api/v1/likes", tags=["likes"])


def _toggle_response(outcome: ToggleOutcome, label: str) -> ApiResponse:
    liked = outcome is ToggleOutcome.ADDED
    action = "liked" if liked else "unliked"
    return ApiResponse(data=LikeState(liked=liked), message=f"{label} {action} successfully")


@router.post("/toggle/v/{video_id}", response_model=ApiResponse)
def toggle_video_like(video_id: str, user_id: str = Depends(require_auth), db: Database = Depends(get_db)):
    return _toggle_response(like_service.toggle_like(db, "video", video_id, user_id), "Video")


@router.post("/toggle/c/{comment_id}", response_model=ApiResponse)
def toggle_comment_like(comment_id: str, user_id: str = Depends(require_auth), db: Database = Depends(get_db)):
    return _toggle_response(like_service.toggle_like(db, "comment", comment_id, user_id), "Comment")


@router.post("/toggle/t/{tweet_id}", response_model=ApiResponse)
def toggle_tweet_like(tweet_id: str, user_id: str = Depends(require_auth), db: Database = Depends(get_db)):
    return _toggle_response(like_service.toggle_like(db, "tweet", tweet_id, user_id), "Tweet")


@router.get("/videos", response_model=ApiResponse)
def get_liked_videos(user_id: str = Depends(require_auth), db: Database = Depends(get_db)):
    videos = like_service.get_liked_videos(db, user_id)
    return ApiResponse(data=videos, message="Liked videos fetched successfully")
