"""Videos API routes"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pymongo.database import Database

from auth import get_current_user_id, require_auth
from config import settings
from database import get_db
from media_store import MediaStore, get_media_store, staged_upload
from schemas import ApiResponse
from services import videos as video_service

router = APIRouter(prefix="/api/v1/videos", tags=["videos"])


@router.get("", response_model=ApiResponse)
def list_videos(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    query: Optional[str] = None,
    sort_by: str = video_service.DEFAULT_SORT_FIELD,
    sort_type: str = "desc",
    user_id: Optional[str] = None,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    """List videos with search, owner filter, sorting and pagination"""
    result = video_service.list_videos(
        db,
        page=page,
        limit=limit,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        user_id=user_id,
        actor_id=actor_id,
    )
    return ApiResponse(data=result, message="Videos fetched successfully")


@router.post("", response_model=ApiResponse, status_code=201)
def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    user_id: str = Depends(require_auth),
    db: Database = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    """Upload a video and its thumbnail to the media store and create the record"""
    with staged_upload(video_file, settings.UPLOAD_DIR) as video_path, \
            staged_upload(thumbnail, settings.UPLOAD_DIR) as thumbnail_path:
        video = video_service.publish_video(db, store, user_id, title, description, video_path, thumbnail_path)
    return ApiResponse(status_code=201, data=video, message="Video published successfully")


@router.get("/{video_id}", response_model=ApiResponse)
def get_video(
    video_id: str,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    """Get a video by id (counts a view)"""
    video = video_service.get_video(db, video_id, actor_id)
    return ApiResponse(data=video, message="Video fetched successfully")


@router.patch("/{video_id}", response_model=ApiResponse)
def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    """Update title, description and/or thumbnail"""
    with staged_upload(thumbnail, settings.UPLOAD_DIR) as thumbnail_path:
        video = video_service.update_video(db, store, video_id, actor_id, title, description, thumbnail_path)
    return ApiResponse(data=video, message="Video updated successfully")


@router.delete("/{video_id}", response_model=ApiResponse)
def delete_video(
    video_id: str,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    """Delete a video and its stored media"""
    video_service.delete_video(db, store, video_id, actor_id)
    return ApiResponse(data={}, message="Video deleted successfully")


@router.patch("/toggle/publish/{video_id}", response_model=ApiResponse)
def toggle_publish_status(
    video_id: str,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    state = video_service.toggle_publish_status(db, video_id, actor_id)
    message = "Video published successfully" if state.is_published else "Video unpublished successfully"
    return ApiResponse(data=state, message=message)
