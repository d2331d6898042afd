"""Playlists API routes"""
from typing import Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database

from auth import get_current_user_id, require_auth
from database import get_db
from schemas import ApiResponse, PlaylistCreate, PlaylistUpdate
from services import playlists as playlist_service

router = APIRouter(prefix="/api/v1/playlists", tags=["playlists"])


@router.post("", response_model=ApiResponse, status_code=201)
def create_playlist(payload: PlaylistCreate, user_id: str = Depends(require_auth), db: Database = Depends(get_db)):
    playlist = playlist_service.create_playlist(db, user_id, payload.name, payload.description)
    return ApiResponse(status_code=201, data=playlist, message="Playlist created successfully")


@router.get("/user/{user_id}", response_model=ApiResponse)
def get_user_playlists(user_id: str, db: Database = Depends(get_db)):
    playlists = playlist_service.get_user_playlists(db, user_id)
    return ApiResponse(data=playlists, message="User playlists fetched successfully")


@router.patch("/{playlist_id}/videos/{video_id}", response_model=ApiResponse)
def add_video_to_playlist(
    playlist_id: str,
    video_id: str,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    playlist = playlist_service.add_video_to_playlist(db, playlist_id, video_id, actor_id)
    return ApiResponse(data=playlist, message="Video added to playlist successfully")


@router.delete("/{playlist_id}/videos/{video_id}", response_model=ApiResponse)
def remove_video_from_playlist(
    playlist_id: str,
    video_id: str,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    playlist = playlist_service.remove_video_from_playlist(db, playlist_id, video_id, actor_id)
    return ApiResponse(data=playlist, message="Video removed from playlist successfully")


@router.get("/{playlist_id}", response_model=ApiResponse)
def get_playlist(playlist_id: str, db: Database = Depends(get_db)):
    playlist = playlist_service.get_playlist(db, playlist_id)
    return ApiResponse(data=playlist, message="Playlist fetched successfully")


@router.patch("/{playlist_id}", response_model=ApiResponse)
def update_playlist(
    playlist_id: str,
    payload: PlaylistUpdate,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    playlist = playlist_service.update_playlist(db, playlist_id, actor_id, payload.name, payload.description)
    return ApiResponse(data=playlist, message="Playlist updated successfully")


@router.delete("/{playlist_id}", response_model=ApiResponse)
def delete_playlist(
    playlist_id: str,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    playlist_service.delete_playlist(db, playlist_id, actor_id)
    return ApiResponse(data={}, message="Playlist deleted successfully")
