"""Tweets API routes"""
from typing import Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database

from auth import get_current_user_id, require_auth
from database import get_db
from schemas import ApiResponse, TweetContent
from services import tweets as tweet_service

router = APIRouter(prefix="/api/v1/tweets", tags=["tweets"])


@router.post("", response_model=ApiResponse, status_code=201)
def create_tweet(payload: TweetContent, user_id: str = Depends(require_auth), db: Database = Depends(get_db)):
    tweet = tweet_service.create_tweet(db, user_id, payload.content)
    return ApiResponse(status_code=201, data=tweet, message="Tweet created successfully")


@router.get("/user/{user_id}", response_model=ApiResponse)
def get_user_tweets(user_id: str, db: Database = Depends(get_db)):
    tweets = tweet_service.get_user_tweets(db, user_id)
    return ApiResponse(data=tweets, message="User tweets fetched successfully")


@router.patch("/{tweet_id}", response_model=ApiResponse)
def update_tweet(
    tweet_id: str,
    payload: TweetContent,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    tweet = tweet_service.update_tweet(db, tweet_id, actor_id, payload.content)
    return ApiResponse(data=tweet, message="Tweet updated successfully")


@router.delete("/{tweet_id}", response_model=ApiResponse)
def delete_tweet(
    tweet_id: str,
    actor_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
):
    tweet_service.delete_tweet(db, tweet_id, actor_id)
    return ApiResponse(data={}, message="Tweet deleted successfully")
