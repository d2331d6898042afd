"""Subscriptions API routes"""
from fastapi import APIRouter, Depends
from pymongo.database import Database

from auth import require_auth
from database import get_db
from schemas import ApiResponse, SubscriptionState
from services import subscriptions as subscription_service
from services.common import ToggleOutcome

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}", response_model=ApiResponse)
def toggle_subscription(channel_id: str, user_id: str = Depends(require_auth), db: Database = Depends(get_db)):
    outcome = subscription_service.toggle_subscription(db, channel_id, user_id)
    subscribed = outcome is ToggleOutcome.ADDED
    message = "Subscribed successfully" if subscribed else "Unsubscribed successfully"
    return ApiResponse(data=SubscriptionState(subscribed=subscribed), message=message)


@router.get("/c/{channel_id}", response_model=ApiResponse)
def get_channel_subscribers(channel_id: str, db: Database = Depends(get_db)):
    """Subscriber list of a channel"""
    subscribers = subscription_service.get_channel_subscribers(db, channel_id)
    return ApiResponse(data=subscribers, message="Subscribers fetched successfully")


@router.get("/u/{subscriber_id}", response_model=ApiResponse)
def get_subscribed_channels(subscriber_id: str, db: Database = Depends(get_db)):
    """Channels a user has subscribed to"""
    channels = subscription_service.get_subscribed_channels(db, subscriber_id)
    return ApiResponse(data=channels, message="Subscribed channels fetched successfully")
