"""Channel subscriptions"""
from typing import List

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.database import Database

from database import SUBSCRIPTIONS, USERS, get_documents
from schemas import SubscriptionOut
from services.common import ToggleOutcome, fetch_or_404, parse_object_id, toggle_relation


def toggle_subscription(database: Database, channel_id: str, actor_id: str) -> ToggleOutcome:
    oid = parse_object_id(channel_id, "channel")
    fetch_or_404(database, USERS, oid, "Channel")
    return toggle_relation(database, SUBSCRIPTIONS, {"subscriber": ObjectId(actor_id), "channel": oid})


def _users_by_id(database: Database, user_ids) -> dict:
    return {user["_id"]: user for user in get_documents(database, USERS, {"_id": {"$in": list(user_ids)}})}


def get_channel_subscribers(database: Database, channel_id: str) -> List[SubscriptionOut]:
    """Subscriptions to a channel, each with a summary of the subscriber"""
    oid = parse_object_id(channel_id, "channel")
    fetch_or_404(database, USERS, oid, "Channel")

    subscriptions = get_documents(database, SUBSCRIPTIONS, {"channel": oid}, sort=[("created_at", DESCENDING)])
    users = _users_by_id(database, {sub["subscriber"] for sub in subscriptions})
    return [SubscriptionOut.from_document(sub, subscriber=users.get(sub["subscriber"])) for sub in subscriptions]


def get_subscribed_channels(database: Database, subscriber_id: str) -> List[SubscriptionOut]:
    """Subscriptions held by a user, each with a summary of the channel"""
    oid = parse_object_id(subscriber_id, "subscriber")
    fetch_or_404(database, USERS, oid, "Subscriber")

    subscriptions = get_documents(database, SUBSCRIPTIONS, {"subscriber": oid}, sort=[("created_at", DESCENDING)])
    users = _users_by_id(database, {sub["channel"] for sub in subscriptions})
    return [SubscriptionOut.from_document(sub, channel=users.get(sub["channel"])) for sub in subscriptions]
