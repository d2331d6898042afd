"""Tweet CRUD"""
import logging
from typing import List, Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.database import Database

from database import TWEETS, USERS, create_document, delete_document, get_document, get_documents, update_document
from errors import InvalidArgument, NotFound
from schemas import Tweet, TweetOut
from services.common import ensure_owner, fetch_or_404, parse_object_id

logger = logging.getLogger(__name__)


def _require_content(content: Optional[str]) -> str:
    if not content or not content.strip():
        raise InvalidArgument("Content is required")
    return content.strip()


def create_tweet(database: Database, actor_id: str, content: Optional[str]) -> TweetOut:
    tweet = Tweet(content=_require_content(content), owner=ObjectId(actor_id))
    tweet_id = create_document(database, TWEETS, tweet)
    return TweetOut.from_document(get_document(database, TWEETS, tweet_id))


def get_user_tweets(database: Database, user_id: str) -> List[TweetOut]:
    """Tweets of one user, newest first"""
    oid = parse_object_id(user_id, "user")
    fetch_or_404(database, USERS, oid, "User")
    tweets = get_documents(database, TWEETS, {"owner": oid}, sort=[("created_at", DESCENDING), ("_id", DESCENDING)])
    return [TweetOut.from_document(tweet) for tweet in tweets]


def update_tweet(database: Database, tweet_id: str, actor_id: Optional[str], content: Optional[str]) -> TweetOut:
    oid = parse_object_id(tweet_id, "tweet")
    tweet = fetch_or_404(database, TWEETS, oid, "Tweet")
    ensure_owner(tweet, actor_id, "update this tweet")

    updated = update_document(database, TWEETS, oid, {"content": _require_content(content)})
    if updated is None:
        raise NotFound("Tweet not found")
    return TweetOut.from_document(updated)


def delete_tweet(database: Database, tweet_id: str, actor_id: Optional[str]) -> None:
    oid = parse_object_id(tweet_id, "tweet")
    tweet = fetch_or_404(database, TWEETS, oid, "Tweet")
    ensure_owner(tweet, actor_id, "delete this tweet")
    delete_document(database, TWEETS, oid)
    logger.info(f"User {actor_id} deleted tweet {oid}")
