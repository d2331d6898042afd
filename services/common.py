"""Shared handler building blocks

Identifier validation, fetch-or-404, the ownership guard and the toggle
engine used by likes and subscriptions.
"""
import enum
import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import create_document, get_document
from errors import InvalidArgument, NotFound, Unauthorized

logger = logging.getLogger(__name__)


class ToggleOutcome(str, enum.Enum):
    ADDED = "added"
    REMOVED = "removed"


def is_valid_id(value: Any) -> bool:
    """True when value is a 24-character hex ObjectId string"""
    return isinstance(value, str) and ObjectId.is_valid(value)


def parse_object_id(value: Any, label: str) -> ObjectId:
    """Validate an identifier before any lookup; raises InvalidArgument"""
    if not is_valid_id(value):
        raise InvalidArgument(f"Invalid {label} ID")
    return ObjectId(value)


def fetch_or_404(database: Database, collection_name: str, document_id: ObjectId, label: str) -> Dict[str, Any]:
    document = get_document(database, collection_name, document_id)
    if not document:
        raise NotFound(f"{label} not found")
    return document


def authorize(owner: Any, actor_id: Optional[str]) -> bool:
    """Ownership check; anonymous actors never own anything"""
    if not actor_id or owner is None:
        return False
    return str(owner).lower() == str(actor_id).lower()


def ensure_owner(document: Dict[str, Any], actor_id: Optional[str], action: str) -> None:
    if not authorize(document.get("owner"), actor_id):
        logger.info(f"Rejected {action} by {actor_id} on {document.get('_id')}: not the owner")
        raise Unauthorized(f"You are not authorized to {action}")


def toggle_relation(database: Database, collection_name: str, scope: Dict[str, Any]) -> ToggleOutcome:
    """Remove the relation record matching scope if present, otherwise create it

    Not atomic: a concurrent toggle can interleave between the lookup and the
    write. A duplicate-key error from the unique index means the relation now
    exists, so it is reported as added.
    """
    existing = database[collection_name].find_one(scope)
    if existing:
        database[collection_name].delete_one({"_id": existing["_id"]})
        return ToggleOutcome.REMOVED

    try:
        create_document(database, collection_name, scope)
    except DuplicateKeyError:
        logger.info(f"Concurrent toggle on {collection_name} {scope}; relation already present")
    return ToggleOutcome.ADDED
