"""Authentication dependencies

Session verification happens upstream; the gateway forwards the verified
actor id in the X-User-Id header. Absence means an anonymous request.
"""
import logging
from typing import Optional

from bson import ObjectId
from fastapi import Depends, Header

from errors import NotAuthenticated

security_logger = logging.getLogger("security")


def get_current_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> Optional[str]:
    """Dependency: the authenticated actor id, or None for anonymous requests"""
    if not x_user_id or not x_user_id.strip():
        return None
    # Stored ObjectIds render as lowercase hex
    return x_user_id.strip().lower()


def require_auth(user_id: Optional[str] = Depends(get_current_user_id)) -> str:
    """Dependency: Require authentication, return user_id"""
    if not user_id:
        raise NotAuthenticated("Not authenticated. Please log in.")
    if not ObjectId.is_valid(user_id):
        security_logger.warning(f"Rejected malformed actor id: {user_id!r}")
        raise NotAuthenticated("Invalid authenticated user")
    return user_id
