"""API error taxonomy

Every failure a handler can report is one of these. They subclass
HTTPException so FastAPI maps them to the right status code even without
the envelope handlers registered in main.py.
"""
from fastapi import HTTPException


class ApiError(HTTPException):
    """Base class for errors rendered in the API error envelope"""

    kind = "ApiError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message


class InvalidArgument(ApiError):
    """Malformed identifier or missing required field"""
    kind = "InvalidArgument"
    status_code = 400


class NotAuthenticated(ApiError):
    """No (or no usable) authenticated actor on a request that needs one"""
    kind = "NotAuthenticated"
    status_code = 401


class Unauthorized(ApiError):
    """Actor is not the owner of the entity being mutated"""
    kind = "Unauthorized"
    status_code = 403


class NotFound(ApiError):
    """Referenced entity is absent"""
    kind = "NotFound"
    status_code = 404


class InternalError(ApiError):
    """Remote media store or database failure"""
    kind = "InternalError"
    status_code = 500
