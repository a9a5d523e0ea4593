from typing import Optional
from fastapi import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

class BadRequest(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=HTTP_400_BAD_REQUEST, detail=detail)

class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=HTTP_404_NOT_FOUND, detail=detail)

class Forbidden(HTTPException):
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(status_code=HTTP_403_FORBIDDEN, detail=detail)

class Conflict(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=HTTP_409_CONFLICT, detail=detail)

class InternalServerError(HTTPException):
    """Server-side failure. `error` carries the underlying cause for diagnostics."""
    def __init__(self, detail: str = "Internal server error", error: Optional[str] = None):
        super().__init__(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
        self.error = error

class ValidationError(BadRequest):
    def __init__(self, detail: str = "Missing required fields"):
        super().__init__(detail=detail)

class NotFoundError(NotFound):
    def __init__(self, resource: str = "Resource", identifier: str = None):
        detail = f"{resource} not found"
        super().__init__(detail=detail)
        self.identifier = identifier

class SessionNotFound(NotFoundError):
    def __init__(self, identifier: str = None):
        super().__init__("Session", identifier)

class ConversationNotFound(NotFoundError):
    def __init__(self, identifier: str = None):
        super().__init__("Conversation", identifier)

class AuthorizationError(Forbidden):
    def __init__(self, detail: str = "Not authorized to access this conversation"):
        super().__init__(detail=detail)

class ConversationClosedError(Conflict):
    def __init__(self, identifier: str = None):
        detail = f"Conversation '{identifier}' is already completed." if identifier else "Conversation is already completed."
        super().__init__(detail=detail)

class UpstreamError(InternalServerError):
    """The generation service call failed at the transport or service level."""
    def __init__(self, error: str = None, detail: str = "Generation service request failed"):
        super().__init__(detail=detail, error=error)

class MalformedResponseError(InternalServerError):
    """The generation service answered, but not with the JSON shape we asked for."""
    def __init__(self, error: str = None, detail: str = "Generation service returned a malformed response"):
        super().__init__(detail=detail, error=error)

class PersistenceError(InternalServerError):
    def __init__(self, error: str = None, detail: str = "Database operation failed"):
        super().__init__(detail=detail, error=error)
