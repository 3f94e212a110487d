"""
Typed failures raised by the services and the authorization gate.

Each error carries the envelope vocabulary used by profile_api.errors:
- code: machine readable string (CONFLICT, UNAUTHORIZED, ...)
- status: the HTTP status an equivalent REST response would use
- message: human readable text that is safe to return to the caller
"""
from __future__ import annotations


class ProfileAPIError(Exception):
    code = "INTERNAL_ERROR"
    status = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ConflictError(ProfileAPIError):
    code = "CONFLICT"
    status = 409
    default_message = "Conflict"


class UnauthorizedError(ProfileAPIError):
    """Bad credentials or an unusable refresh token."""
    code = "UNAUTHORIZED"
    status = 401
    default_message = "Unauthorized"


class UnauthenticatedError(ProfileAPIError):
    """Missing or invalid access token on a gated operation."""
    code = "UNAUTHENTICATED"
    status = 401
    default_message = "Authentication required"


class ForbiddenError(ProfileAPIError):
    code = "FORBIDDEN"
    status = 403
    default_message = "Forbidden"


class NotFoundError(ProfileAPIError):
    code = "NOT_FOUND"
    status = 404
    default_message = "Resource not found"


class TokenError(Exception):
    """Base for signed token verification failures."""


class InvalidTokenError(TokenError):
    pass


class TokenExpiredError(TokenError):
    pass
