"""Domain exceptions for the marketplace backend.

Every exception carries the HTTP status and machine-readable code the API
layer answers with, so services can raise them without knowing about HTTP.
"""
from typing import Any


class MarketplaceError(Exception):
    """Base class for all expected, request-terminating failures."""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(MarketplaceError):
    """Raised when input is malformed or missing."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class ConflictError(MarketplaceError):
    """Raised when a unique key already exists."""

    status_code = 409
    code = "CONFLICT"
    default_message = "Resource already exists"


class AuthError(MarketplaceError):
    """Raised on bad credentials. The message never says which part was wrong."""

    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Invalid email or password"


class MissingTokenError(MarketplaceError):
    """Raised when no bearer token was presented."""

    status_code = 401
    code = "MISSING_TOKEN"
    default_message = "Authentication token required"


class InvalidTokenError(MarketplaceError):
    """Raised when a token has a bad signature, bad claims or has expired."""

    status_code = 403
    code = "INVALID_TOKEN"
    default_message = "Token is invalid or expired"


class ForbiddenError(MarketplaceError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Insufficient permissions"


class NotFoundError(MarketplaceError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"

    def __init__(self, resource: str = "Resource", details: dict[str, Any] | None = None):
        super().__init__(f"{resource} not found", details)


class RateLimitError(MarketplaceError):
    """Raised while an account is locked out after repeated login failures."""

    status_code = 429
    code = "RATE_LIMITED"

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            f"Too many failed login attempts. Try again in {retry_after} seconds.",
            {"retry_after": retry_after},
        )
