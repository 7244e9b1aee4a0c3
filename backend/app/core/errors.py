"""
HTTP rendering of errors.

Every failure leaves the API as
``{"error": {"code", "message", "details"?, "request_id"}}``.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import MarketplaceError, RateLimitError, ValidationError
from app.core.security import SECURITY_HEADERS

logger = logging.getLogger(__name__)


class ErrorResponse:
    @staticmethod
    def create(
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        """
        Build the JSON error envelope.

        ``details`` and ``request_id`` are omitted from the body when empty.
        """
        body: Dict[str, Any] = {"code": code, "message": message}
        if details:
            body["details"] = details
        if request_id:
            body["request_id"] = request_id

        return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    """Answer a domain exception with its own status code and error code."""
    headers = None
    if isinstance(exc, RateLimitError):
        headers = {"Retry-After": str(exc.retry_after)}

    return ErrorResponse.create(
        exc.code,
        exc.message,
        status_code=exc.status_code,
        details=exc.details,
        request_id=_request_id(request),
        headers=headers,
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed request bodies with 400 instead of FastAPI's 422."""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return ErrorResponse.create(
        ValidationError.code,
        "; ".join(errors) or "Invalid request",
        status_code=status.HTTP_400_BAD_REQUEST,
        details={"errors": errors},
        request_id=_request_id(request),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log unexpected failures and answer with a body that leaks nothing.

    Starlette runs this handler outside the HTTP middlewares, so the
    request-id and security headers are set here.
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    request_id = _request_id(request)
    return ErrorResponse.create(
        MarketplaceError.code,
        "Internal server error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        request_id=request_id,
        headers={**SECURITY_HEADERS, "X-Request-ID": request_id},
    )
