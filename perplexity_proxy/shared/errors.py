"""
Error taxonomy and the JSON error envelope returned on every failure.
"""

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel

from perplexity_proxy.shared.constants import (
    AUTHORIZATION_HINT,
    CORS_HEADERS,
    INVALID_AUTH_MESSAGE,
    INVALID_MESSAGES_MESSAGE,
    MISSING_AUTH_MESSAGE,
    MISSING_MODEL_MESSAGE,
    SERVER_MISCONFIGURED_MESSAGE,
    UPSTREAM_ERROR_MESSAGE,
)


class ErrorEnvelope(BaseModel):
    error: str
    details: Optional[str] = None
    status: Optional[int] = None
    type: Optional[str] = None


class ProxyError(Exception):
    """A failure classified at the point it was detected."""

    kind = "ProxyError"
    status_code = 500
    message = "Internal proxy error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(error=self.message)


class MissingAuthError(ProxyError):
    kind = "MissingAuth"
    status_code = 401
    message = MISSING_AUTH_MESSAGE


class InvalidAuthError(ProxyError):
    kind = "InvalidAuth"
    status_code = 401
    message = INVALID_AUTH_MESSAGE


class InvalidMessagesError(ProxyError):
    kind = "InvalidMessages"
    status_code = 400
    message = INVALID_MESSAGES_MESSAGE


class MissingModelError(ProxyError):
    kind = "MissingModel"
    status_code = 400
    message = MISSING_MODEL_MESSAGE


class ServerMisconfiguredError(ProxyError):
    kind = "ServerMisconfigured"
    status_code = 500
    message = SERVER_MISCONFIGURED_MESSAGE


class UpstreamError(ProxyError):
    """Perplexity answered with a non-success status; that status is relayed."""

    kind = "UpstreamError"
    message = UPSTREAM_ERROR_MESSAGE

    def __init__(self, status_code: int, details: str):
        super().__init__()
        self.status_code = status_code
        self.details = details

    def envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(error=self.message, details=self.details, status=self.status_code)


class IdentityServiceConfigError(Exception):
    """The identity service cannot be reached because it has no URL."""


def status_for_unexpected(exc: Exception) -> int:
    """
    Status for an exception nobody classified: 401 when its message mentions
    authorization, 500 otherwise. The match is a plain case-sensitive substring test.
    """
    return 401 if AUTHORIZATION_HINT in str(exc) else 500


def unexpected_envelope(exc: Exception) -> ErrorEnvelope:
    return ErrorEnvelope(error=str(exc), type=type(exc).__name__)


def error_response(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    """Renders an envelope with the fixed CORS headers, leaving out unset fields."""
    return JSONResponse(
        content=envelope.model_dump(exclude_none=True),
        status_code=status_code,
        headers=CORS_HEADERS,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Framework errors (unrouted method, unknown path) in the same envelope and headers."""
    headers = {**CORS_HEADERS, **(exc.headers or {})}
    if exc.status_code in (204, 304):
        return Response(status_code=exc.status_code, headers=headers)
    return JSONResponse(
        content=ErrorEnvelope(error=str(exc.detail)).model_dump(exclude_none=True),
        status_code=exc.status_code,
        headers=headers,
    )
