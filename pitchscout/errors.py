"""
Error types for the PitchScout API.

Every error raised deliberately by the service derives from PitchScoutError
and is rendered by ``register_exception_handlers`` as ``{"error": message}``
with the error's status code. Nothing is retried: each error is terminal for
the request that raised it.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

logger = logging.getLogger(__name__)


class PitchScoutError(Exception):
    """Base exception carrying a user-facing message and an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthenticationError(PitchScoutError):
    status_code = 401


class PermissionDeniedError(PitchScoutError):
    status_code = 403


class NotFoundError(PitchScoutError):
    status_code = 404


class UsageLimitExceeded(PitchScoutError):
    """Raised when a user has used up an endpoint's daily ceiling."""

    status_code = 429

    def __init__(self, endpoint: str, limit: int):
        super().__init__(
            f"Rate limit exceeded. Daily limit of {limit} requests reached for {endpoint}. "
            "Please try again tomorrow."
        )
        self.endpoint = endpoint
        self.limit = limit


# ---------------------------------------------------------------------------
# AI gateway
# ---------------------------------------------------------------------------

class GatewayError(PitchScoutError):
    """Non-2xx answer from the AI gateway, mapped to a fixed message."""

    def __init__(self, message: str, status_code: int = 500, upstream_status: int | None = None):
        super().__init__(message, status_code)
        self.upstream_status = upstream_status

    @classmethod
    def from_status(cls, upstream_status: int) -> "GatewayError":
        if upstream_status == 429:
            return cls("Rate limit exceeded. Please try again later.", 429, upstream_status)
        if upstream_status == 402:
            return cls("Payment required. Please add credits to continue.", 402, upstream_status)
        return cls(f"AI gateway error: {upstream_status}", 500, upstream_status)


class GatewayConfigurationError(PitchScoutError):
    status_code = 500


class ResponseParseError(PitchScoutError):
    """The gateway answered, but not with parseable JSON."""

    status_code = 500


# ---------------------------------------------------------------------------
# Uploads and storage
# ---------------------------------------------------------------------------

class VideoValidationError(PitchScoutError):
    status_code = 400


class StorageError(PitchScoutError):
    status_code = 502


class ApiClientError(PitchScoutError):
    """Error body returned to the command-line client by the API."""


def register_exception_handlers(app: FastAPI) -> None:
    """Render PitchScoutError subclasses as ``{"error": ...}`` JSON bodies."""

    @app.exception_handler(PitchScoutError)
    async def handle_pitchscout_error(request: Request, exc: PitchScoutError) -> ORJSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
        return ORJSONResponse(status_code=exc.status_code, content={"error": exc.message})
