"""
Production Middleware
=====================

Request logging and CORS for the public API.

Usage:
    from pitchscout.middleware import setup_middleware
    setup_middleware(app)
"""

import time
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from pitchscout.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# REQUEST LOGGING
# =============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with timing and a short request id.

    Streaming responses are logged when their headers are sent, so
    ``duration_ms`` for chat covers time-to-first-byte only.
    """

    EXCLUDE_PATHS = {"/health", "/ready", "/live", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.EXCLUDE_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        start_time = time.perf_counter()

        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            status_code = response.status_code if response else 500

            log_data = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query": str(request.query_params) if request.query_params else None,
                "status": status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": self._get_client_ip(request),
                "authenticated": "authorization" in request.headers,
            }

            if status_code >= 500:
                logger.error(f"Request: {log_data}")
            elif status_code >= 400:
                logger.warning(f"Request: {log_data}")
            else:
                logger.info(f"Request: {log_data}")

            if response:
                response.headers["X-Request-ID"] = request_id

    def _get_client_ip(self, request: Request) -> str:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"


# =============================================================================
# SETUP FUNCTION
# =============================================================================

def setup_middleware(app: FastAPI) -> None:
    """
    Configure CORS and request logging.

    The AI endpoints are called from browsers on any origin, so the default
    is ``*``; credentials are only allowed with an explicit origin list.
    """
    cors_origins = settings.cors_origins_list
    wildcard = "*" in cors_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
        expose_headers=["X-Request-ID"],
    )

    # Outermost - logs everything
    app.add_middleware(RequestLoggingMiddleware)

    logger.info(f"Middleware configured: cors_origins={'*' if wildcard else len(cors_origins)}")
