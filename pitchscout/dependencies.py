"""
FastAPI Dependencies
====================

Common dependencies for dependency injection: database sessions, the
authenticated user, the AI gateway, object storage and the usage limiter.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pitchscout.config import settings
from pitchscout.database import get_db
from pitchscout.errors import AuthenticationError
from pitchscout.gateway import AIGatewayClient
from pitchscout.rate_limit import DailyUsageLimiter
from pitchscout.storage import VideoStorage

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

__all__ = [
    "CurrentUser",
    "close_clients",
    "decode_access_token",
    "get_current_user",
    "get_db",
    "get_gateway",
    "get_optional_user",
    "get_storage",
    "get_usage_limiter",
]


@dataclass(frozen=True)
class CurrentUser:
    """Identity extracted from a verified access token."""
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None


def decode_access_token(token: str) -> CurrentUser:
    """
    Verify an identity-provider access token and return its subject.

    Raises:
        AuthenticationError: if the token is expired, malformed or unsigned
    """
    options = {"require": ["sub", "exp"]}
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise AuthenticationError("Invalid token subject")

    return CurrentUser(id=user_id, email=payload.get("email"), role=payload.get("role"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """Require a valid ``Authorization: Bearer <token>`` header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing authorization header")
    return decode_access_token(credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[CurrentUser]:
    """Like ``get_current_user`` but anonymous callers get None."""
    if credentials is None or not credentials.credentials:
        return None
    return decode_access_token(credentials.credentials)


# Long-lived clients shared by all requests; closed on application shutdown.
_gateway: Optional[AIGatewayClient] = None
_storage: Optional[VideoStorage] = None
_usage_limiter = DailyUsageLimiter()


def get_gateway() -> AIGatewayClient:
    """AI gateway client shared across requests."""
    global _gateway
    if _gateway is None:
        _gateway = AIGatewayClient()
    return _gateway


def get_storage() -> VideoStorage:
    global _storage
    if _storage is None:
        _storage = VideoStorage()
    return _storage


def get_usage_limiter() -> DailyUsageLimiter:
    return _usage_limiter


async def close_clients() -> None:
    """Close the shared HTTP clients."""
    global _gateway, _storage
    if _gateway is not None:
        await _gateway.close()
        _gateway = None
    if _storage is not None:
        await _storage.close()
        _storage = None
