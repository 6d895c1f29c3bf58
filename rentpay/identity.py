"""
Caller Identity Resolution

Services only see an opaque caller id; how it is obtained is pluggable.
``StaticIdentityResolver`` stands in for a real auth layer during
development, ``BearerTokenIdentityResolver`` reads the ``sub`` claim of a
JWT bearer token.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from fastapi import Request

from .config import Settings

logger = structlog.get_logger(__name__)


class IdentityResolver(ABC):
    @abstractmethod
    def resolve(self, request: Request) -> Optional[str]:
        """Return the caller id for the request, or None if unauthenticated."""
        raise NotImplementedError


class StaticIdentityResolver(IdentityResolver):
    """Attaches the same caller id to every request."""

    def __init__(self, caller_id: Optional[str]):
        self.caller_id = caller_id

    def resolve(self, request: Request) -> Optional[str]:
        return self.caller_id


class BearerTokenIdentityResolver(IdentityResolver):

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def resolve(self, request: Request) -> Optional[str]:
        authorization = request.headers.get("Authorization", "")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            logger.warning("bearer_token_rejected", error=str(e))
            return None
        subject = payload.get("sub")
        return str(subject) if subject else None


def create_access_token(
    caller_id: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Issue a bearer token for a caller (used by tooling and tests)."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=24))
    return jwt.encode({"sub": caller_id, "exp": expire}, secret_key, algorithm=algorithm)


def build_identity_resolver(settings: Settings) -> IdentityResolver:
    if settings.auth_mode == "jwt":
        return BearerTokenIdentityResolver(settings.jwt_secret_key, settings.jwt_algorithm)
    return StaticIdentityResolver(settings.static_user_id)
