"""Authorization service for kiosk and admin endpoints.

Provides unified helpers for:
- Bearer token verification (HMAC-signed tokens by default, replaceable)
- Identity extraction for citizen endpoints
- Role checks for admin/staff endpoints (role is read from the database)
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from typing import Protocol

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suvidha.api.errors import ForbiddenError, UnauthorizedError
from suvidha.config import get_settings
from suvidha.models.enums import UserRole
from suvidha.models.user import User
from suvidha.services import get_async_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Decoded caller identity."""

    user_id: int
    """Internal user ID the token was issued for."""

    role: UserRole
    """Role claimed by the token (authoritative only for citizen paths)."""


class TokenVerifier(Protocol):
    """Validates a bearer token and yields an identity, or None when invalid."""

    def verify(self, token: str) -> Identity | None: ...


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


class HmacTokenVerifier:
    """Default verifier for `<base64url payload>.<hex HMAC-SHA256>` tokens.

    Payload is JSON: {"userId": int, "role": str, "exp": unix seconds}.
    """

    def __init__(self, secret: str, max_age_seconds: int = 7 * 24 * 3600) -> None:
        self._secret = secret.encode()
        self.max_age_seconds = max_age_seconds

    def _sign(self, payload: str) -> str:
        return hmac.new(self._secret, payload.encode(), hashlib.sha256).hexdigest()

    def issue(self, user_id: int, role: UserRole, now: float | None = None) -> str:
        """Issue a token for a user (used by the seed CLI and tests)."""
        issued_at = time.time() if now is None else now
        claims = {
            "userId": user_id,
            "role": UserRole(role).value,
            "exp": int(issued_at + self.max_age_seconds),
        }
        payload = _b64encode(json.dumps(claims, separators=(",", ":")).encode())
        return f"{payload}.{self._sign(payload)}"

    def verify(self, token: str) -> Identity | None:
        """Verify signature and expiry.

        Returns:
            Identity if the token is valid, None otherwise
        """
        payload, sep, signature = token.partition(".")
        if not sep or not payload or not signature:
            return None

        if not hmac.compare_digest(self._sign(payload), signature):
            return None

        try:
            claims = json.loads(_b64decode(payload))
            user_id = int(claims["userId"])
            role = UserRole(claims["role"])
            expires_at = float(claims["exp"])
        except (binascii.Error, ValueError, KeyError, TypeError):
            return None

        if expires_at < time.time():
            return None

        return Identity(user_id=user_id, role=role)


def get_token_verifier() -> TokenVerifier:
    """FastAPI dependency returning the configured token verifier."""
    settings = get_settings()
    return HmacTokenVerifier(settings.auth_secret, settings.token_max_age_seconds)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extract the raw token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_identity(
    authorization: str | None = Header(None),  # noqa: B008
    verifier: TokenVerifier = Depends(get_token_verifier),  # noqa: B008
) -> Identity:
    """Authenticate the caller.

    Raises:
        UnauthorizedError: Missing header or invalid/expired token
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise UnauthorizedError()

    identity = verifier.verify(token)
    if identity is None:
        logger.warning("Invalid bearer token")
        raise UnauthorizedError("Invalid token", code="invalid_token")

    return identity


async def authorize_staff(session: AsyncSession, identity: Identity) -> User:
    """Ensure the caller exists and is ADMIN or STAFF according to the database.

    Raises:
        ForbiddenError: User missing or role not allowed
    """
    result = await session.execute(select(User).where(User.id == identity.user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_staff_or_admin:
        logger.warning("Admin access denied: user_id=%s", identity.user_id)
        raise ForbiddenError()

    return user


async def require_staff(
    identity: Identity = Depends(get_current_identity),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> User:
    """FastAPI dependency for admin endpoints: authenticated ADMIN or STAFF user."""
    return await authorize_staff(session, identity)


__all__ = [
    "HmacTokenVerifier",
    "Identity",
    "TokenVerifier",
    "authorize_staff",
    "extract_bearer_token",
    "get_current_identity",
    "get_token_verifier",
    "require_staff",
]
