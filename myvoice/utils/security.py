"""Owner secret checks and signed owner session tokens."""

from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from myvoice.config.settings import settings

OWNER_SUBJECT = "owner"


class AuthenticationError(Exception):
    """Raised when an owner token cannot be decoded or is otherwise invalid."""


class TokenPayload(BaseModel):
    """Minimal payload structure embedded in owner tokens."""

    sub: str
    exp: datetime
    iat: datetime | None = None


def is_authorized(supplied_secret: Optional[str]) -> bool:
    """True iff ``supplied_secret`` equals the configured owner password."""

    if not supplied_secret:
        return False
    expected = settings.security.owner_password.get_secret_value()
    return hmac.compare_digest(
        supplied_secret.encode("utf-8"),
        expected.encode("utf-8"),
    )


def create_owner_token(expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed token standing in for the raw owner password."""

    now = datetime.now(timezone.utc)
    expires_delta = expires_delta or timedelta(
        minutes=settings.security.token_expires_minutes
    )
    to_encode: dict[str, Any] = {
        "sub": OWNER_SUBJECT,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(
        to_encode,
        settings.security.token_secret_key.get_secret_value(),
        algorithm=settings.security.token_algorithm,
    )


def decode_owner_token(token: str) -> TokenPayload:
    """Decode and validate an owner token, returning its payload."""

    try:
        payload = jwt.decode(
            token,
            settings.security.token_secret_key.get_secret_value(),
            algorithms=[settings.security.token_algorithm],
        )
        decoded = TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid owner token") from exc
    if decoded.sub != OWNER_SUBJECT:
        raise AuthenticationError("Token was not issued to the owner")
    return decoded


__all__ = [
    "AuthenticationError",
    "OWNER_SUBJECT",
    "TokenPayload",
    "create_owner_token",
    "decode_owner_token",
    "is_authorized",
]
