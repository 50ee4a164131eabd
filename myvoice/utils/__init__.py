"""Utility helpers for the MyVoice Studio backend."""

from .security import (
    AuthenticationError,
    create_owner_token,
    decode_owner_token,
    is_authorized,
)

__all__ = [
    "AuthenticationError",
    "create_owner_token",
    "decode_owner_token",
    "is_authorized",
]
