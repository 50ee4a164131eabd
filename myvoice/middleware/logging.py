"""Structured logging middleware for FastAPI requests."""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from cryptography.fernet import Fernet
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from myvoice.config.settings import settings
from myvoice.utils import AuthenticationError, decode_owner_token

logger = logging.getLogger("myvoice.middleware.structured")

COLOR_RESET = "\u001b[0m"
COLOR_GREEN = "\u001b[32m"
COLOR_CYAN = "\u001b[36m"
COLOR_YELLOW = "\u001b[33m"
COLOR_RED = "\u001b[31m"

OWNER_HEADER = "x-owner-password"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one line per HTTP request, tagged with the owner session if any."""

    _cipher: ClassVar[Optional[Fernet]] = None

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        log_payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": request.method,
            "url": str(request.url),
            "client_ip": request.client.host if request.client else None,
            "request_bytes": request.headers.get("content-length"),
            "owner_session": self._owner_session(request),
        }

        try:
            response = await call_next(request)
        except Exception as exc:
            log_payload["status_code"] = 500
            log_payload["duration_ms"] = self._elapsed_ms(start_time)
            log_payload["error"] = repr(exc)
            logger.exception(self._format_console_message(log_payload))
            raise

        log_payload["status_code"] = response.status_code
        log_payload["duration_ms"] = self._elapsed_ms(start_time)
        logger.info(self._format_console_message(log_payload))
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)

    def _owner_session(self, request: Request) -> Optional[str]:
        """Return an opaque session descriptor for owner requests.

        Raw secrets never reach the log: password requests are only marked,
        token requests carry an encrypted fingerprint of the token's issue
        time.
        """

        if request.headers.get(OWNER_HEADER):
            return "password"

        scheme, _, token = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None

        try:
            payload = decode_owner_token(token)
        except AuthenticationError:
            return "invalid-token"

        issued_at = payload.iat or payload.exp
        fingerprint = hashlib.sha256(
            f"{payload.sub}:{int(issued_at.timestamp())}".encode("utf-8")
        ).hexdigest()
        return self._encrypt_session_metadata(
            {"session": fingerprint, "expires_at": payload.exp.isoformat()}
        )

    @classmethod
    def _encrypt_session_metadata(cls, metadata: dict[str, Any]) -> str:
        payload_bytes = json.dumps(metadata, default=str, separators=(",", ":")).encode("utf-8")
        return cls._get_cipher().encrypt(payload_bytes).decode("utf-8")

    @classmethod
    def _get_cipher(cls) -> Fernet:
        """Return a cached Fernet cipher initialised from the token secret."""

        if cls._cipher is None:
            secret_bytes = settings.security.token_secret_key.get_secret_value().encode("utf-8")
            key = base64.urlsafe_b64encode(hashlib.sha256(secret_bytes).digest())
            cls._cipher = Fernet(key)
        return cls._cipher

    @staticmethod
    def _format_console_message(payload: dict[str, Any]) -> str:
        """Return request metadata wrapped with ANSI color codes."""

        status = payload.get("status_code") or 0
        if 200 <= status < 300:
            color = COLOR_GREEN
        elif 400 <= status < 500:
            color = COLOR_YELLOW
        elif status >= 500:
            color = COLOR_RED
        else:
            color = COLOR_CYAN

        fields = [
            ("timestamp", payload.get("timestamp")),
            ("method", payload.get("method")),
            ("url", payload.get("url")),
            ("status", payload.get("status_code")),
            ("duration_ms", payload.get("duration_ms")),
            ("request_bytes", payload.get("request_bytes")),
            ("client_ip", payload.get("client_ip")),
            ("owner_session", payload.get("owner_session")),
        ]
        message = ", ".join(
            f"{name}={value if value is not None else '-'}" for name, value in fields
        )
        return f"{color}{message}{COLOR_RESET}"
