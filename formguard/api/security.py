"""Security middleware and utilities for the FormGuard API."""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

_REQUEST_ID_RE = re.compile(r"^[\w\-]{1,128}$")
_MAX_REQUEST_BODY_BYTES = 64 * 1024


def timing_safe_compare(a: str, b: str) -> bool:
    """Compare two strings in constant time to prevent timing attacks."""
    a_bytes = hashlib.sha256(a.encode("utf-8")).digest()
    b_bytes = hashlib.sha256(b.encode("utf-8")).digest()
    return hmac.compare_digest(a_bytes, b_bytes)


def sanitize_request_id(raw: str) -> str:
    """Sanitize X-Request-ID to prevent log/header injection.

    Allows only alphanumeric, hyphen, and underscore; max 128 chars.
    Returns an empty string if nothing usable is left (caller generates one).
    """
    if _REQUEST_ID_RE.match(raw):
        return raw
    cleaned = re.sub(r"[^\w\-]", "", raw)[:128]
    if cleaned:
        logger.warning("Sanitized X-Request-ID header (contained invalid characters)")
        return cleaned
    return ""


def client_ip(request: Request) -> str:
    """Best-effort client address; first X-Forwarded-For hop wins."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject standard security headers into every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none'"
        )
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = (
                "max-age=63072000; includeSubDomains"
            )
        return response


class RequestBodyLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies exceeding a hard byte limit before full read."""

    def __init__(self, app: Any, max_bytes: int = _MAX_REQUEST_BODY_BYTES) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                too_large = int(content_length) > self.max_bytes
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"detail": "Invalid Content-Length header."},
                )
            if too_large:
                logger.warning(
                    "Rejected request: Content-Length %s exceeds limit %s",
                    content_length, self.max_bytes,
                )
                return JSONResponse(
                    status_code=413,
                    content={
                        "detail": f"Request body too large. Maximum: {self.max_bytes} bytes."
                    },
                )
        return await call_next(request)
