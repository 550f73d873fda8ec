"""FastAPI application factory for FormGuard."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from formguard import __version__
from formguard.api.routes import router
from formguard.api.security import (
    RequestBodyLimitMiddleware,
    SecurityHeadersMiddleware,
    client_ip,
    sanitize_request_id,
)
from formguard.config import Settings, get_settings
from formguard.engine import FormEngine
from formguard.exceptions import (
    BotSubmission,
    FormGuardError,
    RateLimitExceeded,
    SecurityViolation,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("formguard.audit")


def _rejection_response(exc: FormGuardError) -> JSONResponse:
    """Map a refused submission to its HTTP status and body.

    Bodies never carry the submitted values, only the field and family.
    """
    content: dict[str, Any] = {"detail": exc.message}
    headers: dict[str, str] = {}
    status_code = 400

    if isinstance(exc, RateLimitExceeded):
        status_code = 429
        content["kind"] = "rate_limit"
        headers["Retry-After"] = str(max(int(exc.retry_after + 0.999), 1))
    elif isinstance(exc, SecurityViolation):
        content.update(kind="security", field=exc.field, family=exc.family)
    elif isinstance(exc, BotSubmission):
        content["kind"] = "security"

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FormGuardError)
    async def formguard_error_handler(request: Request, exc: FormGuardError) -> JSONResponse:
        return _rejection_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", "Validation error"),
                "type": err.get("type", "value_error"),
            }
            for err in exc.errors()
        ]
        return JSONResponse(status_code=422, content={"detail": errors})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.exception("Unhandled exception request_id=%s", request_id)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "request_id": request_id},
        )


def create_app(settings: Settings | None = None, engine: FormEngine | None = None) -> FastAPI:
    """Build the API around one ``FormEngine``, whose rate-limit window is shared
    by every request the app serves."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Contact-form validation and injection screening",
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
    )

    # Contact forms post cross-origin from a static site; last added = outermost.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestBodyLimitMiddleware, max_bytes=settings.max_request_body_bytes)

    app.state.settings = settings
    app.state.engine = engine or FormEngine(settings=settings)

    app.include_router(router, prefix="/api/v1")

    @app.middleware("http")
    async def request_context(request: Request, call_next) -> Response:  # noqa: ANN001
        raw_id = request.headers.get("X-Request-ID", "")
        request_id = sanitize_request_id(raw_id) if raw_id else ""
        if raw_id and not request_id:
            audit_logger.warning("INVALID_REQUEST_ID ip=%s", client_ip(request))
        request.state.request_id = request_id or uuid.uuid4().hex

        start = time.monotonic()
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        response.headers["X-Response-Time-Ms"] = str(round((time.monotonic() - start) * 1000, 2))
        return response

    _install_error_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
