"""API route definitions for FormGuard."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from formguard.api.security import client_ip, timing_safe_compare
from formguard.engine import FormEngine
from formguard.models import (
    ContactSubmission,
    FieldRequest,
    MessageReport,
    SecurityCheckRequest,
    SecurityVerdict,
    SubmissionReport,
    ValidationVerdict,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("formguard.audit")

router = APIRouter(tags=["validation"])


def verify_api_key(
    request: Request,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> None:
    """Optional API key auth for /api/v1 endpoints.

    If `FG_API_KEY` is set, requests must include a matching `X-API-Key` header.
    """
    expected = request.app.state.settings.api_key
    if not expected:
        return
    if x_api_key is None or not timing_safe_compare(x_api_key, expected):
        audit_logger.warning(
            "AUTH_FAILURE ip=%s path=%s",
            client_ip(request),
            request.url.path,
        )
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


def _get_engine(request: Request) -> FormEngine:
    return request.app.state.engine


@router.post(
    "/validate/name",
    response_model=ValidationVerdict,
    dependencies=[Depends(verify_api_key)],
)
async def validate_name(body: FieldRequest, request: Request) -> ValidationVerdict:
    return _get_engine(request).validate_field("name", body.value)


@router.post(
    "/validate/email",
    response_model=ValidationVerdict,
    dependencies=[Depends(verify_api_key)],
)
async def validate_email(body: FieldRequest, request: Request) -> ValidationVerdict:
    return _get_engine(request).validate_field("email", body.value)


@router.post(
    "/validate/message",
    response_model=MessageReport,
    dependencies=[Depends(verify_api_key)],
)
async def validate_message(body: FieldRequest, request: Request) -> MessageReport:
    return _get_engine(request).validate_field("message", body.value)


@router.post(
    "/security/check",
    response_model=SecurityVerdict,
    dependencies=[Depends(verify_api_key)],
)
async def security_check(body: SecurityCheckRequest, request: Request) -> SecurityVerdict:
    return _get_engine(request).check_field(body.field, body.value)


@router.post(
    "/submit",
    response_model=SubmissionReport,
    dependencies=[Depends(verify_api_key)],
)
async def submit(body: ContactSubmission, request: Request) -> SubmissionReport:
    engine = _get_engine(request)
    request_id = getattr(request.state, "request_id", None)
    return engine.submit(body, client_key=client_ip(request), request_id=request_id)


@router.get("/validators", dependencies=[Depends(verify_api_key)])
async def list_validators(request: Request) -> dict[str, list[str]]:
    engine = _get_engine(request)
    return {
        "validators": engine.available_validators,
        "injection_families": engine.security.detector.families,
    }
