"""Pydantic data models for FormGuard."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

MAX_FIELD_LENGTH = 10_000


class RejectionKind(str, Enum):
    """Category of a rejected field or submission."""

    FORMAT = "format"
    PLAUSIBILITY = "plausibility"
    SECURITY = "security"
    RATE_LIMIT = "rate_limit"


class ThreatFamily(str, Enum):
    """Which screen of the security check tripped."""

    INPUT_TYPE = "input_type"
    LENGTH = "length"
    SQL = "sql"
    XSS = "xss"
    NOSQL = "nosql"
    LDAP = "ldap"
    COMMAND = "command"
    PATH_TRAVERSAL = "path_traversal"


class ValidationVerdict(BaseModel):
    """Outcome of validating a single name or email field."""

    field: str
    valid: bool
    confidence: int | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Heuristic confidence (0-100) where the validator scores.",
    )
    reason: str | None = Field(
        default=None,
        description="Human-readable rejection reason; None when valid.",
    )
    suggestions: list[str] = Field(default_factory=list)
    kind: RejectionKind | None = None


class QualityFeedback(BaseModel):
    """Coarse quality band for a message."""

    acceptable: bool
    message: str
    suggestion: str | None = None


class MessageReport(BaseModel):
    """Outcome of analysing a free-text message."""

    field: str = "message"
    valid: bool
    issues: list[str] = Field(default_factory=list)
    quality: int = Field(ge=0, le=100, description="Advisory quality score (0-100).")
    feedback: QualityFeedback
    suggestions: list[str] = Field(default_factory=list)
    reading_ease: float | None = Field(
        default=None,
        description="Flesch reading ease, advisory only.",
    )


class SecurityVerdict(BaseModel):
    """Outcome of screening one raw field for injection patterns."""

    field: str
    valid: bool
    threat: str | None = None
    family: ThreatFamily | None = None


class ContactSubmission(BaseModel):
    """A complete contact-form submission, as received."""

    name: str = Field(..., max_length=MAX_FIELD_LENGTH)
    email: str = Field(..., max_length=MAX_FIELD_LENGTH)
    message: str = Field(..., max_length=MAX_FIELD_LENGTH)
    honeypot: str | None = Field(
        default=None,
        max_length=MAX_FIELD_LENGTH,
        description="Hidden field; any non-blank value marks a bot.",
    )
    csrf_token: str | None = None


class SubmissionReport(BaseModel):
    """Aggregated verdict for a contact-form submission."""

    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )
    version: str = ""
    accepted: bool
    kind: RejectionKind | None = None
    reason: str | None = None
    retry_after: float | None = None
    security: list[SecurityVerdict] = Field(default_factory=list)
    name: ValidationVerdict | None = None
    email: ValidationVerdict | None = None
    message: MessageReport | None = None
    sanitized: dict[str, str] = Field(
        default_factory=dict,
        description="Sanitized field values, present only when accepted.",
    )
    csrf_token: str | None = None


class FieldRequest(BaseModel):
    """Inbound request to validate one field value."""

    value: str = Field(..., max_length=MAX_FIELD_LENGTH)


class SecurityCheckRequest(BaseModel):
    """Inbound request to screen one raw field value."""

    field: str = Field(..., min_length=1, max_length=64)
    value: str = Field(..., max_length=MAX_FIELD_LENGTH)
