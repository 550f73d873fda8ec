"""Input sanitization utilities for FormGuard.

Accepted submissions are passed through ``sanitize_input`` before being
handed on; the security screen always runs on the raw value first.
"""

from __future__ import annotations

import html
import re

_TAGS = re.compile(r"<[^>]*>")

_CONTROL_CHARS = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]",
)


def sanitize_input(raw: object) -> str:
    """Clean a raw field value for onward submission.

    Steps:
    1. Non-string input becomes ``""``
    2. Strip anything shaped like an HTML tag (``<...>``)
    3. Strip ASCII control characters and DEL (preserving \\n, \\r, \\t)
    4. Trim surrounding whitespace
    """
    if not isinstance(raw, str):
        return ""
    text = _TAGS.sub("", raw)
    text = _CONTROL_CHARS.sub("", text)
    return text.strip()


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` for safe display inside HTML."""
    return html.escape(text, quote=True)
