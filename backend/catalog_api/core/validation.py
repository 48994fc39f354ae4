from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from fastapi import HTTPException, status

_UUID4_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_uuid4(value: str | None) -> bool:
    return bool(value) and _UUID4_RE.fullmatch(value) is not None


def require_uuid(raw: str, label: str) -> str:
    """Path ids must be UUIDv4; anything else is a 400, never a lookup."""
    if not is_uuid4(raw):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label} ID format")
    return raw.lower()


def is_email(value: str | None) -> bool:
    return bool(value) and _EMAIL_RE.fullmatch(value) is not None


def normalize_email(value: str) -> str:
    return value.strip().lower()


# -----------------------------
# Request shape
# -----------------------------
@dataclass(frozen=True)
class ShapeCheck:
    accepted: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> ShapeCheck:
        return cls(accepted=True)

    @classmethod
    def rejected(cls, reason: str) -> ShapeCheck:
        return cls(accepted=False, reason=reason)


def _declared_length(content_length: str | None) -> int:
    if content_length is None or not content_length.strip():
        return 0
    try:
        return int(content_length.strip())
    except ValueError:
        # A garbled header is treated as a declared payload.
        return 1


def validate_empty_request(
    query_params: Mapping[str, object] | None,
    body: bytes | None,
    content_length: str | None,
    *,
    allow_query: bool = False,
) -> ShapeCheck:
    """
    Accept only requests that carry no payload.

    Rejects query parameters (unless ``allow_query``), a non-empty body, and a
    Content-Length above zero even when no body bytes were read.
    """
    if not allow_query and query_params and len(query_params) > 0:
        return ShapeCheck.rejected("query parameters")
    if body:
        return ShapeCheck.rejected("request body")
    if _declared_length(content_length) > 0:
        return ShapeCheck.rejected("content-length")
    return ShapeCheck.ok()
