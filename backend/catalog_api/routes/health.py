# catalog_api/routes/health.py
"""
Liveness probe.

Every answer is status-only: no body, no error detail, always uncacheable.
A successful probe leaves one row in ``health_checks``.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from catalog_api.core.database import get_db
from catalog_api.core.validation import ShapeCheck
from catalog_api.dependencies.request_shape import read_request_shape
from catalog_api.services.health import record_health_check

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "X-Content-Type-Options": "nosniff",
}

PROBE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _empty(status_code: int, **extra_headers: str) -> Response:
    return Response(status_code=status_code, headers={**NO_CACHE_HEADERS, **extra_headers})


@router.api_route("/healthz", methods=PROBE_METHODS, include_in_schema=False)
def healthz(
    request: Request,
    shape: ShapeCheck = Depends(read_request_shape),
    db: Session = Depends(get_db),
) -> Response:
    if request.method != "GET":
        return _empty(status.HTTP_405_METHOD_NOT_ALLOWED, Allow="GET")

    if not shape.accepted:
        logger.info("Health check rejected: %s present", shape.reason)
        return _empty(status.HTTP_400_BAD_REQUEST)

    try:
        record_health_check(db)
    except Exception:
        db.rollback()
        logger.exception("Health check failed: database unavailable")
        return _empty(status.HTTP_503_SERVICE_UNAVAILABLE)

    return _empty(status.HTTP_200_OK)
