from __future__ import annotations

from fastapi import HTTPException, Request, status

from catalog_api.core.validation import ShapeCheck, validate_empty_request


async def read_request_shape(request: Request) -> ShapeCheck:
    body = await request.body()
    return validate_empty_request(
        request.query_params,
        body,
        request.headers.get("content-length"),
    )


async def require_no_body(request: Request) -> None:
    """Public GET/DELETE routes take no payload; query strings are tolerated."""
    body = await request.body()
    check = validate_empty_request(
        request.query_params,
        body,
        request.headers.get("content-length"),
        allow_query=True,
    )
    if not check.accepted:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body not allowed")
