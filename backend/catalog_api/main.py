import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api.core.config import settings
from catalog_api.core.logging_config import configure_logging
from catalog_api.middleware.request_logging import register_request_logging_middleware
from catalog_api.routes.health import router as health_router
from catalog_api.routes.images import router as images_router
from catalog_api.routes.products import router as products_router
from catalog_api.routes.users import router as users_router
from catalog_api.routes.verification import router as verification_router

configure_logging(
    level=settings.LOG_LEVEL,
    json_output=settings.is_prod,
    log_file=settings.LOG_FILE or None,
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Catalog API")
logger.info(
    "Startup config: ENV=%s sns_topic=%s s3_bucket=%s verify_expiry_s=%s",
    settings.ENV,
    "set" if settings.SNS_TOPIC_ARN else "unset",
    settings.S3_BUCKET_NAME or "unset",
    settings.EMAIL_VERIFY_TOKEN_EXPIRE_SECONDS,
)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def _error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


@app.exception_handler(StarletteHTTPException)
def http_exception_handler(request: Request, exc: StarletteHTTPException):  # noqa: ARG001
    detail = exc.detail
    message: str
    details: dict | None = None
    code = _error_code(exc.status_code)

    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        # HTTPException(detail={"message": "...", "code": "...", "details": {...}})
        msg = detail.get("message")
        message = msg if isinstance(msg, str) and msg else "Request failed"
        det = detail.get("details")
        details = det if isinstance(det, dict) else None
        explicit = detail.get("code") or (details or {}).get("code")
        if isinstance(explicit, str) and explicit:
            code = explicit
    else:
        message = str(detail) if detail is not None else "Request failed"

    payload: dict = {"error": code, "message": message}
    if details:
        payload["details"] = details
    return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may carry the raw exception object from a custom validator.
    errors = []
    for err in exc.errors():
        item = {k: v for k, v in err.items() if k != "ctx"}
        if "ctx" in err:
            item["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(item)
    return jsonable_encoder(errors)


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request payload",
            "details": {"errors": _jsonable_errors(exc)},
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Added last so it wraps CORS and sees every response.
register_request_logging_middleware(app)

app.include_router(health_router)
# Before users: "/v1/user/verify" must not be captured by "/v1/user/{user_id}".
app.include_router(verification_router)
app.include_router(users_router)
app.include_router(products_router)
app.include_router(images_router)
