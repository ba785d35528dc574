"""
Exception Handlers.

Convert exceptions raised anywhere in a request into the standard error
envelope:

    {"success": false, "data": null,
     "error": {"code": ..., "message": ..., "details": ...},
     "metadata": {"timestamp": ..., "request_id": ...}}

ApplicationError subclasses map to 4xx/5xx via EXCEPTION_STATUS_MAP,
request validation failures to 422 VAL_REQUEST_INVALID, and anything else
to 500 SYS_INTERNAL_ERROR. Exception text is only exposed when
api_detailed_errors is on, and never to the public embed widget.

Usage:
    app = FastAPI()
    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wrapcommand.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from wrapcommand.backend.core.logging import get_logger
from wrapcommand.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    ConflictError: 409,
    RateLimitError: 429,
    ExternalServiceError: 502,
    DatabaseError: 503,
}

# Seconds a client should wait before retrying, sent as Retry-After
RETRY_AFTER_SECONDS: dict[type[ApplicationError], int] = {
    RateLimitError: 60,
    DatabaseError: 5,
}

PUBLIC_FRONTENDS = frozenset({"embed"})


def _status_for(exc: ApplicationError) -> int:
    """Resolve the HTTP status for an exception, honouring subclasses."""
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[cls]
    return 500


def _retry_after_for(exc: ApplicationError) -> int | None:
    for cls in type(exc).__mro__:
        if cls in RETRY_AFTER_SECONDS:
            return RETRY_AFTER_SECONDS[cls]
    return None


def _get_request_id(request: Request) -> str | None:
    """Request ID from request state (set by middleware), else the header."""
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str):
        return request_id
    return request.headers.get("x-request-id")


def _get_frontend(request: Request) -> str | None:
    frontend = getattr(request.state, "frontend", None)
    return frontend if isinstance(frontend, str) else None


def _detailed_errors_enabled(request: Request) -> bool:
    if _get_frontend(request) in PUBLIC_FRONTENDS:
        return False

    from wrapcommand.backend.core.config import get_app_config

    return get_app_config().features.api_detailed_errors


def _log_context(request: Request, **fields: Any) -> dict[str, Any]:
    context = {
        "path": request.url.path,
        "method": request.method,
        "request_id": _get_request_id(request),
        "frontend": _get_frontend(request),
        **fields,
    }
    return {key: value for key, value in context.items() if value is not None}


def _error_response(
    request: Request,
    status_code: int,
    error: ErrorDetail,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    response = ErrorResponse(
        error=error,
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json"),
        headers=headers,
    )


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """Handle every ApplicationError subclass."""
    status_code = _status_for(exc)
    log_extra = _log_context(request, code=exc.code, message=exc.message, status=status_code)

    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
    else:
        logger.warning("Client error", extra=log_extra)

    error = ErrorDetail(code=exc.code, message=exc.message)
    details = getattr(exc, "details", None)
    if details:
        error.details = details

    retry_after = _retry_after_for(exc)
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None

    return _error_response(request, status_code, error, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle FastAPI request validation errors.

    Each error reports a dotted location such as ``body.customer_email``
    or ``query.model``. Submitted values are not echoed back.
    """
    errors = exc.errors()
    details = {
        "validation_errors": [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", "Validation error"),
                "type": err.get("type", "unknown"),
            }
            for err in errors
        ]
    }

    logger.warning(
        "Request validation failed",
        extra=_log_context(
            request,
            error_count=len(errors),
            fields=[item["field"] for item in details["validation_errors"]],
        ),
    )

    error = ErrorDetail(
        code="VAL_REQUEST_INVALID",
        message="Request validation failed",
        details=details,
    )
    return _error_response(request, 422, error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and return a generic 500."""
    logger.exception(
        "Unhandled exception",
        extra=_log_context(request, exception_type=type(exc).__name__),
    )

    error = ErrorDetail(
        code="SYS_INTERNAL_ERROR",
        message="An unexpected error occurred",
    )
    if _detailed_errors_enabled(request):
        error.details = {"exception_type": type(exc).__name__, "exception": str(exc)}

    return _error_response(request, 500, error)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.debug("Exception handlers registered")
