"""
Request Context Middleware.

Tags every request with a correlation ID and the calling frontend, times it,
and binds both to structlog so that every log line emitted while serving the
request carries them.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from wrapcommand.backend.core.logging import get_logger

logger = get_logger(__name__)

# Keep aligned with VALID_SOURCES in logging.py
KNOWN_FRONTENDS = {"web", "cli", "api", "embed", "internal"}


def _request_logging_enabled() -> bool:
    from wrapcommand.backend.core.config import get_app_config

    return get_app_config().features.api_request_logging


def resolve_frontend(header_value: str | None) -> str:
    """Normalize an X-Frontend-ID header value, falling back to 'unknown'."""
    frontend = (header_value or "unknown").strip().lower()
    return frontend if frontend in KNOWN_FRONTENDS else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds request context to every request.

    Headers read:
        X-Request-ID   - propagated when present, generated otherwise
        X-Frontend-ID  - web, cli, api, embed or internal

    Headers written:
        X-Request-ID, X-Response-Time

    Handlers can read request.state.request_id, request.state.frontend
    and request.state.start_time.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = resolve_frontend(request.headers.get("X-Frontend-ID"))
        start = time.perf_counter()

        request.state.request_id = request_id
        request.state.frontend = frontend
        request.state.start_time = start

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )

        logger.debug(
            "Request started",
            extra={"client_host": request.client.host if request.client else None},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                    "error_type": type(exc).__name__,
                },
            )
            raise
        else:
            duration_ms = int((time.perf_counter() - start) * 1000)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"
            log = logger.info if _request_logging_enabled() else logger.debug
            log(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
