"""Request ID and access-log middleware.

Learn: Every request gets a UUID, either from the incoming
X-Request-ID header (for distributed tracing) or auto-generated.
The ID is bound to structlog's contextvars so it appears in all
log entries for that request (including the auth.* and task.*
events), and returned in the response header. One
"http.request" line is logged per request with method, path,
status and duration.

This is the outermost middleware, so it also turns any exception
nothing else handled into the generic 500 body. Catching it here
logs it exactly once and keeps the X-Request-ID header on the reply.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from taskboard.config import settings

logger = structlog.get_logger()

SERVER_ERROR = "Something went wrong on the server"


def server_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected exception and build the generic 500 reply."""
    logger.exception(
        "taskboard.unhandled_error",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    content = {"message": SERVER_ERROR}
    if settings.debug:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate and propagate a unique request ID, log the request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception as e:
            response = server_error_response(request, e)
        logger.info(
            "http.request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        response.headers["X-Request-ID"] = request_id
        return response
