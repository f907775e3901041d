"""Request context middleware.

Every request gets an ID, taken from `X-Request-ID` or generated, that
is bound into the structlog context and echoed on the response. One
access log line is written per request; for the product endpoints it
carries the cache status and result totals read back from the `X-FF-*`
headers. Exceptions escaping the routers are turned into a 500 in the
uniform error format.
"""

import time
from typing import Any, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Response header -> access log field
RESULT_LOG_FIELDS = {
    "X-FF-Cache": "cache",
    "X-FF-Total": "total",
    "X-FF-Total-Pages": "total_pages",
}


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: dict | list | None = None,
) -> JSONResponse:
    """Build a response in the uniform error format.

    Args:
        request: The failed request.
        status_code: HTTP status.
        error_code: Machine-readable code, e.g. `CATALOG_UNAVAILABLE`.
        message: Human-readable message.
        details: Extra context for the client.

    Returns:
        `{error_code, message, details, request_id}` JSON response.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or {},
            "request_id": getattr(request.state, "request_id", None),
        },
    )


def result_log_fields(response: Response) -> dict[str, Any]:
    """Cache status and totals a response reports, keyed by log field."""
    return {
        field: response.headers[header]
        for header, field in RESULT_LOG_FIELDS.items()
        if header in response.headers
    }


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds the request ID, logs the request and absorbs crashes."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.exception(
                    "Unhandled exception",
                    method=request.method,
                    path=request.url.path,
                    error=str(e),
                )
                response = error_response(
                    request,
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "INTERNAL_ERROR",
                    "An internal error occurred",
                )

            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                **result_log_fields(response),
            )
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        return response


def setup_middleware(app: FastAPI) -> None:
    """Install the request context middleware.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(RequestContextMiddleware)
