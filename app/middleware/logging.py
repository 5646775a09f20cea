"""
Request Logging Middleware
Logs every HTTP request with timing and tags it with an X-Request-ID
"""
import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status code and duration.
    Reuses the caller's X-Request-ID when present, otherwise generates one.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.2f}ms) [{request_id[:8]}]",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_host": request.client.host if request.client else None
            }
        )

        return response
