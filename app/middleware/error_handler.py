"""
Global Error Handler Middleware
Last line of defence: nothing escapes a request as a bare traceback
"""
import logging
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.services.sync.errors import SyncError

logger = logging.getLogger(__name__)


def _error_body(request: Request, **fields: Any) -> Dict[str, Any]:
    body = {"success": False, **fields, "path": request.url.path}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        body["request_id"] = request_id
    return body


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Converts anything that escapes a route into a JSON 500.

    The sync pipeline reports its own failures as a SyncResult, so a
    SyncError here means a caller skipped that path; it still gets its
    error_code in the response.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except SyncError as exc:
            logger.error(f"Sync error escaped {request.method} {request.url.path}: {exc.message}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content=_error_body(request, error=exc.message, error_code=exc.error_code)
            )
        except Exception as exc:
            logger.error(
                f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
                exc_info=True,
                extra={"client_host": request.client.host if request.client else None}
            )
            return JSONResponse(
                status_code=500,
                content=_error_body(request, error="Internal server error", error_type=type(exc).__name__)
            )
