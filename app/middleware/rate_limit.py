"""
Rate Limiting
Keeps manual sync triggers from hammering HubSpot and Supabase (slowapi)

RATE LIMITS:
- Global default: 100 requests/minute per key
- HubSpot sync triggers: 10/hour (set on the routes)
"""
import logging
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def rate_limit_key_func(request: Request) -> str:
    """
    Authenticated requests are limited per user, anonymous ones per IP.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"

    ip = get_remote_address(request)
    return f"ip:{ip}"


limiter = Limiter(
    key_func=rate_limit_key_func,
    default_limits=["100/minute"],
    storage_uri="memory://",  # Single instance; use Redis when scaling out
)


def install_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter and its 429 handler to the app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    logger.info("✅ Rate limiting enabled (default: 100/minute, sync triggers: 10/hour)")
