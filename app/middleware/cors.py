"""
CORS Configuration
Cross-Origin Resource Sharing settings for the Clear Match web app

- Development: any origin, no credentials
- Staging/production: explicit origins from CORS_ALLOWED_ORIGINS only
- Never allows the "null" origin (prevents file:// attacks)
"""
import logging
from fastapi.middleware.cors import CORSMiddleware as FastAPICORSMiddleware
from app.core.config import settings

logger = logging.getLogger(__name__)


def get_cors_middleware():
    """Returns the CORS middleware class and its options for the current environment."""
    if settings.environment == "development":
        logger.warning("⚠️  DEV MODE: CORS allowing ALL origins (*)")
        return FastAPICORSMiddleware, {
            "allow_origins": ["*"],
            "allow_credentials": False,  # Must be False when using "*"
            "allow_methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["*"],
            "max_age": 600,
        }

    allowed_origins = [origin for origin in settings.cors_origins if origin != "null"]
    logger.info(f"🌐 CORS allowed origins: {allowed_origins}")

    return FastAPICORSMiddleware, {
        "allow_origins": allowed_origins,
        "allow_credentials": True,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": [
            "Content-Type",
            "Authorization",
            "X-API-Key",
            "X-Request-ID",
        ],
        "expose_headers": ["X-Request-ID"],
        "max_age": 600,  # Cache preflight requests for 10 minutes
    }
