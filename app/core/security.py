"""
Security and Authentication
Handles JWT validation (Supabase Auth) and API key authentication

SECURITY FEATURES:
- JWT validation via Supabase
- organization_id taken from JWT app_metadata, falling back to the user's profile
- API key authentication with timing-safe comparison (service-to-service sync)
- RLS ensures database-level isolation
"""
import logging
import hmac
from typing import Dict, Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, APIKeyHeader
from supabase import AsyncClient

from app.core.dependencies import get_supabase
from app.core.config import settings
from app.services.sync.database import get_profile_organization

logger = logging.getLogger(__name__)

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


# ============================================================================
# JWT AUTHENTICATION (Supabase)
# ============================================================================

async def resolve_organization_id(supabase: AsyncClient, user) -> Optional[str]:
    """
    Organization for an authenticated user.

    Order: JWT app_metadata.organization_id → profiles.organization_id →
    DEFAULT_ORGANIZATION_ID.
    """
    app_metadata = user.app_metadata or {}
    organization_id = app_metadata.get("organization_id")
    if organization_id:
        return organization_id

    try:
        organization_id = await get_profile_organization(supabase, user.id)
    except Exception as e:
        logger.warning(f"Profile lookup failed for user {user.id}: {e}")
        organization_id = None

    return organization_id or settings.default_organization_id


async def get_current_user_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    supabase: AsyncClient = Depends(get_supabase)
) -> Dict[str, str]:
    """
    Get user context (user_id + organization_id) for the caller.

    Flow:
    1. Validate JWT with Supabase Auth
    2. Extract user_id from the JWT sub claim
    3. Resolve organization_id (see resolve_organization_id)

    Returns:
        dict with user_id, organization_id, email
    """
    if not credentials:
        logger.warning("No authorization credentials provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required"
        )

    token = credentials.credentials

    try:
        response = await supabase.auth.get_user(token)

        if not response or not response.user:
            logger.warning("JWT validation failed: no user returned")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication token"
            )

        user = response.user
        organization_id = await resolve_organization_id(supabase, user)

        if not organization_id:
            logger.error(f"User {user.id} has no organization")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User not assigned to any organization. Contact support."
            )

        logger.info(f"✅ User authenticated: {sanitize_for_logging(user.email or '')} (organization_id: {organization_id[:8]}...)")

        # Rate limits key on the user from here on
        request.state.user_id = user.id

        return {
            "user_id": user.id,
            "organization_id": organization_id,
            "email": user.email or "",
        }

    except HTTPException:
        # Re-raise HTTP exceptions (already formatted)
        raise
    except Exception as e:
        logger.error(f"JWT validation error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed"
        )


# ============================================================================
# API KEY AUTHENTICATION (service-to-service)
# ============================================================================

async def verify_api_key(api_key: Optional[str] = Depends(api_key_scheme)) -> bool:
    """
    Verify API key for service-to-service sync calls.

    Uses timing-safe comparison to prevent timing attacks.

    Raises:
        HTTPException if API key is invalid, missing or not configured
    """
    if not settings.sync_api_key:
        logger.error("API key authentication attempted but SYNC_API_KEY not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API key authentication not configured"
        )

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required (X-API-Key header)"
        )

    if not hmac.compare_digest(api_key, settings.sync_api_key):
        logger.warning(f"Invalid API key attempt: {api_key[:4]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    logger.info("✅ API key authenticated")
    return True


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def sanitize_for_logging(text: str, max_length: int = 50) -> str:
    """
    Sanitize sensitive data for logging (prevent PII leakage).

    Truncates long strings and masks email addresses.

    Example:
        "user@example.com" -> "u***@example.com"
    """
    if not text:
        return ""

    if len(text) > max_length:
        text = text[:max_length] + "..."

    if "@" in text:
        local, _, domain = text.partition("@")
        masked_local = local[0] + "***" if len(local) > 1 else local
        text = f"{masked_local}@{domain}"

    return text
