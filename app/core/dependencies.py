"""
Dependency Injection
Provides reusable dependencies for FastAPI routes

DEPENDENCIES:
- Supabase client (database + auth)
- HTTP client (HubSpot API)

Clients are created in the app lifespan and stored on `app.state`;
their lifecycle belongs to the application, not to this module.
"""
import logging

import httpx
from fastapi import FastAPI, HTTPException, Request, status
from supabase import AsyncClient, acreate_client

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)


# ============================================================================
# INITIALIZATION (called on app startup)
# ============================================================================

async def create_supabase_client(config: Settings = settings) -> AsyncClient:
    """Service-role Supabase client (backend only)."""
    return await acreate_client(config.supabase_url, config.supabase_service_key)


def create_http_client(config: Settings = settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.hubspot_request_timeout),
        limits=httpx.Limits(max_keepalive_connections=5, max_connections=10)
    )


async def initialize_clients(app: FastAPI):
    """
    Create shared clients on app startup.

    Called from main.py lifespan event.
    """
    logger.info("Initializing clients...")

    try:
        app.state.supabase = await create_supabase_client()
        logger.info("✅ Supabase client initialized")
    except Exception as e:
        logger.error(f"❌ Failed to initialize Supabase: {e}")
        raise

    app.state.http_client = create_http_client()
    logger.info("✅ HTTP client initialized")


async def shutdown_clients(app: FastAPI):
    """
    Close shared clients on app shutdown.

    Called from main.py lifespan event.
    """
    logger.info("Shutting down clients...")

    http_client = getattr(app.state, "http_client", None)
    if http_client:
        try:
            await http_client.aclose()
            logger.info("✅ HTTP client closed")
        except Exception as e:
            logger.error(f"Error closing HTTP client: {e}")

    # Supabase doesn't need explicit cleanup
    app.state.supabase = None
    app.state.http_client = None

    logger.info("✅ All clients shutdown complete")


# ============================================================================
# DEPENDENCY FUNCTIONS (injected into routes)
# ============================================================================

def get_settings() -> Settings:
    return settings


def get_supabase(request: Request) -> AsyncClient:
    """
    Get Supabase client for dependency injection.

    Usage:
        @router.get("/example")
        async def example(supabase: AsyncClient = Depends(get_supabase)):
            result = await supabase.table("candidates").select("*").execute()
            return result.data
    """
    client = getattr(request.app.state, "supabase", None)
    if client is None:
        logger.error("Supabase client not initialized")
        raise RuntimeError("Supabase client not initialized. Call initialize_clients() first.")

    return client


def get_http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        logger.error("HTTP client not initialized")
        raise RuntimeError("HTTP client not initialized. Call initialize_clients() first.")

    return client


def require_hubspot(config: Settings) -> None:
    """Refuse sync requests when no HubSpot token is configured."""
    if not config.hubspot_api_key:
        logger.error("HubSpot sync requested but HUBSPOT_API_KEY not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="HubSpot integration is not configured"
        )
