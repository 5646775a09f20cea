"""
Function Routes
Service-to-service HubSpot sync (scheduled jobs, other backends)

Authenticated with X-API-Key; the caller names the organization explicitly.
"""
import logging
import httpx
from fastapi import APIRouter, Depends
from supabase import AsyncClient

from app.core.config import Settings
from app.core.dependencies import get_http_client, get_settings, get_supabase, require_hubspot
from app.core.security import verify_api_key
from app.models.schemas.sync import FunctionSyncRequest, SyncResult
from app.services.sync.orchestration.hubspot_sync import sync_hubspot_contacts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])


@router.post("/sync-hubspot", response_model=SyncResult)
async def sync_hubspot_function(
    body: FunctionSyncRequest,
    _authenticated: bool = Depends(verify_api_key),
    supabase: AsyncClient = Depends(get_supabase),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    config: Settings = Depends(get_settings)
):
    """Run a HubSpot sync for `organization_id` and return its SyncResult."""
    require_hubspot(config)

    logger.info(f"Function sync requested for organization {body.organization_id}")

    return await sync_hubspot_contacts(http_client, supabase, config, body.organization_id, body.actor_id)
