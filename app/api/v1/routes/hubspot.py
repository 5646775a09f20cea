"""
HubSpot Sync Routes
User-triggered HubSpot contact sync (inline or as a background job)
"""
import logging
import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from supabase import AsyncClient

from app.core.config import Settings
from app.core.dependencies import get_http_client, get_settings, get_supabase, require_hubspot
from app.core.security import get_current_user_context
from app.middleware.rate_limit import limiter
from app.models.schemas.sync import SyncJobResponse, SyncResult
from app.services.jobs.tasks import sync_hubspot_task
from app.services.sync.database import create_sync_job, get_sync_job
from app.services.sync.orchestration.hubspot_sync import sync_hubspot_contacts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/hubspot", tags=["hubspot"])


@router.post("/sync", response_model=SyncResult)
@limiter.limit("10/hour")
async def sync_hubspot(
    request: Request,
    user_context: dict = Depends(get_current_user_context),
    supabase: AsyncClient = Depends(get_supabase),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    config: Settings = Depends(get_settings)
):
    """
    Sync HubSpot contacts into the caller's organization and wait for the result.

    Always returns 200 with a SyncResult; `success` tells the UI whether
    to show the synced count or the failure reason.
    """
    require_hubspot(config)

    user_id = user_context["user_id"]
    organization_id = user_context["organization_id"]

    logger.info(f"HubSpot sync requested for organization {organization_id} (user {user_id})")

    result = await sync_hubspot_contacts(http_client, supabase, config, organization_id, user_id)

    if result.success:
        logger.info(f"✅ Synced {result.synced_count} contacts from HubSpot for organization {organization_id}")
    else:
        logger.warning(f"⚠️  HubSpot sync for organization {organization_id} failed: {result.error}")

    return result


@router.post("/sync/background", response_model=SyncJobResponse, status_code=202)
@limiter.limit("10/hour")
async def sync_hubspot_background(
    request: Request,
    user_context: dict = Depends(get_current_user_context),
    supabase: AsyncClient = Depends(get_supabase),
    config: Settings = Depends(get_settings)
):
    """
    Start HubSpot sync as background job.

    Returns immediately with job_id for status tracking.
    """
    require_hubspot(config)

    user_id = user_context["user_id"]
    organization_id = user_context["organization_id"]

    logger.info(f"Enqueueing HubSpot sync for organization {organization_id} (user {user_id})")

    try:
        job_id = await create_sync_job(supabase, organization_id, user_id)
        sync_hubspot_task.send(organization_id, user_id, job_id)
    except Exception as e:
        logger.error(f"Error enqueueing HubSpot sync: {e}")
        raise HTTPException(status_code=500, detail="Could not start HubSpot sync")

    logger.info(f"✅ HubSpot sync job {job_id} queued")

    return SyncJobResponse(
        status="queued",
        job_id=job_id,
        message="HubSpot sync started in background. Use GET /api/hubspot/sync/jobs/{job_id} to check status."
    )


@router.get("/sync/jobs/{job_id}")
async def get_job_status(
    job_id: str,
    user_context: dict = Depends(get_current_user_context),
    supabase: AsyncClient = Depends(get_supabase)
):
    """
    Get status of a background sync job.

    Returns:
    - status: queued, running, completed, failed
    - started_at / completed_at
    - result: SyncResult of the run
    - error_message: failure reason, if any
    """
    job = await get_sync_job(supabase, job_id, user_context["organization_id"])

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job
