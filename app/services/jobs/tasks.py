"""
Dramatiq Background Tasks
Runs HubSpot sync jobs outside the request cycle
"""
import dramatiq
import asyncio
import logging
from typing import Optional

from app.services.jobs.broker import broker  # noqa: F401 (registers the broker before actors)

logger = logging.getLogger(__name__)


async def _run_hubspot_sync_job(organization_id: str, actor_id: Optional[str], job_id: str) -> dict:
    """
    Create fresh clients, run the sync and record the outcome on the job row.

    Dramatiq workers run in separate processes, so clients are never shared
    with the API process; they are closed in the same event loop that used them.
    """
    from app.core.config import settings
    from app.core.dependencies import create_http_client, create_supabase_client
    from app.services.sync.database import update_sync_job
    from app.services.sync.orchestration.hubspot_sync import sync_hubspot_contacts
    from app.services.sync.transform import utc_now_iso

    supabase = await create_supabase_client(settings)
    http_client = create_http_client(settings)

    try:
        await update_sync_job(supabase, job_id, status="running", started_at=utc_now_iso())

        try:
            result = await sync_hubspot_contacts(http_client, supabase, settings, organization_id, actor_id)
        except Exception as e:
            await update_sync_job(
                supabase, job_id,
                status="failed",
                completed_at=utc_now_iso(),
                error_message=str(e)
            )
            raise

        await update_sync_job(
            supabase, job_id,
            status="completed" if result.success else "failed",
            completed_at=utc_now_iso(),
            result=result.model_dump(mode="json"),
            error_message=result.error
        )
        return result.model_dump(mode="json")

    finally:
        await http_client.aclose()


@dramatiq.actor(max_retries=3)
def sync_hubspot_task(organization_id: str, actor_id: Optional[str], job_id: str):
    """
    Background job for HubSpot contact sync.

    Args:
        organization_id: Organization that owns the synced candidates
        actor_id: User who triggered the sync
        job_id: sync_jobs row for status tracking
    """
    logger.info(f"🚀 Starting HubSpot sync job {job_id} for organization {organization_id}")

    try:
        result = asyncio.run(_run_hubspot_sync_job(organization_id, actor_id, job_id))
    except Exception as e:
        logger.error(f"❌ HubSpot sync job {job_id} failed: {e}")
        raise  # Re-raise for Dramatiq retry logic

    logger.info(f"✅ HubSpot sync job {job_id} finished: {result.get('synced_count', 0)} contacts synced")
    return result
