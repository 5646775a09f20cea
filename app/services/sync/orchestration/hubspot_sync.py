"""
HubSpot sync engine
Coordinates HubSpot → Clear Match contact sync

Per page, strictly sequential:
1. Fetch a page of contacts from HubSpot
2. Transform to candidate records
3. Reconcile against existing candidates (by personal email)
4. Persist (batched insert + concurrent per-record updates)
5. Record one "sync" activity per persisted candidate

Never raises: every outcome is returned as a SyncResult.
"""
import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional, Protocol

import httpx
from supabase import AsyncClient

from app.models.schemas.hubspot import ContactPage
from app.models.schemas.sync import SyncResult
from app.services.sync.activity import record_sync_activities
from app.services.sync.database import CandidateStore, SupabaseStore
from app.services.sync.errors import SyncError
from app.services.sync.persistence import persist_candidates
from app.services.sync.providers.hubspot import HubSpotContactSource
from app.services.sync.reconcile import reconcile_candidates
from app.services.sync.transform import transform_page, utc_now_iso

logger = logging.getLogger(__name__)


class SyncStage(str, Enum):
    FETCHING = "fetching"
    TRANSFORMING = "transforming"
    RECONCILING = "reconciling"
    PERSISTING = "persisting"
    RECORDING_ACTIVITY = "recording_activity"
    DONE = "done"
    FAILED = "failed"


class ContactSource(Protocol):
    async def fetch_page(self, after: Optional[str] = None) -> ContactPage:
        ...


async def run_hubspot_sync(
    source: ContactSource,
    store: CandidateStore,
    organization_id: str,
    actor_id: Optional[str],
    page_delay: float = 0.1,
    clock: Callable[[], str] = utc_now_iso,
) -> SyncResult:
    """
    Run a full HubSpot contact sync for one organization.

    Args:
        source: Remote contact source
        store: Storage port
        organization_id: Tenant that owns the synced candidates
        actor_id: User (or service) triggering the sync
        page_delay: Seconds to wait between pages (rate-limit courtesy)
        clock: Returns the sync timestamp for each page

    Returns:
        SyncResult. success is False when a fatal error stopped the run
        or when any individual update failed.
    """
    logger.info(f"🚀 Starting HubSpot sync for organization {organization_id}")

    stage = SyncStage.FETCHING
    after: Optional[str] = None
    batches = 0
    inserted = 0
    updated = 0
    duplicates = 0
    activities = 0
    errors: List[str] = []
    failed_ids: List[str] = []

    def result(success: bool, error: Optional[str] = None, failed_stage: Optional[SyncStage] = None) -> SyncResult:
        return SyncResult(
            success=success,
            organization_id=organization_id,
            synced_count=inserted + updated,
            inserted_count=inserted,
            updated_count=updated,
            failed_count=len(failed_ids),
            duplicates_skipped=duplicates,
            activities_recorded=activities,
            batches_processed=batches,
            error=error,
            errors=errors,
            failed_stage=failed_stage.value if failed_stage else None,
        )

    try:
        while True:
            stage = SyncStage.FETCHING
            page = await source.fetch_page(after)
            if not page.records:
                break

            batches += 1

            stage = SyncStage.TRANSFORMING
            now = clock()
            candidates = transform_page(page.records, organization_id, actor_id, now)

            stage = SyncStage.RECONCILING
            reconciled = await reconcile_candidates(store, candidates, organization_id)
            duplicates += len(reconciled.duplicates)

            stage = SyncStage.PERSISTING
            persisted = await persist_candidates(store, reconciled.to_insert, reconciled.to_update)
            inserted += persisted.inserted_count
            updated += persisted.updated_count
            for failure in persisted.failures:
                failed_ids.append(failure.candidate_id)
                errors.append(failure.message)

            stage = SyncStage.RECORDING_ACTIVITY
            activities += await record_sync_activities(store, persisted.persisted, organization_id, actor_id, now)

            logger.info(f"📦 Batch {batches} done: {inserted + updated} synced so far")

            after = page.next_cursor
            if not after:
                break

            if page_delay:
                await asyncio.sleep(page_delay)

    except SyncError as e:
        logger.error(f"❌ HubSpot sync failed for organization {organization_id} while {stage.value}: {e.message}")
        errors.append(e.message)
        return result(False, error=e.message, failed_stage=stage)
    except Exception as e:
        logger.exception(f"❌ Unexpected error in HubSpot sync for organization {organization_id} while {stage.value}")
        errors.append(str(e))
        return result(False, error=f"Unexpected error: {e}", failed_stage=stage)

    logger.info("=" * 80)
    logger.info(f"✅ HubSpot sync complete for organization {organization_id}")
    logger.info(f"Batches: {batches}")
    logger.info(f"Inserted: {inserted}")
    logger.info(f"Updated: {updated}")
    logger.info(f"Failed updates: {len(failed_ids)}")
    logger.info(f"Duplicates skipped: {duplicates}")
    logger.info(f"Activities: {activities}")
    logger.info("=" * 80)

    if failed_ids:
        return result(
            False,
            error=f"{len(failed_ids)} candidate update(s) failed: {', '.join(failed_ids)}",
        )

    return result(True)


async def sync_hubspot_contacts(
    http_client: httpx.AsyncClient,
    supabase: AsyncClient,
    settings,
    organization_id: str,
    actor_id: Optional[str],
) -> SyncResult:
    """
    Wire the production adapters (HubSpot over httpx, Supabase store) and run the sync.

    Used by the HTTP routes and the background worker alike.
    """
    source = HubSpotContactSource.from_settings(http_client, settings)
    store = SupabaseStore(supabase)

    return await run_hubspot_sync(
        source,
        store,
        organization_id,
        actor_id,
        page_delay=settings.hubspot_page_delay_seconds,
    )
