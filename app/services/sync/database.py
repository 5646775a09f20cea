"""
Storage adapter for the sync pipeline
Wraps the async Supabase client behind the small surface the pipeline needs

Every call is scoped by organization_id (mandatory argument), on top of
the RLS policies that enforce the same boundary in the database.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

from supabase import AsyncClient

from app.services.sync.errors import StorageError

logger = logging.getLogger(__name__)


CANDIDATES_TABLE = "candidates"
ACTIVITIES_TABLE = "activities"
SYNC_JOBS_TABLE = "sync_jobs"
PROFILES_TABLE = "profiles"


class CandidateStore(Protocol):
    """Storage port used by the reconciler, persister and activity recorder."""

    async def select(
        self,
        table: str,
        organization_id: str,
        column: str,
        values: Iterable[str],
        fields: str = "*",
    ) -> List[Dict[str, Any]]:
        ...

    async def insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        ...

    async def update(
        self,
        table: str,
        organization_id: str,
        record_id: str,
        patch: Dict[str, Any],
    ) -> Dict[str, Any]:
        ...


class SupabaseStore:
    """
    CandidateStore backed by Supabase (PostgREST).

    The client is created and owned by the caller (app lifespan or worker task).
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def select(
        self,
        table: str,
        organization_id: str,
        column: str,
        values: Iterable[str],
        fields: str = "*",
    ) -> List[Dict[str, Any]]:
        values = list(values)
        if not values:
            return []

        try:
            result = await self.client.table(table)\
                .select(fields)\
                .eq("organization_id", organization_id)\
                .in_(column, values)\
                .execute()
        except Exception as e:
            logger.error(f"❌ Select from {table} failed ({len(values)} keys): {e}")
            raise StorageError(f"Select from {table} failed: {e}") from e

        return result.data or []

    async def insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return []

        try:
            result = await self.client.table(table).insert(rows).execute()
        except Exception as e:
            logger.error(f"❌ Insert into {table} failed ({len(rows)} rows): {e}")
            raise StorageError(f"Insert into {table} failed: {e}") from e

        return result.data or []

    async def update(
        self,
        table: str,
        organization_id: str,
        record_id: str,
        patch: Dict[str, Any],
    ) -> Dict[str, Any]:
        try:
            result = await self.client.table(table)\
                .update(patch)\
                .eq("id", record_id)\
                .eq("organization_id", organization_id)\
                .execute()
        except Exception as e:
            raise StorageError(f"Update of {table}.{record_id} failed: {e}") from e

        if not result.data:
            raise StorageError(f"Update of {table}.{record_id} matched no rows")

        return result.data[0]


# ============================================================================
# SYNC JOB TRACKING
# ============================================================================

async def create_sync_job(client: AsyncClient, organization_id: str, user_id: str) -> str:
    """Insert a queued `sync_jobs` row and return its id."""
    job = await client.table(SYNC_JOBS_TABLE).insert({
        "organization_id": organization_id,
        "user_id": user_id,
        "job_type": "hubspot",
        "status": "queued"
    }).execute()

    return job.data[0]["id"]


async def update_sync_job(client: AsyncClient, job_id: str, **fields: Any):
    await client.table(SYNC_JOBS_TABLE).update(fields).eq("id", job_id).execute()


async def get_sync_job(client: AsyncClient, job_id: str, organization_id: str) -> Optional[Dict[str, Any]]:
    result = await client.table(SYNC_JOBS_TABLE)\
        .select("*")\
        .eq("id", job_id)\
        .eq("organization_id", organization_id)\
        .limit(1)\
        .execute()

    if result.data:
        return result.data[0]
    return None


# ============================================================================
# PROFILES
# ============================================================================

async def get_profile_organization(client: AsyncClient, user_id: str) -> Optional[str]:
    """organization_id from the user's profile row, if any."""
    result = await client.table(PROFILES_TABLE)\
        .select("organization_id")\
        .eq("id", user_id)\
        .limit(1)\
        .execute()

    if result.data:
        return result.data[0].get("organization_id")
    return None
