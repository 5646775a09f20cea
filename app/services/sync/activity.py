"""
Sync activity recording
One "sync" activity per candidate persisted in this run (best effort)
"""
import logging
from typing import List, Optional

from app.models.schemas.activity import ActivityMetadata, ActivityRecord
from app.models.schemas.candidate import PersistedCandidate
from app.services.sync.database import ACTIVITIES_TABLE, CandidateStore
from app.services.sync.errors import ActivityWriteError, StorageError
from app.services.sync.transform import utc_now_iso

logger = logging.getLogger(__name__)


def build_sync_activities(
    persisted: List[PersistedCandidate],
    organization_id: str,
    actor_id: Optional[str],
    now: Optional[str] = None,
    source: str = "hubspot",
) -> List[ActivityRecord]:
    now = now or utc_now_iso()
    return [
        ActivityRecord(
            organization_id=organization_id,
            candidate_id=candidate.candidate_id,
            type="sync",
            description="Synced from HubSpot",
            metadata=ActivityMetadata(source=source, sync_date=now),
            created_by=actor_id,
            created_at=now,
        )
        for candidate in persisted
    ]


async def record_sync_activities(
    store: CandidateStore,
    persisted: List[PersistedCandidate],
    organization_id: str,
    actor_id: Optional[str],
    now: Optional[str] = None,
) -> int:
    """
    Write sync activities in one batched insert.

    Failure is logged and swallowed into a 0 return: candidate data is
    already stored, so the sync itself still counts as successful.

    Returns:
        Number of activity rows written
    """
    activities = build_sync_activities(persisted, organization_id, actor_id, now)
    if not activities:
        return 0

    try:
        await store.insert(ACTIVITIES_TABLE, [a.to_row() for a in activities])
    except StorageError as e:
        error = ActivityWriteError(f"Writing {len(activities)} sync activities failed: {e.message}")
        logger.error(f"❌ {error.message}")
        return 0

    logger.info(f"📝 Recorded {len(activities)} sync activities")
    return len(activities)
