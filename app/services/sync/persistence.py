"""
Candidate persistence
Writes reconciled candidates to Supabase

- New candidates: ONE batched insert (failure aborts the run)
- Existing candidates: one update per record, issued concurrently;
  a failed update is collected and never cancels its siblings
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from app.models.schemas.candidate import CandidateRecord, CandidateUpdate, PersistedCandidate
from app.services.sync.database import CANDIDATES_TABLE, CandidateStore
from app.services.sync.errors import InsertBatchError, StorageError, UpdateRecordError

logger = logging.getLogger(__name__)

# Only written when the row is created; an update never overwrites them
INSERT_ONLY_FIELDS = {"created_by", "relationship_type", "is_active_looking"}


@dataclass
class PersistResult:
    inserted: List[PersistedCandidate] = field(default_factory=list)
    updated: List[PersistedCandidate] = field(default_factory=list)
    failures: List[UpdateRecordError] = field(default_factory=list)

    @property
    def persisted(self) -> List[PersistedCandidate]:
        return self.inserted + self.updated

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)

    @property
    def updated_count(self) -> int:
        return len(self.updated)


def update_patch(record: CandidateRecord) -> Dict[str, Any]:
    row = record.to_row()
    for column in INSERT_ONLY_FIELDS:
        row.pop(column, None)
    return row


async def insert_candidates(store: CandidateStore, to_insert: List[CandidateRecord]) -> List[PersistedCandidate]:
    """
    Insert new candidates in one call.

    Raises:
        InsertBatchError: the batch failed, or the database returned fewer rows than sent
    """
    if not to_insert:
        return []

    try:
        rows = await store.insert(CANDIDATES_TABLE, [c.to_row() for c in to_insert])
    except StorageError as e:
        raise InsertBatchError(f"Candidate insert failed: {e.message}", record_count=len(to_insert)) from e

    if len(rows) != len(to_insert):
        raise InsertBatchError(
            f"Candidate insert returned {len(rows)} rows for {len(to_insert)} records",
            record_count=len(to_insert),
        )

    # PostgREST returns inserted rows in request order
    return [
        PersistedCandidate(
            candidate_id=str(row["id"]),
            personal_email=row.get("personal_email", candidate.personal_email),
            operation="insert",
        )
        for row, candidate in zip(rows, to_insert)
    ]


async def _update_one(store: CandidateStore, update: CandidateUpdate) -> PersistedCandidate:
    record = update.record
    try:
        await store.update(CANDIDATES_TABLE, record.organization_id, update.candidate_id, update_patch(record))
    except StorageError as e:
        raise UpdateRecordError(update.candidate_id, e.message, personal_email=record.personal_email) from e

    return PersistedCandidate(
        candidate_id=update.candidate_id,
        personal_email=record.personal_email,
        operation="update",
    )


async def update_candidates(
    store: CandidateStore,
    to_update: List[CandidateUpdate],
) -> Tuple[List[PersistedCandidate], List[UpdateRecordError]]:
    """
    Update existing candidates concurrently and wait for all of them.

    Returns:
        (updated candidates, UpdateRecordError per failed record)
    """
    outcomes = await asyncio.gather(
        *(_update_one(store, update) for update in to_update),
        return_exceptions=True
    )

    updated: List[PersistedCandidate] = []
    failures: List[UpdateRecordError] = []
    for update, outcome in zip(to_update, outcomes):
        if isinstance(outcome, UpdateRecordError):
            logger.error(f"❌ {outcome.message}")
            failures.append(outcome)
        elif isinstance(outcome, Exception):
            logger.error(f"❌ Unexpected error updating candidate {update.candidate_id}: {outcome}")
            failures.append(UpdateRecordError(update.candidate_id, str(outcome), update.record.personal_email))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            updated.append(outcome)

    return updated, failures


async def persist_candidates(
    store: CandidateStore,
    to_insert: List[CandidateRecord],
    to_update: List[CandidateUpdate],
) -> PersistResult:
    """
    Persist one page of reconciled candidates.

    Every input record ends up in exactly one of inserted / updated / failures.

    Raises:
        InsertBatchError: fatal, nothing from the insert set is assumed committed
    """
    inserted = await insert_candidates(store, to_insert)
    updated, failures = await update_candidates(store, to_update)

    logger.info(f"💾 Persisted page: {len(inserted)} inserted, {len(updated)} updated, {len(failures)} failed")
    return PersistResult(inserted=inserted, updated=updated, failures=failures)
