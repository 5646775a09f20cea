"""
Sync error taxonomy

Fatal errors (abort the run, surface as SyncResult.success=False):
- RemoteFetchError
- ReconciliationQueryError
- InsertBatchError

Non-fatal errors (collected or logged, the run continues):
- UpdateRecordError
- ActivityWriteError
"""
from typing import Optional


class SyncError(Exception):
    """Base class for every error raised inside the sync pipeline."""

    error_code = "sync_error"
    fatal = True

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code


class StorageError(SyncError):
    """A Supabase call failed (raised by the storage adapter)."""

    error_code = "storage_error"


class RemoteFetchError(SyncError):
    """Non-2xx response or network failure from HubSpot."""

    error_code = "remote_fetch_failed"

    def __init__(self, status_code: Optional[int], body: str = ""):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"HubSpot request failed: {body}"
        else:
            message = f"HubSpot API error: {status_code} - {body[:200]}"
        super().__init__(message)

    @property
    def is_transient(self) -> bool:
        return self.status_code is None or self.status_code == 429 or self.status_code >= 500


class ReconciliationQueryError(SyncError):
    """Lookup of existing candidates by email failed."""

    error_code = "reconciliation_query_failed"


class InsertBatchError(SyncError):
    """Batched insert of new candidates failed; the whole batch is treated as failed."""

    error_code = "insert_batch_failed"

    def __init__(self, message: str, record_count: int = 0):
        super().__init__(message)
        self.record_count = record_count


class UpdateRecordError(SyncError):
    """Update of one existing candidate failed."""

    error_code = "update_record_failed"
    fatal = False

    def __init__(self, candidate_id: str, message: str, personal_email: Optional[str] = None):
        super().__init__(f"Update of candidate {candidate_id} failed: {message}")
        self.candidate_id = candidate_id
        self.personal_email = personal_email


class ActivityWriteError(SyncError):
    """Writing sync activities failed; logged only."""

    error_code = "activity_write_failed"
    fatal = False
