"""
Contact Sync System
HubSpot → Clear Match candidate sync pipeline
"""
from app.services.sync.database import CandidateStore, SupabaseStore
from app.services.sync.errors import (
    SyncError,
    RemoteFetchError,
    ReconciliationQueryError,
    InsertBatchError,
    UpdateRecordError,
    ActivityWriteError,
)
from app.services.sync.orchestration.hubspot_sync import SyncStage, run_hubspot_sync, sync_hubspot_contacts

__all__ = [
    "CandidateStore",
    "SupabaseStore",
    "SyncError",
    "RemoteFetchError",
    "ReconciliationQueryError",
    "InsertBatchError",
    "UpdateRecordError",
    "ActivityWriteError",
    "SyncStage",
    "run_hubspot_sync",
    "sync_hubspot_contacts",
]
