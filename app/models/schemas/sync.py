"""
Sync Schemas
Models for HubSpot sync triggers and their results
"""
from typing import Optional, List
from pydantic import BaseModel, Field


class SyncResult(BaseModel):
    """
    Outcome of one sync run.
    Returned to every caller instead of raising, so the UI can render it directly.
    """
    success: bool
    organization_id: str
    synced_count: int = 0  # inserted + successfully updated
    inserted_count: int = 0
    updated_count: int = 0
    failed_count: int = 0
    duplicates_skipped: int = 0
    activities_recorded: int = 0
    batches_processed: int = 0
    error: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    failed_stage: Optional[str] = None


class FunctionSyncRequest(BaseModel):
    """Body of the service-to-service sync call."""
    organization_id: str = Field(min_length=1)
    actor_id: Optional[str] = None


class SyncJobResponse(BaseModel):
    """Response for a queued background sync."""
    status: str  # "queued"
    job_id: str
    message: str
