"""
Pydantic Schemas
Domain and request/response models
"""

# HubSpot wire models
from .hubspot import HubSpotContact, ContactPage

# Candidates
from .candidate import (
    CandidateLocation,
    HubSpotProvenance,
    CandidateRecord,
    CandidateUpdate,
    PersistedCandidate,
)

# Activities
from .activity import ActivityMetadata, ActivityRecord

# Sync schemas
from .sync import SyncResult, FunctionSyncRequest, SyncJobResponse

__all__ = [
    # HubSpot
    "HubSpotContact",
    "ContactPage",
    # Candidates
    "CandidateLocation",
    "HubSpotProvenance",
    "CandidateRecord",
    "CandidateUpdate",
    "PersistedCandidate",
    # Activities
    "ActivityMetadata",
    "ActivityRecord",
    # Sync
    "SyncResult",
    "FunctionSyncRequest",
    "SyncJobResponse",
]
