"""
Activity Schemas
Append-only audit entries in the `activities` table
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel


class ActivityMetadata(BaseModel):
    source: str = "hubspot"
    sync_date: str


class ActivityRecord(BaseModel):
    organization_id: str
    candidate_id: str
    type: str = "sync"
    description: str = "Synced from HubSpot"
    metadata: ActivityMetadata
    created_by: Optional[str] = None
    created_at: str

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
