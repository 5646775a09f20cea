"""
Candidate Schemas
Local candidate records written to the `candidates` table
"""
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class CandidateLocation(BaseModel):
    """Composite location; only built when a city is known."""
    city: str
    category: str = "Unknown"


class HubSpotProvenance(BaseModel):
    """
    Where a candidate came from.
    Stored in `candidates.nurturing_info` so records can be re-processed later.
    """
    source: Literal["hubspot"] = "hubspot"
    hubspot_id: str
    last_synced_at: str
    hubspot_created_at: Optional[str] = None
    hubspot_modified_at: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class CandidateRecord(BaseModel):
    """
    Candidate row as produced by the HubSpot transformer.

    Natural key for reconciliation: (organization_id, personal_email).
    """
    organization_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    personal_email: Optional[str] = None
    work_email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    current_job_title: Optional[str] = None
    current_company: Optional[str] = None
    current_industry: Optional[str] = None
    functional_role: Optional[str] = None
    current_location: Optional[CandidateLocation] = None
    tech_stack: List[str] = Field(default_factory=list)
    past_titles: List[str] = Field(default_factory=list)
    relationship_type: str = "candidate"
    is_active_looking: bool = False
    nurturing_info: HubSpotProvenance
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        """JSON-ready dict; absent optionals are omitted rather than nulled."""
        return self.model_dump(mode="json", exclude_none=True)


class CandidateUpdate(BaseModel):
    """A transformed record matched to an existing candidate row."""
    candidate_id: str
    record: CandidateRecord


class PersistedCandidate(BaseModel):
    """A candidate that is durably stored after this run (has a row id)."""
    candidate_id: str
    personal_email: Optional[str] = None
    operation: Literal["insert", "update"]
