"""
HubSpot Schemas
Wire models for the HubSpot CRM v3 contacts API
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class HubSpotContact(BaseModel):
    """
    One contact as returned by GET /crm/v3/objects/contacts.
    Immutable snapshot of the remote record; never written back.
    """
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    properties: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    def prop(self, name: str) -> Optional[str]:
        """Property value as a stripped string, or None when missing/blank."""
        value = self.properties.get(name)
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class ContactPage(BaseModel):
    """A single page of contacts plus the opaque cursor for the next one."""
    records: List[HubSpotContact] = Field(default_factory=list)
    next_cursor: Optional[str] = None
