"""
HubSpot → Clear Match contact transformer

Maps one HubSpot contact onto a candidate record:
- static field mapping
- HubSpot timestamps → ISO-8601
- city/state → composite location (only when a city is known)
- ";"-joined multi-select values → ordered lists
- placeholder name when BOTH first and last name are missing
- provenance stamped on every record

Pure: no I/O. Given the same contact and the same `now`, output is identical.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from dateutil import parser as date_parser

from app.models.schemas.candidate import CandidateLocation, CandidateRecord, HubSpotProvenance
from app.models.schemas.hubspot import HubSpotContact

logger = logging.getLogger(__name__)


# HubSpot property → candidates column (first match wins for shared columns)
FIELD_MAPPING: Dict[str, str] = {
    "firstname": "first_name",
    "lastname": "last_name",
    "email": "personal_email",
    "work_email": "work_email",
    "phone": "phone",
    "linkedin_url": "linkedin_url",
    "linkedinbio": "linkedin_url",
    "website": "github_url",
    "jobtitle": "current_job_title",
    "company": "current_company",
    "industry": "current_industry",
    "job_function": "functional_role",
}

# HubSpot multi-select property → candidates array column
ARRAY_FIELD_MAPPING: Dict[str, str] = {
    "tech_stack": "tech_stack",
    "past_job_titles": "past_titles",
}

LOCATION_PROPERTIES = ("city", "state")
TIMESTAMP_PROPERTIES = ("createdate", "lastmodifieddate")

# Default projection requested from HubSpot
HUBSPOT_PROPERTIES: List[str] = list(dict.fromkeys(
    ["hs_object_id"]
    + list(FIELD_MAPPING)
    + list(ARRAY_FIELD_MAPPING)
    + list(LOCATION_PROPERTIES)
    + list(TIMESTAMP_PROPERTIES)
))

PLACEHOLDER_FIRST_NAME = "Unknown"
PLACEHOLDER_LAST_NAME = "Contact"
MULTI_VALUE_DELIMITER = ";"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def hubspot_timestamp_to_iso(value: Optional[str]) -> Optional[str]:
    """
    Convert a HubSpot timestamp to ISO-8601 (UTC).

    Legacy properties carry epoch milliseconds as a string ("1700000000000");
    the v3 API returns ISO strings ("2024-01-05T10:00:00.000Z"). Both are
    accepted. Anything unparseable returns None.

    Examples:
        >>> hubspot_timestamp_to_iso("0")
        '1970-01-01T00:00:00+00:00'
    """
    if value is None:
        return None

    value = str(value).strip()
    if not value:
        return None

    try:
        if value.lstrip("-").isdigit():
            parsed = datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
        else:
            parsed = date_parser.isoparse(value)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            parsed = parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError) as e:
        logger.debug(f"Ignoring unparseable HubSpot timestamp {value!r}: {e}")
        return None

    return parsed.isoformat()


def split_multi_value(value: Optional[str]) -> List[str]:
    """'python; go;;rust' → ['python', 'go', 'rust']; missing → []."""
    if not value:
        return []
    return [part.strip() for part in value.split(MULTI_VALUE_DELIMITER) if part.strip()]


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Case-insensitive match key for an email. Stored values keep their original case."""
    if not value:
        return None
    value = value.strip().lower()
    return value or None


def build_location(contact: HubSpotContact) -> Optional[CandidateLocation]:
    city = contact.prop("city")
    if not city:
        return None
    return CandidateLocation(city=city, category=contact.prop("state") or "Unknown")


def transform_hubspot_contact(
    contact: HubSpotContact,
    organization_id: str,
    actor_id: Optional[str],
    now: Optional[str] = None,
) -> CandidateRecord:
    """
    Transform a HubSpot contact into a candidate record.

    Args:
        contact: Remote contact snapshot
        organization_id: Tenant that will own the record
        actor_id: User (or service) performing the sync; stamped as creator/updater
        now: Sync timestamp (ISO-8601); defaults to the current UTC time

    Returns:
        CandidateRecord ready for reconciliation
    """
    now = now or utc_now_iso()

    fields: Dict[str, object] = {}
    for hubspot_field, column in FIELD_MAPPING.items():
        if column in fields:
            continue
        value = contact.prop(hubspot_field)
        if value is not None:
            fields[column] = value

    for hubspot_field, column in ARRAY_FIELD_MAPPING.items():
        fields[column] = split_multi_value(contact.prop(hubspot_field))

    location = build_location(contact)
    if location:
        fields["current_location"] = location

    if not fields.get("first_name") and not fields.get("last_name"):
        fields["first_name"] = PLACEHOLDER_FIRST_NAME
        fields["last_name"] = PLACEHOLDER_LAST_NAME

    provenance = HubSpotProvenance(
        hubspot_id=contact.id,
        last_synced_at=now,
        hubspot_created_at=hubspot_timestamp_to_iso(contact.prop("createdate")),
        hubspot_modified_at=hubspot_timestamp_to_iso(contact.prop("lastmodifieddate")),
        properties=dict(contact.properties),
    )

    return CandidateRecord(
        organization_id=organization_id,
        nurturing_info=provenance,
        created_by=actor_id,
        updated_by=actor_id,
        **fields,
    )


def transform_page(
    contacts: List[HubSpotContact],
    organization_id: str,
    actor_id: Optional[str],
    now: Optional[str] = None,
) -> List[CandidateRecord]:
    """Transform a page of contacts with one shared sync timestamp."""
    now = now or utc_now_iso()
    return [transform_hubspot_contact(contact, organization_id, actor_id, now) for contact in contacts]
