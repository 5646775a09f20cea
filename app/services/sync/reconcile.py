"""
Candidate reconciliation
Splits a page of transformed candidates into inserts and updates

Natural key: (organization_id, personal_email), compared case-insensitively
on both sides. One lookup per page.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from app.models.schemas.candidate import CandidateRecord, CandidateUpdate
from app.services.sync.database import CANDIDATES_TABLE, CandidateStore
from app.services.sync.errors import ReconciliationQueryError, StorageError
from app.services.sync.transform import normalize_email

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    to_insert: List[CandidateRecord] = field(default_factory=list)
    to_update: List[CandidateUpdate] = field(default_factory=list)
    # Earlier occurrences of an email repeated within the same page
    duplicates: List[CandidateRecord] = field(default_factory=list)


def collapse_duplicate_emails(candidates: List[CandidateRecord]) -> Tuple[List[CandidateRecord], List[CandidateRecord]]:
    """
    Keep the last occurrence of each personal email, in first-seen order.

    Emails differing only in case count as the same email. Candidates
    without an email are never collapsed.

    Returns:
        (unique candidates, superseded candidates)
    """
    last_index: Dict[str, int] = {}
    for index, candidate in enumerate(candidates):
        key = normalize_email(candidate.personal_email)
        if key:
            last_index[key] = index

    unique: List[CandidateRecord] = []
    superseded: List[CandidateRecord] = []
    slots: Dict[str, int] = {}

    for index, candidate in enumerate(candidates):
        key = normalize_email(candidate.personal_email)
        if not key:
            unique.append(candidate)
            continue

        if key not in slots:
            slots[key] = len(unique)
            unique.append(candidates[last_index[key]])

        if index != last_index[key]:
            superseded.append(candidate)

    return unique, superseded


def lookup_values(candidates: List[CandidateRecord]) -> List[str]:
    """
    Email values to query: each email as received plus its lower-cased form.

    The `in` filter is case-sensitive, so both spellings are sent; matches
    are then compared through normalize_email.
    """
    values: Dict[str, None] = {}
    for candidate in candidates:
        email = candidate.personal_email
        if not email:
            continue
        values[email] = None
        values[normalize_email(email)] = None
    return list(values)


async def reconcile_candidates(
    store: CandidateStore,
    candidates: List[CandidateRecord],
    organization_id: str,
) -> ReconcileResult:
    """
    Decide insert vs update for each candidate.

    Args:
        store: Storage port
        candidates: Transformed candidates of one page
        organization_id: Tenant scope for the lookup

    Returns:
        ReconcileResult with every candidate in exactly one of
        to_insert / to_update / duplicates

    Raises:
        ReconciliationQueryError: the existing-candidate lookup failed
    """
    unique, duplicates = collapse_duplicate_emails(candidates)
    if duplicates:
        logger.warning(f"⚠️  {len(duplicates)} candidates share an email with a later contact in the same page; last one wins")

    # Superseded duplicates still contribute their spelling to the lookup
    emails = lookup_values(candidates)

    existing: Dict[str, str] = {}
    if emails:
        try:
            rows = await store.select(
                CANDIDATES_TABLE,
                organization_id,
                "personal_email",
                emails,
                fields="id, personal_email",
            )
        except StorageError as e:
            raise ReconciliationQueryError(f"Existing candidate lookup failed: {e.message}") from e

        for row in rows:
            key = normalize_email(row.get("personal_email"))
            if key and key not in existing:
                existing[key] = str(row["id"])

    result = ReconcileResult(duplicates=duplicates)
    for candidate in unique:
        key = normalize_email(candidate.personal_email)
        if key and key in existing:
            result.to_update.append(CandidateUpdate(candidate_id=existing[key], record=candidate))
        else:
            result.to_insert.append(candidate)

    logger.info(
        f"🔍 Reconciled {len(candidates)} candidates: "
        f"{len(result.to_insert)} new, {len(result.to_update)} existing, {len(duplicates)} duplicates"
    )
    return result
