import pytest

from app.models.schemas.candidate import PersistedCandidate
from app.services.sync.activity import build_sync_activities, record_sync_activities

ORG_ID = "org-1"
NOW = "2024-05-01T12:00:00+00:00"


def _persisted(*ids):
    return [PersistedCandidate(candidate_id=candidate_id, operation="insert") for candidate_id in ids]


def test_one_activity_per_candidate():
    activities = build_sync_activities(_persisted("c1", "c2"), ORG_ID, "user-1", NOW)

    assert [a.candidate_id for a in activities] == ["c1", "c2"]
    row = activities[0].to_row()
    assert row["type"] == "sync"
    assert row["description"] == "Synced from HubSpot"
    assert row["metadata"] == {"source": "hubspot", "sync_date": NOW}
    assert row["created_by"] == "user-1"
    assert row["created_at"] == NOW
    assert row["organization_id"] == ORG_ID


@pytest.mark.asyncio
async def test_records_in_one_batch(store):
    count = await record_sync_activities(store, _persisted("c1", "c2", "c3"), ORG_ID, "user-1", NOW)

    assert count == 3
    assert store.calls_of("insert") == [("insert", "activities", 3)]
    assert [a["candidate_id"] for a in store.tables["activities"]] == ["c1", "c2", "c3"]


@pytest.mark.asyncio
async def test_nothing_persisted_writes_nothing(store):
    assert await record_sync_activities(store, [], ORG_ID, "user-1", NOW) == 0
    assert store.calls == []


@pytest.mark.asyncio
async def test_write_failure_is_swallowed(store):
    store.fail_insert_tables.add("activities")

    count = await record_sync_activities(store, _persisted("c1"), ORG_ID, None, NOW)

    assert count == 0
    assert store.tables["activities"] == []
