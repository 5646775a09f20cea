from types import SimpleNamespace

import pytest

from app.services.sync.database import SupabaseStore, create_sync_job, get_sync_job
from app.services.sync.errors import StorageError


class FakeQuery:
    """Records the PostgREST builder chain and returns canned data on execute()."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.chain = []

    def __getattr__(self, name):
        def step(*args):
            self.chain.append((name, *args))
            return self
        return step

    async def execute(self):
        self.client.queries.append((self.table, self.chain))
        if self.client.error:
            raise self.client.error
        return SimpleNamespace(data=self.client.data)


class FakeSupabase:
    def __init__(self, data=None, error=None):
        self.data = data if data is not None else []
        self.error = error
        self.queries = []

    def table(self, name):
        return FakeQuery(self, name)


@pytest.mark.asyncio
async def test_select_is_scoped_by_organization():
    client = FakeSupabase(data=[{"id": "c1", "personal_email": "a@x.com"}])

    rows = await SupabaseStore(client).select("candidates", "org-1", "personal_email", ["a@x.com"], fields="id, personal_email")

    assert rows == [{"id": "c1", "personal_email": "a@x.com"}]
    table, chain = client.queries[0]
    assert table == "candidates"
    assert chain == [
        ("select", "id, personal_email"),
        ("eq", "organization_id", "org-1"),
        ("in_", "personal_email", ["a@x.com"]),
    ]


@pytest.mark.asyncio
async def test_select_without_values_skips_the_query():
    client = FakeSupabase()

    assert await SupabaseStore(client).select("candidates", "org-1", "personal_email", []) == []
    assert client.queries == []


@pytest.mark.asyncio
async def test_update_is_scoped_by_id_and_organization():
    client = FakeSupabase(data=[{"id": "c1"}])

    await SupabaseStore(client).update("candidates", "org-1", "c1", {"first_name": "A"})

    _, chain = client.queries[0]
    assert chain == [
        ("update", {"first_name": "A"}),
        ("eq", "id", "c1"),
        ("eq", "organization_id", "org-1"),
    ]


@pytest.mark.asyncio
async def test_update_matching_no_rows_fails():
    with pytest.raises(StorageError, match="matched no rows"):
        await SupabaseStore(FakeSupabase(data=[])).update("candidates", "org-1", "missing", {})


@pytest.mark.asyncio
async def test_client_errors_become_storage_errors():
    store = SupabaseStore(FakeSupabase(error=RuntimeError("boom")))

    with pytest.raises(StorageError, match="boom"):
        await store.insert("candidates", [{"first_name": "A"}])

    with pytest.raises(StorageError):
        await store.select("candidates", "org-1", "personal_email", ["a@x.com"])


@pytest.mark.asyncio
async def test_sync_job_helpers():
    client = FakeSupabase(data=[{"id": "job-1", "status": "queued"}])

    job_id = await create_sync_job(client, "org-1", "user-1")
    job = await get_sync_job(client, job_id, "org-1")

    assert job_id == "job-1"
    assert job["status"] == "queued"
    insert_chain = client.queries[0][1]
    assert insert_chain[0][1]["job_type"] == "hubspot"
    assert ("eq", "organization_id", "org-1") in client.queries[1][1]
