import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
os.environ.setdefault("HUBSPOT_API_KEY", "hubspot-token")
os.environ.setdefault("SYNC_API_KEY", "sync-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ["REDIS_URL"] = ""

import pytest

from app.models.schemas.hubspot import ContactPage, HubSpotContact
from app.services.sync.errors import StorageError


FROZEN_NOW = "2024-05-01T12:00:00+00:00"


class FakeStore:
    """In-memory CandidateStore with switchable failures."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {"candidates": [], "activities": []}
        self.calls: list[tuple] = []
        self.fail_select = False
        self.fail_insert_tables: set[str] = set()
        self.fail_update_ids: set[str] = set()
        self._next_id = 0

    def _new_id(self) -> str:
        self._next_id += 1
        return f"cand-{self._next_id}"

    def seed_candidate(self, organization_id: str, personal_email: str | None, **fields) -> str:
        row = {"id": self._new_id(), "organization_id": organization_id, "personal_email": personal_email, **fields}
        self.tables["candidates"].append(row)
        return row["id"]

    async def select(self, table, organization_id, column, values, fields="*"):
        values = list(values)
        self.calls.append(("select", table, organization_id, tuple(values)))
        if self.fail_select:
            raise StorageError("select exploded")
        return [
            dict(row)
            for row in self.tables.setdefault(table, [])
            if row.get("organization_id") == organization_id and row.get(column) in values
        ]

    async def insert(self, table, rows):
        self.calls.append(("insert", table, len(rows)))
        if table in self.fail_insert_tables:
            raise StorageError(f"insert into {table} exploded")
        stored = []
        for row in rows:
            row = {"id": self._new_id(), **row}
            self.tables.setdefault(table, []).append(row)
            stored.append(dict(row))
        return stored

    async def update(self, table, organization_id, record_id, patch):
        self.calls.append(("update", table, record_id))
        if record_id in self.fail_update_ids:
            raise StorageError(f"update of {record_id} exploded")
        for row in self.tables.setdefault(table, []):
            if row["id"] == record_id and row["organization_id"] == organization_id:
                row.update(patch)
                return dict(row)
        raise StorageError(f"Update of {table}.{record_id} matched no rows")

    def calls_of(self, kind: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == kind]


class FakeContactSource:
    """ContactSource serving pre-built pages, keyed by cursor order."""

    def __init__(self, pages: list[ContactPage]):
        self.pages = pages
        self.requested: list[str | None] = []

    async def fetch_page(self, after=None):
        self.requested.append(after)
        return self.pages[len(self.requested) - 1]


def _make_contact(contact_id: str, **properties) -> HubSpotContact:
    return HubSpotContact(id=contact_id, properties={"hs_object_id": contact_id, **properties})


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def make_contact():
    return _make_contact


@pytest.fixture
def make_source():
    """Build a FakeContactSource from lists of contacts; cursors are chained automatically."""

    def build(*pages):
        built = []
        for index, contacts in enumerate(pages):
            next_cursor = f"cursor-{index + 1}" if index + 1 < len(pages) else None
            built.append(ContactPage(records=list(contacts), next_cursor=next_cursor))
        return FakeContactSource(built)

    return build


@pytest.fixture
def frozen_clock():
    return lambda: FROZEN_NOW


@pytest.fixture
def store_factory():
    return FakeStore


@pytest.fixture
def page_source():
    """FakeContactSource over explicit ContactPage objects."""
    return FakeContactSource
