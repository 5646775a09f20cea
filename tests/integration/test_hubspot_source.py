"""
HubSpot contacts source against a mocked HTTP transport.
"""
import httpx
import pytest

from app.services.sync.errors import RemoteFetchError
from app.services.sync.providers.hubspot import HubSpotContactSource

BASE_URL = "https://api.hubapi.test"


def _page(*ids, after=None):
    body = {
        "results": [
            {
                "id": contact_id,
                "properties": {"hs_object_id": contact_id, "email": f"{contact_id}@x.com"},
                "createdAt": "2024-01-05T10:00:00.000Z",
                "updatedAt": "2024-01-06T10:00:00.000Z",
                "archived": False,
            }
            for contact_id in ids
        ]
    }
    if after:
        body["paging"] = {"next": {"after": after, "link": f"{BASE_URL}/crm/v3/objects/contacts?after={after}"}}
    return body


def _source(client, **kwargs):
    return HubSpotContactSource(client, "test-token", base_url=BASE_URL, retry_wait=0, **kwargs)


@pytest.mark.asyncio
async def test_first_page_request(httpx_mock):
    httpx_mock.add_response(json=_page("1", "2", after="next-cursor"))

    async with httpx.AsyncClient() as client:
        page = await _source(client, page_size=50, properties=["email", "firstname"]).fetch_page()

    assert [c.id for c in page.records] == ["1", "2"]
    assert page.records[0].prop("email") == "1@x.com"
    assert page.records[0].created_at == "2024-01-05T10:00:00.000Z"
    assert page.next_cursor == "next-cursor"

    request = httpx_mock.get_requests()[0]
    assert request.method == "GET"
    assert request.url.path == "/crm/v3/objects/contacts"
    assert request.url.params["limit"] == "50"
    assert request.url.params["properties"] == "email,firstname"
    assert "after" not in request.url.params
    assert request.headers["Authorization"] == "Bearer test-token"


@pytest.mark.asyncio
async def test_cursor_is_forwarded_and_last_page_has_none(httpx_mock):
    httpx_mock.add_response(json=_page("3"))

    async with httpx.AsyncClient() as client:
        page = await _source(client).fetch_page(after="abc")

    assert page.next_cursor is None
    assert httpx_mock.get_requests()[0].url.params["after"] == "abc"


@pytest.mark.asyncio
async def test_empty_results(httpx_mock):
    httpx_mock.add_response(json={"results": []})

    async with httpx.AsyncClient() as client:
        page = await _source(client).fetch_page()

    assert page.records == []
    assert page.next_cursor is None


@pytest.mark.asyncio
async def test_client_error_is_not_retried(httpx_mock):
    httpx_mock.add_response(status_code=401, text="Authentication credentials not found")

    async with httpx.AsyncClient() as client:
        with pytest.raises(RemoteFetchError) as exc_info:
            await _source(client, max_attempts=3).fetch_page()

    assert exc_info.value.status_code == 401
    assert exc_info.value.is_transient is False
    assert "401" in exc_info.value.message
    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_transient_errors_are_retried(httpx_mock):
    httpx_mock.add_response(status_code=429, text="Too many requests")
    httpx_mock.add_response(status_code=502, text="Bad gateway")
    httpx_mock.add_response(json=_page("1"))

    async with httpx.AsyncClient() as client:
        page = await _source(client, max_attempts=3).fetch_page()

    assert [c.id for c in page.records] == ["1"]
    assert len(httpx_mock.get_requests()) == 3


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts(httpx_mock):
    httpx_mock.add_response(status_code=500, text="oops")
    httpx_mock.add_response(status_code=500, text="oops")

    async with httpx.AsyncClient() as client:
        with pytest.raises(RemoteFetchError) as exc_info:
            await _source(client, max_attempts=2).fetch_page()

    assert exc_info.value.status_code == 500
    assert len(httpx_mock.get_requests()) == 2


@pytest.mark.asyncio
async def test_transport_error_becomes_remote_fetch_error(httpx_mock):
    httpx_mock.add_exception(httpx.ConnectTimeout("timed out"))

    async with httpx.AsyncClient() as client:
        with pytest.raises(RemoteFetchError) as exc_info:
            await _source(client, max_attempts=1).fetch_page()

    assert exc_info.value.status_code is None
    assert exc_info.value.is_transient is True


@pytest.mark.asyncio
async def test_malformed_payload(httpx_mock):
    httpx_mock.add_response(json={"results": [{"properties": {}}]})

    async with httpx.AsyncClient() as client:
        with pytest.raises(RemoteFetchError, match="Unexpected contact payload"):
            await _source(client).fetch_page()
