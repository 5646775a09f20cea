"""
HubSpot CRM contacts source
Fetches contacts page by page from the CRM v3 objects API
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from app.core.circuit_breakers import hubspot_retrying
from app.models.schemas.hubspot import ContactPage, HubSpotContact
from app.services.sync.errors import RemoteFetchError
from app.services.sync.transform import HUBSPOT_PROPERTIES

logger = logging.getLogger(__name__)

CONTACTS_PATH = "/crm/v3/objects/contacts"


class HubSpotContactSource:
    """
    Remote contact source for the sync pipeline.

    Args:
        http_client: Async HTTP client (owned by the caller)
        access_token: HubSpot private app token
        base_url: API base URL
        page_size: Contacts per page (HubSpot caps this at 100)
        properties: Property projection; defaults to every mapped property
        max_attempts: Attempts per page on 429/5xx/transport errors
        retry_wait: Initial backoff in seconds
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        access_token: str,
        base_url: str = "https://api.hubapi.com",
        page_size: int = 100,
        properties: Optional[List[str]] = None,
        max_attempts: int = 3,
        retry_wait: float = 1.0,
    ):
        self.http_client = http_client
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.properties = properties or list(HUBSPOT_PROPERTIES)
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient, settings) -> "HubSpotContactSource":
        return cls(
            http_client,
            access_token=settings.hubspot_api_key,
            base_url=settings.hubspot_base_url,
            page_size=settings.hubspot_page_size,
            properties=settings.hubspot_property_list,
            max_attempts=settings.hubspot_max_retries,
        )

    async def fetch_page(self, after: Optional[str] = None) -> ContactPage:
        """
        Fetch one page of contacts.

        Args:
            after: Opaque cursor from the previous page (None for the first page)

        Returns:
            ContactPage; next_cursor is None on the last page

        Raises:
            RemoteFetchError: non-2xx response or network failure (after retries)
        """
        async for attempt in hubspot_retrying(self.max_attempts, min_wait=self.retry_wait):
            with attempt:
                data = await self._request(after)

        try:
            records = [HubSpotContact.model_validate(item) for item in data.get("results", [])]
        except ValidationError as e:
            raise RemoteFetchError(None, f"Unexpected contact payload: {e}") from e

        next_cursor = ((data.get("paging") or {}).get("next") or {}).get("after")

        logger.info(f"📇 Fetched {len(records)} HubSpot contacts (cursor: {after or 'none'}, more: {bool(next_cursor)})")
        return ContactPage(records=records, next_cursor=next_cursor)

    async def _request(self, after: Optional[str]) -> Dict[str, Any]:
        params = {
            "limit": self.page_size,
            "properties": ",".join(self.properties),
        }
        if after:
            params["after"] = after

        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

        try:
            response = await self.http_client.get(f"{self.base_url}{CONTACTS_PATH}", headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"HubSpot transport error: {e}")
            raise RemoteFetchError(None, str(e)) from e

        if not response.is_success:
            logger.error(f"❌ HubSpot API error: {response.status_code} - {response.text[:500]}")
            raise RemoteFetchError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteFetchError(response.status_code, "Response body is not valid JSON") from e
