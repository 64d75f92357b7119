"""BulkStatus — Resource API Client.

Handles authentication headers, timeouts and error conversion for the
query and update endpoints. Retry policy lives in the update executor;
every call here is fire-once.
"""

from typing import Any, Dict, Optional

import httpx

from bulkstatus.config import Settings, get_settings
from bulkstatus.core.logging import get_logger

logger = get_logger("resource.client")


class ResourceAPIError(Exception):
    """Raised on a non-2xx response, transport failure or malformed body."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class ResourceClient:
    """Async HTTP client for a generic resource API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.settings.use_auth_header:
            headers["Authorization"] = (
                f"{self.settings.auth_type} {self.settings.auth_token}"
            )
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.settings.timeout_seconds,
                headers=self._headers(),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    # ── Core Request Method ──

    async def _request(
        self,
        method: str,
        url: str,
        params: Dict[str, Any] | None = None,
        json_body: Dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one request; any 2xx response is returned unread."""
        client = await self._get_client()
        logger.debug(f"{method} {url}")
        try:
            resp = await client.request(method, url, params=params, json=json_body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ResourceAPIError(
                f"{method} {url} returned {e.response.status_code}",
                e.response.status_code,
            ) from e
        except httpx.TimeoutException as e:
            raise ResourceAPIError(f"{method} {url} timed out: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            raise ResourceAPIError(f"{method} {url} failed: {e}") from e
        return resp

    # ── Endpoints ──

    async def query(self, identifier: str) -> Any:
        """Search the query endpoint for at most one match of ``identifier``.

        Returns the decoded JSON body, or None when the body is empty.
        """
        params = {self.settings.search_query_param: identifier, "limit": 1}
        resp = await self._request("GET", self.settings.query_url, params=params)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ResourceAPIError(
                f"GET {self.settings.query_url} returned invalid JSON",
                resp.status_code,
            ) from e

    async def update(self, resource_id: Any, payload: Dict[str, Any]) -> None:
        """Send the update payload to ``{update_url}/{resource_id}``.

        The response body is ignored; any 2xx status counts as success.
        """
        url = f"{self.settings.update_url}/{resource_id}"
        await self._request(self.settings.update_method, url, json_body=payload)
