"""HackerOne hacker API client.

One GET per program handle against the structured scopes endpoint.
Bodies are returned as raw bytes; nothing here parses them.
"""

from dataclasses import dataclass
from urllib.parse import quote

import httpx

from scope_scraper.errors import TransportError
from scope_scraper.logging.audit import get_logger
from scope_scraper.security.credentials import Credentials

DEFAULT_BASE_URL = "https://api.hackerone.com"
SCOPES_PATH = "/v1/hackers/programs/{handle}/structured_scopes"


@dataclass
class ScopeResponse:
    handle: str
    status_code: int
    body: bytes  # Raw response body, verbatim


class HackerOneClient:
    """Thin async wrapper around one httpx.AsyncClient reused for a whole run."""

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                auth=self._credentials.as_auth(),
                timeout=httpx.Timeout(self._timeout, connect=10.0),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    def scopes_url(self, handle: str) -> str:
        return self._base_url + SCOPES_PATH.format(handle=quote(handle, safe="", errors="surrogateescape"))

    async def fetch_structured_scopes(self, handle: str) -> ScopeResponse:
        """GET the structured scopes of one program.

        Non-2xx responses are returned like any other; only transport
        failures raise.

        Raises:
            TransportError: on connection, timeout, protocol or URL errors.
        """
        url = self.scopes_url(handle)
        client = self._get_client()
        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            raise TransportError(f"request timed out: {e}", handle=handle) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"request failed: {e}", handle=handle) from e

        if not response.is_success:
            get_logger().warning(
                "Upstream returned non-success status",
                extra={"audit_data": {"handle": handle, "upstream_status": response.status_code}},
            )
        return ScopeResponse(handle=handle, status_code=response.status_code, body=response.content)

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "HackerOneClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
