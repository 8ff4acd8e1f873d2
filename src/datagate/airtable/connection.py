"""AirtableConnectionManager — httpx client lifecycle, auth and error mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from ..correlation import get_correlation_id, get_logger
from ..exceptions import DataSourceConnectionError, DataSourceRequestError

if TYPE_CHECKING:
    from ..config import DataSourceConfig

logger = get_logger(__name__)


def _error_details(response: httpx.Response) -> tuple[str, str | None]:
    """Extract ``(message, type)`` from an Airtable error body.

    Airtable answers either ``{"error": {"type": ..., "message": ...}}`` or
    ``{"error": "NOT_FOUND"}``.
    """
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        error_type = error.get("type")
        return str(error.get("message") or error_type or response.reason_phrase), error_type
    if isinstance(error, str):
        return error, error
    return response.reason_phrase, None


class AirtableConnectionManager:
    """Wrap an ``httpx.AsyncClient`` bound to one Airtable base.

    The API key and base id come from the ``scheme://apiKey@baseId``
    connection string. Every request carries the bearer token and the
    current correlation id.
    """

    def __init__(
        self,
        config: DataSourceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_id(self) -> str:
        return self._config.container_id

    async def connect(self) -> httpx.AsyncClient:
        """Create and cache the HTTP client. Idempotent."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.api_url.rstrip("/"),
                headers={"Authorization": f"Bearer {self._config.api_key}"},
                timeout=self._config.timeout,
                transport=self._transport,
            )
        return self._client

    @property
    def client(self) -> httpx.AsyncClient:
        """Return the HTTP client; raises if not connected."""
        if self._client is None:
            raise DataSourceConnectionError("Not connected; call connect() first")
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Any = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises:
            DataSourceConnectionError: the backend could not be reached.
            DataSourceRequestError: the backend answered with an error status.
        """
        client = await self.connect()
        headers = {}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id
        try:
            response = await client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("[airtable] %s %s failed: %s", method, path, e)
            raise DataSourceConnectionError(str(e) or type(e).__name__) from e

        if response.is_error:
            message, error_type = _error_details(response)
            logger.error(
                "[airtable] %s %s -> HTTP %s %s: %s",
                method,
                path,
                response.status_code,
                error_type or "",
                message,
            )
            raise DataSourceRequestError(
                message, status_code=response.status_code, error_type=error_type
            )

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise DataSourceRequestError(
                f"Invalid JSON in response: {e}", status_code=response.status_code
            ) from e
        return data if isinstance(data, dict) else {"data": data}

    async def health_check(self) -> bool:
        """Probe the metadata endpoint; return True if the credentials work."""
        try:
            await self.request("GET", "/meta/bases")
            return True
        except (DataSourceConnectionError, DataSourceRequestError) as e:
            logger.error("[airtable] Error checking database connection - %s", e)
            return False
