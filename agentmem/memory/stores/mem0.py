"""Mem0 platform implementation of RemoteMemoryService.

Talks to the Mem0 REST API with httpx:

    POST   /v1/memories/           add
    POST   /v1/memories/search/    search
    GET    /v1/memories/           list
    PUT    /v1/memories/{id}/      update
    DELETE /v1/memories/{id}/      delete

Usage:
    async with Mem0MemoryService(api_key="m0-...") as service:
        await service.probe()
"""

from typing import Any

import httpx

from agentmem.memory.errors import ConfigurationError, ConnectivityError
from agentmem.memory.store import RemoteMemoryService, RemoteRecord
from agentmem.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.mem0.ai"


class Mem0MemoryService(RemoteMemoryService):
    """Async client for the Mem0 memory API.

    Attributes:
        base_url: Base URL of the Mem0 API
        probe_scope: Scope used for the connectivity probe
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        probe_scope: str = "init-test",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Mem0 API key
            base_url: Base URL of the Mem0 API
            timeout: Request timeout in seconds
            probe_scope: Scope used for the connectivity probe
            transport: Optional httpx transport (tests inject a MockTransport)

        Raises:
            ConfigurationError: If no API key is supplied
        """
        if not api_key:
            raise ConfigurationError("MEM0_API_KEY environment variable is required")

        self.base_url = base_url.rstrip("/")
        self.probe_scope = probe_scope
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "Mem0MemoryService":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Token {self._api_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Make an API request, mapping every failure to ConnectivityError."""
        try:
            response = await self._client.request(
                method=method,
                url=path,
                headers=self._headers(),
                json=json,
                params=params,
            )
        except httpx.HTTPError as e:
            raise ConnectivityError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise ConnectivityError(
                self._error_message(response),
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise ConnectivityError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(data, dict):
            for key in ("detail", "error", "message"):
                if data.get(key):
                    return str(data[key])
        return response.text or f"HTTP {response.status_code}"

    @staticmethod
    def _records(payload: Any) -> list[RemoteRecord]:
        """Normalize list responses; paginated responses wrap them in `results`."""
        if isinstance(payload, dict):
            payload = payload.get("results", [])
        if not isinstance(payload, list):
            return []
        return [r for r in payload if isinstance(r, dict)]

    async def probe(self) -> None:
        await self._request(
            "POST",
            "/v1/memories/search/",
            json={"query": "test", "user_id": self.probe_scope, "limit": 1},
        )

    async def add(
        self, scope_id: str, content: str, metadata: dict[str, str]
    ) -> str | None:
        payload = await self._request(
            "POST",
            "/v1/memories/",
            json={
                "messages": [{"role": "user", "content": content}],
                "user_id": scope_id,
                "metadata": metadata,
            },
        )
        records = self._records(payload)
        if records and records[0].get("id"):
            return str(records[0]["id"])
        if isinstance(payload, dict) and payload.get("id"):
            return str(payload["id"])
        # Queued (async mode) writes do not report an id
        logger.debug("mem0_add_without_id", scope_id=scope_id)
        return None

    async def search(
        self,
        scope_id: str,
        query: str,
        *,
        limit: int = 10,
        filters: dict[str, str] | None = None,
    ) -> list[RemoteRecord]:
        body: dict[str, Any] = {"query": query, "user_id": scope_id, "limit": limit}
        if filters:
            body["filters"] = filters
        payload = await self._request("POST", "/v1/memories/search/", json=body)
        return self._records(payload)

    async def update(self, memory_id: str, content: str) -> None:
        await self._request("PUT", f"/v1/memories/{memory_id}/", json={"text": content})

    async def delete(self, memory_id: str) -> None:
        await self._request("DELETE", f"/v1/memories/{memory_id}/")

    async def list(self, scope_id: str, *, limit: int = 100) -> list[RemoteRecord]:
        payload = await self._request(
            "GET",
            "/v1/memories/",
            params={"user_id": scope_id, "page_size": limit},
        )
        return self._records(payload)[:limit]
