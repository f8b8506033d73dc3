"""Tests for Mem0MemoryService against a mocked HTTP transport."""

import json
from collections.abc import Callable

import httpx
import pytest

from agentmem.memory.errors import ConfigurationError, ConnectivityError
from agentmem.memory.stores import Mem0MemoryService

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport:
    """Collects requests and answers them with a handler."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> dict:
        return json.loads(self.last.content)


def make_service(handler: Handler) -> tuple[Mem0MemoryService, RecordingTransport]:
    recorder = RecordingTransport(handler)
    service = Mem0MemoryService(
        api_key="m0-test",
        base_url="https://mem0.test/",
        transport=recorder.transport,
    )
    return service, recorder


class TestConstruction:
    def test_requires_api_key(self) -> None:
        """Should raise ConfigurationError without an API key."""
        with pytest.raises(ConfigurationError):
            Mem0MemoryService(api_key=None)
        with pytest.raises(ConfigurationError):
            Mem0MemoryService(api_key="")


class TestRequests:
    """Tests for the request shape of each operation."""

    @pytest.mark.asyncio
    async def test_probe(self) -> None:
        service, recorder = make_service(lambda r: httpx.Response(200, json=[]))
        async with service:
            await service.probe()

        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/v1/memories/search/"
        assert recorder.last.headers["Authorization"] == "Token m0-test"
        assert recorder.last_json == {"query": "test", "user_id": "init-test", "limit": 1}

    @pytest.mark.asyncio
    async def test_add_returns_first_id(self) -> None:
        service, recorder = make_service(
            lambda r: httpx.Response(200, json=[{"id": "mem-1", "event": "ADD"}])
        )
        async with service:
            memory_id = await service.add("scope_a", "hello", {"tabId": "3"})

        assert memory_id == "mem-1"
        assert recorder.last.url.path == "/v1/memories/"
        assert recorder.last_json == {
            "messages": [{"role": "user", "content": "hello"}],
            "user_id": "scope_a",
            "metadata": {"tabId": "3"},
        }

    @pytest.mark.asyncio
    async def test_add_queued_without_id(self) -> None:
        """Should return None when the write is accepted without an id."""
        service, _ = make_service(
            lambda r: httpx.Response(200, json={"message": "queued", "status": "PENDING"})
        )
        async with service:
            assert await service.add("scope_a", "hello", {}) is None

    @pytest.mark.asyncio
    async def test_search_with_filters(self) -> None:
        records = [{"id": "m1", "memory": "x", "user_id": "scope_a", "metadata": {}}]
        service, recorder = make_service(lambda r: httpx.Response(200, json=records))
        async with service:
            result = await service.search("scope_a", "x", limit=5, filters={"tabId": "42"})

        assert result == records
        assert recorder.last_json == {
            "query": "x",
            "user_id": "scope_a",
            "limit": 5,
            "filters": {"tabId": "42"},
        }

    @pytest.mark.asyncio
    async def test_search_paginated_shape(self) -> None:
        """Should unwrap {"results": [...]} responses."""
        service, _ = make_service(
            lambda r: httpx.Response(200, json={"results": [{"id": "m1"}, "junk"]})
        )
        async with service:
            assert await service.search("scope_a", "") == [{"id": "m1"}]

    @pytest.mark.asyncio
    async def test_list(self) -> None:
        service, recorder = make_service(
            lambda r: httpx.Response(200, json=[{"id": str(i)} for i in range(5)])
        )
        async with service:
            records = await service.list("scope_a", limit=3)

        assert len(records) == 3
        assert recorder.last.method == "GET"
        assert recorder.last.url.params["user_id"] == "scope_a"
        assert recorder.last.url.params["page_size"] == "3"

    @pytest.mark.asyncio
    async def test_update_and_delete(self) -> None:
        service, recorder = make_service(lambda r: httpx.Response(204))
        async with service:
            await service.update("m1", "new text")
            await service.delete("m1")

        update, delete = recorder.requests
        assert (update.method, update.url.path) == ("PUT", "/v1/memories/m1/")
        assert json.loads(update.content) == {"text": "new text"}
        assert (delete.method, delete.url.path) == ("DELETE", "/v1/memories/m1/")


class TestErrors:
    """Tests for mapping failures to ConnectivityError."""

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        service, _ = make_service(
            lambda r: httpx.Response(401, json={"detail": "Invalid API key"})
        )
        async with service:
            with pytest.raises(ConnectivityError) as exc_info:
                await service.probe()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid API key"

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service, _ = make_service(fail)
        async with service:
            with pytest.raises(ConnectivityError) as exc_info:
                await service.search("scope_a", "x")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_invalid_json_body(self) -> None:
        service, _ = make_service(lambda r: httpx.Response(200, content=b"<html>"))
        async with service:
            with pytest.raises(ConnectivityError, match="invalid JSON"):
                await service.list("scope_a")
