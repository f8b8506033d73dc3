"""RemoteMemoryService abstract interface."""

from abc import ABC, abstractmethod
from typing import Any

RemoteRecord = dict[str, Any]


class RemoteMemoryService(ABC):
    """Abstract interface for the remote keyed memory service.

    Records are remote-native dicts carrying the owning scope id
    (`user_id`), the free-text body (`memory`), and a flat string-keyed
    `metadata` map. Implementations raise ConnectivityError on any
    transport or service failure.
    """

    @abstractmethod
    async def probe(self) -> None:
        """Issue a harmless request to verify connectivity and auth."""
        pass

    @abstractmethod
    async def add(
        self, scope_id: str, content: str, metadata: dict[str, str]
    ) -> str | None:
        """Store a record, returning the service-assigned id if reported."""
        pass

    @abstractmethod
    async def search(
        self,
        scope_id: str,
        query: str,
        *,
        limit: int = 10,
        filters: dict[str, str] | None = None,
    ) -> list[RemoteRecord]:
        """Search records within a scope."""
        pass

    @abstractmethod
    async def update(self, memory_id: str, content: str) -> None:
        """Replace the content of a record."""
        pass

    @abstractmethod
    async def delete(self, memory_id: str) -> None:
        """Delete a record."""
        pass

    @abstractmethod
    async def list(self, scope_id: str, *, limit: int = 100) -> list[RemoteRecord]:
        """List records within a scope."""
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None
