"""In-memory implementation of RemoteMemoryService."""

from uuid import uuid4

from agentmem.memory.errors import ConnectivityError
from agentmem.memory.models import utc_now
from agentmem.memory.store import RemoteMemoryService, RemoteRecord


class InMemoryMemoryService(RemoteMemoryService):
    """In-memory implementation of RemoteMemoryService for testing and development.

    Uses simple dict storage with linear scan for queries. Text search is
    a case-insensitive substring match and an empty query matches every
    record. Not suitable for production use.
    """

    def __init__(self) -> None:
        self._records: dict[str, RemoteRecord] = {}
        self.calls: list[str] = []

    async def probe(self) -> None:
        self.calls.append("probe")

    async def add(
        self, scope_id: str, content: str, metadata: dict[str, str]
    ) -> str | None:
        self.calls.append("add")
        memory_id = str(uuid4())
        now = utc_now().isoformat()
        self._records[memory_id] = {
            "id": memory_id,
            "user_id": scope_id,
            "memory": content,
            "metadata": dict(metadata),
            "created_at": now,
            "updated_at": now,
        }
        return memory_id

    async def search(
        self,
        scope_id: str,
        query: str,
        *,
        limit: int = 10,
        filters: dict[str, str] | None = None,
    ) -> list[RemoteRecord]:
        self.calls.append("search")
        query_lower = query.lower()
        results = [
            record
            for record in self._records.values()
            if record["user_id"] == scope_id
            and query_lower in record["memory"].lower()
            and self._matches(record, filters or {})
        ]
        # Sort by created_at descending
        results.sort(key=lambda r: r["created_at"], reverse=True)
        return [self._copy(r) for r in results[:limit]]

    async def update(self, memory_id: str, content: str) -> None:
        self.calls.append("update")
        record = self._records.get(memory_id)
        if record is None:
            raise ConnectivityError(f"Memory {memory_id} not found", status_code=404)
        record["memory"] = content
        record["updated_at"] = utc_now().isoformat()

    async def delete(self, memory_id: str) -> None:
        self.calls.append("delete")
        if self._records.pop(memory_id, None) is None:
            raise ConnectivityError(f"Memory {memory_id} not found", status_code=404)

    async def list(self, scope_id: str, *, limit: int = 100) -> list[RemoteRecord]:
        self.calls.append("list")
        results = [r for r in self._records.values() if r["user_id"] == scope_id]
        results.sort(key=lambda r: r["created_at"], reverse=True)
        return [self._copy(r) for r in results[:limit]]

    def __len__(self) -> int:
        return len(self._records)

    @staticmethod
    def _matches(record: RemoteRecord, filters: dict[str, str]) -> bool:
        metadata = record["metadata"]
        for key, expected in filters.items():
            if key == "tags":
                stored = set(metadata.get("tags", "").split(","))
                if not set(expected.split(",")) <= stored:
                    return False
            elif metadata.get(key) != expected:
                return False
        return True

    @staticmethod
    def _copy(record: RemoteRecord) -> RemoteRecord:
        return {**record, "metadata": dict(record["metadata"])}
