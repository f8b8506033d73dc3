"""Remote store adapter.

Translates entry operations into the remote service's record shape and
back. Owns auto-initialization against the service; holds no cache and
no business rules.

Wire format: remote metadata is a flat map of strings keyed in camelCase
(tabId, taskId, toolName, sessionId, createdAt, expiresAt). Numbers and
datetimes are stringified, tags are comma-joined.
"""

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TypeVar

from pydantic import ValidationError

from agentmem.memory.enums import MemoryCategory
from agentmem.memory.errors import ConnectivityError
from agentmem.memory.models import (
    MemoryEntry,
    MemoryMetadata,
    MemoryOperationResult,
    MemorySearchParams,
    MemorySearchResult,
    ensure_utc,
    utc_now,
)
from agentmem.memory.scope import DEFAULT_AGENT_ID, PrefixScopeResolver, ScopeResolver
from agentmem.memory.store import RemoteMemoryService, RemoteRecord
from agentmem.observability.logging import get_logger
from agentmem.observability.metrics import MALFORMED_DATA, REMOTE_LATENCY

logger = get_logger(__name__)

T = TypeVar("T")


def _error_text(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or type(error).__name__


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(str(value)))


def _parse_tags(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(tag) for tag in value]
    return [tag for tag in (t.strip() for t in str(value).split(",")) if tag]


def _parse_importance(value: Any) -> float:
    importance = float(value)
    if not 0.0 <= importance <= 1.0:
        raise ValueError(f"importance out of range: {importance}")
    return importance


class RemoteStoreAdapter:
    """Bridge between MemoryEntry and a RemoteMemoryService."""

    def __init__(
        self,
        service: RemoteMemoryService,
        resolver: ScopeResolver | None = None,
    ) -> None:
        self._service = service
        self._resolver = resolver or PrefixScopeResolver()
        self._initialized = False

    @property
    def service(self) -> RemoteMemoryService:
        return self._service

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Verify connectivity with a probe query.

        Raises:
            ConnectivityError: If the probe fails
        """
        try:
            with REMOTE_LATENCY.labels(operation="probe").time():
                await self._service.probe()
        except Exception as e:
            raise ConnectivityError(
                f"Failed to initialize memory service: {_error_text(e)}",
                status_code=getattr(e, "status_code", None),
            ) from e
        self._initialized = True
        logger.info("memory_service_initialized", service=type(self._service).__name__)

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self.initialize()

    async def close(self) -> None:
        await self._service.close()

    # ------------------ writes ------------------
    async def add(self, content: str, metadata: MemoryMetadata) -> MemoryOperationResult:
        """Persist an entry. Never raises; failures come back as results.

        On success `data` is the remote-assigned id, or None when the
        service accepted the write without reporting one.
        """
        try:
            await self._ensure_initialized()
            scope_id = self._resolver.scope_for(metadata.agent_id)
            with REMOTE_LATENCY.labels(operation="add").time():
                memory_id = await self._service.add(
                    scope_id, content, self.to_remote_metadata(metadata)
                )
        except Exception as e:
            logger.warning("memory_add_failed", agent_id=metadata.agent_id, error=_error_text(e))
            return MemoryOperationResult.fail(f"Failed to add memory: {_error_text(e)}")

        return MemoryOperationResult.ok("Memory added successfully", data=memory_id)

    async def update(self, memory_id: str, content: str) -> MemoryOperationResult:
        """Replace an entry's content. Never raises."""
        if not memory_id:
            return MemoryOperationResult.fail("Cannot update a memory without an id")
        try:
            await self._ensure_initialized()
            with REMOTE_LATENCY.labels(operation="update").time():
                await self._service.update(memory_id, content)
        except Exception as e:
            logger.warning("memory_update_failed", memory_id=memory_id, error=_error_text(e))
            return MemoryOperationResult.fail(f"Failed to update memory: {_error_text(e)}")

        return MemoryOperationResult.ok("Memory updated successfully")

    async def delete(self, memory_id: str, owner: str) -> MemoryOperationResult:
        """Delete an entry. Never raises."""
        if not memory_id:
            return MemoryOperationResult.fail("Cannot delete a memory without an id")
        try:
            await self._ensure_initialized()
            with REMOTE_LATENCY.labels(operation="delete").time():
                await self._service.delete(memory_id)
        except Exception as e:
            logger.warning(
                "memory_delete_failed", memory_id=memory_id, owner=owner, error=_error_text(e)
            )
            return MemoryOperationResult.fail(f"Failed to delete memory: {_error_text(e)}")

        return MemoryOperationResult.ok("Memory deleted successfully")

    # ------------------ reads -------------------
    async def search(self, params: MemorySearchParams) -> MemorySearchResult:
        """Search entries.

        Raises:
            ConnectivityError: If the service call fails
        """
        agent_id = params.agent_id or DEFAULT_AGENT_ID
        records = await self._read(
            "search",
            lambda: self._service.search(
                self._resolver.scope_for(agent_id),
                params.query,
                limit=params.limit,
                filters=self.to_remote_filters(params) or None,
            ),
        )

        entries = [
            entry
            for entry in self.to_entries(records)
            if self._passes_local_filters(entry, params)
        ]
        return MemorySearchResult(
            entries=entries,
            total=len(entries),
            has_more=len(records) == params.limit,
        )

    async def get_all(self, agent_id: str, limit: int = 100) -> MemorySearchResult:
        """List an agent's entries without a text query.

        Raises:
            ConnectivityError: If the service call fails
        """
        records = await self._read(
            "list",
            lambda: self._service.list(self._resolver.scope_for(agent_id), limit=limit),
        )
        entries = self.to_entries(records)
        return MemorySearchResult(
            entries=entries,
            total=len(records),
            has_more=len(records) == limit,
        )

    async def _read(self, operation: str, call: Callable[[], Any]) -> list[RemoteRecord]:
        await self._ensure_initialized()
        try:
            with REMOTE_LATENCY.labels(operation=operation).time():
                return list(await call())
        except ConnectivityError:
            raise
        except Exception as e:
            raise ConnectivityError(f"Memory {operation} failed: {_error_text(e)}") from e

    @staticmethod
    def _passes_local_filters(entry: MemoryEntry, params: MemorySearchParams) -> bool:
        if params.importance is not None:
            if entry.metadata.importance is None or entry.metadata.importance < params.importance:
                return False
        if params.time_range is not None and not params.time_range.contains(entry.created_at):
            return False
        return True

    # --------------- transformation -------------
    @staticmethod
    def to_remote_metadata(metadata: MemoryMetadata) -> dict[str, str]:
        """Flatten metadata into the string map the service stores."""
        remote: dict[str, str] = {}

        if metadata.tab_id is not None:
            remote["tabId"] = str(metadata.tab_id)
        if metadata.task_id:
            remote["taskId"] = metadata.task_id
        if metadata.category is not None:
            remote["category"] = metadata.category.value
        if metadata.tags:
            remote["tags"] = ",".join(metadata.tags)
        if metadata.importance is not None:
            remote["importance"] = str(metadata.importance)
        if metadata.expires_at is not None:
            remote["expiresAt"] = metadata.expires_at.isoformat()
        if metadata.url:
            remote["url"] = metadata.url
        if metadata.site:
            remote["site"] = metadata.site
        if metadata.tool_name:
            remote["toolName"] = metadata.tool_name
        if metadata.session_id:
            remote["sessionId"] = metadata.session_id

        remote["createdAt"] = utc_now().isoformat()
        return remote

    @staticmethod
    def to_remote_filters(params: MemorySearchParams) -> dict[str, str]:
        filters: dict[str, str] = {}
        if params.category is not None:
            filters["category"] = params.category.value
        if params.tab_id is not None:
            filters["tabId"] = str(params.tab_id)
        if params.task_id:
            filters["taskId"] = params.task_id
        if params.tags:
            filters["tags"] = ",".join(params.tags)
        return filters

    def to_entries(self, records: Iterable[RemoteRecord]) -> list[MemoryEntry]:
        entries = []
        for record in records:
            entry = self.to_entry(record)
            if entry is not None:
                entries.append(entry)
        return entries

    def to_entry(self, record: RemoteRecord) -> MemoryEntry | None:
        """Convert a remote record, omitting any field that fails to parse."""
        raw = record.get("metadata")
        meta: dict[str, Any] = raw if isinstance(raw, dict) else {}
        record_id = record.get("id")

        def field(key: str, parser: Callable[[Any], T], value: Any = None) -> T | None:
            value = meta.get(key) if value is None else value
            if value is None or value == "":
                return None
            try:
                return parser(value)
            except (TypeError, ValueError) as e:
                MALFORMED_DATA.labels(kind="field").inc()
                logger.debug("memory_field_skipped", memory_id=record_id, field=key, error=str(e))
                return None

        fields: dict[str, Any] = {
            "agent_id": self._resolver.agent_for(str(record.get("user_id") or "")),
            "tab_id": field("tabId", int),
            "task_id": field("taskId", str),
            "category": field("category", MemoryCategory),
            "tags": field("tags", _parse_tags),
            "importance": field("importance", _parse_importance),
            "expires_at": field("expiresAt", _parse_datetime),
            "url": field("url", str),
            "site": field("site", str),
            "tool_name": field("toolName", str),
            "session_id": field("sessionId", str),
        }
        created_at = field("createdAt", _parse_datetime) or field(
            "created_at", _parse_datetime, record.get("created_at")
        )
        updated_at = field("updated_at", _parse_datetime, record.get("updated_at"))

        try:
            return MemoryEntry(
                id=str(record_id) if record_id is not None else None,
                content=str(record.get("memory") or record.get("text") or ""),
                metadata=MemoryMetadata(**fields),
                created_at=created_at or utc_now(),
                updated_at=updated_at,
            )
        except ValidationError as e:
            MALFORMED_DATA.labels(kind="record").inc()
            logger.warning("memory_record_skipped", memory_id=record_id, error=str(e))
            return None


__all__ = ["RemoteStoreAdapter"]
