"""MemoryManager - central orchestrator for agent memory.

Writes go through to the remote store before the local cache or any
listener sees them. Reads favor availability: a failed remote read comes
back as an empty result so the calling agent can continue without memory.
No public operation raises except initialize().
"""

import json
from collections.abc import Mapping
from datetime import timedelta
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from agentmem.config.models import MemoryConfig
from agentmem.memory.adapter import RemoteStoreAdapter
from agentmem.memory.cache import LocalMemoryCache
from agentmem.memory.enums import MemoryCategory, MemoryEventType
from agentmem.memory.events import MemoryEventBus, MemoryListener
from agentmem.memory.folding import fold_agent_context, fold_task_context
from agentmem.memory.models import (
    AgentMemoryContext,
    MemoryEntry,
    MemoryMetadata,
    MemoryOperationResult,
    MemorySearchParams,
    MemorySearchResult,
    MemoryStats,
    TaskContext,
    site_from_url,
    utc_now,
)
from agentmem.memory.preferences import format_preference
from agentmem.observability.logging import get_logger
from agentmem.observability.metrics import MEMORY_OPERATIONS

logger = get_logger(__name__)

DISABLED_MESSAGE = "Memory is disabled"

TASK_CONTEXT_SCAN_LIMIT = 50
AGENT_CONTEXT_SCAN_LIMIT = 20
TAB_CLEAR_SCAN_LIMIT = 100
STATS_SCAN_LIMIT = 1000

WORKFLOW_SUCCESS_IMPORTANCE = 0.8
WORKFLOW_FAILURE_IMPORTANCE = 0.3
TOOL_SUCCESS_IMPORTANCE = 0.6
TOOL_FAILURE_IMPORTANCE = 0.4
USER_PREFERENCE_IMPORTANCE = 0.9


def _count(operation: str, outcome: str) -> None:
    MEMORY_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


class MemoryManager:
    """Facade over the remote store adapter, local cache, and event bus.

    A manager built without an adapter, or with `enabled=False`, is
    disabled: every operation short-circuits without touching the network.
    """

    def __init__(
        self,
        adapter: RemoteStoreAdapter | None,
        config: MemoryConfig | None = None,
        *,
        agent_id: str | None = None,
        session_id: str | None = None,
        event_bus: MemoryEventBus | None = None,
        cache: LocalMemoryCache | None = None,
    ) -> None:
        self._config = config or MemoryConfig()
        self._adapter = adapter
        self._agent_id = agent_id or self._config.agent_id
        self._session_id = session_id or str(uuid4())
        self._event_bus = event_bus or MemoryEventBus()
        self._cache = cache or LocalMemoryCache(
            max_entries=self._config.max_entries,
            retention=timedelta(days=self._config.retention_days),
        )

    @property
    def is_enabled(self) -> bool:
        return self._config.enabled and self._adapter is not None

    @property
    def agent_id(self) -> str:
        return self._agent_id

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def config(self) -> MemoryConfig:
        return self._config

    @property
    def event_bus(self) -> MemoryEventBus:
        return self._event_bus

    @property
    def cache(self) -> LocalMemoryCache:
        return self._cache

    async def initialize(self) -> None:
        """Verify the remote service is reachable.

        Raises:
            ConnectivityError: If the probe fails
        """
        if not self.is_enabled or self._adapter is None:
            return
        await self._adapter.initialize()
        logger.info("memory_manager_initialized", agent_id=self._agent_id)

    async def close(self) -> None:
        if self._adapter is not None:
            await self._adapter.close()

    def on_memory_event(self, callback: MemoryListener) -> None:
        """Subscribe to every memory event."""
        self._event_bus.subscribe(callback)

    def get_cached(self, entry_id: str) -> MemoryEntry | None:
        return self._cache.get(entry_id)

    # ------------------ writes ------------------
    def _complete_metadata(
        self, metadata: MemoryMetadata | Mapping[str, Any] | None
    ) -> MemoryMetadata:
        if isinstance(metadata, MemoryMetadata):
            supplied = metadata.model_dump(exclude_none=True)
        else:
            supplied = {k: v for k, v in (metadata or {}).items() if v is not None}

        fields: dict[str, Any] = {
            "agent_id": self._agent_id,
            "session_id": self._session_id,
            **supplied,
        }
        if fields.get("url") and not fields.get("site"):
            fields["site"] = site_from_url(fields["url"])
        return MemoryMetadata.model_validate(fields)

    async def add_memory(
        self,
        content: str,
        metadata: MemoryMetadata | Mapping[str, Any] | None = None,
    ) -> MemoryOperationResult:
        """Persist an entry, then cache it and emit memory_added."""
        if not self.is_enabled or self._adapter is None:
            _count("add", "disabled")
            return MemoryOperationResult.fail(DISABLED_MESSAGE)
        if not content:
            _count("add", "invalid")
            return MemoryOperationResult.fail("Content is required to add a memory")

        try:
            full_metadata = self._complete_metadata(metadata)
        except ValidationError as e:
            _count("add", "invalid")
            return MemoryOperationResult.fail(f"Invalid memory metadata: {e.errors()[0]['msg']}")

        try:
            result = await self._adapter.add(content, full_metadata)
            if not result.success:
                _count("add", "failed")
                return result

            entry = MemoryEntry(
                id=result.data or str(uuid4()),
                content=content,
                metadata=full_metadata,
            )
            self._cache.put(entry)
            self._event_bus.emit(
                MemoryEventType.MEMORY_ADDED,
                {
                    "entry_id": entry.id,
                    "category": full_metadata.category,
                    "agent_id": self._agent_id,
                    "tab_id": full_metadata.tab_id,
                },
            )
        except Exception as e:
            _count("add", "failed")
            logger.error("memory_add_unexpected_error", error=str(e), exc_info=True)
            return MemoryOperationResult.fail(f"Failed to add memory: {e}")

        _count("add", "success")
        logger.debug(
            "memory_added",
            entry_id=entry.id,
            category=full_metadata.category,
            content=content,
        )
        return MemoryOperationResult.ok("Memory added successfully", data=entry)

    async def update_memory(self, entry_id: str, content: str) -> MemoryOperationResult:
        """Replace an entry's content remotely, then in the cache."""
        if not self.is_enabled or self._adapter is None:
            return MemoryOperationResult.fail(DISABLED_MESSAGE)
        if not entry_id:
            return MemoryOperationResult.fail("Cannot update a memory without an id")
        if not content:
            return MemoryOperationResult.fail("Content is required to update a memory")

        result = await self._adapter.update(entry_id, content)
        if not result.success:
            _count("update", "failed")
            return result

        cached = self._cache.get(entry_id)
        if cached is not None:
            cached.content = content
            cached.touch()
        self._event_bus.emit(
            MemoryEventType.MEMORY_UPDATED,
            {"entry_id": entry_id, "agent_id": self._agent_id},
        )
        _count("update", "success")
        return result

    async def delete_memory(self, entry_id: str) -> MemoryOperationResult:
        """Delete an entry remotely and evict it from the cache."""
        if not self.is_enabled or self._adapter is None:
            return MemoryOperationResult.fail(DISABLED_MESSAGE)
        if not entry_id:
            return MemoryOperationResult.fail("Cannot delete a memory without an id")

        result = await self._adapter.delete(entry_id, self._agent_id)
        if not result.success:
            _count("delete", "failed")
            return result

        self._cache.evict(entry_id)
        self._event_bus.emit(
            MemoryEventType.MEMORY_DELETED,
            {"entry_id": entry_id, "agent_id": self._agent_id},
        )
        _count("delete", "success")
        return result

    async def store_workflow_pattern(
        self,
        pattern: str,
        success: bool,
        metadata: Mapping[str, Any] | None = None,
    ) -> MemoryOperationResult:
        return await self.add_memory(
            pattern,
            {
                **(metadata or {}),
                "category": MemoryCategory.WORKFLOW_PATTERN,
                "importance": (
                    WORKFLOW_SUCCESS_IMPORTANCE if success else WORKFLOW_FAILURE_IMPORTANCE
                ),
            },
        )

    async def store_tool_result(
        self,
        tool_name: str,
        result: Any,
        success: bool,
        metadata: Mapping[str, Any] | None = None,
    ) -> MemoryOperationResult:
        content = (
            f"Tool: {tool_name}, Success: {json.dumps(success)}, "
            f"Result: {json.dumps(result, default=str)}"
        )
        return await self.add_memory(
            content,
            {
                **(metadata or {}),
                "category": MemoryCategory.TOOL_RESULT,
                "tool_name": tool_name,
                "importance": TOOL_SUCCESS_IMPORTANCE if success else TOOL_FAILURE_IMPORTANCE,
            },
        )

    async def store_user_preference(
        self,
        key: str,
        value: Any,
        metadata: Mapping[str, Any] | None = None,
    ) -> MemoryOperationResult:
        return await self.add_memory(
            format_preference(key, value),
            {
                **(metadata or {}),
                "category": MemoryCategory.USER_PREFERENCE,
                "importance": USER_PREFERENCE_IMPORTANCE,
            },
        )

    # ------------------ reads -------------------
    def _mirror(self, entries: list[MemoryEntry]) -> None:
        for entry in entries:
            if entry.id:
                self._cache.put(entry)

    async def search_memories(
        self,
        params: MemorySearchParams | None = None,
        **fields: Any,
    ) -> MemorySearchResult:
        """Search memories; any failure yields an empty result.

        Accepts a MemorySearchParams, keyword fields, or both (keywords win).
        """
        if not self.is_enabled or self._adapter is None:
            _count("search", "disabled")
            return MemorySearchResult.empty()

        data = params.model_dump(exclude_none=True) if params is not None else {}
        data.update({k: v for k, v in fields.items() if v is not None})
        data.setdefault("agent_id", self._agent_id)
        try:
            search_params = MemorySearchParams.model_validate(data)
        except ValidationError as e:
            _count("search", "invalid")
            logger.warning("memory_search_invalid", error=e.errors()[0]["msg"])
            return MemorySearchResult.empty()

        try:
            result = await self._adapter.search(search_params)
        except Exception as e:
            _count("search", "failed")
            logger.warning("memory_search_failed", query=search_params.query, error=str(e))
            return MemorySearchResult.empty()

        self._mirror(result.entries)
        self._event_bus.emit(
            MemoryEventType.MEMORY_SEARCHED,
            {
                "category": search_params.category,
                "agent_id": self._agent_id,
                "tab_id": search_params.tab_id,
                "result_count": len(result.entries),
            },
        )
        _count("search", "success")
        return result

    async def get_memories_by_category(
        self, category: MemoryCategory, limit: int = 20
    ) -> list[MemoryEntry]:
        result = await self.search_memories(query="", category=category, limit=limit)
        return result.entries

    async def get_recent_memories(self, limit: int = 10) -> list[MemoryEntry]:
        """Most recent entries first; empty on any failure."""
        if not self.is_enabled or self._adapter is None:
            return []
        try:
            result = await self._adapter.get_all(self._agent_id, limit)
        except Exception as e:
            _count("recent", "failed")
            logger.warning("memory_recent_failed", error=str(e))
            return []

        self._mirror(result.entries)
        entries = sorted(result.entries, key=lambda e: e.created_at, reverse=True)
        _count("recent", "success")
        return entries[:limit]

    async def get_task_context(self, task_id: str) -> TaskContext | None:
        """Fold a task's entries into a TaskContext; None when nothing matches."""
        if not self.is_enabled or not task_id:
            return None
        try:
            memories = await self.search_memories(
                query="", task_id=task_id, limit=TASK_CONTEXT_SCAN_LIMIT
            )
            if not memories.entries:
                return None
            return fold_task_context(task_id, memories.entries)
        except Exception as e:
            logger.warning("task_context_failed", task_id=task_id, error=str(e))
            return None

    async def get_agent_context(self, active_task_id: str | None = None) -> AgentMemoryContext:
        """Preferences and learnings from the agent's recent memories.

        Never fails; a disabled or unreachable store yields an empty context.
        """
        recent = await self.get_recent_memories(AGENT_CONTEXT_SCAN_LIMIT)
        return fold_agent_context(
            self._agent_id,
            self._session_id,
            recent,
            active_task_id=active_task_id,
        )

    # ------------------ maintenance -------------
    async def clear_tab_memories(self, tab_id: int) -> MemoryOperationResult:
        """Delete every entry recorded for a tab, one remote call each.

        Individual delete failures are tolerated; the result reports only
        the entries actually deleted.
        """
        if not self.is_enabled or self._adapter is None:
            return MemoryOperationResult.fail(DISABLED_MESSAGE)

        try:
            memories = await self.search_memories(
                query="", tab_id=tab_id, limit=TAB_CLEAR_SCAN_LIMIT
            )
            deleted = 0
            for memory in memories.entries:
                if not memory.id:
                    continue
                result = await self._adapter.delete(memory.id, self._agent_id)
                if result.success:
                    deleted += 1
                    self._cache.evict(memory.id)

            self._event_bus.emit(
                MemoryEventType.MEMORY_CLEARED,
                {"tab_id": tab_id, "agent_id": self._agent_id, "deleted_count": deleted},
            )
        except Exception as e:
            _count("clear_tab", "failed")
            logger.error("clear_tab_failed", tab_id=tab_id, error=str(e))
            return MemoryOperationResult.fail(f"Failed to clear tab memories: {e}")

        _count("clear_tab", "success")
        return MemoryOperationResult.ok(
            f"Deleted {deleted} memories for tab {tab_id}", data=deleted
        )

    async def get_memory_stats(self) -> MemoryStats:
        """Counts per category and distinct tabs; all zeros on failure."""
        stats = MemoryStats.empty()
        if not self.is_enabled or self._adapter is None:
            return stats

        try:
            all_memories = await self._adapter.get_all(self._agent_id, STATS_SCAN_LIMIT)
        except Exception as e:
            logger.warning("memory_stats_failed", error=str(e))
            return stats

        self._mirror(all_memories.entries)
        tab_ids: set[int] = set()
        for entry in all_memories.entries:
            if entry.metadata.category is not None:
                stats.entries_by_category[entry.metadata.category] += 1
            if entry.metadata.tab_id is not None:
                tab_ids.add(entry.metadata.tab_id)
            stats.storage_used += len(entry.content.encode("utf-8"))

        stats.total_entries = all_memories.total
        stats.tab_count = len(tab_ids)
        stats.last_updated = utc_now()
        return stats

    async def cleanup(self) -> int:
        """Apply the retention policy, returning the number of remote deletions.

        Expired entries (past expires_at, or older than retention_days) are
        dropped from the cache and deleted from the remote store.
        """
        if not self.is_enabled or self._adapter is None or not self._config.auto_cleanup:
            return 0

        pruned = self._cache.prune_expired()
        try:
            candidates = await self._adapter.get_all(self._agent_id, self._config.max_entries)
        except Exception as e:
            logger.warning("memory_cleanup_scan_failed", error=str(e))
            return 0

        self._mirror(candidates.entries)
        deleted = 0
        for entry in candidates.entries:
            if not entry.id or not self._cache.is_expired(entry):
                continue
            result = await self._adapter.delete(entry.id, self._agent_id)
            if result.success:
                deleted += 1
                self._cache.evict(entry.id)

        logger.info("memory_cleanup_completed", deleted=deleted, pruned_from_cache=pruned)
        return deleted
