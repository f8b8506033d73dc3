"""Caller-facing memory operations.

MemoryTool accepts a flat argument object (or its JSON text) naming an
action, runs it against a MemoryManager, and answers with a JSON envelope:

    {"ok": true, "output": ...}
    {"ok": false, "error": "..."}

run() never raises.
"""

import json
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from agentmem.memory.enums import MemoryCategory
from agentmem.memory.errors import MemoryValidationError
from agentmem.memory.folding import fold_preferences
from agentmem.memory.manager import MemoryManager
from agentmem.memory.models import PageLocation
from agentmem.observability.logging import get_logger

logger = get_logger(__name__)

INVALID_JSON_ERROR = "Invalid JSON input. Please provide valid JSON with action and parameters."
NOT_INITIALIZED_ERROR = (
    "Memory system is not initialized. Set MEM0_API_KEY environment variable to enable memory."
)

DEFAULT_RESULT_IMPORTANCE = 0.7
PREFERENCE_SCAN_LIMIT = 20
MAX_ERROR_RECORDS = 5
ADD_PREVIEW_LENGTH = 100

LocationProvider = Callable[[], Awaitable[PageLocation | None]]
TaskProvider = Callable[[], str | None]


class MemoryToolArgs(BaseModel):
    """Arguments accepted by MemoryTool.run()."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action: str = Field(..., description="Action to perform")
    content: str | None = Field(default=None, description="Content for add and store_result")
    query: str | None = Field(default=None, description="Search query")
    category: MemoryCategory | None = Field(default=None, description="Memory category")
    task_id: str | None = Field(default=None, alias="taskId", description="Task identifier")
    importance: float | None = Field(default=None, ge=0.0, le=1.0)
    tags: list[str] | None = Field(default=None, description="Comma-separated or list")
    limit: int | None = Field(default=None, ge=1)

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value


def _envelope(ok: bool, output: Any = None, error: str | None = None) -> str:
    response: dict[str, Any] = {"ok": ok}
    if output is not None:
        response["output"] = output
    if error is not None:
        response["error"] = error
    return json.dumps(response, default=str)


class MemoryTool:
    """Store and retrieve information across tasks and sessions.

    Args:
        manager: Memory manager, or None when memory is unavailable
        location_provider: Async callable returning the current page location
        current_task: The active task id, or a callable returning it
    """

    name = "memory_tool"

    def __init__(
        self,
        manager: MemoryManager | None,
        *,
        location_provider: LocationProvider | None = None,
        current_task: TaskProvider | str | None = None,
    ) -> None:
        self._manager = manager
        self._location_provider = location_provider
        self._current_task = current_task
        self._actions: dict[str, Callable[[MemoryManager, MemoryToolArgs], Awaitable[str]]] = {
            "add": self._add,
            "search": self._search,
            "get_context": self._get_context,
            "store_result": self._store_result,
            "get_preferences": self._get_preferences,
        }

    async def run(self, args: dict[str, Any] | str) -> str:
        """Execute one action and return the JSON envelope."""
        if isinstance(args, str):
            try:
                args = json.loads(args)
            except ValueError:
                return _envelope(False, error=INVALID_JSON_ERROR)
            if not isinstance(args, dict):
                return _envelope(False, error=INVALID_JSON_ERROR)

        manager = self._manager
        if manager is None or not manager.is_enabled:
            return _envelope(False, error=NOT_INITIALIZED_ERROR)

        try:
            parsed = MemoryToolArgs.model_validate(args)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            return _envelope(False, error=f"Invalid argument {location}: {first['msg']}")

        handler = self._actions.get(parsed.action)
        if handler is None:
            return _envelope(False, error=f"Unknown action: {parsed.action}")

        try:
            return await handler(manager, parsed)
        except MemoryValidationError as e:
            return _envelope(False, error=e.message)
        except Exception as e:
            logger.error("memory_tool_failed", action=parsed.action, error=str(e), exc_info=True)
            return _envelope(False, error=f"Memory operation failed: {e}")

    def current_task_id(self) -> str | None:
        if callable(self._current_task):
            return self._current_task()
        return self._current_task

    async def _location(self) -> PageLocation | None:
        if self._location_provider is None:
            return None
        return await self._location_provider()

    async def _base_metadata(self, args: MemoryToolArgs) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "task_id": args.task_id or self.current_task_id(),
            "tags": args.tags,
            "importance": args.importance,
        }
        location = await self._location()
        if location is not None:
            metadata["tab_id"] = location.tab_id
            metadata["url"] = location.url or None
            metadata["site"] = location.site
        return metadata

    async def _add(self, manager: MemoryManager, args: MemoryToolArgs) -> str:
        if not args.content:
            raise MemoryValidationError("Content is required for add action")

        metadata = await self._base_metadata(args)
        metadata["category"] = args.category
        result = await manager.add_memory(args.content, metadata)
        if not result.success:
            return _envelope(False, output=result.message, error=result.message)
        return _envelope(
            True,
            output=f"Memory stored successfully: {args.content[:ADD_PREVIEW_LENGTH]}...",
        )

    async def _search(self, manager: MemoryManager, args: MemoryToolArgs) -> str:
        if not args.query:
            raise MemoryValidationError("Query is required for search action")

        location = await self._location()
        result = await manager.search_memories(
            query=args.query,
            category=args.category,
            task_id=args.task_id,
            tab_id=location.tab_id if location else None,
            limit=args.limit or 10,
        )
        memories = [
            {
                "content": entry.content,
                "category": entry.metadata.category.value if entry.metadata.category else None,
                "created": entry.created_at.isoformat(),
                "importance": entry.metadata.importance,
                "tags": entry.metadata.tags,
            }
            for entry in result.entries
        ]
        return _envelope(
            True,
            output={"memories": memories, "total": result.total, "query": args.query},
        )

    async def _get_context(self, manager: MemoryManager, args: MemoryToolArgs) -> str:
        if not args.task_id:
            raise MemoryValidationError("Task ID is required for get_context action")

        context = await manager.get_task_context(args.task_id)
        if context is None:
            return _envelope(True, output={"message": "No context found for task"})
        return _envelope(
            True,
            output={
                "taskId": context.task_id,
                "intermediateResults": context.intermediate_results,
                "userPreferences": context.user_preferences,
                "errorHistory": [
                    record.model_dump(mode="json")
                    for record in context.error_history[:MAX_ERROR_RECORDS]
                ],
            },
        )

    async def _store_result(self, manager: MemoryManager, args: MemoryToolArgs) -> str:
        if not args.content:
            raise MemoryValidationError("Content is required for store_result action")

        metadata = await self._base_metadata(args)
        metadata["category"] = MemoryCategory.TASK_RESULT
        metadata["importance"] = args.importance or DEFAULT_RESULT_IMPORTANCE
        result = await manager.add_memory(args.content, metadata)
        if not result.success:
            return _envelope(False, output=result.message, error=result.message)
        return _envelope(True, output="Task result stored successfully")

    async def _get_preferences(self, manager: MemoryManager, args: MemoryToolArgs) -> str:
        entries = await manager.get_memories_by_category(
            MemoryCategory.USER_PREFERENCE, PREFERENCE_SCAN_LIMIT
        )
        return _envelope(
            True,
            output={"preferences": fold_preferences(entries), "count": len(entries)},
        )
