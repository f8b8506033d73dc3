"""Search parameter and operation result models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from agentmem.memory.enums import MemoryCategory
from agentmem.memory.models.entry import MemoryEntry


class TimeRange(BaseModel):
    """Inclusive creation-time window."""

    start: datetime | None = None
    end: datetime | None = None

    def contains(self, moment: datetime) -> bool:
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


class MemorySearchParams(BaseModel):
    """Parameters for retrieving memories."""

    query: str = Field(default="", description="Free-text query; empty matches all")
    category: MemoryCategory | None = Field(default=None, description="Category filter")
    tags: list[str] | None = Field(default=None, description="Required tags")
    tab_id: int | None = Field(default=None, description="Tab filter")
    agent_id: str | None = Field(default=None, description="Owner scope")
    task_id: str | None = Field(default=None, description="Task filter")
    limit: int = Field(default=10, ge=1, description="Maximum results")
    importance: float | None = Field(
        default=None, ge=0.0, le=1.0, description="Minimum importance"
    )
    time_range: TimeRange | None = Field(default=None, description="Creation window")


class MemorySearchResult(BaseModel):
    """Entries returned by a search.

    has_more is True when the store returned exactly `limit` records; it
    is an approximation, not a cursor.
    """

    entries: list[MemoryEntry] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False

    @classmethod
    def empty(cls) -> "MemorySearchResult":
        return cls(entries=[], total=0, has_more=False)


class MemoryOperationResult(BaseModel):
    """Outcome of a write-side memory operation."""

    success: bool
    message: str | None = None
    data: Any = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "MemoryOperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str) -> "MemoryOperationResult":
        return cls(success=False, message=message)
