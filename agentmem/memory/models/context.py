"""Derived, non-persisted views folded from memory entries."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from agentmem.memory.enums import MemoryCategory
from agentmem.memory.models.entry import utc_now


class ErrorRecord(BaseModel):
    """An error encountered during a task and how it was handled."""

    error: str
    solution: str
    timestamp: datetime


class TaskContext(BaseModel):
    """Context for continuing a task, folded from its entries."""

    task_id: str
    current_step: int = 0
    total_steps: int = 0
    intermediate_results: dict[str, Any] = Field(default_factory=dict)
    user_preferences: dict[str, Any] = Field(default_factory=dict)
    error_history: list[ErrorRecord] = Field(default_factory=list)


class Learning(BaseModel):
    """A workflow pattern the agent has recorded."""

    pattern: str
    success: bool
    confidence: float


class AgentMemoryContext(BaseModel):
    """Preferences and learnings folded from an agent's recent memories."""

    agent_id: str
    session_id: str
    active_task_id: str | None = None
    last_activity: datetime = Field(default_factory=utc_now)
    preferences: dict[str, Any] = Field(default_factory=dict)
    learnings: list[Learning] = Field(default_factory=list)


class MemoryStats(BaseModel):
    """Aggregate counts over an agent's memories."""

    total_entries: int = 0
    entries_by_category: dict[MemoryCategory, int] = Field(default_factory=dict)
    tab_count: int = 0
    last_updated: datetime | None = None
    storage_used: int = Field(default=0, description="Content size in bytes")

    @classmethod
    def empty(cls) -> "MemoryStats":
        """All-zero stats with every category present."""
        return cls(
            entries_by_category={category: 0 for category in MemoryCategory},
            last_updated=utc_now(),
        )
