"""Memory domain models.

Contains all Pydantic models for the memory system:
- MemoryEntry and MemoryMetadata, the persisted unit
- Search parameters and operation results
- Derived views: TaskContext, AgentMemoryContext, MemoryStats
- MemoryEvent for lifecycle notifications
"""

from agentmem.memory.models.context import (
    AgentMemoryContext,
    ErrorRecord,
    Learning,
    MemoryStats,
    TaskContext,
)
from agentmem.memory.models.entry import MemoryEntry, MemoryMetadata, ensure_utc, utc_now
from agentmem.memory.models.event import MemoryEvent
from agentmem.memory.models.location import PageLocation, site_from_url
from agentmem.memory.models.search import (
    MemoryOperationResult,
    MemorySearchParams,
    MemorySearchResult,
    TimeRange,
)

__all__ = [
    "AgentMemoryContext",
    "ErrorRecord",
    "Learning",
    "MemoryEntry",
    "MemoryEvent",
    "MemoryMetadata",
    "MemoryOperationResult",
    "MemorySearchParams",
    "MemorySearchResult",
    "MemoryStats",
    "PageLocation",
    "TaskContext",
    "TimeRange",
    "ensure_utc",
    "site_from_url",
    "utc_now",
]
