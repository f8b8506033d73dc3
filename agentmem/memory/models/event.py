"""Memory lifecycle event model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from agentmem.memory.enums import MemoryEventType
from agentmem.memory.models.entry import utc_now


class MemoryEvent(BaseModel):
    """A lifecycle notification delivered to event bus listeners."""

    type: MemoryEventType
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now)
