"""Caller-facing memory operations for agent tool frameworks."""

from agentmem.tools.memory_tool import MemoryTool, MemoryToolArgs
from agentmem.tools.planning import MemoryAwarePlanner, PlanningContext

__all__ = [
    "MemoryAwarePlanner",
    "MemoryTool",
    "MemoryToolArgs",
    "PlanningContext",
]
