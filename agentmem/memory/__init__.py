"""Agent memory: entries, remote persistence, caching, and derived context.

Entries are written through to a remote memory service, mirrored in a
bounded local cache, and folded into task and agent context views.
"""

from agentmem.memory.enums import MemoryCategory, MemoryEventType
from agentmem.memory.errors import (
    ConfigurationError,
    ConnectivityError,
    MalformedDataError,
    MemorySystemError,
    MemoryValidationError,
)
from agentmem.memory.events import MemoryEventBus
from agentmem.memory.factory import create_memory_manager, initialize_memory_system
from agentmem.memory.manager import MemoryManager

__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "MalformedDataError",
    "MemoryCategory",
    "MemoryEventBus",
    "MemoryEventType",
    "MemoryManager",
    "MemorySystemError",
    "MemoryValidationError",
    "create_memory_manager",
    "initialize_memory_system",
]
