"""Remote memory service backends."""

from agentmem.memory.store import RemoteMemoryService
from agentmem.memory.stores.inmemory import InMemoryMemoryService
from agentmem.memory.stores.mem0 import Mem0MemoryService

__all__ = [
    "RemoteMemoryService",
    "InMemoryMemoryService",
    "Mem0MemoryService",
]
