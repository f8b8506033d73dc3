"""Configuration section models."""

from agentmem.config.models.memory import MemoryConfig, RemoteStoreConfig
from agentmem.config.models.observability import (
    LoggingConfig,
    ObservabilityConfig,
)

__all__ = [
    "MemoryConfig",
    "RemoteStoreConfig",
    "LoggingConfig",
    "ObservabilityConfig",
]
