"""Factory helpers for assembling a MemoryManager from settings.

The remote API key is read from settings, which take it from
AGENTMEM_REMOTE__API_KEY or the legacy MEM0_API_KEY environment variable.
A missing key does not fail construction: the manager comes back disabled.
"""

from datetime import timedelta

from agentmem.config import get_settings
from agentmem.config.settings import Settings
from agentmem.memory.adapter import RemoteStoreAdapter
from agentmem.memory.cache import LocalMemoryCache
from agentmem.memory.errors import ConfigurationError
from agentmem.memory.manager import MemoryManager
from agentmem.memory.scope import PrefixScopeResolver
from agentmem.memory.store import RemoteMemoryService
from agentmem.memory.stores.mem0 import Mem0MemoryService
from agentmem.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the observability.logging section of settings."""
    settings = settings or get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
        max_text_length=log_config.max_text_length,
    )


def create_remote_service(settings: Settings) -> RemoteMemoryService:
    """Create the default remote backend.

    Raises:
        ConfigurationError: If no API key is configured
    """
    remote = settings.remote
    api_key = remote.api_key.get_secret_value() if remote.api_key else None

    logger.info(
        "creating_memory_service",
        backend="mem0",
        base_url=remote.base_url,
        has_api_key=bool(api_key),
    )
    return Mem0MemoryService(
        api_key=api_key,
        base_url=remote.base_url,
        timeout=remote.timeout,
        probe_scope=remote.probe_scope,
    )


def create_memory_manager(
    settings: Settings | None = None,
    *,
    agent_id: str | None = None,
    service: RemoteMemoryService | None = None,
) -> MemoryManager:
    """Create a MemoryManager wired to the configured remote service.

    Args:
        settings: Settings to use (defaults to get_settings())
        agent_id: Owner of stored entries (defaults to memory.agent_id)
        service: Remote service to use instead of the configured backend

    Returns:
        A manager; disabled when memory is off or the backend is misconfigured
    """
    settings = settings or get_settings()
    config = settings.memory
    cache = LocalMemoryCache(
        max_entries=config.max_entries,
        retention=timedelta(days=config.retention_days),
    )

    adapter: RemoteStoreAdapter | None = None
    if config.enabled:
        try:
            backend = service or create_remote_service(settings)
        except ConfigurationError as e:
            logger.warning("memory_disabled", reason=e.message)
        else:
            adapter = RemoteStoreAdapter(
                backend,
                PrefixScopeResolver(settings.remote.namespace_prefix),
            )

    manager = MemoryManager(adapter, config, agent_id=agent_id, cache=cache)
    logger.info(
        "memory_manager_created",
        agent_id=manager.agent_id,
        enabled=manager.is_enabled,
    )
    return manager


async def initialize_memory_system(
    settings: Settings | None = None,
    *,
    agent_id: str | None = None,
    service: RemoteMemoryService | None = None,
) -> MemoryManager | None:
    """Create and initialize a manager.

    Returns:
        An initialized manager, or None when memory is disabled or the
        remote service cannot be reached
    """
    manager = create_memory_manager(settings, agent_id=agent_id, service=service)
    if not manager.is_enabled:
        return None

    try:
        await manager.initialize()
    except Exception as e:
        logger.warning("memory_initialization_failed", error=str(e))
        await manager.close()
        return None
    return manager
