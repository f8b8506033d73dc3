"""Configuration loading for agentmem.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from agentmem.config import get_settings

    settings = get_settings()
    if settings.memory.enabled:
        ...
"""

from functools import lru_cache

from agentmem.config.loader import load_config
from agentmem.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{AGENTMEM_ENV}.toml (environment overrides)
    4. AGENTMEM_* environment variables (runtime overrides)
    5. Legacy MEM0_API_KEY / MEMORY_ENABLED variables

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.

    Returns:
        Settings instance with all configuration loaded and validated
    """
    # TOML layers feed the custom settings source
    set_toml_config(load_config())

    # Env vars take priority over the TOML source
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration.

    Useful for tests or after configuration files have changed.

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
