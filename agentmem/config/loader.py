"""Layered TOML configuration for agentmem.

Configuration files are read from a single directory and stacked in a
fixed order, each layer overriding the one before it:

    default.toml          shipped defaults (required)
    {AGENTMEM_ENV}.toml   per-environment overrides (optional)

Environment variables and constructor arguments are applied on top of the
merged result by Settings, not here.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "AGENTMEM_CONFIG_DIR"
ENVIRONMENT_ENV = "AGENTMEM_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_FILE = "default.toml"

# How many parent directories of the cwd are searched for config/
SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Locate the configuration directory.

    An explicit AGENTMEM_CONFIG_DIR wins and must exist. Otherwise the
    current directory and up to SEARCH_DEPTH - 1 of its parents are
    searched for a `config/` directory, so tests and scripts run from a
    subdirectory still find the project configuration.

    Returns:
        Path to the configuration directory (relative `config` if none found)

    Raises:
        FileNotFoundError: If AGENTMEM_CONFIG_DIR names a missing directory
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {explicit}")
        return path

    start = Path.cwd()
    for directory in [start, *start.parents][:SEARCH_DEPTH]:
        candidate = directory / "config"
        if candidate.exists():
            return candidate

    return Path("config")


def get_environment() -> str:
    """Name of the active environment layer.

    Returns:
        Value of AGENTMEM_ENV, or "development" when unset
    """
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Read one TOML layer.

    Args:
        file_path: Path to the TOML file

    Returns:
        Parsed table

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay one configuration table on another.

    Tables present on both sides are merged key by key; any other value
    from `override` (including a table replacing a scalar, or the reverse)
    wins outright.

    Args:
        base: Lower-priority table
        override: Higher-priority table

    Returns:
        A new merged table; neither input is modified
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path, env: str) -> list[Path]:
    """List the TOML files that make up the configuration, lowest priority first.

    Args:
        config_dir: Directory holding the TOML files
        env: Environment name selecting the optional override layer

    Returns:
        default.toml, followed by {env}.toml when that file exists

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    default_path = config_dir / DEFAULT_FILE
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/{DEFAULT_FILE} or set {CONFIG_DIR_ENV}."
        )

    layers = [default_path]
    env_path = config_dir / f"{env}.toml"
    if env_path.exists():
        layers.append(env_path)
    return layers


def load_config(config_dir: Path | None = None, env: str | None = None) -> dict[str, Any]:
    """Load and merge every configuration layer.

    Args:
        config_dir: Directory to read (defaults to get_config_dir())
        env: Environment layer to apply (defaults to get_environment())

    Returns:
        Merged configuration table
    """
    layers = config_layers(config_dir or get_config_dir(), env or get_environment())

    config: dict[str, Any] = {}
    for layer in layers:
        config = deep_merge(config, load_toml(layer))
    return config
