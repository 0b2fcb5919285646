"""Configuration loading and pack initialization."""

from plugdex.config.loader import (
    home_config_exists,
    load_config,
    local_config_exists,
    resolve_sources,
    save_config,
)
from plugdex.config.schema import DEFAULT_CONFIG, PlugdexConfig

__all__ = [
    "DEFAULT_CONFIG",
    "PlugdexConfig",
    "home_config_exists",
    "load_config",
    "local_config_exists",
    "resolve_sources",
    "save_config",
]
