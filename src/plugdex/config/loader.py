"""Configuration file loading and merging."""

import logging
import os
from pathlib import Path

import yaml

from plugdex.config.schema import DEFAULT_CONFIG, PlugdexConfig
from plugdex.registry.loader import get_pack_search_paths

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
SOURCES_ENV_VAR = "PLUGDEX_SOURCES"


def get_home_config_path() -> Path:
    """Get path to global config: ~/.plugdex/config.yaml."""
    return Path.home() / ".plugdex" / CONFIG_FILENAME


def get_local_config_path() -> Path:
    """Get path to local config: ./.plugdex/config.yaml."""
    return Path.cwd() / ".plugdex" / CONFIG_FILENAME


def home_config_exists() -> bool:
    """Check if the global home config exists."""
    return get_home_config_path().exists()


def local_config_exists() -> bool:
    """Check if the local project config exists."""
    return get_local_config_path().exists()


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found, empty or invalid."""
    if not path.exists():
        return None
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning("Ignoring invalid config file %s: %s", path, e)
        return None
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: not a mapping", path)
        return None
    result: dict[str, object] = data
    return result


def _env_config() -> PlugdexConfig:
    raw = os.environ.get(SOURCES_ENV_VAR)
    if not raw:
        return PlugdexConfig()
    return PlugdexConfig(sources=[s for s in raw.split(os.pathsep) if s])


def load_config() -> PlugdexConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.plugdex/config.yaml)
    3. Local config (./.plugdex/config.yaml)
    4. PLUGDEX_SOURCES environment variable (sources only)

    Returns merged PlugdexConfig.
    """
    config = DEFAULT_CONFIG

    for path in (get_home_config_path(), get_local_config_path()):
        data = load_yaml_config(path)
        if data:
            config = config.merge(PlugdexConfig.from_dict(data))

    return config.merge(_env_config())


def resolve_sources(
    config: PlugdexConfig, overrides: tuple[str, ...] | list[str] = ()
) -> list[Path]:
    """Resolve the pack directories to load, in load order.

    Explicit overrides (e.g. CLI --source) win over configured sources;
    with neither, the existing default pack paths are used.
    """
    if overrides:
        return [Path(s).expanduser() for s in overrides]
    if config.sources:
        return [Path(s).expanduser() for s in config.sources]
    return get_pack_search_paths()


def save_config(config: PlugdexConfig, path: Path) -> None:
    """Save config to a YAML file.

    Creates parent directories if needed.
    Only saves non-None values.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.to_dict()
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
