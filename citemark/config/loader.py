"""
Citemark Configuration Loader.

Centralized configuration loading from config/config.yaml.
Provides cached singleton access to prevent repeated file I/O.
"""
import os
from pathlib import Path
from functools import lru_cache
from typing import Any, Dict
import yaml

from citemark.utils.logger import step_logger


def _get_project_root() -> Path:
    """Get project root directory."""
    # Navigate up from citemark/config/loader.py to project root
    return Path(__file__).parent.parent.parent


def _get_config_path() -> Path:
    override = os.getenv("CITEMARK_CONFIG_PATH")
    if override:
        return Path(override)
    return _get_project_root() / "config" / "config.yaml"


@lru_cache(maxsize=1)
def load_config() -> Dict[str, Any]:
    """
    Load configuration from config/config.yaml (cached singleton).

    The path can be overridden with the CITEMARK_CONFIG_PATH environment variable.

    Returns:
        Dict containing all configuration values
    """
    config_path = _get_config_path()

    if not config_path.exists():
        step_logger.warning(f"[Config] Config file not found at {config_path}, using defaults")
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}
        step_logger.info(f"[Config] Loaded configuration from {config_path}")
        return config
    except (OSError, yaml.YAMLError) as e:
        step_logger.error(f"[Config] Failed to load config: {e}")
        return {}


def get_config_value(path: str, default: Any = None) -> Any:
    """
    Get a configuration value by dot-separated path.

    Args:
        path: Dot-separated path like "metadata.cache_ttl_seconds"
        default: Default value if path not found

    Returns:
        Configuration value or default
    """
    config = load_config()
    keys = path.split(".")

    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value if value is not None else default


# Convenience functions for common config access
def get_api_config() -> Dict[str, Any]:
    """Get API configuration section."""
    config = load_config()
    return config.get("api", {})


def get_metadata_config() -> Dict[str, Any]:
    """Get metadata lookup configuration section."""
    config = load_config()
    return config.get("metadata", {})


def get_database_config() -> Dict[str, Any]:
    """Get database configuration section."""
    config = load_config()
    return config.get("database", {})
