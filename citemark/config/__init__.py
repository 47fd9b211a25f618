"""
Citemark Configuration Module.

Provides centralized access to configuration.
"""
from citemark.config.loader import (
    load_config,
    get_config_value,
    get_api_config,
    get_metadata_config,
    get_database_config
)

__all__ = [
    "load_config",
    "get_config_value",
    "get_api_config",
    "get_metadata_config",
    "get_database_config"
]
