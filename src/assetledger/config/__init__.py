"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .inventory import InventoryConfig, get_inventory_config
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "InventoryConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_inventory_config",
    "get_storage_config",
]
