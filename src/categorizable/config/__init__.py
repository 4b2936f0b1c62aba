"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .events import DEFAULT_EVENT_NAMESPACE, EventConfig, get_event_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_EVENT_NAMESPACE",
    "ConfigurationError",
    "DatabaseConfig",
    "EventConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_event_config",
    "get_storage_config",
]
