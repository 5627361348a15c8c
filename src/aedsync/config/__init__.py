"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, env_float, env_int, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .housekeeping import HousekeepingConfig, get_housekeeping_config
from .http_resilience import (
    WRITE_SAFE_RETRY,
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)
from .logging import configure_logging
from .osm import OsmConfig, get_osm_config
from .overpass import OverpassConfig, get_overpass_config
from .reconciler import ReconcilerConfig, get_reconciler_config
from .registry import RegistryConfig, get_registry_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "WRITE_SAFE_RETRY",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "HousekeepingConfig",
    "MissingConfigurationError",
    "OsmConfig",
    "OverpassConfig",
    "RateLimit",
    "ReconcilerConfig",
    "RegistryConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_float",
    "env_int",
    "get_database_config",
    "get_housekeeping_config",
    "get_osm_config",
    "get_overpass_config",
    "get_reconciler_config",
    "get_registry_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
