"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_positive_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError, ProjectConfigError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .project import CreatorConfig, ProjectConfig, load_project_config, parse_project_config
from .roblox import RobloxConfig, get_roblox_config
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "CreatorConfig",
    "MissingConfigurationError",
    "ProjectConfig",
    "ProjectConfigError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "RobloxConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_roblox_config",
    "get_storage_config",
    "get_sync_config",
    "load_project_config",
    "optional_positive_int",
    "parse_project_config",
    "require_env_vars",
]
