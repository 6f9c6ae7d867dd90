"""Application configuration helpers."""

from __future__ import annotations

from .engine import Backend, EngineConfig, get_backend, get_engine_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .supabase import SupabaseConfig, get_supabase_config

__all__ = [
    "Backend",
    "ConfigurationError",
    "DatabaseConfig",
    "EngineConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SupabaseConfig",
    "configure_logging",
    "get_backend",
    "get_database_config",
    "get_engine_config",
    "get_storage_config",
    "get_supabase_config",
    "require_env_var",
    "require_env_vars",
]
