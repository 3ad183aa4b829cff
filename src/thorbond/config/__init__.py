"""Application configuration helpers."""

from __future__ import annotations

from .engine import EngineConfig, get_engine_config
from .env import optional_env_var, optional_float_env, optional_int_env, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import TRANSPORT_LOGGERS, configure_logging
from .midgard import MidgardConfig, get_midgard_config
from .thornode import ThornodeConfig, get_thornode_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "EngineConfig",
    "InvalidConfigurationError",
    "MidgardConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "TRANSPORT_LOGGERS",
    "ThornodeConfig",
    "configure_logging",
    "get_engine_config",
    "get_midgard_config",
    "get_thornode_config",
    "optional_env_var",
    "optional_float_env",
    "optional_int_env",
    "require_env_vars",
]
