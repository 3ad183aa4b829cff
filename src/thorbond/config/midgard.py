"""Midgard indexer configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, optional_float_env, optional_int_env
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

DEFAULT_MIDGARD_BASE_URL = "https://midgard.ninerealms.com/v2"
DEFAULT_THORBOND_ADDRESS = "thor1xazgmh7sv0p393t9ntj6q9p52ahycc8jjlaap9"
DEFAULT_ACTION_LIMIT = 50
ACTION_TYPE = "send"


@dataclass(frozen=True, slots=True)
class MidgardConfig:
    """Where and how much transaction history to read for the protocol address."""

    resilience: ResilienceConfig
    protocol_address: str = DEFAULT_THORBOND_ADDRESS
    limit: int = DEFAULT_ACTION_LIMIT
    action_type: str = ACTION_TYPE


def default_midgard_resilience(
    base_url: str = DEFAULT_MIDGARD_BASE_URL,
    *,
    cache_ttl_seconds: float | None = None,
) -> ResilienceConfig:
    cache = (
        CacheConfig(backend="memory", default_ttl_seconds=cache_ttl_seconds)
        if cache_ttl_seconds is not None
        else None
    )
    return ResilienceConfig(
        name="midgard",
        base_url=base_url,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=cache,
    )


def get_midgard_config() -> MidgardConfig:
    base_url = optional_env_var("THORBOND_MIDGARD_URL", DEFAULT_MIDGARD_BASE_URL)
    resilience = default_midgard_resilience(
        base_url,
        cache_ttl_seconds=optional_float_env("THORBOND_INDEXER_CACHE_TTL"),
    )
    return MidgardConfig(
        resilience=resilience,
        protocol_address=optional_env_var("THORBOND_ADDRESS", DEFAULT_THORBOND_ADDRESS),
        limit=optional_int_env("THORBOND_ACTION_LIMIT", DEFAULT_ACTION_LIMIT),
    )
