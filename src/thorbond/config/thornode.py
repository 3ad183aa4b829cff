"""THORNode node-state configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig

DEFAULT_THORNODE_BASE_URL = "https://thornode.ninerealms.com/thorchain"


@dataclass(frozen=True, slots=True)
class ThornodeConfig:
    resilience: ResilienceConfig


def default_thornode_resilience(base_url: str = DEFAULT_THORNODE_BASE_URL) -> ResilienceConfig:
    # Bond state is read live on every query; never cache it.
    return ResilienceConfig(
        name="thornode",
        base_url=base_url,
        ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        cache=None,
    )


def get_thornode_config() -> ThornodeConfig:
    base_url = optional_env_var("THORBOND_THORNODE_URL", DEFAULT_THORNODE_BASE_URL)
    return ThornodeConfig(resilience=default_thornode_resilience(base_url))
