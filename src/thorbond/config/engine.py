"""Reconciliation engine tuning."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_float_env, optional_int_env

DEFAULT_ORACLE_CONCURRENCY = 4


@dataclass(frozen=True, slots=True)
class EngineConfig:
    oracle_concurrency: int = DEFAULT_ORACLE_CONCURRENCY
    reconcile_deadline_seconds: float | None = None


def get_engine_config() -> EngineConfig:
    return EngineConfig(
        oracle_concurrency=optional_int_env(
            "THORBOND_ORACLE_CONCURRENCY", DEFAULT_ORACLE_CONCURRENCY
        ),
        reconcile_deadline_seconds=optional_float_env("THORBOND_RECONCILE_DEADLINE"),
    )
