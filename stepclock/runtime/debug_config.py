"""Debug configuration sourced from environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool = False, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class DebugConfig:
    """Immutable runtime debug configuration."""

    metrics_enabled: bool
    trace_enabled: bool
    log_level: str


def resolve_log_level_name(
    default: str = "INFO",
    *,
    env: Mapping[str, str] | None = None,
) -> str:
    """Resolve log level with package-prefixed override."""
    value = _raw("STEPCLOCK_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env)
    if value is None:
        value = default
    return value.strip().upper()


def load_debug_config(*, env: Mapping[str, str] | None = None) -> DebugConfig:
    """Load immutable debug configuration from env vars or an explicit mapping."""
    return DebugConfig(
        metrics_enabled=_flag("STEPCLOCK_DEBUG_METRICS", False, env=env),
        trace_enabled=_flag("STEPCLOCK_DEBUG_TRACE", False, env=env),
        log_level=resolve_log_level_name(env=env),
    )
