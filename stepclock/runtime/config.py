"""Scheduler configuration loading from environment."""

from __future__ import annotations

import os
from typing import Mapping

from stepclock.api.scheduler import (
    DEFAULT_MAX_DELTA_MS,
    DEFAULT_STABILIZATION_FACTOR,
    DEFAULT_STEP_MS,
    StepSchedulerConfig,
)


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _optional_float(name: str, *, env: Mapping[str, str] | None = None) -> float | None:
    raw = _raw(name, env=env)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.strip())
    except ValueError:
        return None


def _float(name: str, default: float, *, env: Mapping[str, str] | None = None) -> float:
    value = _optional_float(name, env=env)
    return float(default) if value is None else value


def load_scheduler_config(*, env: Mapping[str, str] | None = None) -> StepSchedulerConfig:
    """Build scheduler config from ``STEPCLOCK_*`` variables.

    Unparsable values fall back to defaults; parsed values outside the valid
    range raise ``SchedulerConfigError``.
    """
    max_delta_ms = _float("STEPCLOCK_MAX_DELTA_MS", DEFAULT_MAX_DELTA_MS, env=env)
    factor = _float("STEPCLOCK_STABILIZATION_FACTOR", DEFAULT_STABILIZATION_FACTOR, env=env)

    step_ms = _optional_float("STEPCLOCK_STEP_MS", env=env)
    if step_ms is None:
        rate_hz = _optional_float("STEPCLOCK_STEP_RATE_HZ", env=env)
        if rate_hz is not None:
            return StepSchedulerConfig.from_rate(
                rate_hz,
                max_delta_ms=max_delta_ms,
                stabilization_factor=factor,
            )
        step_ms = DEFAULT_STEP_MS
    return StepSchedulerConfig(
        step_ms=step_ms,
        max_delta_ms=max_delta_ms,
        stabilization_factor=factor,
    )
