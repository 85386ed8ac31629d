from __future__ import annotations

import math
from dataclasses import FrozenInstanceError

import pytest

from stepclock.api.errors import SchedulerConfigError, StepClockError
from stepclock.api.scheduler import (
    DEFAULT_MAX_DELTA_MS,
    DEFAULT_STABILIZATION_FACTOR,
    StepSchedulerConfig,
)


def test_defaults_target_60_steps_per_second() -> None:
    config = StepSchedulerConfig()
    assert config.step_ms == pytest.approx(1000 / 60)
    assert config.steps_per_second == pytest.approx(60.0)
    assert config.max_delta_ms == DEFAULT_MAX_DELTA_MS
    assert config.stabilization_factor == DEFAULT_STABILIZATION_FACTOR
    assert 0.0 < config.stabilization_factor <= 1.0
    assert config.max_steps_per_advance == 6


def test_from_rate_builds_step_duration() -> None:
    config = StepSchedulerConfig.from_rate(120, max_delta_ms=50.0, stabilization_factor=0.0)
    assert config.step_ms == pytest.approx(1000 / 120)
    assert config.max_delta_ms == 50.0
    assert config.stabilization_factor == 0.0


def test_integer_values_are_normalized_to_float() -> None:
    config = StepSchedulerConfig(step_ms=1, max_delta_ms=100, stabilization_factor=0)
    assert isinstance(config.step_ms, float)
    assert isinstance(config.max_delta_ms, float)
    assert isinstance(config.stabilization_factor, float)


def test_config_is_immutable() -> None:
    config = StepSchedulerConfig()
    with pytest.raises(FrozenInstanceError):
        config.step_ms = 1.0  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"step_ms": 0.0},
        {"step_ms": -1.0},
        {"step_ms": math.inf},
        {"step_ms": math.nan},
        {"max_delta_ms": 0.0},
        {"max_delta_ms": math.inf},
        {"stabilization_factor": -0.01},
        {"stabilization_factor": 1.01},
        {"stabilization_factor": math.nan},
        {"step_ms": "16"},
        {"max_delta_ms": True},
        {"step_ms": 1e-320},
        {"step_ms": 1e-300},
        {"step_ms": 1e-12, "max_delta_ms": 1e6},
    ],
)
def test_invalid_config_is_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(SchedulerConfigError):
        StepSchedulerConfig(**kwargs)  # type: ignore[arg-type]


@pytest.mark.parametrize("rate", [0.0, -60.0, math.inf])
def test_invalid_rate_is_rejected(rate: float) -> None:
    with pytest.raises(SchedulerConfigError):
        StepSchedulerConfig.from_rate(rate)


def test_config_error_is_catchable_as_value_error_and_package_error() -> None:
    with pytest.raises(ValueError):
        StepSchedulerConfig(step_ms=0.0)
    with pytest.raises(StepClockError):
        StepSchedulerConfig(step_ms=0.0)


def test_subnormal_step_reports_step_ratio() -> None:
    with pytest.raises(SchedulerConfigError, match="max_delta_ms / step_ms"):
        StepSchedulerConfig(step_ms=1e-320)


def test_tiny_but_bounded_step_is_accepted() -> None:
    config = StepSchedulerConfig(step_ms=1e-6, max_delta_ms=100.0)
    assert config.max_steps_per_advance == 100_000_000
