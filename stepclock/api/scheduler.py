"""Public fixed-step scheduler API contracts."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from numbers import Real
from typing import TYPE_CHECKING, Protocol

from stepclock.api.errors import SchedulerConfigError

if TYPE_CHECKING:
    from stepclock.api.metrics import AdvanceMetricsSink

DEFAULT_STEP_MS = 1000.0 / 60.0
DEFAULT_MAX_DELTA_MS = 100.0
DEFAULT_STABILIZATION_FACTOR = 0.2
# Above this a per-advance step count is no longer exactly representable.
_MAX_STEP_RATIO = 2.0**52

StepCallback = Callable[[], None]


def _config_number(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise SchedulerConfigError(f"{name} must be a real number, got {value!r}")
    number = float(value)
    if math.isnan(number):
        raise SchedulerConfigError(f"{name} must not be NaN")
    return number


@dataclass(frozen=True, slots=True)
class StepSchedulerConfig:
    """Immutable scheduler configuration, all durations in milliseconds."""

    step_ms: float = DEFAULT_STEP_MS
    max_delta_ms: float = DEFAULT_MAX_DELTA_MS
    stabilization_factor: float = DEFAULT_STABILIZATION_FACTOR

    def __post_init__(self) -> None:
        step_ms = _config_number("step_ms", self.step_ms)
        max_delta_ms = _config_number("max_delta_ms", self.max_delta_ms)
        factor = _config_number("stabilization_factor", self.stabilization_factor)
        if not math.isfinite(step_ms) or step_ms <= 0.0:
            raise SchedulerConfigError("step_ms must be finite and > 0")
        if not math.isfinite(max_delta_ms) or max_delta_ms <= 0.0:
            raise SchedulerConfigError("max_delta_ms must be finite and > 0")
        ratio = max_delta_ms / step_ms
        if not math.isfinite(ratio) or ratio > _MAX_STEP_RATIO:
            raise SchedulerConfigError("max_delta_ms / step_ms must be finite")
        if not 0.0 <= factor <= 1.0:
            raise SchedulerConfigError("stabilization_factor must be within [0, 1]")
        object.__setattr__(self, "step_ms", step_ms)
        object.__setattr__(self, "max_delta_ms", max_delta_ms)
        object.__setattr__(self, "stabilization_factor", factor)

    @classmethod
    def from_rate(
        cls,
        steps_per_second: float,
        *,
        max_delta_ms: float = DEFAULT_MAX_DELTA_MS,
        stabilization_factor: float = DEFAULT_STABILIZATION_FACTOR,
    ) -> StepSchedulerConfig:
        """Build config from a step rate in Hz instead of a step duration."""
        rate = _config_number("steps_per_second", steps_per_second)
        if not math.isfinite(rate) or rate <= 0.0:
            raise SchedulerConfigError("steps_per_second must be finite and > 0")
        return cls(
            step_ms=1000.0 / rate,
            max_delta_ms=max_delta_ms,
            stabilization_factor=stabilization_factor,
        )

    @property
    def steps_per_second(self) -> float:
        return 1000.0 / self.step_ms

    @property
    def max_steps_per_advance(self) -> int:
        """Upper bound of steps emitted by one advance at the nominal duration."""
        return math.floor(self.max_delta_ms / self.step_ms + 0.5)


@dataclass(frozen=True, slots=True)
class SchedulerState:
    """Read-only view of scheduler running state."""

    total_elapsed_ms: float
    total_steps: int
    effective_step_ms: float


class StepScheduler(Protocol):
    """Fixed-step scheduler contract consumed by host loops.

    Implementations are not thread-safe: each ``advance`` call needs
    exclusive access to the instance.
    """

    @property
    def config(self) -> StepSchedulerConfig:
        """Return immutable scheduler configuration."""

    def advance(self, delta_ms: float) -> int:
        """Consume one frame delta and return the number of steps emitted."""

    def snapshot(self) -> SchedulerState:
        """Return current running state."""


def create_step_scheduler(
    on_step: StepCallback | None = None,
    *,
    config: StepSchedulerConfig | None = None,
    metrics: AdvanceMetricsSink | None = None,
) -> StepScheduler:
    """Create default fixed-step scheduler implementation."""
    from stepclock.stepping.scheduler import FixedStepScheduler

    return FixedStepScheduler(on_step, config=config, metrics=metrics)


def create_locked_step_scheduler(
    on_step: StepCallback | None = None,
    *,
    config: StepSchedulerConfig | None = None,
    metrics: AdvanceMetricsSink | None = None,
) -> StepScheduler:
    """Create scheduler serialized with a lock for multi-threaded hosts."""
    from stepclock.stepping.locking import LockedStepScheduler
    from stepclock.stepping.scheduler import FixedStepScheduler

    return LockedStepScheduler(FixedStepScheduler(on_step, config=config, metrics=metrics))
