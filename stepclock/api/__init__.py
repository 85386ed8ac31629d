"""Public step-clock API contracts."""

from stepclock.api.errors import InvalidDeltaError, SchedulerConfigError, StepClockError
from stepclock.api.logging import LoggingConfig
from stepclock.api.loop import StepLoop, StepSystem, SystemSpec, create_step_loop
from stepclock.api.metrics import AdvanceMetrics, AdvanceMetricsSink, MetricsSnapshot
from stepclock.api.scheduler import (
    DEFAULT_MAX_DELTA_MS,
    DEFAULT_STABILIZATION_FACTOR,
    DEFAULT_STEP_MS,
    SchedulerState,
    StepCallback,
    StepScheduler,
    StepSchedulerConfig,
    create_locked_step_scheduler,
    create_step_scheduler,
)

__all__ = [
    "AdvanceMetrics",
    "AdvanceMetricsSink",
    "DEFAULT_MAX_DELTA_MS",
    "DEFAULT_STABILIZATION_FACTOR",
    "DEFAULT_STEP_MS",
    "InvalidDeltaError",
    "LoggingConfig",
    "MetricsSnapshot",
    "SchedulerConfigError",
    "SchedulerState",
    "StepCallback",
    "StepClockError",
    "StepLoop",
    "StepScheduler",
    "StepSchedulerConfig",
    "StepSystem",
    "SystemSpec",
    "create_locked_step_scheduler",
    "create_step_loop",
    "create_step_scheduler",
]
