"""Fixed-timestep scheduling for simulation host loops."""

from stepclock.api import (
    InvalidDeltaError,
    SchedulerConfigError,
    SchedulerState,
    StepClockError,
    StepScheduler,
    StepSchedulerConfig,
    create_locked_step_scheduler,
    create_step_loop,
    create_step_scheduler,
)

__all__ = [
    "InvalidDeltaError",
    "SchedulerConfigError",
    "SchedulerState",
    "StepClockError",
    "StepScheduler",
    "StepSchedulerConfig",
    "create_locked_step_scheduler",
    "create_step_loop",
    "create_step_scheduler",
]
