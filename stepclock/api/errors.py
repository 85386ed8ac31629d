"""Public step-clock exception types."""

from __future__ import annotations


class StepClockError(Exception):
    """Base class for step-clock failures."""


class InvalidDeltaError(StepClockError, ValueError):
    """Frame delta rejected by ``advance``; scheduler state is untouched."""


class SchedulerConfigError(StepClockError, ValueError):
    """Scheduler configuration rejected at construction time."""
