"""Public step-loop API contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from stepclock.api.scheduler import SchedulerState, StepSchedulerConfig

if TYPE_CHECKING:
    from stepclock.api.metrics import AdvanceMetricsSink


class StepSystem(Protocol):
    """Fixed-step system lifecycle contract."""

    def start(self) -> None:
        """Initialize system resources."""

    def step(self, step_ms: float) -> None:
        """Run one fixed simulation step."""

    def shutdown(self) -> None:
        """Release system resources."""


@dataclass(frozen=True, slots=True)
class SystemSpec:
    """System registration entry for step-loop ordering."""

    system_id: str
    system: StepSystem
    order: int = 0


class StepLoop(Protocol):
    """Ordered fixed-step loop contract."""

    def add_system(self, spec: SystemSpec) -> None:
        """Register system for lifecycle execution."""

    def start(self) -> None:
        """Start systems in order."""

    def advance(self, delta_ms: float) -> int:
        """Consume one frame delta and return number of steps executed."""

    def shutdown(self) -> None:
        """Shutdown started systems in reverse order."""

    def snapshot(self) -> SchedulerState:
        """Return underlying scheduler state."""


def create_step_loop(
    *,
    config: StepSchedulerConfig | None = None,
    metrics: AdvanceMetricsSink | None = None,
) -> StepLoop:
    """Create default fixed-step loop implementation."""
    from stepclock.stepping.step_loop import RuntimeStepLoop

    return RuntimeStepLoop(config=config, metrics=metrics)
