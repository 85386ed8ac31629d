"""Public scheduler metrics contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class AdvanceMetrics:
    """Metrics captured for a single advance call."""

    advance_index: int
    delta_ms: float
    clamped: bool
    steps: int
    effective_step_ms: float


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    """Read-only snapshot consumable by loggers and the CLI summary."""

    last_advance: AdvanceMetrics | None
    advance_count: int
    total_steps: int
    clamped_count: int
    step_exception_count: int
    rolling_delta_ms: float
    rolling_frame_rate_hz: float
    rolling_steps_per_advance: float


class AdvanceMetricsSink(Protocol):
    """Minimal collector surface used by schedulers and step loops."""

    def record_advance(
        self,
        delta_ms: float,
        *,
        clamped: bool,
        steps: int,
        effective_step_ms: float,
    ) -> AdvanceMetrics | None:
        """Record one advance call."""

    def increment_step_exception_count(self, count: int = 1) -> None:
        """Count step callbacks that raised."""

    def snapshot(self) -> MetricsSnapshot:
        """Return rolling metrics snapshot."""
