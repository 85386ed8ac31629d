"""Cadence stabilization for fixed-step scheduling."""

from __future__ import annotations

import math

DEFAULT_TOLERANCE = 0.05


def round_half_up(value: float) -> int:
    """Round to nearest integer, ties towards the larger one."""
    return math.floor(value + 0.5)


class CadenceStabilizer:
    """Exponentially blends the effective step duration toward the frame cadence.

    A frame whose delta lies within a relative ``tolerance`` of a whole multiple of
    the nominal step pulls the estimate toward ``delta / multiple``, the
    duration at which that frame yields exactly ``multiple`` steps. Small
    sustained drift (a 58 Hz or 62 Hz display against a 60 Hz simulation) is
    absorbed this way instead of surfacing as periodic 0- or 2-step frames.

    Any other frame pulls the estimate back toward the nominal step, so
    cadences that are not near a multiple (45 Hz, 120 Hz) keep the plain
    accumulator rounding pattern. The estimate therefore never leaves
    ``step_ms * (1 +/- tolerance)``.
    """

    def __init__(
        self,
        step_ms: float,
        factor: float,
        *,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> None:
        if step_ms <= 0.0:
            raise ValueError("step_ms must be > 0")
        if not 0.0 <= factor <= 1.0:
            raise ValueError("factor must be within [0, 1]")
        if not 0.0 <= tolerance < 0.5:
            raise ValueError("tolerance must be within [0, 0.5)")
        self._step_ms = step_ms
        self._factor = factor
        self._tolerance = tolerance

    @property
    def enabled(self) -> bool:
        return self._factor > 0.0

    def sample(self, delta_ms: float) -> float:
        """Return the step duration this frame's cadence asks for."""
        ratio = delta_ms / self._step_ms
        multiple = round_half_up(ratio)
        if multiple >= 1 and abs(ratio / multiple - 1.0) <= self._tolerance:
            return delta_ms / multiple
        return self._step_ms

    def adapt(self, effective_step_ms: float, delta_ms: float) -> float:
        """Return the effective step duration after observing one clamped delta."""
        if not self.enabled:
            return effective_step_ms
        target = self.sample(delta_ms)
        return effective_step_ms + self._factor * (target - effective_step_ms)
