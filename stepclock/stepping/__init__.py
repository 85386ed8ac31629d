"""Fixed-step scheduling primitives."""

from stepclock.stepping.locking import LockedStepScheduler
from stepclock.stepping.scheduler import FixedStepScheduler, validate_delta
from stepclock.stepping.stabilizer import CadenceStabilizer, round_half_up
from stepclock.stepping.step_loop import RuntimeStepLoop

__all__ = [
    "CadenceStabilizer",
    "FixedStepScheduler",
    "LockedStepScheduler",
    "RuntimeStepLoop",
    "round_half_up",
    "validate_delta",
]
