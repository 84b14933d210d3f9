"""
Per-tick joint smoothing.

Actual joint angles chase the solver's desired angles with first-order
exponential smoothing. The rate is a fraction of the remaining error per
tick, not per second, so the loop must run at a fixed tick frequency for
motion to look the same on every machine.
"""

from typing import Optional

from armsim.core.config import MotionConfig
from armsim.motion.kinematics import JointAngles


class MotionSmoother:
    """Moves actual angles a fixed fraction of the way to the desired angles."""

    def __init__(self, config: Optional[MotionConfig] = None):
        self.config = config or MotionConfig()

    @property
    def alpha(self) -> float:
        return self.config.smoothing

    def advance(self, actual: JointAngles, desired: JointAngles) -> JointAngles:
        """
        Advance one tick.

        With ``0 < alpha <= 1`` each component moves monotonically towards
        its desired value and never overshoots.

        Args:
            actual: Current (rendered) angles
            desired: Solver output to converge on

        Returns:
            Angles for the next tick
        """
        current = actual.as_array()
        goal = desired.as_array()
        return JointAngles.from_array(current + (goal - current) * self.alpha)

    def ticks_to_converge(self, error: float, tolerance: float) -> int:
        """Number of ticks until an initial *error* decays below *tolerance*."""
        if tolerance <= 0:
            raise ValueError("tolerance must be positive")
        ticks = 0
        remaining = abs(error)
        while remaining >= tolerance:
            remaining *= 1.0 - self.alpha
            ticks += 1
        return ticks
