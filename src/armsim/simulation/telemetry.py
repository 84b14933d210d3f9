"""
Joint telemetry estimation.

Samples shoulder velocity and an approximate motor load every Nth tick and
keeps the most recent samples in a fixed-capacity FIFO history.
"""

import math
from collections import deque
from dataclasses import dataclass
from typing import Optional

from armsim.core.config import TelemetryConfig
from armsim.motion.kinematics import JointAngles


@dataclass(frozen=True)
class TelemetrySample:
    """One decimated telemetry reading."""

    tick: int
    velocity: float  # |d shoulder / dt|, rad/s
    load: float  # static-torque proxy, dimensionless


class TelemetryEstimator:
    """
    Finite-difference velocity and static-load proxy for the shoulder joint.

    ``observe`` must be called once per tick with the actual angles; the
    previous shoulder angle is tracked every tick so the velocity always
    spans a single tick, but a sample is only produced on ticks divisible
    by the decimation factor.

    The load is ``|cos(shoulder) + payload|``: the arm's self-weight
    component plus a fixed payload term while carrying an entity. It ignores
    the forearm and base geometry and is meant for display, not control.
    """

    def __init__(self, config: Optional[TelemetryConfig] = None):
        self.config = config or TelemetryConfig()
        self._history: deque[TelemetrySample] = deque(maxlen=self.config.capacity)
        self._previous_shoulder = 0.0

    @property
    def history(self) -> tuple[TelemetrySample, ...]:
        """Samples oldest first."""
        return tuple(self._history)

    @property
    def latest(self) -> Optional[TelemetrySample]:
        return self._history[-1] if self._history else None

    def observe(
        self,
        tick: int,
        angles: JointAngles,
        elapsed: float,
        carrying: bool = False,
    ) -> Optional[TelemetrySample]:
        """
        Record one tick of actual joint angles.

        Args:
            tick: Tick index (1 for the first tick)
            angles: Actual angles after smoothing
            elapsed: Seconds since the previous tick
            carrying: Whether an entity is attached

        Returns:
            The new sample on decimation ticks, otherwise None
        """
        previous = self._previous_shoulder
        self._previous_shoulder = angles.shoulder

        if tick % self.config.decimation != 0:
            return None

        velocity = abs(angles.shoulder - previous) / elapsed if elapsed > 0 else 0.0
        payload = self.config.payload_load if carrying else 0.0
        load = abs(math.cos(angles.shoulder) + payload)

        sample = TelemetrySample(tick=tick, velocity=velocity, load=load)
        self._history.append(sample)
        return sample

    def reset(self, angles: Optional[JointAngles] = None) -> None:
        self._history.clear()
        self._previous_shoulder = angles.shoulder if angles is not None else 0.0
