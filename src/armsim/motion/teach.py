"""
Teach-and-replay programming.

The operator jogs the arm manually and records waypoints (target position
plus grip state). Replay tours the recorded program as a closed loop,
driving the target to each waypoint at constant speed and matching the
waypoint's grip state on arrival.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from armsim.core.config import ReplayConfig
from armsim.core.geometry import Point3, as_point, distance, step_towards, to_tuple
from armsim.core.logging import get_logger

if TYPE_CHECKING:
    from armsim.simulation.gripper import GripperController

logger = get_logger(__name__)


@dataclass(frozen=True)
class Waypoint:
    """A recorded end-effector position and grip state."""

    position: tuple[float, float, float]
    grip: bool

    @property
    def point(self) -> Point3:
        return np.array(self.position, dtype=np.float64)


Program = tuple[Waypoint, ...]


class TeachRecorder:
    """Append-only store of waypoints; the only other edit is a full clear."""

    def __init__(self) -> None:
        self._waypoints: list[Waypoint] = []

    @property
    def program(self) -> Program:
        return tuple(self._waypoints)

    def __len__(self) -> int:
        return len(self._waypoints)

    def record(self, position: Sequence[float] | Point3, grip: bool) -> Waypoint:
        waypoint = Waypoint(position=to_tuple(as_point(position)), grip=bool(grip))
        self._waypoints.append(waypoint)
        logger.info(
            "waypoint_recorded",
            index=len(self._waypoints) - 1,
            position=waypoint.position,
            grip=waypoint.grip,
        )
        return waypoint

    def clear(self) -> None:
        if self._waypoints:
            logger.info("program_cleared", waypoints=len(self._waypoints))
        self._waypoints.clear()


class Replayer:
    """
    Cyclic tour of a recorded program.

    On reaching a waypoint the gripper is switched to the waypoint's grip
    state if it differs: engaging picks up the nearest entity in capture
    range, releasing is unconditional. The index then wraps with
    ``(index + 1) % len(program)``, so replay runs until stopped.
    """

    def __init__(
        self,
        gripper: "GripperController",
        config: Optional[ReplayConfig] = None,
    ):
        self.gripper = gripper
        self.config = config or ReplayConfig()
        self.program: Program = ()
        self.index = 0
        self.laps = 0
        self.active = False

    def start(self, program: Program) -> bool:
        """
        Start replaying *program* from its first waypoint.

        Returns:
            False (and stays inactive) for an empty program
        """
        if not program:
            logger.info("replay_empty_program")
            self.stop()
            return False
        self.program = tuple(program)
        self.index = 0
        self.laps = 0
        self.active = True
        logger.info("replay_started", waypoints=len(self.program))
        return True

    def stop(self) -> None:
        if self.active:
            logger.info("replay_stopped", index=self.index, laps=self.laps)
        self.active = False

    @property
    def current(self) -> Optional[Waypoint]:
        if not self.active:
            return None
        return self.program[self.index]

    def step(self, target: Point3, elapsed: float) -> Point3:
        """
        Advance replay by one tick.

        Args:
            target: Current end-effector target
            elapsed: Seconds since the previous tick

        Returns:
            The new target (unchanged when inactive)
        """
        if not self.active:
            return target

        waypoint = self.program[self.index]
        goal = waypoint.point
        if distance(target, goal) < self.config.threshold:
            self._arrive(waypoint, target)
            return target
        return step_towards(target, goal, self.config.speed * max(elapsed, 0.0))

    def _arrive(self, waypoint: Waypoint, end_effector: Point3) -> None:
        if waypoint.grip != self.gripper.gripping:
            if waypoint.grip:
                self.gripper.engage(end_effector)
            else:
                self.gripper.disengage()

        self.index = (self.index + 1) % len(self.program)
        if self.index == 0:
            self.laps += 1
        logger.debug("replay_waypoint_reached", next_index=self.index, laps=self.laps)

    def reset(self) -> None:
        self.active = False
        self.program = ()
        self.index = 0
        self.laps = 0
