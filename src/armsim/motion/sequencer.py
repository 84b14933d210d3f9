"""
Autonomous pick-and-place sequencer.

A finite-state machine that drives the end-effector target through one
pick-and-place cycle:

    IDLE -> APPROACH -> DESCEND -> LIFT -> MOVE_TO_ZONE -> LOWER_TO_DROP -> RETRACT -> IDLE

Each active phase has a sub-target (derived from the tracked entity or a
fixed cell location) and advances once the target is within the arrival
threshold of it. Between transitions the target moves at constant speed in
a straight line; it is not smoothed. Only the transition table below knows
the phase order, so each transition can be tested on its own.

There is no timeout. A sub-target the target cannot reach stalls its phase
until the sequence is aborted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

from armsim.core.config import SequencerConfig
from armsim.core.exceptions import InvalidOperationError
from armsim.core.geometry import Point3, distance, step_towards
from armsim.core.logging import get_logger

if TYPE_CHECKING:
    from armsim.simulation.gripper import GripperController

logger = get_logger(__name__)


class SequencerPhase(Enum):
    """Phases of the pick-and-place cycle."""

    IDLE = "IDLE"
    APPROACH = "APPROACH"
    DESCEND = "DESCEND"
    LIFT = "LIFT"
    MOVE_TO_ZONE = "MOVE_TO_ZONE"
    LOWER_TO_DROP = "LOWER_TO_DROP"
    RETRACT = "RETRACT"


class GripAction(Enum):
    """Gripper side effect applied when a phase completes."""

    NONE = "none"
    ATTACH = "attach"
    DETACH = "detach"


@dataclass(frozen=True)
class Transition:
    """What happens when a phase reaches its sub-target."""

    next_phase: SequencerPhase
    action: GripAction = GripAction.NONE


TRANSITIONS: dict[SequencerPhase, Transition] = {
    SequencerPhase.APPROACH: Transition(SequencerPhase.DESCEND),
    SequencerPhase.DESCEND: Transition(SequencerPhase.LIFT, GripAction.ATTACH),
    SequencerPhase.LIFT: Transition(SequencerPhase.MOVE_TO_ZONE),
    SequencerPhase.MOVE_TO_ZONE: Transition(SequencerPhase.LOWER_TO_DROP),
    SequencerPhase.LOWER_TO_DROP: Transition(SequencerPhase.RETRACT, GripAction.DETACH),
    SequencerPhase.RETRACT: Transition(SequencerPhase.IDLE),
}


class AutoSequencer:
    """
    Drives the target through the pick-and-place cycle.

    The sequencer reads entity positions and applies grip actions through a
    :class:`~armsim.simulation.gripper.GripperController`.
    """

    def __init__(
        self,
        gripper: "GripperController",
        config: Optional[SequencerConfig] = None,
    ):
        self.gripper = gripper
        self.config = config or SequencerConfig()
        self.phase = SequencerPhase.IDLE
        self.entity_id: Optional[str] = None
        self._sub_targets: dict[SequencerPhase, Callable[[], Point3]] = {
            SequencerPhase.APPROACH: self._approach_target,
            SequencerPhase.DESCEND: self._descend_target,
            SequencerPhase.LIFT: self._lift_target,
            SequencerPhase.MOVE_TO_ZONE: self._zone_target,
            SequencerPhase.LOWER_TO_DROP: self._drop_target,
            SequencerPhase.RETRACT: self._home_target,
        }

    @property
    def running(self) -> bool:
        return self.phase is not SequencerPhase.IDLE

    def start(self, entity_id: str) -> bool:
        """
        Begin a cycle targeting *entity_id*.

        Returns:
            True if the cycle started, False if one is already running

        Raises:
            InvalidOperationError: If an entity is already attached
        """
        if self.running:
            logger.debug("auto_sequence_already_running", phase=self.phase.value)
            return False
        attached = self.gripper.attached
        if attached is not None:
            raise InvalidOperationError(
                "Release the held entity before starting the auto sequence",
                operation="start_auto_sequence",
                details={"attached": attached.id},
            )
        self.gripper.store.get(entity_id)
        self.entity_id = entity_id
        self._enter(SequencerPhase.APPROACH)
        return True

    def abort(self) -> None:
        """Stop at the current tick, leaving grip and attachment as they are."""
        if self.running:
            logger.info("auto_sequence_aborted", phase=self.phase.value, entity=self.entity_id)
        self.phase = SequencerPhase.IDLE
        self.entity_id = None

    def sub_target(self) -> Point3:
        """Point the current phase is driving towards."""
        if not self.running:
            raise InvalidOperationError("Sequencer is idle", operation="sub_target")
        return self._sub_targets[self.phase]()

    def step(self, target: Point3, elapsed: float) -> Point3:
        """
        Advance the sequence by one tick.

        Arrival is checked against the target at the start of the tick; the
        target then moves towards the sub-target it was heading for.

        Args:
            target: Current end-effector target
            elapsed: Seconds since the previous tick

        Returns:
            The new target (unchanged when idle)
        """
        if not self.running:
            return target

        goal = self.sub_target()
        arrived = distance(target, goal) < self.config.threshold
        next_target = step_towards(target, goal, self.config.speed * max(elapsed, 0.0))
        if arrived:
            self._complete_phase()
        return next_target

    def reset(self) -> None:
        self.phase = SequencerPhase.IDLE
        self.entity_id = None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _enter(self, phase: SequencerPhase) -> None:
        previous = self.phase
        self.phase = phase
        logger.info(
            "phase_changed",
            previous=previous.value,
            phase=phase.value,
            entity=self.entity_id,
        )

    def _complete_phase(self) -> None:
        transition = TRANSITIONS[self.phase]
        if transition.action is GripAction.ATTACH:
            self.gripper.grab(self.entity_id)
        elif transition.action is GripAction.DETACH:
            self.gripper.disengage()
        self._enter(transition.next_phase)
        if transition.next_phase is SequencerPhase.IDLE:
            logger.info("auto_sequence_complete", entity=self.entity_id)
            self.entity_id = None

    # ------------------------------------------------------------------
    # Sub-targets
    # ------------------------------------------------------------------

    def _entity_position(self) -> Point3:
        return self.gripper.store.get(self.entity_id).position

    def _approach_target(self) -> Point3:
        return self._entity_position() + np.array([0.0, self.config.hover_offset, 0.0])

    def _descend_target(self) -> Point3:
        return self._entity_position().copy()

    def _lift_target(self) -> Point3:
        position = self._entity_position()
        return np.array([position[0], self.config.lift_height, position[2]])

    def _zone_target(self) -> Point3:
        x, z = self.config.drop_zone
        return np.array([x, self.config.lift_height, z], dtype=np.float64)

    def _drop_target(self) -> Point3:
        x, z = self.config.drop_zone
        return np.array([x, self.config.drop_height, z], dtype=np.float64)

    def _home_target(self) -> Point3:
        return np.array(self.config.home_position, dtype=np.float64)
