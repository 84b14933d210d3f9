"""
Motion controller: the per-tick composition root of the simulator.

Owns all mutable simulation state (target, angles, entities, program,
telemetry) and is its only writer. A presentation layer calls
:meth:`MotionController.tick` once per frame at a fixed rate and invokes
the operator commands between ticks.

Per tick::

    mode (manual / auto / replay) -> target
    target -> GeometrySolver -> desired angles (held if unreachable)
    desired -> MotionSmoother -> actual angles -> TelemetryEstimator
    end effector + grip -> EntityPhysics -> entity positions
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from armsim.core.config import SimulationConfig
from armsim.core.exceptions import InvalidOperationError, UnreachableTargetError
from armsim.core.geometry import Point3, as_point, to_tuple
from armsim.core.logging import get_logger, tick_context
from armsim.motion.kinematics import GeometrySolver, JointAngles, forward_kinematics
from armsim.motion.sequencer import AutoSequencer, SequencerPhase
from armsim.motion.smoothing import MotionSmoother
from armsim.motion.teach import Program, Replayer, TeachRecorder, Waypoint
from armsim.simulation.entities import EntityPhysics, EntityStore
from armsim.simulation.gripper import GripperController
from armsim.simulation.telemetry import TelemetryEstimator, TelemetrySample

logger = get_logger(__name__)


class ControlMode(Enum):
    """Who is driving the target."""

    MANUAL = "MANUAL"
    AUTO = "AUTO"
    REPLAY = "REPLAY"


@dataclass(frozen=True)
class TickResult:
    """Everything a presentation layer needs to draw one frame."""

    tick: int
    mode: ControlMode
    phase: SequencerPhase
    target: tuple[float, float, float]
    reachable: bool
    desired_angles: JointAngles
    actual_angles: JointAngles
    gripping: bool
    attached_entity_id: Optional[str]
    entity_positions: dict[str, tuple[float, float, float]]
    telemetry: Optional[TelemetrySample] = None


@dataclass(frozen=True)
class ControllerStatus:
    """Read-only snapshot for control panels."""

    mode: ControlMode
    mode_label: str
    phase: SequencerPhase
    tick: int
    target: tuple[float, float, float]
    reachable: bool
    desired_angles: JointAngles
    actual_angles: JointAngles
    end_effector: tuple[float, float, float]
    gripping: bool
    attached_entity_id: Optional[str]
    nearest_entity_distance: Optional[float]
    program_length: int
    replay_index: Optional[int]
    telemetry: tuple[TelemetrySample, ...] = field(default_factory=tuple)


class MotionController:
    """
    Ties solver, smoother, sequencer, replay, gripper, physics and telemetry
    together behind one tick-driven interface.

    Example:
        >>> controller = MotionController()
        >>> controller.update_target((0.0, 1.0, 3.0))
        >>> result = controller.tick(1 / 60)
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()

        self.solver = GeometrySolver(self.config.arm)
        self.smoother = MotionSmoother(self.config.motion)
        self.entities = EntityStore.from_config(self.config.entities)
        self.physics = EntityPhysics(self.config.physics, self.config.gripper)
        self.gripper = GripperController(self.entities, self.config.gripper)
        self.sequencer = AutoSequencer(self.gripper, self.config.sequencer)
        self.recorder = TeachRecorder()
        self.replayer = Replayer(self.gripper, self.config.replay)
        self.telemetry = TelemetryEstimator(self.config.telemetry)

        self._init_state()

    def _init_state(self) -> None:
        self.tick_index = 0
        self.target: Point3 = np.array(self.config.initial_target, dtype=np.float64)
        self.reachable = True
        self.desired_angles = JointAngles()
        self.actual_angles = JointAngles()
        # Start from the pose the initial target asks for, as if it was just dragged there
        self._solve(self.target)

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------

    @property
    def mode(self) -> ControlMode:
        if self.sequencer.running:
            return ControlMode.AUTO
        if self.replayer.active:
            return ControlMode.REPLAY
        return ControlMode.MANUAL

    @property
    def mode_label(self) -> str:
        if self.mode is ControlMode.AUTO:
            return self.sequencer.phase.value
        return self.mode.value

    def _require_manual(self, operation: str) -> None:
        mode = self.mode
        if mode is not ControlMode.MANUAL:
            logger.warning("operation_rejected", operation=operation, mode=mode.value)
            raise InvalidOperationError(
                f"{operation} is only allowed in manual mode",
                operation=operation,
                details={"mode": mode.value, "phase": self.sequencer.phase.value},
            )

    # ------------------------------------------------------------------
    # Operator commands
    # ------------------------------------------------------------------

    def update_target(self, point: Sequence[float] | Point3) -> Optional[JointAngles]:
        """
        Move the target manually (drag input).

        Args:
            point: New target in arm-base coordinates

        Returns:
            The new desired angles, or None if the target is unreachable
            (the previous desired angles are kept)

        Raises:
            InvalidOperationError: Outside manual mode
        """
        self._require_manual("update_target")
        self.target = as_point(point)
        return self._solve(self.target)

    def start_auto_sequence(self) -> bool:
        """
        Start a pick-and-place cycle on the nearest free entity.

        Returns:
            True if started, False if a cycle is already running

        Raises:
            InvalidOperationError: While holding an entity, while replaying,
                or when there is nothing to pick up
        """
        if self.sequencer.running:
            return False
        self._require_manual("start_auto_sequence")

        attached = self.entities.attached
        nearest = self.entities.nearest_free(self.target)
        if attached is None and nearest is None:
            raise InvalidOperationError(
                "No entity to pick up", operation="start_auto_sequence"
            )
        entity_id = nearest[0].id if nearest is not None else attached.id
        try:
            return self.sequencer.start(entity_id)
        except InvalidOperationError:
            logger.warning(
                "operation_rejected",
                operation="start_auto_sequence",
                attached=self.entities.attached_id,
            )
            raise

    def toggle_gripper(self) -> Optional[str]:
        """
        Release if holding, otherwise grab the nearest entity in reach.

        Returns:
            Id of the entity now held, if any

        Raises:
            InvalidOperationError: Outside manual mode
        """
        self._require_manual("toggle_gripper")
        entity = self.gripper.toggle(self.end_effector)
        return entity.id if entity is not None else None

    def record_waypoint(self) -> Waypoint:
        """
        Append the current target and grip state to the program.

        Raises:
            InvalidOperationError: Outside manual mode
        """
        self._require_manual("record_waypoint")
        return self.recorder.record(self.target, self.gripper.gripping)

    def toggle_replay(self) -> bool:
        """
        Start replaying the program, or stop if already replaying.

        Returns:
            True if replay is now running

        Raises:
            InvalidOperationError: While the auto sequence runs
        """
        if self.replayer.active:
            self.replayer.stop()
            return False
        self._require_manual("toggle_replay")
        return self.replayer.start(self.recorder.program)

    def clear_program(self) -> None:
        """Delete all recorded waypoints."""
        if self.replayer.active:
            self._require_manual("clear_program")
        self.recorder.clear()

    def abort(self) -> None:
        """Return to manual mode now; grip and attachment are left as they are."""
        if self.mode is not ControlMode.MANUAL:
            logger.info("mode_aborted", mode=self.mode.value)
        self.sequencer.abort()
        self.replayer.stop()

    def reset(self) -> None:
        """Restore every piece of state to its initial value."""
        self.sequencer.reset()
        self.replayer.reset()
        self.recorder.clear()
        self.gripper.reset()
        self.entities.reset()
        self.telemetry.reset()
        self._init_state()
        logger.info("controller_reset")

    # ------------------------------------------------------------------
    # Simulation loop
    # ------------------------------------------------------------------

    def tick(self, elapsed: float) -> TickResult:
        """
        Advance the simulation by one fixed-rate tick.

        Args:
            elapsed: Seconds since the previous tick

        Returns:
            TickResult for rendering
        """
        self.tick_index += 1
        with tick_context(self.tick_index):
            mode = self.mode
            if mode is ControlMode.AUTO:
                self.target = self.sequencer.step(self.target, elapsed)
            elif mode is ControlMode.REPLAY:
                self.target = self.replayer.step(self.target, elapsed)
            self._solve(self.target)

            self.actual_angles = self.smoother.advance(self.actual_angles, self.desired_angles)
            sample = self.telemetry.observe(
                self.tick_index,
                self.actual_angles,
                elapsed,
                carrying=self.entities.attached is not None,
            )

            self.physics.step(self.entities, self.end_effector)

        return TickResult(
            tick=self.tick_index,
            mode=self.mode,
            phase=self.sequencer.phase,
            target=to_tuple(self.target),
            reachable=self.reachable,
            desired_angles=self.desired_angles,
            actual_angles=self.actual_angles,
            gripping=self.gripper.gripping,
            attached_entity_id=self.entities.attached_id,
            entity_positions=self.entities.positions(),
            telemetry=sample,
        )

    def run(self, ticks: int, fps: float = 60.0) -> list[TickResult]:
        """Run *ticks* ticks at a fixed rate of *fps* and collect the results."""
        if fps <= 0:
            raise ValueError("fps must be positive")
        return [self.tick(1.0 / fps) for _ in range(ticks)]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def end_effector(self) -> Point3:
        """Commanded end-effector point; the gripper and held entity follow it."""
        return self.target.copy()

    @property
    def program(self) -> Program:
        return self.recorder.program

    def status(self) -> ControllerStatus:
        nearest = self.entities.nearest_free(self.end_effector)
        return ControllerStatus(
            mode=self.mode,
            mode_label=self.mode_label,
            phase=self.sequencer.phase,
            tick=self.tick_index,
            target=to_tuple(self.target),
            reachable=self.reachable,
            desired_angles=self.desired_angles,
            actual_angles=self.actual_angles,
            end_effector=to_tuple(forward_kinematics(self.actual_angles, self.config.arm)),
            gripping=self.gripper.gripping,
            attached_entity_id=self.entities.attached_id,
            nearest_entity_distance=None if nearest is None else nearest[1],
            program_length=len(self.recorder),
            replay_index=self.replayer.index if self.replayer.active else None,
            telemetry=self.telemetry.history,
        )

    def _solve(self, target: Point3) -> Optional[JointAngles]:
        try:
            solution = self.solver.solve(target)
        except UnreachableTargetError as e:
            if self.reachable:
                logger.debug("target_unreachable", target=e.target, **e.details)
            self.reachable = False
            return None
        self.reachable = True
        self.desired_angles = solution
        return solution
