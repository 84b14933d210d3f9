"""
Tests for waypoint recording and cyclic replay.
"""

import numpy as np
import pytest

from armsim.core.config import ReplayConfig
from armsim.motion.teach import Replayer, TeachRecorder, Waypoint
from armsim.simulation.entities import Entity, EntityStore
from armsim.simulation.gripper import GripperController

A = Waypoint(position=(0.0, 1.0, 3.0), grip=False)
B = Waypoint(position=(1.0, 1.0, 3.0), grip=True)
C = Waypoint(position=(0.0, 2.0, 3.0), grip=False)


@pytest.fixture
def store():
    return EntityStore([Entity(id="block", position=np.array([1.0, 0.5, 3.0]))])


@pytest.fixture
def gripper(store):
    return GripperController(store)


@pytest.fixture
def replayer(gripper):
    return Replayer(gripper, ReplayConfig())


class TestTeachRecorder:
    """Tests for TeachRecorder."""

    def test_record_appends_in_order(self):
        recorder = TeachRecorder()
        recorder.record((0, 1, 3), False)
        recorder.record(np.array([1.0, 1.0, 3.0]), True)

        assert len(recorder) == 2
        assert recorder.program == (A, B)

    def test_record_snapshots_position(self):
        """Test that later edits to the source array do not leak in."""
        recorder = TeachRecorder()
        point = np.array([0.0, 1.0, 3.0])
        recorder.record(point, False)
        point[0] = 5.0
        assert recorder.program[0].position == (0.0, 1.0, 3.0)

    def test_program_is_immutable_snapshot(self):
        recorder = TeachRecorder()
        recorder.record((0, 1, 3), False)
        program = recorder.program
        recorder.record((1, 1, 3), True)
        assert len(program) == 1
        assert isinstance(program, tuple)

    def test_clear(self):
        recorder = TeachRecorder()
        recorder.record((0, 1, 3), False)
        recorder.clear()
        assert recorder.program == ()


class TestReplayer:
    """Tests for Replayer."""

    def test_empty_program_does_not_start(self, replayer):
        assert replayer.start(()) is False
        assert not replayer.active
        assert replayer.current is None

    def test_inactive_step_is_noop(self, replayer):
        target = np.array([1.0, 2.0, 3.0])
        assert replayer.step(target, 0.1) is target

    def test_moves_at_replay_speed(self, replayer):
        replayer.start((B,))
        result = replayer.step(np.array([0.0, 1.0, 3.0]), 0.1)
        assert result == pytest.approx(np.array([0.4, 1.0, 3.0]))
        assert replayer.index == 0

    def test_cycles_through_program(self, replayer, gripper, store):
        """Test A -> B -> C -> A with grip changes applied on arrival."""
        replayer.start((A, B, C))
        target = A.point

        target = replayer.step(target, 1.0)
        assert replayer.index == 1
        assert target.tolist() == list(A.position)

        target = replayer.step(target, 1.0)
        assert target == pytest.approx(B.point)

        replayer.step(target, 1.0)
        assert replayer.index == 2
        assert gripper.gripping
        assert store.attached_id == "block"

        target = replayer.step(target, 1.0)
        assert target == pytest.approx(C.point)

        replayer.step(target, 1.0)
        assert replayer.index == 0
        assert replayer.laps == 1
        assert not gripper.gripping
        assert store.attached_id is None

    def test_matching_grip_left_alone(self, replayer, gripper):
        """Test that arriving with the grip already right does nothing."""
        gripper.engage(np.array([1.0, 1.0, 3.0]))
        replayer.start((B,))
        replayer.step(B.point, 0.1)
        assert gripper.gripping
        assert replayer.laps == 1

    def test_empty_grasp_on_arrival(self, replayer, gripper, store):
        far = Waypoint(position=(-3.0, 3.0, 0.0), grip=True)
        replayer.start((far,))
        replayer.step(far.point, 0.1)
        assert gripper.gripping
        assert store.attached_id is None

    def test_single_waypoint_wraps(self, replayer):
        replayer.start((A,))
        for _ in range(3):
            replayer.step(A.point, 0.1)
        assert replayer.index == 0
        assert replayer.laps == 3

    def test_stop_and_restart_from_first(self, replayer):
        replayer.start((A, B))
        replayer.step(A.point, 0.1)
        replayer.stop()
        assert not replayer.active
        replayer.start((A, B))
        assert replayer.index == 0
        assert replayer.current == A

    def test_reset(self, replayer):
        replayer.start((A, B))
        replayer.reset()
        assert not replayer.active
        assert replayer.program == ()
