"""
Tests for GripperController.
"""

import numpy as np
import pytest

from armsim.core.config import GripperConfig
from armsim.simulation.entities import Entity, EntityStore
from armsim.simulation.gripper import GripperController


@pytest.fixture
def store():
    return EntityStore(
        [
            Entity(id="a", position=np.array([2.0, 0.5, 2.0])),
            Entity(id="b", position=np.array([2.0, 0.5, 3.0])),
        ]
    )


@pytest.fixture
def gripper(store):
    return GripperController(store, GripperConfig())


class TestEngage:
    """Tests for proximity grasping."""

    def test_grabs_nearest_in_radius(self, gripper, store):
        entity = gripper.engage(np.array([2.0, 1.0, 2.4]))
        assert entity.id == "a"
        assert gripper.gripping
        assert store.attached_id == "a"

    def test_empty_grasp(self, gripper, store):
        """Test that nothing within the capture radius still closes the gripper."""
        assert gripper.engage(np.array([-2.0, 3.0, 0.0])) is None
        assert gripper.gripping
        assert store.attached_id is None

    def test_radius_is_exclusive(self, store):
        gripper = GripperController(store, GripperConfig(capture_radius=1.0))
        assert gripper.engage(np.array([2.0, 1.5, 2.0])) is None

    def test_second_engage_keeps_held_entity(self, gripper, store):
        gripper.engage(np.array([2.0, 1.0, 2.0]))
        again = gripper.engage(np.array([2.0, 1.0, 3.0]))
        assert again.id == "a"
        assert store.attached_id == "a"


class TestReleaseAndToggle:
    """Tests for disengage and toggle."""

    def test_disengage_releases(self, gripper, store):
        gripper.engage(np.array([2.0, 1.0, 2.0]))
        released = gripper.disengage()
        assert released.id == "a"
        assert not gripper.gripping
        assert store.attached is None

    def test_disengage_empty(self, gripper):
        assert gripper.disengage() is None
        assert not gripper.gripping

    def test_toggle_cycle(self, gripper):
        ee = np.array([2.0, 1.0, 2.0])
        assert gripper.toggle(ee).id == "a"
        assert gripper.toggle(ee) is None
        assert not gripper.gripping

    def test_toggle_after_empty_grasp_retries(self, gripper):
        """Test that an empty grasp does not count as holding."""
        gripper.engage(np.array([-2.0, 3.0, 0.0]))
        assert gripper.toggle(np.array([2.0, 1.0, 3.0])).id == "b"

    def test_grab_ignores_distance(self, gripper, store):
        gripper.grab("b")
        assert gripper.gripping
        assert store.attached_id == "b"

    def test_reset(self, gripper, store):
        gripper.grab("a")
        gripper.reset()
        assert not gripper.gripping
        assert store.attached_id is None
