"""
Gripper attachment logic.

The gripper has a grip flag and acquires at most one entity through the
store's attachment slot. Engaging with nothing in reach still closes the
gripper (an "empty grasp").
"""

from typing import Optional

from armsim.core.config import GripperConfig
from armsim.core.geometry import Point3
from armsim.core.logging import get_logger
from armsim.simulation.entities import Entity, EntityStore

logger = get_logger(__name__)


class GripperController:
    """Proximity-based grab and unconditional release."""

    def __init__(self, store: EntityStore, config: Optional[GripperConfig] = None):
        self.store = store
        self.config = config or GripperConfig()
        self.gripping = False

    @property
    def attached(self) -> Optional[Entity]:
        return self.store.attached

    def engage(self, end_effector: Point3) -> Optional[Entity]:
        """
        Close the gripper and try to pick up the nearest free entity.

        Args:
            end_effector: Current end-effector point

        Returns:
            The attached entity, or None for an empty grasp
        """
        self.gripping = True
        if self.store.attached is not None:
            # Already holding something; the slot only holds one
            return self.store.attached

        nearest = self.store.nearest_free(end_effector)
        if nearest is None or nearest[1] >= self.config.capture_radius:
            logger.info(
                "gripper_empty_grasp",
                nearest_distance=None if nearest is None else round(nearest[1], 3),
                capture_radius=self.config.capture_radius,
            )
            return None

        entity, dist = nearest
        self.store.attach(entity.id)
        logger.info("entity_attached", entity=entity.id, distance=round(dist, 3))
        return entity

    def grab(self, entity_id: str) -> Entity:
        """Close the gripper on a specific entity regardless of distance."""
        entity = self.store.attach(entity_id)
        self.gripping = True
        logger.info("entity_attached", entity=entity_id)
        return entity

    def disengage(self) -> Optional[Entity]:
        """Open the gripper, releasing whatever is held."""
        released = self.store.detach()
        self.gripping = False
        if released is not None:
            logger.info("entity_released", entity=released.id)
        return released

    def toggle(self, end_effector: Point3) -> Optional[Entity]:
        """
        Release if holding an entity, otherwise engage.

        Returns:
            The entity now held (None after a release or an empty grasp)
        """
        if self.store.attached is not None:
            self.disengage()
            return None
        return self.engage(end_effector)

    def reset(self) -> None:
        self.store.detach()
        self.gripping = False
