"""
Liftable entities and their minimal physics.

Entities live in an :class:`EntityStore`: a mapping from entity id to
state plus a single optional ``attached_id``. Keeping the attachment in one
slot, rather than as a flag on each entity, means at most one entity can
ever be held.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

import numpy as np

from armsim.core.config import EntityConfig, GripperConfig, PhysicsConfig
from armsim.core.exceptions import InvalidOperationError
from armsim.core.geometry import Point3, as_point, distance, to_tuple
from armsim.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Entity:
    """A liftable object (a block, in the default cell)."""

    id: str
    position: Point3
    velocity_y: float = 0.0
    initial_position: Optional[Point3] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.position = as_point(self.position)
        if self.initial_position is None:
            self.initial_position = self.position.copy()
        else:
            self.initial_position = as_point(self.initial_position)

    def reset(self) -> None:
        self.position = self.initial_position.copy()
        self.velocity_y = 0.0


class EntityStore:
    """All entities of the cell plus the single attachment slot."""

    def __init__(self, entities: Iterable[Entity] = ()):
        self._entities: dict[str, Entity] = {}
        self.attached_id: Optional[str] = None
        for entity in entities:
            self.add(entity)

    @classmethod
    def from_config(cls, entities: Iterable[EntityConfig]) -> "EntityStore":
        return cls(Entity(id=e.id, position=np.array(e.position)) for e in entities)

    def add(self, entity: Entity) -> None:
        if entity.id in self._entities:
            raise ValueError(f"Duplicate entity id: {entity.id}")
        self._entities[entity.id] = entity

    def get(self, entity_id: str) -> Entity:
        try:
            return self._entities[entity_id]
        except KeyError:
            raise KeyError(f"Unknown entity: {entity_id}") from None

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    @property
    def attached(self) -> Optional[Entity]:
        if self.attached_id is None:
            return None
        return self._entities[self.attached_id]

    def is_attached(self, entity_id: str) -> bool:
        return self.attached_id == entity_id

    def free_entities(self) -> list[Entity]:
        return [e for e in self._entities.values() if e.id != self.attached_id]

    def nearest_free(self, point: Point3) -> Optional[tuple[Entity, float]]:
        """Closest non-attached entity to *point* and its distance, if any."""
        candidates = [(e, distance(point, e.position)) for e in self.free_entities()]
        if not candidates:
            return None
        return min(candidates, key=lambda pair: pair[1])

    def attach(self, entity_id: str) -> Entity:
        """
        Put *entity_id* in the attachment slot.

        Raises:
            InvalidOperationError: If a different entity is already attached
        """
        entity = self.get(entity_id)
        if self.attached_id is not None and self.attached_id != entity_id:
            raise InvalidOperationError(
                "Another entity is already attached",
                operation="attach",
                details={"attached": self.attached_id, "requested": entity_id},
            )
        self.attached_id = entity_id
        return entity

    def detach(self) -> Optional[Entity]:
        entity = self.attached
        self.attached_id = None
        return entity

    def positions(self) -> dict[str, tuple[float, float, float]]:
        return {e.id: to_tuple(e.position) for e in self._entities.values()}

    def reset(self) -> None:
        self.attached_id = None
        for entity in self._entities.values():
            entity.reset()


class EntityPhysics:
    """
    Free fall and rest for loose entities, rigid follow for the held one.

    Velocity accumulates by a fixed decrement per tick (not integrated over
    elapsed time); on reaching the floor an entity is clamped there with its
    vertical velocity zeroed.
    """

    def __init__(
        self,
        config: Optional[PhysicsConfig] = None,
        gripper_config: Optional[GripperConfig] = None,
    ):
        self.config = config or PhysicsConfig()
        self.gripper_config = gripper_config or GripperConfig()

    def step(self, store: EntityStore, end_effector: Point3) -> None:
        """
        Update every entity for one tick.

        Args:
            store: Entities to update in place
            end_effector: Current end-effector point
        """
        for entity in store:
            if store.is_attached(entity.id):
                self._follow(entity, end_effector)
            else:
                self._fall(entity)

    def _follow(self, entity: Entity, end_effector: Point3) -> None:
        entity.position = as_point(end_effector)
        entity.position[1] -= self.gripper_config.attach_offset
        # No falling speed carries over once released
        entity.velocity_y = 0.0

    def _fall(self, entity: Entity) -> None:
        floor = self.config.floor_level
        if entity.position[1] > floor:
            entity.velocity_y -= self.config.gravity_step
            entity.position[1] += entity.velocity_y
        if entity.position[1] <= floor:
            if entity.velocity_y != 0.0:
                logger.debug("entity_landed", entity=entity.id, floor=floor)
            entity.position[1] = floor
            entity.velocity_y = 0.0
