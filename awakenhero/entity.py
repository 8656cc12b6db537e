"""Entity kinds, identifiers and a registry for finding entities by id."""

from dataclasses import dataclass
from enum import IntEnum


class EntityType(IntEnum):
    """Every kind of thing that can own a collider."""

    UNKNOWN = 0
    HERO = 1
    NETWORK_HERO = 2
    OWL = 3
    POT = 4
    CHEST = 5
    FENCE = 6
    DOOR = 7

    @property
    def label(self):
        """Upper-case name used in log messages."""
        return f"ENTITY_{self.name}"

    @property
    def capacity(self):
        """How many of this kind a map holds, or None if it is not a map object."""
        return _MAP_CAPACITY.get(self)


_MAP_CAPACITY = {
    EntityType.OWL: 8,
    EntityType.POT: 64,
    EntityType.CHEST: 64,
    EntityType.FENCE: 64,
    EntityType.DOOR: 64,
}

MAP_ENTITY_TYPES = tuple(_MAP_CAPACITY)


@dataclass(frozen=True)
class EntityId:
    """Identifies one entity: its kind and a unique number."""

    type: EntityType
    id: int


class EntityRegistry:
    """Hands out entity ids and finds entities by them."""

    def __init__(self):
        self._last_id = 0
        self._entities = {}

    def __len__(self):
        return len(self._entities)

    def __contains__(self, entity_id):
        return entity_id in self._entities

    def create_id(self, entity_type):
        """Return a fresh id for an entity of ``entity_type``."""
        self._last_id += 1
        return EntityId(EntityType(entity_type), self._last_id)

    def add(self, entity):
        """Register an entity under its ``id`` attribute and return it."""
        key = entity.id
        if key in self._entities:
            raise ValueError(f"entity {key} is already registered")
        self._entities[key] = entity
        return entity

    def remove(self, entity_id):
        """Unregister and return the entity with ``entity_id``."""
        try:
            return self._entities.pop(entity_id)
        except KeyError:
            raise KeyError(f"no entity registered as {entity_id}") from None

    def lookup(self, entity_id):
        """Return the entity with ``entity_id``, or None if there is none."""
        return self._entities.get(entity_id)