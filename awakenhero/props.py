"""Map objects the hero can bump into or interact with: chests, doors, fences, owls, pots."""

import logging
from dataclasses import dataclass
from enum import IntEnum

import pygame

from .collision import CollisionLayer
from .config import TILE_SIZE
from .entity import EntityType
from .geometry import Rect, Vec2
from .tile import TileFlag

_log = logging.getLogger(__name__)


@dataclass
class Inventory:
    """What the hero carries."""

    keys: int = 0
    boss_key: bool = False


def _tile(x, y):
    return Rect(x * TILE_SIZE, y * TILE_SIZE, TILE_SIZE, TILE_SIZE)


def _to_pygame(rect):
    return pygame.Rect(int(rect.x), int(rect.y), int(rect.width), int(rect.height))


def _sprite_image(tileset, sprite):
    return tileset.subsurface(_to_pygame(sprite))


class _Prop:
    """Shared set-up, teardown and drawing of a tile-sized map object."""

    entity_type = EntityType.UNKNOWN
    layer = CollisionLayer(0)

    def _attach(self, world, registry, collider_area, position):
        self._world = world
        self._registry = registry
        self.id = registry.create_id(self.entity_type)
        self.position = position
        self.collider = world.create(self.id, collider_area, self.layer)
        registry.add(self)

    @property
    def sprite(self):
        """The tileset rectangle this object is drawn from."""
        return self._sprite

    def destroy(self):
        """Remove this object's collider and unregister it."""
        self._world.destroy(self.collider)
        self._registry.remove(self.id)

    def render(self, surface, tileset, offset=Vec2()):
        """Draw the object from ``tileset`` onto ``surface``, shifted by ``-offset``."""
        surface.blit(
            _sprite_image(tileset, self.sprite),
            (int(self.position.x - offset.x), int(self.position.y - offset.y)),
        )


class ChestLoot(IntEnum):
    """What a chest holds."""

    NOTHING = 0
    RANDOM = 1
    KEY = 2
    BOSSKEY = 3


_CHEST_SPRITE = _tile(0, 5)
_CHEST_OPENED_SPRITE = _tile(1, 5)


class Chest(_Prop):
    """A chest that gives its loot once."""

    entity_type = EntityType.CHEST
    layer = CollisionLayer.CHEST

    def __init__(self, world, registry, x, y, loot=ChestLoot.NOTHING):
        self.loot = ChestLoot(loot)
        self.is_opened = False
        rect = Rect(x, y, TILE_SIZE, TILE_SIZE)
        self._attach(world, registry, rect, rect)

    @property
    def sprite(self):
        return _CHEST_OPENED_SPRITE if self.is_opened else _CHEST_SPRITE

    def destroy(self):
        super().destroy()

    def render(self, surface, tileset, offset=Vec2()):
        super().render(surface, tileset, offset)

    def interact(self, inventory):
        """Open the chest into ``inventory``; return the loot, or None if already open."""
        if self.is_opened:
            _log.info("Already opened")
            return None
        self.is_opened = True
        if self.loot is ChestLoot.KEY:
            inventory.keys += 1
            _log.info("Got key: %d", inventory.keys)
        elif self.loot is ChestLoot.BOSSKEY:
            inventory.boss_key = True
            _log.info("Opened bosskey.")
        elif self.loot is ChestLoot.RANDOM:
            _log.info("Opened random.")
        else:
            _log.info("Opened nothing.")
        return self.loot


class DoorType(IntEnum):
    """What it takes to get through a door."""

    MONSTER = 0
    KEY = 1
    BOSS = 2
    ONEWAY = 3
    ONEWAY_EXIT = 4
    KEYBLOCK = 5


_DOOR_SPRITES = {
    DoorType.MONSTER: _tile(0, 4),
    DoorType.KEY: _tile(1, 4),
    DoorType.BOSS: _tile(2, 4),
    DoorType.ONEWAY: _tile(3, 5),
    DoorType.ONEWAY_EXIT: _tile(3, 4),
    DoorType.KEYBLOCK: _tile(2, 5),
}


class Door(_Prop):
    """A door that blocks the way until it is opened."""

    entity_type = EntityType.DOOR
    layer = CollisionLayer.DOOR

    def __init__(self, world, registry, x, y, door_type, flipflags=TileFlag(0)):
        self.type = DoorType(door_type)
        self.flipflags = TileFlag(flipflags)
        self.is_open = False
        rect = Rect(x, y, TILE_SIZE, TILE_SIZE)
        self._attach(world, registry, rect, rect)

    @property
    def sprite(self):
        return _DOOR_SPRITES[self.type]

    def destroy(self):
        super().destroy()

    def render(self, surface, tileset, offset=Vec2()):
        """Draw the closed door, flipped and rotated by its tile flags."""
        if self.is_open:
            return
        image = _sprite_image(tileset, self.sprite)
        image = pygame.transform.flip(
            image,
            bool(self.flipflags & TileFlag.FLIP_H),
            bool(self.flipflags & TileFlag.FLIP_V),
        )
        if self.flipflags & TileFlag.ROTATED:
            image = pygame.transform.rotate(image, 90)
        surface.blit(
            image, (int(self.position.x - offset.x), int(self.position.y - offset.y))
        )

    def interact(self, inventory):
        """Try to open the door with what ``inventory`` holds; return True if it opened."""
        if self.is_open:
            return False
        if self.type in (DoorType.KEY, DoorType.KEYBLOCK):
            if inventory.keys == 0:
                return False
            inventory.keys -= 1
        elif self.type is DoorType.BOSS:
            if not inventory.boss_key:
                return False
        else:
            return False
        self.set_open(True)
        return True

    def set_open(self, is_open):
        """Open or close the door; an open door stops blocking."""
        self.is_open = is_open
        self._world.set_enabled(self.collider, not is_open)


class FenceType(IntEnum):
    """Which part of a fence a tile shows."""

    TL = 0
    TR = 1
    BL = 2
    BR = 3
    L = 4
    R = 5
    T = 6
    B = 7


_FENCE_AREAS = {
    FenceType.TL: Rect(0, 0, 8, 8),
    FenceType.TR: Rect(8, 0, 8, 8),
    FenceType.BL: Rect(0, 8, 8, 8),
    FenceType.BR: Rect(8, 8, 8, 8),
    FenceType.L: Rect(0, 0, 8, 16),
    FenceType.R: Rect(8, 0, 8, 16),
    FenceType.T: Rect(0, 0, 16, 8),
    FenceType.B: Rect(0, 8, 16, 8),
}

_FENCE_SPRITES = {
    FenceType.TL: _tile(4, 4),
    FenceType.TR: _tile(5, 4),
    FenceType.BL: _tile(4, 5),
    FenceType.BR: _tile(5, 5),
    FenceType.L: _tile(6, 4),
    FenceType.R: _tile(7, 4),
    FenceType.T: _tile(6, 5),
    FenceType.B: _tile(7, 5),
}


class Fence(_Prop):
    """A fence piece whose collider covers only part of its tile."""

    entity_type = EntityType.FENCE
    layer = CollisionLayer.FENCE

    def __init__(self, world, registry, fence_type, x, y):
        self.type = FenceType(fence_type)
        area = _FENCE_AREAS[self.type].moved(x, y)
        self._attach(world, registry, area, Rect(x, y, TILE_SIZE, TILE_SIZE))

    @property
    def sprite(self):
        return _FENCE_SPRITES[self.type]

    def destroy(self):
        super().destroy()

    def render(self, surface, tileset, offset=Vec2()):
        super().render(surface, tileset, offset)


class Owl(_Prop):
    """An owl statue that speaks a message."""

    entity_type = EntityType.OWL
    layer = CollisionLayer.OWL
    _sprite = _tile(4, 3)

    def __init__(self, world, registry, x, y):
        self.message = "It's dangerous to go alone."
        rect = Rect(x, y, TILE_SIZE, TILE_SIZE)
        self._attach(world, registry, rect, rect)

    def destroy(self):
        super().destroy()

    def render(self, surface, tileset, offset=Vec2()):
        super().render(surface, tileset, offset)

    def interact(self):
        """Log and return the owl's message."""
        _log.info("%s", self.message)
        return self.message


class Pot(_Prop):
    """A pot that blocks the way."""

    entity_type = EntityType.POT
    layer = CollisionLayer.POT
    _sprite = _tile(1, 6)

    def __init__(self, world, registry, x, y):
        rect = Rect(x, y, TILE_SIZE, TILE_SIZE)
        self._attach(world, registry, rect, rect)

    def destroy(self):
        super().destroy()

    def render(self, surface, tileset, offset=Vec2()):
        super().render(surface, tileset, offset)