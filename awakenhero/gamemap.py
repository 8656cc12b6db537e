"""The dungeon map: a grid of rooms of tiles, plus the objects placed in it."""

import logging
import math
from dataclasses import dataclass, field

import pygame

from .config import (
    MAP_HEIGHT,
    MAP_WIDTH,
    ROOM_HEIGHT,
    ROOM_SIZE,
    ROOM_WIDTH,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TILE_SIZE,
)
from .entity import MAP_ENTITY_TYPES
from .geometry import Rect, Vec2
from .tile import Tile, TileFlag

_log = logging.getLogger(__name__)


class MapCapacityError(RuntimeError):
    """Raised when a map already holds as many objects of a kind as it can."""


@dataclass
class Room:
    """One screen of tiles, stored row by row."""

    tiles: list = field(default_factory=lambda: [Tile.NONE] * ROOM_SIZE)
    flags: list = field(default_factory=lambda: [TileFlag(0)] * ROOM_SIZE)


def _room_index(x, y):
    return y * ROOM_WIDTH + x


class Map:
    """A MAP_WIDTH by MAP_HEIGHT grid of rooms, the objects in them and the spawn tile."""

    def __init__(self):
        self.rooms = [[Room() for _ in range(MAP_WIDTH)] for _ in range(MAP_HEIGHT)]
        self._objects = {entity_type: [] for entity_type in MAP_ENTITY_TYPES}
        self.spawn_x = 0
        self.spawn_y = 0

    def add(self, entity):
        """Place a map object; raise MapCapacityError when its kind is full."""
        entity_type = entity.id.type
        if entity_type not in self._objects:
            raise ValueError(f"{entity_type.label} is not a map object")
        bucket = self._objects[entity_type]
        if len(bucket) >= entity_type.capacity:
            raise MapCapacityError(
                f"map already holds {entity_type.capacity} of {entity_type.label}"
            )
        bucket.append(entity)
        return entity

    def objects(self):
        """Yield every map object, kind by kind, in the order they were added."""
        for bucket in self._objects.values():
            yield from bucket

    def _locate(self, x, y):
        x, y = int(x), int(y)
        if not (0 <= x < ROOM_WIDTH * MAP_WIDTH and 0 <= y < ROOM_HEIGHT * MAP_HEIGHT):
            raise IndexError(f"tile ({x}, {y}) lies outside the map")
        room_x, tile_x = divmod(x, ROOM_WIDTH)
        room_y, tile_y = divmod(y, ROOM_HEIGHT)
        return self.rooms[room_y][room_x], _room_index(tile_x, tile_y)

    def get_tile(self, x, y):
        """Return the tile at global tile coordinates (x, y)."""
        room, index = self._locate(x, y)
        return room.tiles[index]

    def set_tile(self, x, y, tile, flipflags=TileFlag(0)):
        """Set the tile at global tile coordinates (x, y)."""
        room, index = self._locate(x, y)
        room.tiles[index] = Tile(tile)
        room.flags[index] = TileFlag(flipflags)

    def room_at(self, x, y):
        """Return the room containing global tile (x, y); raise IndexError outside the map."""
        room, _ = self._locate(x, y)
        return room

    def room_from_tile(self, x, y):
        """Return the room containing global tile (x, y)."""
        return self.room_at(x, y)

    def render(self, surface, tileset_image, tileset, room_x, room_y):
        """Draw the tiles of one room onto ``surface`` at room-local positions."""
        room = self.rooms[room_y][room_x]
        for index, tile in enumerate(room.tiles):
            if tile is Tile.NONE:
                continue
            y, x = divmod(index, ROOM_WIDTH)
            source = tileset.rect(tile)
            image = tileset_image.subsurface(
                pygame.Rect(int(source.x), int(source.y), int(source.width), int(source.height))
            )
            surface.blit(image, (x * TILE_SIZE, y * TILE_SIZE))

    def render_objects(self, surface, tileset_image, offset=Vec2()):
        """Draw every map object, shifted by ``-offset``."""
        for entity in self.objects():
            entity.render(surface, tileset_image, offset)

    def profile(self):
        """Log and return how full each kind of object is, as {type: (count, capacity)}."""
        report = {
            entity_type: (len(bucket), entity_type.capacity)
            for entity_type, bucket in self._objects.items()
        }
        _log.info("Rooms: %d", MAP_WIDTH * MAP_HEIGHT)
        for entity_type, (count, capacity) in report.items():
            _log.info("%s: %d/%d", entity_type.name.title(), count, capacity)
        return report


def global_to_room_tile(x, y):
    """Return the tile-sized rectangle at (x, y) made relative to its room's screen."""
    return Rect(
        int(math.fmod(x, SCREEN_WIDTH)),
        int(math.fmod(y, SCREEN_HEIGHT)),
        TILE_SIZE,
        TILE_SIZE,
    )