"""Tile kinds, tile flags, solidity and the animated tileset layout."""

import math
from dataclasses import replace
from enum import IntEnum, IntFlag

from .config import TILE_SIZE
from .geometry import Rect


class Tile(IntEnum):
    """The kinds of tile a room is made of."""

    NONE = 0
    WALL_TL = 1
    WALL_T = 2
    WALL_TR = 3
    WALL_L = 4
    FLOOR = 5
    WALL_R = 6
    WALL_BL = 7
    WALL_B = 8
    WALL_BR = 9
    CEIL = 10
    WALL_CORNER_TL = 11
    WALL_CORNER_TR = 12
    WALL_CORNER_BL = 13
    WALL_CORNER_BR = 14
    FLOOR_ALT = 15
    FLOOR_STAIR = 16
    BLOCK = 17
    STATUE = 18
    HOLE = 19
    HOLE_B = 20
    HOLE_T = 21
    HOLE_TB = 22
    TORCH = 23
    CAULDRON = 24


class TileFlag(IntFlag):
    """How a tile's sprite is rotated or flipped."""

    ROTATED = 1 << 0
    FLIP_V = 1 << 1
    FLIP_H = 1 << 2


def _tile_rect(x, y):
    return Rect(x * TILE_SIZE, y * TILE_SIZE, TILE_SIZE, TILE_SIZE)


_TILE_RECTS = {
    Tile.NONE: Rect(),
    Tile.WALL_TL: _tile_rect(0, 0),
    Tile.WALL_T: _tile_rect(1, 0),
    Tile.WALL_TR: _tile_rect(2, 0),
    Tile.WALL_L: _tile_rect(0, 1),
    Tile.FLOOR: _tile_rect(1, 1),
    Tile.WALL_R: _tile_rect(2, 1),
    Tile.WALL_BL: _tile_rect(0, 2),
    Tile.WALL_B: _tile_rect(1, 2),
    Tile.WALL_BR: _tile_rect(2, 2),
    Tile.CEIL: _tile_rect(4, 2),
    Tile.WALL_CORNER_TL: _tile_rect(3, 0),
    Tile.WALL_CORNER_TR: _tile_rect(4, 0),
    Tile.WALL_CORNER_BL: _tile_rect(3, 1),
    Tile.WALL_CORNER_BR: _tile_rect(4, 1),
    Tile.FLOOR_ALT: _tile_rect(1, 3),
    Tile.FLOOR_STAIR: _tile_rect(2, 3),
    Tile.BLOCK: _tile_rect(3, 6),
    Tile.STATUE: _tile_rect(2, 6),
    Tile.HOLE: _tile_rect(5, 0),
    Tile.HOLE_B: _tile_rect(5, 1),
    Tile.HOLE_T: _tile_rect(5, 2),
    Tile.HOLE_TB: _tile_rect(5, 3),
    Tile.TORCH: _tile_rect(6, 1),
    Tile.CAULDRON: _tile_rect(6, 0),
}

_SOLID = frozenset(
    {
        Tile.WALL_TL,
        Tile.WALL_T,
        Tile.WALL_TR,
        Tile.WALL_L,
        Tile.WALL_R,
        Tile.WALL_BL,
        Tile.WALL_B,
        Tile.WALL_BR,
        Tile.CEIL,
        Tile.WALL_CORNER_TL,
        Tile.WALL_CORNER_TR,
        Tile.WALL_CORNER_BL,
        Tile.WALL_CORNER_BR,
        Tile.BLOCK,
        Tile.STATUE,
        Tile.TORCH,
        Tile.CAULDRON,
    }
)

# (low time, transition time, high time) of each animated tile's bobbing cycle.
_ANIMATIONS = {
    Tile.TORCH: (0.3, 0.1, 0.3),
    Tile.CAULDRON: (0.2, 0.1, 0.2),
}

_ANIMATION_BASE_COLUMN = 6


def is_solid(tile):
    """Return True if the tile blocks movement."""
    return Tile(tile) in _SOLID


def _bobbing_frame(time, low, transition, high):
    """Return the sprite offset for a low-rise-high-fall cycle, or None past its end."""
    frame_time = math.fmod(time, low + high + transition * 4)
    keyframes = (
        (low, 0),
        (low + transition, 1),
        (low + transition * 2, 2),
        (low + transition * 2 + high, 3),
        (low + transition * 3 + high, 2),
        (low + transition * 4 + high, 1),
    )
    return next((sprite for limit, sprite in keyframes if frame_time < limit), None)


class Tileset:
    """Source rectangles of each tile within the tileset image, with animation state."""

    def __init__(self):
        self._rects = dict(_TILE_RECTS)

    def rect(self, tile):
        """Return the tileset rectangle currently shown for ``tile``."""
        return self._rects[Tile(tile)]

    def update(self, time):
        """Advance the animated tiles to the frame for ``time`` seconds."""
        for tile, timing in _ANIMATIONS.items():
            frame = _bobbing_frame(time, *timing)
            if frame is not None:
                column = _ANIMATION_BASE_COLUMN + frame
                self._rects[tile] = replace(self._rects[tile], x=column * TILE_SIZE)