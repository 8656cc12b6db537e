"""Screen, room and map dimensions, window settings and input bindings."""

import os
from enum import IntEnum

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

TILE_SIZE = 16

ROOM_WIDTH = 11
ROOM_HEIGHT = 9
ROOM_SIZE = ROOM_WIDTH * ROOM_HEIGHT

MAP_WIDTH = 8
MAP_HEIGHT = 8
MAP_SIZE = MAP_WIDTH * MAP_HEIGHT

SCREEN_WIDTH = TILE_SIZE * ROOM_WIDTH
SCREEN_HEIGHT = TILE_SIZE * ROOM_HEIGHT

WIN_SCALE = 3
WIN_WIDTH = SCREEN_WIDTH * WIN_SCALE
WIN_HEIGHT = SCREEN_HEIGHT * WIN_SCALE

TITLE = "Awaken Hero"


class Input(IntEnum):
    """Keyboard keys bound to the hero's actions."""

    DOWN = pygame.K_DOWN
    UP = pygame.K_UP
    LEFT = pygame.K_LEFT
    RIGHT = pygame.K_RIGHT
    SWING = pygame.K_x
    USE = pygame.K_c


def screen_size(scale):
    """Return the (width, height) of one room's view enlarged by ``scale``."""
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale!r}")
    return SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale