"""The player's hero: movement, swinging, interaction and drawing."""

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Optional

import pygame

from .collision import CollisionLayer, Raycast
from .config import ROOM_HEIGHT, ROOM_WIDTH, TILE_SIZE, Input
from .entity import EntityType
from .geometry import Rect, Vec2
from .message import Action, MessageAction
from .props import Inventory
from .textures import HeroPalette

_log = logging.getLogger(__name__)

HERO_SPEED = 80.0
WALK_DELAY = 0.4
FLIP_DELAY = 0.2
SWING_DELAY = 0.23
SWING_REACH = 4

_ORIGIN = Vec2(3, 6)
_SIZE = Vec2(10, 10)
_ROOM_OFFSET = Vec2(5.0, 0.0)
_START = Vec2(83, 83)


class Direction(IntEnum):
    """Which way a hero faces."""

    DOWN = 0
    UP = 1
    LEFT = 2
    RIGHT = 3


class HeroState(IntEnum):
    """What a hero's animation shows."""

    IDLE = 0
    WALK = 1
    SWING = 2


def _sprite(x, y, flipped=False):
    step = TILE_SIZE + 1
    return Rect(x * step, y * step, -TILE_SIZE if flipped else TILE_SIZE, TILE_SIZE)


def _vec(x, y):
    return Vec2(x * TILE_SIZE, y * TILE_SIZE)


_SWORD_SPRITES = {
    Direction.DOWN: (_sprite(0, 1), _sprite(0, 2), _sprite(1, 2)),
    Direction.LEFT: (_sprite(1, 0), _sprite(0, 0), _sprite(0, 1)),
    Direction.RIGHT: (_sprite(1, 0), _sprite(2, 0), _sprite(2, 1)),
    Direction.UP: (_sprite(2, 1), _sprite(2, 0), _sprite(1, 0)),
}

_SWORD_OFFSETS = {
    Direction.DOWN: (_vec(-0.8, 0), _vec(-0.7, 0.8), _vec(0, 1)),
    Direction.LEFT: (_vec(0, -1), _vec(-0.8, -0.7), _vec(-1, 0)),
    Direction.RIGHT: (_vec(0.4, -1), _vec(0.8, -0.7), _vec(1, 0)),
    Direction.UP: (_vec(0.9, -0.4), _vec(0.75, -0.75), _vec(0, -1)),
}

# Two rays per direction, relative to the hero's top-left corner.
_USE_RAYCASTS = {
    Direction.DOWN: (
        Raycast(Vec2(1.5, _SIZE.y), Vec2(0, 4)),
        Raycast(Vec2(_SIZE.x - 1.5, _SIZE.y), Vec2(0, 4)),
    ),
    Direction.UP: (
        Raycast(Vec2(1.5, 0), Vec2(1, -4)),
        Raycast(Vec2(_SIZE.x - 1.5, 0), Vec2(0, -4)),
    ),
    Direction.LEFT: (
        Raycast(Vec2(0, 1.5), Vec2(-4, 0)),
        Raycast(Vec2(0, _SIZE.y - 1.5), Vec2(-4, 0)),
    ),
    Direction.RIGHT: (
        Raycast(Vec2(_SIZE.x, 1.5), Vec2(4, 0)),
        Raycast(Vec2(_SIZE.x, _SIZE.y - 1.5), Vec2(4, 0)),
    ),
}

# Per direction: first swing frame, later frames, and the body's lunge.
_SWING_SPRITES = {
    Direction.DOWN: (_sprite(0, 1), _sprite(1, 1), Vec2(0, SWING_REACH)),
    Direction.UP: (_sprite(2, 1), _sprite(3, 1), Vec2(0, -SWING_REACH)),
    Direction.LEFT: (_sprite(4, 1), _sprite(5, 1), Vec2(-SWING_REACH, 0)),
    Direction.RIGHT: (_sprite(4, 1, True), _sprite(5, 1, True), Vec2(SWING_REACH, 0)),
}


def _sheet_image(sheet, sprite):
    """Cut ``sprite`` out of ``sheet``; a negative width or height means flipped."""
    area = pygame.Rect(
        int(sprite.x), int(sprite.y), abs(int(sprite.width)), abs(int(sprite.height))
    )
    image = sheet.subsurface(area)
    if sprite.width < 0 or sprite.height < 0:
        image = pygame.transform.flip(image, sprite.width < 0, sprite.height < 0)
    return image


@dataclass
class HeroAnimState:
    """Animation timers and choices of a hero."""

    palette: HeroPalette = HeroPalette.GREEN
    state: HeroState = HeroState.IDLE
    flipped: bool = False
    is_moving: bool = False
    flip_tick: float = 0.0
    walk_tick: float = 0.0


@dataclass
class HeroHusk:
    """Everything needed to animate and draw a hero, local or remote."""

    position: Rect = field(default_factory=lambda: Rect(0, 0, TILE_SIZE, TILE_SIZE))
    sprite_offset: Vec2 = field(default_factory=Vec2)
    facing: Direction = Direction.DOWN
    animation: HeroAnimState = field(default_factory=HeroAnimState)
    swinging: bool = False
    swing_tick: float = 0.0

    def update(self, dt):
        """Advance the swing and the walking animation by ``dt`` seconds."""
        if self.swinging:
            self.swing_tick += dt
            self.swinging = self.swing_tick < SWING_DELAY
        self._update_animation(dt)

    def _update_animation(self, dt):
        anim = self.animation
        if self.swinging:
            anim.state = HeroState.SWING
            return
        anim.state = HeroState.WALK if anim.is_moving else HeroState.IDLE
        if anim.is_moving:
            anim.flip_tick += dt
            anim.walk_tick += dt
            if anim.flip_tick > FLIP_DELAY:
                anim.flipped = not anim.flipped
                anim.flip_tick -= FLIP_DELAY
            if anim.walk_tick > WALK_DELAY:
                anim.walk_tick -= WALK_DELAY
        else:
            anim.flip_tick = FLIP_DELAY
            anim.walk_tick = WALK_DELAY / 0.15

    def _swing_frame(self):
        return int(self.swing_tick / SWING_DELAY * 4)

    def sprite(self):
        """Return (sprite sheet rectangle, body offset) for the current animation."""
        anim = self.animation
        facing = Direction(self.facing)
        if anim.state == HeroState.SWING:
            frame = self._swing_frame()
            first, later, lunge = _SWING_SPRITES[facing]
            offset = lunge if frame >= 2 else Vec2()
            return (first if frame == 0 else later), offset
        if facing is Direction.DOWN:
            return _sprite(0, 0, anim.flipped), Vec2()
        if facing is Direction.UP:
            return _sprite(1, 0, anim.flipped), Vec2()
        column = 2
        if anim.state == HeroState.WALK and anim.walk_tick >= WALK_DELAY / 2:
            column = 3
        return _sprite(column, 0, facing is Direction.RIGHT), Vec2()

    def sword_frame(self):
        """Return which of the three sword frames to show, or None when not swinging."""
        if not self.swinging:
            return None
        return min(self._swing_frame(), 2)

    def render(self, surface, textures, offset=Vec2()):
        """Draw the hero and, while swinging, the sword, shifted by ``-offset``."""
        sprite, self.sprite_offset = self.sprite()
        base = self.position.origin() + self.sprite_offset - _ORIGIN - offset
        sheet = textures.palette(self.animation.palette)
        surface.blit(_sheet_image(sheet, sprite), (int(base.x), int(base.y)))
        frame = self.sword_frame()
        if frame is None:
            return
        facing = Direction(self.facing)
        sword_at = base + _SWORD_OFFSETS[facing][frame]
        surface.blit(
            _sheet_image(textures.sword, _SWORD_SPRITES[facing][frame]),
            (int(sword_at.x), int(sword_at.y)),
        )


class Hero:
    """The hero steered by the local player."""

    def __init__(self, world, registry):
        self._world = world
        self._registry = registry
        self.id = registry.create_id(EntityType.HERO)
        self.husk = HeroHusk(position=Rect(_START.x, _START.y, TILE_SIZE, TILE_SIZE))
        self.husk.animation.palette = HeroPalette.PURPLE
        area = Rect(_START.x, _START.y, _SIZE.x, _SIZE.y)
        self.collider = world.create(self.id, area, CollisionLayer.PLAYER)
        self.inventory = Inventory()
        self.room_x = 0
        self.room_y = 0
        registry.add(self)

    def update(self, dt, held=frozenset(), pressed=frozenset(), send_action=None):
        """Advance one frame.

        ``held`` holds the keys that are down, ``pressed`` those pressed this
        frame; ``send_action`` receives a MessageAction when the hero swings.
        Returns the direction input that was applied.
        """
        direction = self._walk(dt, held)
        husk = self.husk
        if not husk.swinging and Input.SWING in pressed:
            husk.swinging = True
            husk.swing_tick = 0.0
            if send_action is not None:
                send_action(MessageAction(Action.SWING, husk.position.x, husk.position.y))
        if Input.USE in pressed:
            self.use()
        husk.animation.is_moving = abs(direction.x) + abs(direction.y) > 0.1
        husk.update(dt)
        return direction

    def _walk(self, dt, held):
        if self.husk.swinging:
            return Vec2()
        x = y = 0.0
        if Input.LEFT in held:
            x = -1.0
            self.husk.facing = Direction.LEFT
        if Input.RIGHT in held:
            x = 1.0
            self.husk.facing = Direction.RIGHT
        if Input.DOWN in held:
            y = 1.0
            self.husk.facing = Direction.DOWN
        if Input.UP in held:
            y = -1.0
            self.husk.facing = Direction.UP
        direction = Vec2(x, y)
        velocity = direction.normalized().scale(HERO_SPEED * dt)
        self._world.move(self.collider, Vec2(velocity.x, 0.0))
        new_position = self._world.move(self.collider, Vec2(0.0, velocity.y))
        self.husk.position = replace(self.husk.position, x=new_position.x, y=new_position.y)
        self.room_x = int((_ROOM_OFFSET.x + new_position.x) / TILE_SIZE / ROOM_WIDTH)
        self.room_y = int((_ROOM_OFFSET.y + new_position.y) / TILE_SIZE / ROOM_HEIGHT)
        if x or y:
            self.touch_use()
        return direction

    def _raycast_hit(self, layer):
        corner = self.husk.position.origin()
        for cast in _USE_RAYCASTS[Direction(self.husk.facing)]:
            hit = self._world.raycast(Raycast(cast.origin + corner, cast.point), layer)
            if hit is not None:
                return hit
        return None

    def touch_use(self) -> Optional[bool]:
        """Try the door in front of the hero; return whether it opened, or None if none."""
        hit = self._raycast_hit(CollisionLayer.DOOR)
        if hit is None:
            return None
        if hit.parent.type is EntityType.DOOR:
            door = self._registry.lookup(hit.parent)
            if door is not None:
                return door.interact(self.inventory)
            return None
        _log.info("Tried to touch use '%s'", hit.parent.type.label)
        return None

    def use(self):
        """Interact with the owl or chest in front of the hero and return what it gave."""
        hit = self._raycast_hit(CollisionLayer.OWL | CollisionLayer.CHEST)
        if hit is None:
            _log.info("No interactions.")
            return None
        entity = self._registry.lookup(hit.parent)
        if entity is None:
            return None
        if hit.parent.type is EntityType.OWL:
            return entity.interact()
        if hit.parent.type is EntityType.CHEST:
            return entity.interact(self.inventory)
        _log.info("Interact with '%s'", hit.parent.type.label)
        return None