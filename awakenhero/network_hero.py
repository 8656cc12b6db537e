"""Heroes of other players, moved smoothly between the states the server relays."""

import logging
from dataclasses import replace

from .config import TILE_SIZE
from .entity import EntityType
from .geometry import Rect, Vec2
from .hero import HERO_SPEED, Direction, HeroAnimState, HeroHusk
from .message import NetworkHeroState
from .textures import HeroPalette

_log = logging.getLogger(__name__)

NETWORK_SYNC_DELAY = 0.1

# Squared distance between syncs above which the hero walks instead of snapping.
_WALK_THRESHOLD = 10.0


def husk_state(husk):
    """Return the network state describing ``husk``."""
    return NetworkHeroState(
        Vec2(husk.position.x, husk.position.y),
        husk.facing,
        HeroPalette(husk.animation.palette),
    )


class NetworkHero:
    """A hero owned by another player."""

    def __init__(self, registry, owner, state):
        self.id = registry.create_id(EntityType.NETWORK_HERO)
        self.owner = owner
        self.last_synced = 0.0
        self.husk = HeroHusk(
            position=Rect(state.position.x, state.position.y, TILE_SIZE, TILE_SIZE),
            facing=Direction(state.facing),
            animation=HeroAnimState(palette=HeroPalette(state.palette)),
        )
        self.previous = state
        self.target = state
        registry.add(self)

    def handle_sync(self, state, now):
        """Take a new state received at time ``now`` as the next target."""
        self.previous = self.target
        self.target = state
        self.last_synced = now
        self.husk.animation.palette = HeroPalette(state.palette)
        self.husk.facing = Direction(state.facing)

    def handle_action(self, x, y):
        """Start a swing at (x, y)."""
        _log.info("Hero %d action received.", self.owner)
        self.target = replace(self.target, position=Vec2(x, y))
        self.husk.position = replace(self.husk.position, x=x, y=y)
        self.husk.swinging = True
        self.husk.swing_tick = 0.0

    def update(self, dt, now):
        """Move towards the interpolated target and advance the animation."""
        progress = (now - self.last_synced) / NETWORK_SYNC_DELAY
        position = self.husk.position.origin()
        movement = self.target.position - self.previous.position
        target_position = self.previous.position + movement.scale(progress)
        if movement.length_sqr() > _WALK_THRESHOLD:
            velocity = (target_position - position).normalized().scale(HERO_SPEED * dt)
            position = position + velocity
            self.husk.animation.is_moving = True
        else:
            position = self.target.position
            self.husk.animation.is_moving = False
        self.husk.position = replace(self.husk.position, x=position.x, y=position.y)
        self.husk.update(dt)

    def render(self, surface, textures, offset=Vec2()):
        """Draw this hero."""
        self.husk.render(surface, textures, offset)