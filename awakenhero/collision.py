"""Colliders on layers, movement against the tile map and other colliders, and raycasts."""

from dataclasses import dataclass
from enum import IntFlag

import pygame

from .config import TILE_SIZE
from .geometry import Rect, Vec2

_EPSILON = 0.000001

DEBUG_COLOR = (0, 228, 48)


class CollisionLayer(IntFlag):
    """What a collider belongs to; layers combine into masks for raycasts."""

    PLAYER = 1 << 0
    SWORD = 1 << 1
    ENEMY = 1 << 2
    CHEST = 1 << 3
    POT = 1 << 4
    OWL = 1 << 5
    FENCE = 1 << 6
    DOOR = 1 << 7


@dataclass
class Collider:
    """A rectangular collision area owned by an entity."""

    parent: object
    layer: CollisionLayer
    area: Rect
    alive: bool = True
    enabled: bool = True
    debug: bool = False


@dataclass(frozen=True)
class Raycast:
    """A segment starting at ``origin`` and reaching ``origin + point``."""

    origin: Vec2
    point: Vec2


@dataclass(frozen=True)
class RaycastHit:
    """The nearest collider a raycast met, and where."""

    parent: object
    collider: int
    hit_point: Vec2


def _edge_hits(area, a, b, c):
    """Yield where the line a*x + b*y + c = 0 crosses the inside of each edge."""
    # Lines parallel to an edge pair are not considered.
    if abs(a) > _EPSILON:
        for edge_y in (area.y, area.y + area.height):
            x = -(b * edge_y + c) / a
            if area.x < x < area.x + area.width:
                yield Vec2(x, edge_y)
    if abs(b) > _EPSILON:
        for edge_x in (area.x, area.x + area.width):
            y = -(a * edge_x + c) / b
            if area.y < y < area.y + area.height:
                yield Vec2(edge_x, y)


class CollisionWorld:
    """Holds every collider; ids are slot numbers and dead slots are reused."""

    def __init__(self, is_solid_at=None):
        """``is_solid_at(tile_x, tile_y)`` tells whether a map tile blocks movement."""
        self._is_solid_at = is_solid_at or (lambda x, y: False)
        self._colliders = []

    def __len__(self):
        return sum(1 for collider in self._colliders if collider.alive)

    def __iter__(self):
        """Yield (id, collider) for every live collider."""
        for collider_id, collider in enumerate(self._colliders):
            if collider.alive:
                yield collider_id, collider

    def create(self, parent, area, layer):
        """Add a collider and return its id."""
        collider = Collider(parent=parent, layer=CollisionLayer(layer), area=area)
        for collider_id, existing in enumerate(self._colliders):
            if not existing.alive:
                self._colliders[collider_id] = collider
                return collider_id
        self._colliders.append(collider)
        return len(self._colliders) - 1

    def get(self, collider_id):
        """Return the collider stored under ``collider_id``."""
        if not 0 <= collider_id < len(self._colliders):
            raise IndexError(f"no collider with id {collider_id}")
        return self._colliders[collider_id]

    def destroy(self, collider_id):
        """Mark a collider dead so its slot can be reused."""
        self.get(collider_id).alive = False

    def set_enabled(self, collider_id, enabled):
        """Enable or disable blocking by a collider."""
        self.get(collider_id).enabled = enabled

    def set_debug(self, collider_id, debug):
        """Choose whether ``render`` outlines this collider."""
        self.get(collider_id).debug = debug

    def _collides_with_map(self, area):
        from_x = int(area.x / TILE_SIZE)
        from_y = int(area.y / TILE_SIZE)
        to_x = int((area.x + area.width) / TILE_SIZE)
        to_y = int((area.y + area.height) / TILE_SIZE)
        return any(
            self._is_solid_at(x, y)
            for y in range(from_y, to_y + 1)
            for x in range(from_x, to_x + 1)
        )

    def move(self, collider_id, delta):
        """Try to shift a collider by ``delta``; return its resulting top-left corner.

        The move is all or nothing: if the new area touches a solid tile or
        overlaps another enabled collider, the collider stays where it was.
        """
        collider = self.get(collider_id)
        if not collider.alive:
            raise ValueError(f"collider {collider_id} has been destroyed")
        new_area = collider.area.moved(delta.x, delta.y)
        if self._collides_with_map(new_area):
            return collider.area.origin()
        for other_id, other in enumerate(self._colliders):
            if other_id == collider_id or not other.alive:
                continue
            if other.enabled and new_area.intersects(other.area):
                return collider.area.origin()
        collider.area = new_area
        return new_area.origin()

    def raycast(self, raycast, hit_layer):
        """Return the nearest hit on a collider in ``hit_layer`` within the ray's length, or None."""
        origin = raycast.origin
        end = origin + raycast.point
        a = origin.y - end.y
        b = end.x - origin.x
        c = origin.x * end.y - origin.y * end.x
        best = origin.distance_sqr(end)
        hit = None
        for collider_id, collider in enumerate(self._colliders):
            if not collider.alive or not collider.layer & hit_layer:
                continue
            for point in _edge_hits(collider.area, a, b, c):
                distance = origin.distance_sqr(point)
                if distance < best:
                    best = distance
                    hit = RaycastHit(collider.parent, collider_id, point)
        return hit

    def render(self, surface, offset=Vec2()):
        """Outline every live collider that has debug drawing switched on."""
        for _, collider in self:
            if not collider.debug:
                continue
            area = collider.area
            pygame.draw.rect(
                surface,
                DEBUG_COLOR,
                pygame.Rect(
                    int(area.x - offset.x),
                    int(area.y - offset.y),
                    int(area.width),
                    int(area.height),
                ),
                1,
            )