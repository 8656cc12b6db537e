"""Small immutable 2D vector and rectangle types, plus a debug marker."""

import math
from dataclasses import dataclass

import pygame

_POINT_SIZE = 2


@dataclass(frozen=True)
class Vec2:
    """A 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other):
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def scale(self, factor):
        """Return this vector multiplied by ``factor``."""
        return Vec2(self.x * factor, self.y * factor)

    def length_sqr(self):
        """Return the squared length."""
        return self.x * self.x + self.y * self.y

    def normalized(self):
        """Return a unit vector in the same direction; the zero vector stays zero."""
        length = math.hypot(self.x, self.y)
        if length == 0:
            return Vec2()
        return Vec2(self.x / length, self.y / length)

    def distance_sqr(self, other):
        """Return the squared distance to ``other``."""
        return (self - other).length_sqr()


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def intersects(self, other):
        """Return True if the rectangles overlap; touching edges do not count."""
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )

    def moved(self, dx, dy):
        """Return a copy shifted by (dx, dy)."""
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def origin(self):
        """Return the top-left corner as a vector."""
        return Vec2(self.x, self.y)


def draw_point(surface, x, y, color):
    """Draw a small cross centred on (x, y)."""
    pygame.draw.line(
        surface, color, (x - _POINT_SIZE, y - _POINT_SIZE), (x + _POINT_SIZE, y + _POINT_SIZE)
    )
    pygame.draw.line(
        surface, color, (x + _POINT_SIZE, y - _POINT_SIZE), (x - _POINT_SIZE, y + _POINT_SIZE)
    )