"""A small top-down dungeon adventure with Tiled maps and UDP multiplayer."""

__version__ = "0.1.0"