"""The game window, its main loop and the command that starts the game or the server."""

import logging
import sys
import time
from pathlib import Path

import pygame

from .client import Client
from .collision import CollisionWorld
from .config import (
    ROOM_HEIGHT,
    ROOM_WIDTH,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TILE_SIZE,
    TITLE,
    WIN_HEIGHT,
    WIN_WIDTH,
    Input,
)
from .entity import EntityRegistry
from .geometry import Vec2
from .hero import Hero
from .map_tiled import load_map
from .server import server_main
from .textures import Textures
from .tile import Tileset, is_solid

_BACKGROUND = (0, 0, 0)
_FPS = 60


class Game:
    """One running game: window, map, local hero and connection to other players."""

    def __init__(self, asset_dir="assets", map_path=None):
        pygame.init()
        self.screen = pygame.display.set_mode((WIN_WIDTH, WIN_HEIGHT))
        pygame.display.set_caption(TITLE)
        pygame.mouse.set_visible(False)
        asset_dir = Path(asset_dir)
        if map_path is None:
            map_path = asset_dir / "maps" / "debug.json"
        self.registry = EntityRegistry()
        self.world = CollisionWorld(self._is_solid_at)
        self.tileset = Tileset()
        self.textures = Textures(asset_dir)
        self.map = load_map(map_path, self.world, self.registry)
        self.hero = Hero(self.world, self.registry)
        self.client = Client(self.hero, self.registry)
        self.client.connect()
        self._running = True
        self._started = time.monotonic()
        self._clock = pygame.time.Clock()

    def _is_solid_at(self, x, y):
        try:
            return is_solid(self.map.get_tile(x, y))
        except IndexError:
            return True

    def camera_target(self):
        """Return the world point at the centre of the hero's current room."""
        return Vec2(
            self.hero.room_x * TILE_SIZE * ROOM_WIDTH + TILE_SIZE * ROOM_WIDTH / 2,
            self.hero.room_y * TILE_SIZE * ROOM_HEIGHT + TILE_SIZE * ROOM_HEIGHT / 2,
        )

    def _poll_input(self):
        pressed = set()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                pressed.add(event.key)
        keys = pygame.key.get_pressed()
        held = {key for key in Input if keys[key]}
        return held, {key for key in Input if key in pressed}

    def update(self):
        """Advance the game by one frame."""
        dt = self._clock.tick(_FPS) / 1000.0
        now = time.monotonic() - self._started
        self.tileset.update(now)
        held, pressed = self._poll_input()
        self.hero.update(dt, held, pressed, self.client.send_action)
        self.client.update(now)
        for network_hero in self.client.network_heroes:
            network_hero.update(dt, now)

    def render(self):
        """Draw the hero's room and everything in it, scaled up to the window."""
        surface = self.textures.render_target
        surface.fill(_BACKGROUND)
        self.map.render(
            surface, self.textures.tileset, self.tileset, self.hero.room_x, self.hero.room_y
        )
        offset = self.camera_target() - Vec2(SCREEN_WIDTH / 2, SCREEN_HEIGHT / 2)
        self.map.render_objects(surface, self.textures.tileset, offset)
        for network_hero in self.client.network_heroes:
            network_hero.render(surface, self.textures, offset)
        self.hero.husk.render(surface, self.textures, offset)
        self.world.render(surface, offset)
        self.screen.blit(pygame.transform.scale(surface, (WIN_WIDTH, WIN_HEIGHT)), (0, 0))
        pygame.display.flip()

    def is_running(self):
        """Return False once the window has been asked to close."""
        return self._running

    def close(self):
        """Disconnect, report map usage and shut the window."""
        self.client.close()
        self.map.profile()
        pygame.quit()


def main(argv=None):
    """Start the game, or the relay server when the first argument is ``--server``."""
    argv = sys.argv[1:] if argv is None else list(argv)
    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")
    if argv and argv[0] == "--server":
        return server_main()
    game = Game()
    try:
        while game.is_running():
            game.update()
            game.render()
    finally:
        game.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())