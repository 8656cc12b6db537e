"""Hero palettes and the images the game draws with."""

from enum import IntEnum
from pathlib import Path

import pygame

from .config import SCREEN_HEIGHT, SCREEN_WIDTH


class HeroPalette(IntEnum):
    """Colour schemes a hero can be drawn in."""

    GREEN = 0
    RED = 1
    BLUE = 2
    PURPLE = 3


_PALETTE_FILES = {
    HeroPalette.GREEN: "link.png",
    HeroPalette.RED: "link_red.png",
    HeroPalette.BLUE: "link_blue.png",
    HeroPalette.PURPLE: "link_purple.png",
}


def _load(path):
    if not path.is_file():
        raise FileNotFoundError(f"missing image {path}")
    return pygame.image.load(str(path))


class Textures:
    """The images loaded from an asset directory, and the off-screen render target."""

    def __init__(self, asset_dir="assets"):
        root = Path(asset_dir)
        self.render_target = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT))
        self.hero = _load(root / "link.png")
        self.sword = _load(root / "sword.png")
        self.hero_palettes = {
            palette: _load(root / name) for palette, name in _PALETTE_FILES.items()
        }
        self.tileset = _load(root / "tileset.png")

    def palette(self, palette):
        """Return the hero sprite sheet for ``palette``."""
        return self.hero_palettes[HeroPalette(palette)]