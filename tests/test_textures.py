import pygame
import pytest

from awakenhero.config import SCREEN_HEIGHT, SCREEN_WIDTH
from awakenhero.textures import HeroPalette, Textures

FILES = {
    "link.png": (10, 4),
    "link_red.png": (11, 4),
    "link_blue.png": (12, 4),
    "link_purple.png": (13, 4),
    "sword.png": (14, 4),
    "tileset.png": (15, 4),
}


@pytest.fixture
def asset_dir(tmp_path):
    for name, size in FILES.items():
        pygame.image.save(pygame.Surface(size), str(tmp_path / name))
    return tmp_path


@pytest.mark.parametrize(
    "palette, name",
    [
        (HeroPalette.GREEN, "link.png"),
        (HeroPalette.RED, "link_red.png"),
        (HeroPalette.BLUE, "link_blue.png"),
        (HeroPalette.PURPLE, "link_purple.png"),
    ],
)
def test_palette_images(asset_dir, palette, name):
    textures = Textures(asset_dir)
    assert textures.palette(palette).get_size() == FILES[name]
    assert textures.palette(int(palette)).get_size() == FILES[name]


def test_other_images(asset_dir):
    textures = Textures(asset_dir)
    assert textures.hero.get_size() == FILES["link.png"]
    assert textures.sword.get_size() == FILES["sword.png"]
    assert textures.tileset.get_size() == FILES["tileset.png"]


def test_render_target_is_one_room(asset_dir):
    textures = Textures(asset_dir)
    assert textures.render_target.get_size() == (SCREEN_WIDTH, SCREEN_HEIGHT)


def test_missing_image_raises(asset_dir):
    (asset_dir / "sword.png").unlink()
    with pytest.raises(FileNotFoundError):
        Textures(asset_dir)


def test_unknown_palette_raises(asset_dir):
    textures = Textures(asset_dir)
    with pytest.raises(ValueError):
        textures.palette(len(HeroPalette))