import pygame
import pytest

from awakenhero.collision import CollisionLayer, CollisionWorld
from awakenhero.config import TILE_SIZE
from awakenhero.entity import EntityRegistry, EntityType
from awakenhero.geometry import Rect, Vec2
from awakenhero.props import (
    Chest,
    ChestLoot,
    Door,
    DoorType,
    Fence,
    FenceType,
    Inventory,
    Owl,
    Pot,
)

RED = (255, 0, 0)
BLUE = (0, 0, 255)
BLACK = (0, 0, 0)


@pytest.fixture
def world():
    return CollisionWorld()


@pytest.fixture
def registry():
    return EntityRegistry()


def _tileset(colored):
    surface = pygame.Surface((8 * TILE_SIZE, 8 * TILE_SIZE))
    for (tx, ty), color in colored.items():
        surface.fill(color, pygame.Rect(tx * TILE_SIZE, ty * TILE_SIZE, TILE_SIZE, TILE_SIZE))
    return surface


def _pixel(surface, x, y):
    return tuple(surface.get_at((x, y)))[:3]


def test_chest_registers_and_collides(world, registry):
    chest = Chest(world, registry, 32, 48, ChestLoot.KEY)
    assert chest.id.type == EntityType.CHEST
    assert registry.lookup(chest.id) is chest
    collider = world.get(chest.collider)
    assert collider.area == Rect(32, 48, TILE_SIZE, TILE_SIZE)
    assert collider.layer == CollisionLayer.CHEST
    assert collider.parent == chest.id


def test_chest_key_loot_once(world, registry):
    chest = Chest(world, registry, 0, 0, ChestLoot.KEY)
    inventory = Inventory()
    assert chest.interact(inventory) is ChestLoot.KEY
    assert inventory.keys == 1
    assert chest.interact(inventory) is None
    assert inventory.keys == 1
    assert chest.is_opened


def test_chest_boss_key(world, registry):
    chest = Chest(world, registry, 0, 0, ChestLoot.BOSSKEY)
    inventory = Inventory()
    chest.interact(inventory)
    assert inventory == Inventory(keys=0, boss_key=True)


def test_chest_render_changes_when_opened(world, registry):
    tileset = _tileset({(0, 5): RED, (1, 5): BLUE})
    chest = Chest(world, registry, 0, 0)
    surface = pygame.Surface((TILE_SIZE, TILE_SIZE))
    chest.render(surface, tileset)
    assert _pixel(surface, 8, 8) == RED
    chest.interact(Inventory())
    chest.render(surface, tileset)
    assert _pixel(surface, 8, 8) == BLUE


def test_render_applies_offset(world, registry):
    tileset = _tileset({(1, 6): RED})
    pot = Pot(world, registry, 100, 100)
    surface = pygame.Surface((TILE_SIZE, TILE_SIZE))
    pot.render(surface, tileset, Vec2(100, 100))
    assert _pixel(surface, 0, 0) == RED


def test_destroy_unregisters(world, registry):
    pot = Pot(world, registry, 0, 0)
    pot.destroy()
    assert registry.lookup(pot.id) is None
    assert not world.get(pot.collider).alive


@pytest.mark.parametrize("door_type", [DoorType.KEY, DoorType.KEYBLOCK])
def test_key_door_needs_a_key(world, registry, door_type):
    door = Door(world, registry, 0, 0, door_type)
    inventory = Inventory()
    assert door.interact(inventory) is False
    assert not door.is_open
    inventory.keys = 2
    assert door.interact(inventory) is True
    assert inventory.keys == 1
    assert door.is_open
    assert not world.get(door.collider).enabled
    assert door.interact(inventory) is False
    assert inventory.keys == 1


def test_boss_door_needs_boss_key(world, registry):
    door = Door(world, registry, 0, 0, DoorType.BOSS)
    assert door.interact(Inventory(keys=3)) is False
    assert door.interact(Inventory(boss_key=True)) is True
    assert door.is_open


@pytest.mark.parametrize(
    "door_type", [DoorType.MONSTER, DoorType.ONEWAY, DoorType.ONEWAY_EXIT]
)
def test_other_doors_stay_shut(world, registry, door_type):
    door = Door(world, registry, 0, 0, door_type)
    inventory = Inventory(keys=1, boss_key=True)
    assert door.interact(inventory) is False
    assert inventory == Inventory(keys=1, boss_key=True)
    assert world.get(door.collider).enabled


def test_set_open_toggles_collider(world, registry):
    door = Door(world, registry, 0, 0, DoorType.MONSTER)
    door.set_open(True)
    assert not world.get(door.collider).enabled
    door.set_open(False)
    assert world.get(door.collider).enabled and not door.is_open


def test_open_door_is_not_drawn(world, registry):
    tileset = _tileset({(1, 4): RED})
    door = Door(world, registry, 0, 0, DoorType.KEY)
    surface = pygame.Surface((TILE_SIZE, TILE_SIZE))
    door.render(surface, tileset)
    assert _pixel(surface, 8, 8) == RED
    door.set_open(True)
    cleared = pygame.Surface((TILE_SIZE, TILE_SIZE))
    door.render(cleared, tileset)
    assert _pixel(cleared, 8, 8) == BLACK


def test_fence_collider_covers_part_of_tile(world, registry):
    fence = Fence(world, registry, FenceType.T, 32, 48)
    assert world.get(fence.collider).area == Rect(32, 48, 16, 8)
    assert fence.position == Rect(32, 48, TILE_SIZE, TILE_SIZE)
    assert world.get(fence.collider).layer == CollisionLayer.FENCE


def test_fence_blocks_only_its_part(world, registry):
    Fence(world, registry, FenceType.B, 0, 0)
    walker = world.create(None, Rect(0, -20, 4, 4), CollisionLayer.PLAYER)
    assert world.move(walker, Vec2(0, 22)) == Vec2(0, 2)
    assert world.move(walker, Vec2(0, 6)) == Vec2(0, 2)


def test_owl_message(world, registry):
    owl = Owl(world, registry, 0, 0)
    assert owl.interact() == "It's dangerous to go alone."
    owl.message = "Beware."
    assert owl.interact() == "Beware."


def test_unknown_door_type_raises(world, registry):
    with pytest.raises(ValueError):
        Door(world, registry, 0, 0, len(DoorType))