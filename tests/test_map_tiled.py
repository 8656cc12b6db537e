import json

import pytest

from awakenhero.collision import CollisionWorld
from awakenhero.config import MAP_WIDTH, ROOM_WIDTH, TILE_SIZE
from awakenhero.entity import EntityRegistry, EntityType
from awakenhero.gamemap import MapCapacityError
from awakenhero.map_tiled import TileObject, load_map, parse_map
from awakenhero.props import Chest, ChestLoot, Door, DoorType, Fence, FenceType, Owl, Pot
from awakenhero.tile import Tile, TileFlag

WIDTH = ROOM_WIDTH * MAP_WIDTH


@pytest.fixture
def world():
    return CollisionWorld()


@pytest.fixture
def registry():
    return EntityRegistry()


def _tile_layer(cells, rows=2):
    data = [0] * (WIDTH * rows)
    for (x, y), gid in cells.items():
        data[y * WIDTH + x] = gid
    return {"type": "tilelayer", "data": data}


def _document(*layers):
    return {"width": WIDTH, "height": 2, "layers": list(layers)}


def test_tile_ids_map_to_tiles(world, registry):
    game_map = parse_map(
        _document(_tile_layer({(0, 0): 12, (1, 0): 1, (2, 1): 64})), world, registry
    )
    assert game_map.get_tile(0, 0) is Tile.FLOOR
    assert game_map.get_tile(1, 0) is Tile.WALL_TL
    assert game_map.get_tile(2, 1) is Tile.BLOCK
    assert game_map.get_tile(3, 0) is Tile.NONE


def test_flip_flags_are_decoded(world, registry):
    cells = {(0, 0): 0x80000000 | 1, (1, 0): 0x40000000 | 1, (2, 0): 0x20000000 | 1}
    game_map = parse_map(_document(_tile_layer(cells)), world, registry)
    flags = game_map.rooms[0][0].flags
    assert flags[0] == TileFlag.FLIP_H
    assert flags[1] == TileFlag.FLIP_V
    assert flags[2] == TileFlag.FLIP_H | TileFlag.ROTATED
    assert game_map.get_tile(2, 0) is Tile.WALL_TL


def test_diagonal_and_horizontal_flip_cancel(world, registry):
    cells = {(0, 0): 0x80000000 | 0x20000000 | 1}
    game_map = parse_map(_document(_tile_layer(cells)), world, registry)
    assert game_map.rooms[0][0].flags[0] == TileFlag.ROTATED


def test_spawn_tile_sets_spawn(world, registry):
    game_map = parse_map(_document(_tile_layer({(5, 1): 34})), world, registry)
    assert (game_map.spawn_x, game_map.spawn_y) == (5, 1)
    assert list(game_map.objects()) == []


def test_tile_objects_are_created(world, registry):
    cells = {(0, 0): 45, (1, 0): 62, (2, 0): 51, (3, 0): 35, (4, 0): 0x80000000 | 42}
    game_map = parse_map(_document(_tile_layer(cells)), world, registry)
    objects = list(game_map.objects())
    fence = next(o for o in objects if isinstance(o, Fence))
    assert fence.type is FenceType.TL
    assert (fence.position.x, fence.position.y) == (0, 0)
    pot = next(o for o in objects if isinstance(o, Pot))
    assert pot.position.x == TILE_SIZE
    chest = next(o for o in objects if isinstance(o, Chest))
    assert chest.loot is ChestLoot.NOTHING
    owl = next(o for o in objects if isinstance(o, Owl))
    assert owl.position.x == 3 * TILE_SIZE
    door = next(o for o in objects if isinstance(o, Door))
    assert door.type is DoorType.KEY
    assert door.flipflags == TileFlag.FLIP_H
    assert len(world) == 5
    assert all(registry.lookup(o.id) is o for o in objects)


def test_unknown_tile_ids_are_ignored(world, registry):
    game_map = parse_map(_document(_tile_layer({(0, 0): 200})), world, registry)
    assert game_map.get_tile(0, 0) is Tile.NONE
    assert list(game_map.objects()) == []


def test_object_group_templates(world, registry):
    group = {
        "type": "objectgroup",
        "objects": [
            {
                "template": "owl.tx",
                "x": 32,
                "y": 48,
                "properties": [{"name": "message", "value": "Hello there."}],
            },
            {
                "template": "chest.tx",
                "x": 64,
                "y": 16,
                "properties": [{"name": "loot", "value": "KEY_BOSS"}],
            },
            {"template": "chest.tx", "x": 80, "y": 16},
            {"template": "statue.tx", "x": 0, "y": 16},
        ],
    }
    game_map = parse_map(_document(group), world, registry)
    owls = [o for o in game_map.objects() if isinstance(o, Owl)]
    chests = [o for o in game_map.objects() if isinstance(o, Chest)]
    assert len(owls) == 1
    assert owls[0].message == "Hello there."
    assert (owls[0].position.x, owls[0].position.y) == (32, 48 - TILE_SIZE)
    assert [c.loot for c in chests] == [ChestLoot.BOSSKEY, ChestLoot.NOTHING]


def test_unknown_loot_name_gives_nothing(world, registry):
    group = {
        "type": "objectgroup",
        "objects": [
            {
                "template": "chest.tx",
                "x": 0,
                "y": 16,
                "properties": [{"name": "loot", "value": "GOLD"}],
            }
        ],
    }
    game_map = parse_map(_document(group), world, registry)
    assert [c.loot for c in game_map.objects()] == [ChestLoot.NOTHING]


def test_object_outside_map_raises(world, registry):
    group = {"type": "objectgroup", "objects": [{"template": "owl.tx", "x": 100000, "y": 16}]}
    with pytest.raises(IndexError):
        parse_map(_document(group), world, registry)


def test_capacity_overflow_cleans_up(world, registry):
    cells = {(x, 0): 35 for x in range(EntityType.OWL.capacity + 1)}
    with pytest.raises(MapCapacityError):
        parse_map(_document(_tile_layer(cells)), world, registry)
    assert len(world) == EntityType.OWL.capacity
    assert len(registry) == EntityType.OWL.capacity


def test_missing_width_raises(world, registry):
    with pytest.raises(ValueError):
        parse_map({"layers": []}, world, registry)


def test_other_layer_types_are_ignored(world, registry):
    doc = _document({"type": "imagelayer", "image": "sky.png"})
    game_map = parse_map(doc, world, registry)
    assert list(game_map.objects()) == []
    assert game_map.get_tile(0, 0) is Tile.NONE


def test_parse_map_accepts_json_text(world, registry):
    text = json.dumps(_document(_tile_layer({(0, 0): 12})))
    game_map = parse_map(text, world, registry)
    assert game_map.get_tile(0, 0) is Tile.FLOOR


def test_load_map_from_file(tmp_path, world, registry):
    path = tmp_path / "level.json"
    path.write_text(json.dumps(_document(_tile_layer({(1, 1): 22, (0, 1): 34}))))
    game_map = load_map(path, world, registry)
    assert game_map.get_tile(1, 1) is Tile.WALL_BR
    assert (game_map.spawn_x, game_map.spawn_y) == (0, 1)


def test_fence_objects_line_up_with_fence_types():
    fences = [o for o in TileObject if o.name.startswith("FENCE_")]
    assert [FenceType[o.name[len("FENCE_"):]] for o in fences] == [
        FenceType(o - TileObject.FENCE_TL) for o in fences
    ]


def test_door_objects_line_up_with_door_types():
    doors = [o for o in TileObject if o.name.startswith("DOOR_")]
    assert [DoorType[o.name[len("DOOR_"):]] for o in doors] == [
        DoorType(o - TileObject.DOOR_MONSTER) for o in doors
    ]