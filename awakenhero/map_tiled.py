"""Building a game map from a map exported by the Tiled editor."""

import logging
from enum import IntEnum

from .config import TILE_SIZE
from .gamemap import Map, MapCapacityError
from .jsonlite import load_file, loads
from .props import Chest, ChestLoot, Door, DoorType, Fence, FenceType, Owl, Pot
from .tile import Tile, TileFlag

_log = logging.getLogger(__name__)


class TileObject(IntEnum):
    """Objects that a tile in a tile layer stands for."""

    NONE = 0
    SPAWN = 1
    FENCE_TL = 2
    FENCE_TR = 3
    FENCE_BL = 4
    FENCE_BR = 5
    FENCE_L = 6
    FENCE_R = 7
    FENCE_T = 8
    FENCE_B = 9
    POT = 10
    CHEST = 11
    OWL = 12
    KEYDOOR = 13
    DOOR_MONSTER = 14
    DOOR_KEY = 15
    DOOR_BOSS = 16
    DOOR_ONEWAY = 17
    DOOR_ONEWAY_EXIT = 18
    DOOR_KEYBLOCK = 19


_TILED_FLIP_H = 0x80000000
_TILED_FLIP_V = 0x40000000
_TILED_FLIP_D = 0x20000000
_TILED_HEXA_ROTATED = 0x10000000
_TILED_GUID_PART = ~(_TILED_FLIP_H | _TILED_FLIP_V | _TILED_FLIP_D | _TILED_HEXA_ROTATED) & 0xFFFFFFFF

_TILED_TO_TILE = {
    0: Tile.WALL_TL,
    1: Tile.WALL_T,
    2: Tile.WALL_TR,
    10: Tile.WALL_L,
    11: Tile.FLOOR,
    12: Tile.WALL_R,
    20: Tile.WALL_BL,
    21: Tile.WALL_B,
    22: Tile.WALL_BR,
    3: Tile.WALL_CORNER_TL,
    4: Tile.WALL_CORNER_TR,
    13: Tile.WALL_CORNER_BL,
    14: Tile.WALL_CORNER_BR,
    24: Tile.CEIL,
    31: Tile.FLOOR_ALT,
    32: Tile.FLOOR_STAIR,
    63: Tile.BLOCK,
    62: Tile.STATUE,
    5: Tile.HOLE,
    15: Tile.HOLE_B,
    25: Tile.HOLE_T,
    35: Tile.HOLE_TB,
    6: Tile.CAULDRON,
    7: Tile.CAULDRON,
    8: Tile.CAULDRON,
    9: Tile.CAULDRON,
    16: Tile.TORCH,
    17: Tile.TORCH,
    18: Tile.TORCH,
    19: Tile.TORCH,
}

_TILED_TO_TILEOBJECT = {
    33: TileObject.SPAWN,
    44: TileObject.FENCE_TL,
    45: TileObject.FENCE_TR,
    54: TileObject.FENCE_BL,
    55: TileObject.FENCE_BR,
    46: TileObject.FENCE_L,
    47: TileObject.FENCE_R,
    56: TileObject.FENCE_T,
    57: TileObject.FENCE_B,
    61: TileObject.POT,
    50: TileObject.CHEST,
    34: TileObject.OWL,
    40: TileObject.DOOR_MONSTER,
    41: TileObject.DOOR_KEY,
    42: TileObject.DOOR_BOSS,
    53: TileObject.DOOR_ONEWAY,
    43: TileObject.DOOR_ONEWAY_EXIT,
    52: TileObject.DOOR_KEYBLOCK,
}

_FENCE_OBJECTS = range(TileObject.FENCE_TL, TileObject.FENCE_B + 1)
_DOOR_OBJECTS = range(TileObject.DOOR_MONSTER, TileObject.DOOR_KEYBLOCK + 1)

_LOOT_NAMES = {
    "NOTHING": ChestLoot.NOTHING,
    "RANDOM": ChestLoot.RANDOM,
    "KEY": ChestLoot.KEY,
    "KEY_BOSS": ChestLoot.BOSSKEY,
}


def _member(obj, key):
    if not isinstance(obj, dict):
        raise ValueError(f"expected an object holding {key!r}, got {type(obj).__name__}")
    if key not in obj:
        raise ValueError(f"missing member {key!r}")
    return obj[key]


def _number(obj, key):
    value = _member(obj, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"member {key!r} must be a number")
    return value


def _string(obj, key):
    value = _member(obj, key)
    if not isinstance(value, str):
        raise ValueError(f"member {key!r} must be a string")
    return value


def _array(obj, key):
    value = _member(obj, key)
    if not isinstance(value, list):
        raise ValueError(f"member {key!r} must be an array")
    return value


def _as_string(value, what):
    if not isinstance(value, str):
        raise ValueError(f"{what} must be a string")
    return value


def _find_property(properties, name):
    if properties is None:
        return None
    if not isinstance(properties, list):
        raise ValueError("properties must be an array")
    for prop in properties:
        if _string(prop, "name") == name:
            return prop.get("value")
    return None


def _place(game_map, entity):
    try:
        return game_map.add(entity)
    except MapCapacityError:
        entity.destroy()
        raise


def _create_tile_object(game_map, world, registry, x, y, tile_object, flipflags):
    px, py = x * TILE_SIZE, y * TILE_SIZE
    if tile_object is TileObject.SPAWN:
        game_map.spawn_x = x
        game_map.spawn_y = y
    elif tile_object in _FENCE_OBJECTS:
        fence_type = FenceType(tile_object - TileObject.FENCE_TL)
        _place(game_map, Fence(world, registry, fence_type, px, py))
    elif tile_object is TileObject.POT:
        _place(game_map, Pot(world, registry, px, py))
    elif tile_object is TileObject.CHEST:
        _place(game_map, Chest(world, registry, px, py, ChestLoot.NOTHING))
    elif tile_object is TileObject.OWL:
        _place(game_map, Owl(world, registry, px, py))
    elif tile_object in _DOOR_OBJECTS:
        door_type = DoorType(tile_object - TileObject.DOOR_MONSTER)
        _place(game_map, Door(world, registry, px, py, door_type, flipflags))
    else:
        raise ValueError(f"tile object {tile_object.name} is not supported")


def _read_tilelayer(game_map, world, registry, layer, width):
    for index, raw in enumerate(_array(layer, "data")):
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ValueError("tile layer data must hold numbers")
        y, x = divmod(index, width)
        guid = int(raw) & 0xFFFFFFFF
        flip_h = bool(guid & _TILED_FLIP_H)
        flip_v = bool(guid & _TILED_FLIP_V)
        flip_d = bool(guid & _TILED_FLIP_D)
        guid &= _TILED_GUID_PART
        if guid == 0:
            continue
        guid -= 1
        # A diagonal flip is a rotation combined with a horizontal flip.
        if flip_d:
            flip_h = not flip_h
        flipflags = TileFlag(0)
        if flip_h:
            flipflags |= TileFlag.FLIP_H
        if flip_v:
            flipflags |= TileFlag.FLIP_V
        if flip_d:
            flipflags |= TileFlag.ROTATED

        tile = _TILED_TO_TILE.get(guid, Tile.NONE)
        if tile is not Tile.NONE:
            game_map.set_tile(x, y, tile, flipflags)
        tile_object = _TILED_TO_TILEOBJECT.get(guid, TileObject.NONE)
        if tile_object is not TileObject.NONE:
            _create_tile_object(game_map, world, registry, x, y, tile_object, flipflags)


def _object_owl(game_map, world, registry, x, y, properties):
    owl = Owl(world, registry, x, y)
    message = _find_property(properties, "message")
    if message is not None:
        owl.message = _as_string(message, "owl message")
    _place(game_map, owl)


def _object_chest(game_map, world, registry, x, y, properties):
    loot = ChestLoot.NOTHING
    name = _find_property(properties, "loot")
    if name is not None:
        loot = _LOOT_NAMES.get(_as_string(name, "chest loot"), ChestLoot.NOTHING)
    _place(game_map, Chest(world, registry, x, y, loot))


def _read_objectgroup(game_map, world, registry, layer):
    for obj in _array(layer, "objects"):
        template = _string(obj, "template")
        # Tiled anchors objects at their bottom-left corner.
        x = _number(obj, "x")
        y = _number(obj, "y") - TILE_SIZE
        properties = obj.get("properties")
        game_map.room_at(int(x / TILE_SIZE), int(y / TILE_SIZE))
        if template == "owl.tx":
            _object_owl(game_map, world, registry, int(x), int(y), properties)
        elif template == "chest.tx":
            _object_chest(game_map, world, registry, int(x), int(y), properties)
        else:
            _log.info("Unknown template '%s'", template)


def parse_map(data, world, registry):
    """Build a Map from a parsed Tiled document (or its JSON text)."""
    if isinstance(data, (str, bytes, bytearray)):
        data = loads(data)
    width = int(_number(data, "width"))
    if width <= 0:
        raise ValueError(f"map width must be positive, got {width}")
    game_map = Map()
    for layer in _array(data, "layers"):
        layer_type = _string(layer, "type")
        if layer_type == "tilelayer":
            _read_tilelayer(game_map, world, registry, layer, width)
        elif layer_type == "objectgroup":
            _read_objectgroup(game_map, world, registry, layer)
    return game_map


def load_map(path, world, registry):
    """Read the Tiled JSON file at ``path`` and build a Map from it."""
    return parse_map(load_file(path), world, registry)