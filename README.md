# awakenhero

A small top-down dungeon adventure. The hero walks through rooms laid out in a
map made with the Tiled editor. Along the way the hero opens chests, picks up
keys, unlocks doors and talks to owls. Several players can share one dungeon
through a small UDP relay server.

## Installing

```
pip install .
```

The game needs pygame. To run the tests, install the `test` extra instead:

```
pip install ".[test]"
pytest
```

## Playing

Start the game with:

```
awakenhero
```

It looks for its images and its map in an `assets` directory: the hero
sprites, the sword, the tileset and `maps/debug.json`.

| Key    | Action                              |
|--------|-------------------------------------|
| Arrows | Walk                                |
| X      | Swing the sword                     |
| C      | Use: open a chest or talk to an owl |

Walking into a key door uses a key from the inventory. A boss door opens only
when the hero carries the boss key.

## Multiplayer

Start the relay server in one terminal:

```
awakenhero --server
```

Then start the game in other terminals with `awakenhero`. The server listens
on UDP port 3000. It gives every player an id and passes their positions and
sword swings on to the other players. Each player gets a hero colour chosen
from their id.

## As a library

The pieces can also be used on their own:

- `awakenhero.jsonlite` loads the small subset of JSON that the map files use.
- `awakenhero.map_tiled` builds a `Map` from Tiled data: `parse_map` takes
  already-parsed data and `load_map` takes a file path.
- `awakenhero.collision.CollisionWorld` moves rectangles against the tile map
  and against each other, and casts rays that stop at colliders.
- `awakenhero.message.Message` encodes and decodes the network messages.