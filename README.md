# geovt

Slice GeoJSON into vector tiles on the fly.

`geovt` takes GeoJSON data (a geometry, a feature or a feature collection)
given as plain Python dictionaries, such as those returned by `json.load`.
It projects the data to Web Mercator, simplifies it, and cuts it into a
pyramid of tiles with integer tile coordinates. Each tile comes back as a
list of GeoJSON feature dictionaries.

It depends only on the standard library.

## Installation

```
pip install geovt
```

## Building a tile index

```python
import json

from geovt.index import GeoJSONVT, Options, TileOptions

with open("states.geojson") as fh:
    data = json.load(fh)

index = GeoJSONVT(data, Options(max_zoom=14, tile=TileOptions(extent=4096, buffer=64)))

tile = index.get_tile(7, 37, 48)
print(tile.num_points, tile.num_simplified)
for feature in tile.features:
    print(feature["geometry"]["type"], feature["properties"], feature.get("id"))
```

When the index is built it tiles the data eagerly. A tile stops being split
when it reaches `index_max_zoom` or when it holds no more than
`index_max_points` points. When a deeper tile is requested, the index splits
it lazily from the nearest parent that still keeps its source geometry.

`get_tile` behaves as follows:

- Tile x coordinates wrap around the antimeridian.
- A zoom above `max_zoom` raises `ValueError`, and so do negative z or y.
- A tile with no data in it comes back as an empty `Tile`.

Each feature in `Tile.features` has the keys `"type"`, `"geometry"` and
`"properties"`. It has an `"id"` key when the feature has an id. Coordinates
are whole numbers in tile units, from `0` to `extent`, plus the buffer.

`index.total()` gives the number of tiles generated so far, and
`index.stats()` gives the count per zoom level. `index.internal_tiles()`
returns the `InternalTile` objects themselves, keyed by `to_id(z, x, y)`.

## Options

`TileOptions`:

| field          | default | meaning                                               |
|----------------|---------|-------------------------------------------------------|
| `tolerance`    | `3.0`   | simplification tolerance; higher means simpler        |
| `extent`       | `4096`  | tile extent in tile units                             |
| `buffer`       | `64`    | buffer around each tile, in tile units                |
| `line_metrics` | `False` | add `mapbox_clip_start` / `mapbox_clip_end` to lines  |

`Options`:

| field              | default  | meaning                                        |
|--------------------|----------|------------------------------------------------|
| `max_zoom`         | `18`     | deepest zoom that can be requested             |
| `index_max_zoom`   | `5`      | deepest zoom tiled up front                    |
| `index_max_points` | `100000` | stop tiling up front at or below this many points |
| `generate_id`      | `False`  | number features 0, 1, 2 … replacing their ids  |
| `tile`             | defaults | a `TileOptions`                                |

## A single tile without an index

```python
from geovt.index import TileOptions, geojson_to_tile

tile = geojson_to_tile(data, 12, 1171, 1566, TileOptions(), wrap=False, clip=True)
```

With `clip=True`, or with line metrics turned on, the features are clipped
to the tile and its buffer. With `wrap=True` they are first wrapped across
the antimeridian.

## Lower-level pieces

The building blocks can also be used on their own:

- `geovt.convert` projects GeoJSON into the geometry types of `geovt.types`. `as_feature_collection` and `convert` do this for whole documents.
- `geovt.simplify` computes Douglas–Peucker importance values.
- `geovt.clip` clips features between two axis-parallel lines.
- `geovt.wrap` wraps features across the world edges.
- `geovt.tile` turns projected features into tile coordinates.

## What it does not do

`geovt` produces tiles as Python dictionaries only. It does not:

- encode tiles into a binary vector tile format;
- serve tiles over the network;
- store tiles on disk;
- provide a command-line program.