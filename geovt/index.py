"""Tile index over a GeoJSON document, built on demand down to a maximum zoom."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from geovt.clip import clip as clip_features
from geovt.convert import as_feature_collection, convert
from geovt.tile import InternalTile, Tile, empty_tile
from geovt.types import VtFeature
from geovt.wrap import wrap as wrap_features


@dataclass
class TileOptions:
    """Options that shape the contents of a single tile."""

    tolerance: float = 3.0  # simplification tolerance (higher means simpler)
    extent: int = 4096  # tile extent
    buffer: int = 64  # tile buffer on each side
    line_metrics: bool = False  # track clip positions along lines


@dataclass
class Options:
    """Options for a tile index."""

    max_zoom: int = 18  # max zoom to preserve detail on
    index_max_zoom: int = 5  # max zoom in the initial tile index
    index_max_points: int = 100000  # max points per tile in the initial index
    generate_id: bool = False  # number features in order, overriding their ids
    tile: TileOptions = field(default_factory=TileOptions)


def to_id(z: int, x: int, y: int) -> int:
    """Unique key of the tile at zoom z and position x, y."""
    return (((1 << z) * y + x) * 32) + z


def geojson_to_tile(
    geojson: Mapping[str, Any],
    z: int,
    x: int,
    y: int,
    options: Optional[TileOptions] = None,
    wrap: bool = False,
    clip: bool = False,
) -> Tile:
    """Build one tile straight from a GeoJSON document, without an index."""
    if options is None:
        options = TileOptions()
    collection = as_feature_collection(geojson)
    z2 = 1 << z
    tolerance = (options.tolerance / options.extent) / z2
    features = convert(collection, tolerance, False)

    if wrap:
        features = wrap_features(features, options.buffer / options.extent, options.line_metrics)

    if clip or options.line_metrics:
        p = options.buffer / options.extent
        left = clip_features(
            features, (x - p) / z2, (x + 1.0 + p) / z2, -1.0, 2.0, options.line_metrics, 0
        )
        features = clip_features(
            left, (y - p) / z2, (y + 1.0 + p) / z2, -1.0, 2.0, options.line_metrics, 1
        )

    return InternalTile(
        features, z, x, y, options.extent, tolerance, options.line_metrics
    ).tile


class GeoJSONVT:
    """Slices a GeoJSON document into tiles, splitting further as tiles are requested."""

    def __init__(self, geojson: Mapping[str, Any], options: Optional[Options] = None) -> None:
        self.options = options if options is not None else Options()
        self._stats: dict[int, int] = {}
        self._total = 0
        self._tiles: dict[int, InternalTile] = {}

        tile_options = self.options.tile
        collection = as_feature_collection(geojson)
        z2 = 1 << self.options.max_zoom
        converted = convert(
            collection,
            (tile_options.tolerance / tile_options.extent) / z2,
            self.options.generate_id,
        )
        features = wrap_features(
            converted, tile_options.buffer / tile_options.extent, tile_options.line_metrics
        )
        self._split_tile(features, 0, 0, 0, 0, 0, 0)

    def get_tile(self, z: int, x: int, y: int) -> Tile:
        """Return the tile at z/x/y, wrapping x around the world."""
        if z > self.options.max_zoom:
            raise ValueError(f"Requested zoom higher than maxZoom: {z}")
        if z < 0 or y < 0:
            raise ValueError(f"invalid tile coordinates: {z}/{x}/{y}")

        x %= 1 << z
        tile_id = to_id(z, x, y)

        existing = self._tiles.get(tile_id)
        if existing is not None:
            return existing.tile

        parent = self._find_parent(z, x, y)
        if parent is None:
            raise LookupError(f"parent tile not found for {z}/{x}/{y}")

        # drill down from the closest ancestor that still holds its source geometry
        self._split_tile(parent.source_features, parent.z, parent.x, parent.y, z, x, y)

        existing = self._tiles.get(tile_id)
        if existing is not None:
            return existing.tile
        return empty_tile()

    def internal_tiles(self) -> dict[int, InternalTile]:
        """All tiles built so far, keyed by their tile id."""
        return dict(self._tiles)

    def stats(self) -> dict[int, int]:
        """Number of tiles built so far at each zoom level."""
        return dict(self._stats)

    def total(self) -> int:
        """Total number of tiles built so far."""
        return self._total

    def _find_parent(self, z: int, x: int, y: int) -> Optional[InternalTile]:
        while z > 0:
            z -= 1
            x >>= 1
            y >>= 1
            parent = self._tiles.get(to_id(z, x, y))
            if parent is not None:
                return parent
        return None

    def _split_tile(
        self,
        features: list[VtFeature],
        z: int,
        x: int,
        y: int,
        cz: int,
        cx: int,
        cy: int,
    ) -> None:
        options = self.options
        tile_options = options.tile
        z2 = float(1 << z)
        tile_id = to_id(z, x, y)

        tile = self._tiles.get(tile_id)
        if tile is None:
            if z == options.max_zoom:
                tolerance = 0.0
            else:
                tolerance = tile_options.tolerance / (z2 * tile_options.extent)
            tile = InternalTile(
                features,
                z,
                x,
                y,
                tile_options.extent,
                tolerance,
                tile_options.line_metrics,
            )
            self._tiles[tile_id] = tile
            self._stats[z] = self._stats.get(z, 0) + 1
            self._total += 1

        if not features:
            return

        if cz == 0:
            # first-pass tiling: stop at the index zoom or when the tile is simple enough
            if z == options.index_max_zoom or tile.tile.num_points <= options.index_max_points:
                tile.source_features = features
                return
        else:
            # drilling down to a specific tile
            if z == options.max_zoom:
                return
            if z == cz:
                tile.source_features = features
                return
            shift = cz - z
            if x != cx >> shift or y != cy >> shift:
                tile.source_features = features
                return

        p = 0.5 * tile_options.buffer / tile_options.extent
        low, high = tile.bbox.min, tile.bbox.max
        metrics = tile_options.line_metrics

        def quarter(band: list[VtFeature], k1: float, k2: float) -> list[VtFeature]:
            return clip_features(band, k1 / z2, k2 / z2, low.y, high.y, metrics, 1)

        left = clip_features(features, (x - p) / z2, (x + 0.5 + p) / z2, low.x, high.x, metrics, 0)
        self._split_tile(
            quarter(left, y - p, y + 0.5 + p), z + 1, x * 2, y * 2, cz, cx, cy
        )
        self._split_tile(
            quarter(left, y + 0.5 - p, y + 1.0 + p), z + 1, x * 2, y * 2 + 1, cz, cx, cy
        )

        right = clip_features(
            features, (x + 0.5 - p) / z2, (x + 1.0 + p) / z2, low.x, high.x, metrics, 0
        )
        self._split_tile(
            quarter(right, y - p, y + 0.5 + p), z + 1, x * 2 + 1, y * 2, cz, cx, cy
        )
        self._split_tile(
            quarter(right, y + 0.5 - p, y + 1.0 + p), z + 1, x * 2 + 1, y * 2 + 1, cz, cx, cy
        )

        # the children hold the geometry now
        tile.source_features = []