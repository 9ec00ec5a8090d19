"""Slice GeoJSON into vector tiles: projection, simplification, clipping and tiling."""

__version__ = "0.1.1"
__all__ = ["clip", "convert", "index", "simplify", "tile", "types", "wrap"]