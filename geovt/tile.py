"""Conversion of projected features into tile-local GeoJSON features."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional

from geovt.types import (
    BBox,
    FeatureId,
    GeometryKind,
    VtFeature,
    VtGeometry,
    VtLinearRing,
    VtLineString,
    VtPoint,
)


@dataclass
class Tile:
    """A finished tile: GeoJSON features in tile coordinates plus point counts."""

    features: list[dict] = field(default_factory=list)
    num_points: int = 0
    num_simplified: int = 0


def empty_tile() -> Tile:
    """Return a tile with no features."""
    return Tile()


def _round_half_away(value: float) -> float:
    if not math.isfinite(value):
        return value
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(float(whole), value)


def _metric_value(value: float) -> Any:
    if math.isfinite(value) and value.is_integer():
        return int(value)
    return value


class InternalTile:
    """A tile being built from projected features, with its source data and bbox."""

    def __init__(
        self,
        source: list[VtFeature],
        z: int,
        x: int,
        y: int,
        extent: int,
        tolerance: float,
        line_metrics: bool,
    ) -> None:
        self.extent = extent
        self.z = z
        self.x = x
        self.y = y
        self.z2 = float(2**z)
        self.tolerance = tolerance
        self.sq_tolerance = tolerance * tolerance
        self.line_metrics = line_metrics
        self.source_features: list[VtFeature] = []
        self.bbox = BBox()
        self.tile = Tile()

        for feature in source:
            self.tile.num_points += feature.num_points
            props = dict(feature.properties) if feature.properties else None
            self._add_geometry(feature.geometry, props, feature.id)

            self.bbox.min.x = min(feature.bbox.min.x, self.bbox.min.x)
            self.bbox.min.y = min(feature.bbox.min.y, self.bbox.min.y)
            self.bbox.max.x = max(feature.bbox.max.x, self.bbox.max.x)
            self.bbox.max.y = max(feature.bbox.max.y, self.bbox.max.y)

    def __repr__(self) -> str:
        return (
            f"InternalTile(z={self.z}, x={self.x}, y={self.y}, "
            f"features={len(self.tile.features)})"
        )

    def _push(
        self,
        kind: str,
        coordinates: Any,
        props: Optional[dict],
        feature_id: Optional[FeatureId],
    ) -> None:
        feature: dict[str, Any] = {
            "type": "Feature",
            "geometry": {"type": kind, "coordinates": coordinates},
            "properties": dict(props) if props is not None else None,
        }
        if feature_id is not None:
            feature["id"] = feature_id
        self.tile.features.append(feature)

    def _add_geometry(
        self, geometry: VtGeometry, props: Optional[dict], feature_id: Optional[FeatureId]
    ) -> None:
        kind, value = geometry.kind, geometry.value
        match kind:
            case GeometryKind.EMPTY:
                raise ValueError("cannot add an empty geometry to a tile")
            case GeometryKind.POINT:
                self._push("Point", self._transform_point(value), props, feature_id)
            case GeometryKind.MULTI_POINT:
                points = [self._transform_point(p) for p in value]
                self._push_single_or_multi("Point", "MultiPoint", points, props, feature_id)
            case GeometryKind.LINE_STRING:
                self._add_line_string(value, props, feature_id)
            case GeometryKind.MULTI_LINE_STRING:
                lines = [
                    self._transform_line_string(line)
                    for line in value
                    if line.dist > self.tolerance
                ]
                self._push_single_or_multi(
                    "LineString", "MultiLineString", lines, props, feature_id
                )
            case GeometryKind.POLYGON:
                polygon = self._transform_polygon(value)
                if polygon:
                    self._push("Polygon", polygon, props, feature_id)
            case GeometryKind.MULTI_POLYGON:
                polygons = [p for p in map(self._transform_polygon, value) if p]
                self._push_single_or_multi(
                    "Polygon", "MultiPolygon", polygons, props, feature_id
                )
            case GeometryKind.GEOMETRY_COLLECTION:
                for child in value:
                    self._add_geometry(child, props, feature_id)
            case _:
                raise ValueError(f"unknown geometry kind: {kind!r}")

    def _push_single_or_multi(
        self,
        single: str,
        multi: str,
        parts: list,
        props: Optional[dict],
        feature_id: Optional[FeatureId],
    ) -> None:
        if len(parts) == 1:
            self._push(single, parts[0], props, feature_id)
        elif parts:
            self._push(multi, parts, props, feature_id)

    def _add_line_string(
        self, line: VtLineString, props: Optional[dict], feature_id: Optional[FeatureId]
    ) -> None:
        coordinates = self._transform_line_string(line)
        if not coordinates:
            return
        if self.line_metrics:
            props = dict(props or {})
            props["mapbox_clip_start"] = _metric_value(line.seg_start / line.dist)
            props["mapbox_clip_end"] = _metric_value(line.seg_end / line.dist)
        self._push("LineString", coordinates, props, feature_id)

    def _transform_point(self, p: VtPoint) -> list[float]:
        self.tile.num_simplified += 1
        return [
            _round_half_away((p.x * self.z2 - self.x) * self.extent),
            _round_half_away((p.y * self.z2 - self.y) * self.extent),
        ]

    def _transform_line_string(self, line: VtLineString) -> list[list[float]]:
        if line.dist <= self.tolerance:
            return []
        return [self._transform_point(p) for p in line.elements if p.z > self.sq_tolerance]

    def _transform_linear_ring(self, ring: VtLinearRing) -> list[list[float]]:
        if ring.area <= self.sq_tolerance:
            return []
        return [self._transform_point(p) for p in ring.elements if p.z > self.sq_tolerance]

    def _transform_polygon(self, rings: list[VtLinearRing]) -> list[list[list[float]]]:
        return [
            self._transform_linear_ring(ring)
            for ring in rings
            if ring.area > self.sq_tolerance
        ]