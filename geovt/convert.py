"""Projection of GeoJSON geometries into the unit Web Mercator square."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from itertools import pairwise
from typing import Any

from geovt.simplify import simplify_wrapper
from geovt.types import (
    GeometryKind,
    VtFeature,
    VtGeometry,
    VtLinearRing,
    VtLineString,
    VtPoint,
    make_feature,
)

GEOMETRY_TYPES = frozenset(
    {
        "Point",
        "MultiPoint",
        "LineString",
        "MultiLineString",
        "Polygon",
        "MultiPolygon",
        "GeometryCollection",
    }
)


@dataclass(frozen=True)
class Projector:
    """Projects longitude/latitude coordinates and simplifies lines and rings."""

    tolerance: float

    def project_point(self, p: Sequence[float]) -> VtPoint:
        lon, lat = p[0], p[1]
        sine = math.sin(lat * math.pi / 180.0)
        x = lon / 360.0 + 0.5
        if sine >= 1.0:
            y = 0.0
        elif sine <= -1.0:
            y = 1.0
        else:
            y = 0.5 - 0.25 * math.log((1.0 + sine) / (1.0 - sine)) / math.pi
            y = max(min(y, 1.0), 0.0)
        return VtPoint(x, y, 0.0)

    def project_line_string(self, points: Sequence[Sequence[float]]) -> VtLineString:
        result = VtLineString()
        if not points:
            return result

        result.elements = [self.project_point(p) for p in points]
        dist = 0.0
        for a, b in pairwise(result.elements):
            dist += math.hypot(b.x - a.x, b.y - a.y)
        result.dist = dist

        simplify_wrapper(result.elements, self.tolerance)
        result.seg_start = 0.0
        result.seg_end = result.dist
        return result

    def project_linear_ring(self, ring: Sequence[Sequence[float]]) -> VtLinearRing:
        result = VtLinearRing()
        if not ring:
            return result

        result.elements = [self.project_point(p) for p in ring]
        area = 0.0
        for a, b in pairwise(result.elements):
            area += a.x * b.y - b.x * a.y
        result.area = abs(area / 2.0)

        simplify_wrapper(result.elements, self.tolerance)
        return result

    def project_polygon(self, rings: Sequence[Sequence[Sequence[float]]]) -> list[VtLinearRing]:
        return [self.project_linear_ring(ring) for ring in rings]

    def project_geometry(self, geometry: Mapping[str, Any]) -> VtGeometry:
        match geometry.get("type"):
            case "Point":
                return VtGeometry(GeometryKind.POINT, self.project_point(geometry["coordinates"]))
            case "MultiPoint":
                return VtGeometry(
                    GeometryKind.MULTI_POINT,
                    [self.project_point(p) for p in geometry["coordinates"]],
                )
            case "LineString":
                return VtGeometry(
                    GeometryKind.LINE_STRING, self.project_line_string(geometry["coordinates"])
                )
            case "MultiLineString":
                return VtGeometry(
                    GeometryKind.MULTI_LINE_STRING,
                    [self.project_line_string(line) for line in geometry["coordinates"]],
                )
            case "Polygon":
                return VtGeometry(GeometryKind.POLYGON, self.project_polygon(geometry["coordinates"]))
            case "MultiPolygon":
                return VtGeometry(
                    GeometryKind.MULTI_POLYGON,
                    [self.project_polygon(polygon) for polygon in geometry["coordinates"]],
                )
            case "GeometryCollection":
                return VtGeometry(
                    GeometryKind.GEOMETRY_COLLECTION,
                    [self.project_geometry(child) for child in geometry["geometries"]],
                )
            case other:
                raise ValueError(f"unknown geometry type: {other!r}")


def as_feature_collection(geojson: Mapping[str, Any]) -> dict:
    """Wrap a GeoJSON geometry, feature or feature collection as a collection."""
    kind = geojson.get("type")
    if kind == "FeatureCollection":
        return {"type": "FeatureCollection", "features": list(geojson.get("features", []))}
    if kind == "Feature":
        return {"type": "FeatureCollection", "features": [geojson]}
    if kind in GEOMETRY_TYPES:
        feature = {"type": "Feature", "geometry": geojson, "properties": None}
        return {"type": "FeatureCollection", "features": [feature]}
    raise ValueError(f"unknown GeoJSON type: {kind!r}")


def convert(features: Mapping[str, Any], tolerance: float, generate_id: bool) -> list[VtFeature]:
    """Project every feature of a collection, dropping those left without points."""
    projector = Projector(tolerance)
    projected = []
    for generated_id, feature in enumerate(features.get("features", [])):
        feature_id = generated_id if generate_id else feature.get("id")
        geometry = feature.get("geometry")
        if geometry is None:
            raise ValueError("feature has no geometry")
        properties = dict(feature.get("properties") or {})
        vt_feature = make_feature(projector.project_geometry(geometry), properties, feature_id)
        if vt_feature is not None:
            projected.append(vt_feature)
    return projected