"""Geometry and feature types used while slicing GeoJSON into tiles."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional, Union

FeatureId = Union[str, int, float]


@dataclass
class Point2D:
    """A plain two-dimensional point."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class BBox:
    """Axis-aligned bounding box."""

    min: Point2D = field(default_factory=Point2D)
    max: Point2D = field(default_factory=Point2D)


@dataclass
class VtPoint:
    """A projected point; ``z`` holds its simplification importance."""

    x: float
    y: float
    z: float = 0.0


@dataclass
class VtLineString:
    """A projected line with its length and, optionally, clip metrics."""

    elements: list[VtPoint] = field(default_factory=list)
    dist: float = 0.0
    seg_start: float = 0.0
    seg_end: float = 0.0


@dataclass
class VtLinearRing:
    """A projected polygon ring with its area."""

    elements: list[VtPoint] = field(default_factory=list)
    area: float = 0.0


class GeometryKind(enum.Enum):
    EMPTY = "Empty"
    POINT = "Point"
    MULTI_POINT = "MultiPoint"
    LINE_STRING = "LineString"
    MULTI_LINE_STRING = "MultiLineString"
    POLYGON = "Polygon"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"


@dataclass
class VtGeometry:
    """A projected geometry.

    ``value`` depends on ``kind``: ``None`` for EMPTY, a VtPoint, a list of
    VtPoint, a VtLineString, a list of VtLineString, a list of VtLinearRing,
    a list of such lists, or a list of VtGeometry.
    """

    kind: GeometryKind
    value: Any = None


@dataclass
class VtFeature:
    """A projected feature with its bounding box and point count."""

    geometry: VtGeometry
    properties: dict = field(default_factory=dict)
    id: Optional[FeatureId] = None
    bbox: BBox = field(default_factory=BBox)
    num_points: int = 0


def iter_points(geometry: VtGeometry) -> Iterator[VtPoint]:
    """Yield every point of a geometry, depth first, in storage order."""
    kind, value = geometry.kind, geometry.value
    if kind is GeometryKind.EMPTY:
        return
    if kind is GeometryKind.POINT:
        yield value
    elif kind is GeometryKind.MULTI_POINT:
        yield from value
    elif kind is GeometryKind.LINE_STRING:
        yield from value.elements
    elif kind in (GeometryKind.MULTI_LINE_STRING, GeometryKind.POLYGON):
        for part in value:
            yield from part.elements
    elif kind is GeometryKind.MULTI_POLYGON:
        for polygon in value:
            for ring in polygon:
                yield from ring.elements
    elif kind is GeometryKind.GEOMETRY_COLLECTION:
        for child in value:
            yield from iter_points(child)


def make_feature(
    geometry: VtGeometry, properties: dict, feature_id: Optional[FeatureId]
) -> Optional[VtFeature]:
    """Build a feature and its bounding box; return None if it has no points."""
    bbox = BBox(Point2D(2.0, 1.0), Point2D(-1.0, 0.0))
    count = 0
    for point in iter_points(geometry):
        bbox.min.x = min(point.x, bbox.min.x)
        bbox.min.y = min(point.y, bbox.min.y)
        bbox.max.x = max(point.x, bbox.max.x)
        bbox.max.y = max(point.y, bbox.max.y)
        count += 1
    if count == 0:
        return None
    return VtFeature(geometry, properties, feature_id, bbox, count)


def coordinate(point: Union[VtPoint, Point2D], axis: int) -> float:
    """Return the x (axis 0) or y (axis 1) coordinate of a point."""
    if axis == 0:
        return point.x
    if axis == 1:
        return point.y
    raise ValueError(f"axis must be 0 or 1, not {axis!r}")


def calc_progress(a: VtPoint, b: VtPoint, v: float, axis: int) -> float:
    """Fraction of the way from a to b at which the given axis reaches v."""
    if axis == 0:
        return (v - a.x) / (b.x - a.x)
    if axis == 1:
        return (v - a.y) / (b.y - a.y)
    raise ValueError(f"axis must be 0 or 1, not {axis!r}")


def intersect(a: VtPoint, b: VtPoint, v: float, t: float, axis: int) -> VtPoint:
    """Point on segment a-b at progress t, with the given axis fixed to v."""
    if axis == 0:
        return VtPoint(v, (b.y - a.y) * t + a.y, 1.0)
    if axis == 1:
        return VtPoint((b.x - a.x) * t + a.x, v, 1.0)
    raise ValueError(f"axis must be 0 or 1, not {axis!r}")