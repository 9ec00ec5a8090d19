"""Clipping of projected features between two axis-parallel lines."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, replace
from itertools import pairwise

from geovt.types import (
    GeometryKind,
    VtFeature,
    VtGeometry,
    VtLinearRing,
    VtLineString,
    VtPoint,
    calc_progress,
    coordinate,
    intersect,
    make_feature,
)


@dataclass(frozen=True)
class Clipper:
    """Clips geometries to the band ``k1 <= coordinate <= k2`` along one axis."""

    k1: float
    k2: float
    line_metrics: bool = False
    axis: int = 0

    def _coord(self, point: VtPoint) -> float:
        return coordinate(point, self.axis)

    def _progress(self, a: VtPoint, b: VtPoint, v: float) -> float:
        return calc_progress(a, b, v, self.axis)

    def _cross(self, a: VtPoint, b: VtPoint, v: float, t: float) -> VtPoint:
        return intersect(a, b, v, t, self.axis)

    def clip_multi_point(self, points: list[VtPoint]) -> VtGeometry:
        kept = [replace(p) for p in points if self.k1 <= self._coord(p) <= self.k2]
        return VtGeometry(GeometryKind.MULTI_POINT, kept)

    def clip_line_string(self, line: VtLineString) -> VtGeometry:
        return self._lines_geometry(self._clip_line(line))

    def clip_multi_line_string(self, lines: list[VtLineString]) -> VtGeometry:
        parts = [part for line in lines for part in self._clip_line(line)]
        return self._lines_geometry(parts)

    def clip_polygon(self, polygon: list[VtLinearRing]) -> VtGeometry:
        return VtGeometry(GeometryKind.POLYGON, self._clip_rings(polygon))

    def clip_multi_polygon(self, polygons: list[list[VtLinearRing]]) -> VtGeometry:
        result = []
        for polygon in polygons:
            rings = self._clip_rings(polygon)
            if rings:
                result.append(rings)
        return VtGeometry(GeometryKind.MULTI_POLYGON, result)

    def clip_geometry_collection(self, geometries: list[VtGeometry]) -> VtGeometry:
        return VtGeometry(
            GeometryKind.GEOMETRY_COLLECTION,
            [self.clip_geometry(child) for child in geometries],
        )

    def clip_geometry(self, geometry: VtGeometry) -> VtGeometry:
        kind, value = geometry.kind, geometry.value
        match kind:
            case GeometryKind.EMPTY:
                return VtGeometry(GeometryKind.EMPTY)
            case GeometryKind.POINT:
                return VtGeometry(GeometryKind.POINT, replace(value))
            case GeometryKind.MULTI_POINT:
                return self.clip_multi_point(value)
            case GeometryKind.LINE_STRING:
                return self.clip_line_string(value)
            case GeometryKind.MULTI_LINE_STRING:
                return self.clip_multi_line_string(value)
            case GeometryKind.POLYGON:
                return self.clip_polygon(value)
            case GeometryKind.MULTI_POLYGON:
                return self.clip_multi_polygon(value)
            case GeometryKind.GEOMETRY_COLLECTION:
                return self.clip_geometry_collection(value)
        raise ValueError(f"unknown geometry kind: {kind!r}")

    @staticmethod
    def _lines_geometry(parts: list[VtLineString]) -> VtGeometry:
        if len(parts) == 1:
            return VtGeometry(GeometryKind.LINE_STRING, parts[0])
        return VtGeometry(GeometryKind.MULTI_LINE_STRING, parts)

    def _clip_rings(self, rings: list[VtLinearRing]) -> list[VtLinearRing]:
        result = []
        for ring in rings:
            clipped = self._clip_ring(ring)
            if clipped.elements:
                result.append(clipped)
        return result

    def _new_slice(self, line: VtLineString) -> VtLineString:
        part = VtLineString(dist=line.dist)
        if self.line_metrics:
            part.seg_start = line.seg_start
            part.seg_end = line.seg_end
        return part

    def _clip_line(self, line: VtLineString) -> list[VtLineString]:
        points = line.elements
        if len(points) < 2:
            return []

        k1, k2, metrics = self.k1, self.k2, self.line_metrics
        slices: list[VtLineString] = []
        line_len = line.seg_start
        seg_len = 0.0
        last_index = len(points) - 2
        current = self._new_slice(line)

        for i, (a, b) in enumerate(pairwise(points)):
            ak, bk = self._coord(a), self._coord(b)
            is_last_seg = i == last_index

            if metrics:
                seg_len = math.hypot(b.x - a.x, b.y - a.y)

            if ak < k1:
                if bk > k2:
                    # ---|-----|-->
                    t = self._progress(a, b, k1)
                    current.elements.append(self._cross(a, b, k1, t))
                    if metrics:
                        current.seg_start = line_len + seg_len * t
                    t = self._progress(a, b, k2)
                    current.elements.append(self._cross(a, b, k2, t))
                    if metrics:
                        current.seg_end = line_len + seg_len * t
                    slices.append(current)
                    current = self._new_slice(line)
                elif bk > k1:
                    # ---|-->  |
                    t = self._progress(a, b, k1)
                    current.elements.append(self._cross(a, b, k1, t))
                    if metrics:
                        current.seg_start = line_len + seg_len * t
                    if is_last_seg:
                        current.elements.append(replace(b))
                elif bk == k1 and not is_last_seg:
                    # --->|..  |
                    if metrics:
                        current.seg_start = line_len + seg_len
                    current.elements.append(replace(b))
            elif ak > k2:
                if bk < k1:
                    # <--|-----|---
                    t = self._progress(a, b, k2)
                    current.elements.append(self._cross(a, b, k2, t))
                    if metrics:
                        current.seg_start = line_len + seg_len * t
                    t = self._progress(a, b, k1)
                    current.elements.append(self._cross(a, b, k1, t))
                    if metrics:
                        current.seg_end = line_len + seg_len * t
                    slices.append(current)
                    current = self._new_slice(line)
                elif bk < k2:
                    # |  <--|---
                    t = self._progress(a, b, k2)
                    current.elements.append(self._cross(a, b, k2, t))
                    if metrics:
                        current.seg_start = line_len + seg_len * t
                    if is_last_seg:
                        current.elements.append(replace(b))
                elif bk == k2 and not is_last_seg:
                    # |  ..|<---
                    if metrics:
                        current.seg_start = line_len + seg_len
                    current.elements.append(replace(b))
            else:
                current.elements.append(replace(a))
                if bk < k1:
                    # <--|---  |
                    t = self._progress(a, b, k1)
                    current.elements.append(self._cross(a, b, k1, t))
                    if metrics:
                        current.seg_end = line_len + seg_len * t
                    slices.append(current)
                    current = self._new_slice(line)
                elif bk > k2:
                    # |  ---|-->
                    t = self._progress(a, b, k2)
                    current.elements.append(self._cross(a, b, k2, t))
                    if metrics:
                        current.seg_end = line_len + seg_len * t
                    slices.append(current)
                    current = self._new_slice(line)
                elif is_last_seg:
                    # | --> |
                    current.elements.append(replace(b))

            if metrics:
                line_len += seg_len

        if current.elements:
            if metrics:
                current.seg_end = line_len
            slices.append(current)

        return slices

    def _clip_ring(self, ring: VtLinearRing) -> VtLinearRing:
        points = ring.elements
        result = VtLinearRing(area=ring.area)
        if len(points) < 2:
            return result

        k1, k2 = self.k1, self.k2
        out = result.elements
        last_index = len(points) - 2

        def cross(a: VtPoint, b: VtPoint, v: float) -> VtPoint:
            return self._cross(a, b, v, self._progress(a, b, v))

        for i, (a, b) in enumerate(pairwise(points)):
            ak, bk = self._coord(a), self._coord(b)
            if ak < k1:
                if bk > k1:
                    # ---|-->  |
                    out.append(cross(a, b, k1))
                    if bk > k2:
                        # ---|-----|-->
                        out.append(cross(a, b, k2))
                    elif i == last_index:
                        out.append(replace(b))
            elif ak > k2:
                if bk < k2:
                    # |  <--|---
                    out.append(cross(a, b, k2))
                    if bk < k1:
                        # <--|-----|---
                        out.append(cross(a, b, k1))
                    elif i == last_index:
                        out.append(replace(b))
            else:
                # | --> |
                out.append(replace(a))
                if bk < k1:
                    out.append(cross(a, b, k1))
                elif bk > k2:
                    out.append(cross(a, b, k2))

        # close the ring if clipping left its ends apart
        if out and out[0] != out[-1]:
            out.append(replace(out[0]))

        return result


def clip(
    features: list[VtFeature],
    k1: float,
    k2: float,
    min_all: float,
    max_all: float,
    line_metrics: bool,
    axis: int = 0,
) -> list[VtFeature]:
    """Clip features to ``k1 <= coordinate < k2`` along the given axis.

    ``min_all`` and ``max_all`` bound the coordinates of all features and
    allow the whole list to be accepted or rejected at once.
    """
    if min_all >= k1 and max_all < k2:
        return copy.deepcopy(features)
    if max_all < k1 or min_all >= k2:
        return []

    clipper = Clipper(k1, k2, line_metrics, axis)
    clipped: list[VtFeature] = []

    for feature in features:
        low = coordinate(feature.bbox.min, axis)
        high = coordinate(feature.bbox.max, axis)

        if low >= k1 and high < k2:
            clipped.append(copy.deepcopy(feature))
            continue
        if high < k1 or low >= k2:
            continue

        geometry = clipper.clip_geometry(feature.geometry)

        if line_metrics and geometry.kind is GeometryKind.MULTI_LINE_STRING:
            pieces = [VtGeometry(GeometryKind.LINE_STRING, part) for part in geometry.value]
        else:
            pieces = [geometry]

        for piece in pieces:
            result = make_feature(piece, copy.deepcopy(feature.properties), feature.id)
            if result is not None:
                clipped.append(result)

    return clipped