"""Wrapping of features that cross the antimeridian."""

from __future__ import annotations

import copy

from geovt.clip import clip
from geovt.types import VtFeature, iter_points


def shift_coords(features: list[VtFeature], offset: float) -> None:
    """Move every feature horizontally by ``offset``, in place."""
    for feature in features:
        for point in iter_points(feature.geometry):
            point.x += offset
        feature.bbox.min.x += offset
        feature.bbox.max.x += offset


def wrap(features: list[VtFeature], buffer: float, line_metrics: bool) -> list[VtFeature]:
    """Fold the parts of features beyond the world edges back into the world.

    The result keeps, in order, the part that wrapped from the left, the
    central part, and the part that wrapped from the right.
    """
    left = clip(features, -1.0 - buffer, buffer, -1.0, 2.0, line_metrics, 0)
    right = clip(features, 1.0 - buffer, 2.0 + buffer, -1.0, 2.0, line_metrics, 0)

    if not left and not right:
        return copy.deepcopy(features)

    merged = clip(features, -buffer, 1.0 + buffer, -1.0, 2.0, line_metrics, 0)

    if left:
        shift_coords(left, 1.0)
        merged = left + merged
    if right:
        shift_coords(right, -1.0)
        merged.extend(right)

    return merged