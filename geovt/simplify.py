"""Douglas-Peucker importance marking for projected point lists."""

from __future__ import annotations

import math

from geovt.types import VtPoint


def get_sq_seg_dist(p: VtPoint, a: VtPoint, b: VtPoint) -> float:
    """Squared distance from point p to the segment a-b."""
    x, y = a.x, a.y
    dx, dy = b.x - a.x, b.y - a.y

    if dx != 0.0 or dy != 0.0:
        numerator = (p.x - a.x) * dx + (p.y - a.y) * dy
        denominator = dx * dx + dy * dy
        if denominator:
            t = numerator / denominator
        else:
            t = math.copysign(math.inf, numerator) if numerator else math.nan
        if t > 1.0:
            x, y = b.x, b.y
        elif t > 0.0:
            x += dx * t
            y += dy * t

    dx, dy = p.x - x, p.y - y
    return dx * dx + dy * dy


def simplify(points: list[VtPoint], first: int, last: int, sq_tolerance: float) -> None:
    """Store each kept point's importance (squared distance) in its z value."""
    pending = [(first, last)]
    while pending:
        first, last = pending.pop()
        max_sq_dist = sq_tolerance
        index = 0
        mid = first + ((last - first) >> 1)
        min_pos_to_mid = last - first
        start, end = points[first], points[last]

        for i, point in enumerate(points[first + 1:last], start=first + 1):
            sq_dist = get_sq_seg_dist(point, start, end)
            if sq_dist > max_sq_dist:
                index = i
                max_sq_dist = sq_dist
            elif sq_dist == max_sq_dist:
                # prefer a pivot close to the middle to keep splits balanced
                pos_to_mid = abs(i - mid)
                if pos_to_mid < min_pos_to_mid:
                    index = i
                    min_pos_to_mid = pos_to_mid

        if max_sq_dist > sq_tolerance:
            points[index].z = max_sq_dist
            if last - index > 1:
                pending.append((index, last))
            if index - first > 1:
                pending.append((first, index))


def simplify_wrapper(points: list[VtPoint], tolerance: float) -> None:
    """Mark the endpoints as always kept and simplify everything between."""
    if not points:
        raise ValueError("cannot simplify an empty point list")
    points[0].z = 1.0
    points[-1].z = 1.0
    simplify(points, 0, len(points) - 1, tolerance * tolerance)