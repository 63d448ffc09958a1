"""Ramer–Douglas–Peucker polyline simplification.

Reduces ring density for rendering. The tolerance is in the unit of the
input points: the pipeline simplifies after projection, so it is in
degrees, and its ground distance therefore varies with latitude.

The classic recursion is driven by an explicit stack so that rings of
any size are safe from the interpreter's recursion limit. Output keeps
the original point order and the exact input tuples.
"""

from __future__ import annotations

from collections.abc import Sequence

Point = tuple[float, float]

# A triangle is the smallest ring worth keeping as a polygon.
MIN_POINTS_TO_SIMPLIFY = 4


def squared_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Squared distance from *p* to the segment ``a``-``b``."""
    x, y = a
    dx = b[0] - x
    dy = b[1] - y

    if dx != 0.0 or dy != 0.0:
        t = ((p[0] - x) * dx + (p[1] - y) * dy) / (dx * dx + dy * dy)
        if t > 1.0:
            x, y = b
        elif t > 0.0:
            x += dx * t
            y += dy * t

    dx = p[0] - x
    dy = p[1] - y
    return dx * dx + dy * dy


def simplify(points: Sequence[Point], tolerance: float) -> list[Point]:
    """Simplify *points* with Ramer–Douglas–Peucker.

    The first and last points are always kept. A segment's farthest
    interior point is kept (and the segment split) only when its squared
    distance exceeds ``tolerance ** 2``; ties go to the lowest index.
    Inputs of three points or fewer are returned unchanged.

    Args:
        points: Ordered ``(x, y)`` points.
        tolerance: Maximum allowed deviation, in the unit of *points*.

    Returns:
        A new list with the retained points in their original order.

    Raises:
        ValueError: If *tolerance* is negative.
    """
    if tolerance < 0:
        msg = f"tolerance must be >= 0, got {tolerance}"
        raise ValueError(msg)
    if len(points) < MIN_POINTS_TO_SIMPLIFY:
        return list(points)

    sq_tolerance = tolerance * tolerance
    last = len(points) - 1
    keep = [False] * len(points)
    keep[0] = keep[last] = True

    stack = [(0, last)]
    while stack:
        start, end = stack.pop()
        max_dist = 0.0
        index = start
        for i in range(start + 1, end):
            dist = squared_segment_distance(points[i], points[start], points[end])
            if dist > max_dist:
                index = i
                max_dist = dist

        if max_dist > sq_tolerance:
            keep[index] = True
            if index - start > 1:
                stack.append((start, index))
            if end - index > 1:
                stack.append((index, end))

    return [p for p, kept in zip(points, keep, strict=True) if kept]
