"""Area-weighted polygon centroid in planar coordinates.

The centroid is computed in Lambert space, before projection, and then
projected as a single point. Degenerate rings never raise:

- no vertices            -> ``None``
- one or two vertices    -> arithmetic mean
- three or more vertices -> shoelace centroid
- exactly zero area      -> arithmetic mean (collinear / self-cancelling ring)

The ring is taken as given. Callers order it by ``sequence`` first.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from zone_geometry.core.constants import MIN_POLYGON_VERTICES
from zone_geometry.models.vertex import PlanarPoint


class _XY(Protocol):
    @property
    def x(self) -> float: ...

    @property
    def y(self) -> float: ...


def mean_point(ring: Sequence[_XY]) -> PlanarPoint:
    """Arithmetic mean of the ring's coordinates. *ring* must be non-empty."""
    count = len(ring)
    return PlanarPoint(
        sum(v.x for v in ring) / count,
        sum(v.y for v in ring) / count,
    )


def polygon_centroid(ring: Sequence[_XY]) -> PlanarPoint | None:
    """Return the area-weighted centroid of *ring*, or ``None`` if it is empty.

    Args:
        ring: Ordered vertices (anything with ``x`` and ``y``). The closing
            edge from the last vertex back to the first is implicit.

    Returns:
        The centroid as a ``PlanarPoint``, or ``None`` for an empty ring.
    """
    if not ring:
        return None
    if len(ring) < MIN_POLYGON_VERTICES:
        return mean_point(ring)

    area = 0.0
    cx = 0.0
    cy = 0.0
    count = len(ring)
    for i in range(count):
        x1, y1 = ring[i].x, ring[i].y
        x2, y2 = ring[(i + 1) % count].x, ring[(i + 1) % count].y
        f = x1 * y2 - x2 * y1
        area += f
        cx += (x1 + x2) * f
        cy += (y1 + y2) * f
    area *= 0.5

    if area == 0.0:
        return mean_point(ring)
    return PlanarPoint(cx / (6.0 * area), cy / (6.0 * area))
