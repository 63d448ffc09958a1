"""Shared geometry constants: single source of truth.

Centralises ellipsoid definitions, geometry thresholds and the
positional-source labels used by the orchestrator.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Ellipsoids: (semi-major axis in metres, inverse flattening)
# ---------------------------------------------------------------------------

GRS80_SEMI_MAJOR_AXIS: float = 6_378_137.0
GRS80_INVERSE_FLATTENING: float = 298.257222101

CLARKE_1880_IGN_SEMI_MAJOR_AXIS: float = 6_378_249.2
CLARKE_1880_IGN_INVERSE_FLATTENING: float = 293.4660212936269

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

SQ_METRES_PER_HECTARE: float = 10_000.0

# ---------------------------------------------------------------------------
# Geometry thresholds
# ---------------------------------------------------------------------------

DEFAULT_SIMPLIFY_TOLERANCE_DEG: float = 0.0001
"""RDP tolerance in degrees, applied after projection (roughly 11 m)."""

MIN_POLYGON_VERTICES: int = 3
"""Rings with fewer vertices have no area; their centroid is the vertex mean."""

MIN_RING_VERTICES: int = 2
"""Rings with fewer vertices are rendered as their centroid point."""

MAX_LATITUDE_DEG: float = 90.0

ROUND_TRIP_TOLERANCE_M: float = 0.01
"""Planar residual in metres above which an inverse projection counts as out of domain."""

DEFAULT_COUNTRY_CODE: str = "MA"

# ---------------------------------------------------------------------------
# Positional sources, in strict priority order
# ---------------------------------------------------------------------------

SOURCE_RING: str = "ring"
SOURCE_PLANAR_POINT: str = "planar_point"
SOURCE_GEOGRAPHIC_POINT: str = "geographic_point"

GEOMETRY_POINT: str = "Point"
GEOMETRY_POLYGON: str = "Polygon"
