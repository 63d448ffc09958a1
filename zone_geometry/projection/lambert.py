"""Lambert Conformal Conic forward and inverse projection.

Converts between planar Lambert coordinates (metres, false-origin
shifted) and WGS 84 longitude/latitude (degrees). The transform itself
is delegated to PROJ through a pyproj ``Transformer`` built from
``ProjectionParameters.to_proj4()``, which covers the one- and
two-standard-parallel forms and the ``+towgs84`` datum shift.

Every function takes the ``ProjectionParameters`` explicitly. Transformers
are cached per parameter set; they are safe to share between threads.
"""

from __future__ import annotations

import functools
import math
from typing import TYPE_CHECKING

from zone_geometry.core.constants import MAX_LATITUDE_DEG, ROUND_TRIP_TOLERANCE_M
from zone_geometry.core.exceptions import OutOfDomainError
from zone_geometry.models.vertex import GeographicPoint, PlanarPoint

if TYPE_CHECKING:
    from pyproj import Transformer

    from zone_geometry.models.projection import ProjectionParameters
    from zone_geometry.models.vertex import Vertex

GEOGRAPHIC_CRS = "EPSG:4326"


@functools.lru_cache(maxsize=32)
def build_transformer(params: ProjectionParameters, *, inverse: bool = True) -> Transformer:
    """Return the PROJ transformer for *params*.

    Args:
        params: Projection parameters of one country.
        inverse: ``True`` for planar -> WGS 84, ``False`` for the reverse.

    Returns:
        A ``pyproj.Transformer`` with ``always_xy`` axis order.
    """
    from pyproj import Transformer

    local = params.to_proj4()
    if inverse:
        return Transformer.from_crs(local, GEOGRAPHIC_CRS, always_xy=True)
    return Transformer.from_crs(GEOGRAPHIC_CRS, local, always_xy=True)


def _planar(lon: float, lat: float, params: ProjectionParameters) -> tuple[float, float]:
    return build_transformer(params, inverse=False).transform(lon, lat, errcheck=False)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def to_geographic(point: PlanarPoint | Vertex, params: ProjectionParameters) -> GeographicPoint:
    """Convert a planar Lambert point to WGS 84 longitude/latitude.

    Args:
        point: Anything with planar ``x`` (easting) and ``y`` (northing).
        params: Projection parameters of the point's country.

    Returns:
        The WGS 84 position in degrees.

    Raises:
        OutOfDomainError: If the input is not finite, resolves to a pole,
            or lies outside the region the cone covers.
    """
    x, y = point.x, point.y
    if not (math.isfinite(x) and math.isfinite(y)):
        msg = f"Planar coordinate is not finite: ({x}, {y})"
        raise OutOfDomainError(msg)

    lon, lat = build_transformer(params).transform(x, y, errcheck=False)
    if not (math.isfinite(lon) and math.isfinite(lat)):
        msg = f"Planar coordinate ({x}, {y}) could not be projected"
        raise OutOfDomainError(msg)
    if abs(lat) >= MAX_LATITUDE_DEG:
        msg = f"Planar coordinate ({x}, {y}) resolves to an invalid latitude {lat}"
        raise OutOfDomainError(msg)

    # PROJ wraps points beyond the cone's angular extent instead of failing.
    back_x, back_y = _planar(lon, lat, params)
    if not math.hypot(back_x - x, back_y - y) <= ROUND_TRIP_TOLERANCE_M:
        msg = f"Planar coordinate ({x}, {y}) lies outside the projection's domain"
        raise OutOfDomainError(msg)

    return GeographicPoint(lon, lat)


def to_planar(point: GeographicPoint, params: ProjectionParameters) -> PlanarPoint:
    """Convert a WGS 84 longitude/latitude to planar Lambert coordinates.

    Raises:
        OutOfDomainError: If the input is not finite, ``|latitude| >= 90``,
            or PROJ cannot project it.
    """
    validate_geographic(point)

    x, y = _planar(point.longitude, point.latitude, params)
    if not (math.isfinite(x) and math.isfinite(y)):
        msg = f"Geographic coordinate ({point.longitude}, {point.latitude}) could not be projected"
        raise OutOfDomainError(msg)
    return PlanarPoint(x, y)


def validate_geographic(point: GeographicPoint) -> None:
    """Reject positions outside the ellipsoid's mathematical domain.

    Raises:
        OutOfDomainError: If a coordinate is not finite or ``|latitude| >= 90``.
    """
    lon, lat = point.longitude, point.latitude
    if not (math.isfinite(lon) and math.isfinite(lat)):
        msg = f"Geographic coordinate is not finite: ({lon}, {lat})"
        raise OutOfDomainError(msg)
    if abs(lat) >= MAX_LATITUDE_DEG:
        msg = f"Latitude {lat} is outside the open interval (-90, 90)"
        raise OutOfDomainError(msg)


def is_within_envelope(point: GeographicPoint, params: ProjectionParameters) -> bool:
    """Soft check against the country's geographic validity envelope."""
    min_lon, min_lat, max_lon, max_lat = params.geographic_envelope
    return min_lon <= point.longitude <= max_lon and min_lat <= point.latitude <= max_lat


def is_within_planar_envelope(point: PlanarPoint | Vertex, params: ProjectionParameters) -> bool:
    """Soft check against the country's planar envelope (``True`` if none is set)."""
    if params.planar_envelope is None:
        return True
    min_x, min_y, max_x, max_y = params.planar_envelope
    return min_x <= point.x <= max_x and min_y <= point.y <= max_y
