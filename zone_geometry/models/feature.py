"""Render-ready output models.

A ``Feature`` is one zone or parcel after projection and simplification:
either a Point or a Polygon in WGS 84 degrees, with the entity's
attribute bag attached unchanged. A ``FeatureBatch`` collects the
features of one request together with the counters the API layer
exposes for observability.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from zone_geometry.core.constants import GEOMETRY_POINT, GEOMETRY_POLYGON, MIN_POLYGON_VERTICES
from zone_geometry.models.vertex import GeographicPoint


def close_ring(coords: list[tuple[float, float]]) -> list[tuple[float, float]]:
    """Return *coords* with the first point repeated at the end if needed."""
    if coords and coords[0] != coords[-1]:
        return [*coords, coords[0]]
    return list(coords)


@dataclass(frozen=True, slots=True)
class Feature:
    """A single render-ready geometry.

    Attributes:
        key: Identifier of the source entity.
        geometry_type: ``"Point"`` or ``"Polygon"``.
        coordinates: One ``(lon, lat)`` pair for points; the simplified,
            open ring for polygons.
        centroid: Representative point (the point itself for Point features).
        attributes: Entity attribute bag, passed through unchanged.
        source: Which positional input produced the geometry
            (``"ring"``, ``"planar_point"`` or ``"geographic_point"``).
        in_envelope: ``False`` if any output point left the country's
            soft validity envelope.
        area_ha: Geodesic area of the unsimplified ring, Polygon only.
    """

    key: str
    geometry_type: str
    coordinates: list[tuple[float, float]]
    centroid: GeographicPoint | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    source: str = ""
    in_envelope: bool = True
    area_ha: float | None = None

    @property
    def is_polygon(self) -> bool:
        return self.geometry_type == GEOMETRY_POLYGON

    def geometry_dict(self, *, close: bool = False) -> dict[str, object]:
        """Return ``{"type", "coordinates"}`` in ``[lon, lat]`` order."""
        if self.is_polygon:
            ring = close_ring(self.coordinates) if close else self.coordinates
            return {"type": GEOMETRY_POLYGON, "coordinates": [list(c) for c in ring]}
        return {"type": GEOMETRY_POINT, "coordinates": list(self.coordinates[0])}

    def to_dict(self, *, close_ring: bool = False) -> dict[str, object]:
        """Serialise as a GeoJSON-style Feature for the rendering layer."""
        return {
            "type": "Feature",
            "id": self.key,
            "geometry": self.geometry_dict(close=close_ring),
            "properties": self.attributes,
        }

    def to_shape(self) -> Any:
        """Return the Shapely geometry of this feature."""
        from shapely.geometry import LineString, Point, Polygon

        if self.is_polygon:
            if len(self.coordinates) < MIN_POLYGON_VERTICES:
                return LineString(self.coordinates)
            return Polygon(self.coordinates)
        return Point(self.coordinates[0])


@dataclass(frozen=True, slots=True)
class FeatureBatch:
    """Result of one orchestrator batch.

    Attributes:
        features: Features in input order.
        country_code: Country whose parameters were used.
        filtered_count: Entities with no positional data (silently excluded).
        out_of_domain_count: Entities dropped for ``OutOfDomainError``.
        rejected_count: Entities dropped for any other validation/contract error.
        failed_count: Entities dropped for an unexpected exception.
        out_of_envelope_count: Features kept but flagged outside the envelope.
        errors: Structured error dicts, one per dropped (non-filtered) entity.
    """

    features: list[Feature] = field(default_factory=list)
    country_code: str = ""
    filtered_count: int = 0
    out_of_domain_count: int = 0
    rejected_count: int = 0
    failed_count: int = 0
    out_of_envelope_count: int = 0
    errors: list[dict[str, object]] = field(default_factory=list)

    @property
    def dropped_count(self) -> int:
        return self.filtered_count + self.out_of_domain_count + self.rejected_count + self.failed_count

    def to_feature_collection(self, *, close_rings: bool = False) -> dict[str, object]:
        """Serialise as a FeatureCollection with the observability counters."""
        return {
            "type": "FeatureCollection",
            "features": [f.to_dict(close_ring=close_rings) for f in self.features],
            "filtered": self.filtered_count,
            "outOfDomain": self.out_of_domain_count,
            "outOfEnvelope": self.out_of_envelope_count,
            "rejected": self.rejected_count,
            "failed": self.failed_count,
        }

    def to_json(self, *, close_rings: bool = False, indent: int | None = None) -> str:
        """Serialise through the validated ``FeatureCollectionPayload`` schema."""
        from zone_geometry.models.collection import FeatureCollectionPayload

        return FeatureCollectionPayload.from_batch(self, close_rings=close_rings).to_json(indent=indent)
