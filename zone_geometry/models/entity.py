"""Data model for a zone or parcel record handed over by the API layer.

An ``EntityRecord`` carries whatever positional data the persistence
layer holds for one zone or parcel: an optional vertex ring, an optional
single planar point, and an optional legacy geographic point. The
attribute bag is opaque and is passed through to the output Feature.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from zone_geometry.core.exceptions import EntityContractError
from zone_geometry.models.vertex import GeographicPoint, PlanarPoint, Vertex, _as_float


@dataclass(frozen=True, slots=True)
class EntityRecord:
    """One zone or parcel with its positional data.

    Attributes:
        key: Identifier of the owning entity, copied onto the Feature.
        vertices: Ring vertices in storage order (sorted later by ``sequence``).
        planar_point: Single representative Lambert point, if stored.
        geographic_point: Legacy, already-projected WGS 84 point, if stored.
        attributes: Opaque payload passed through unchanged.
    """

    key: str
    vertices: tuple[Vertex, ...] = ()
    planar_point: PlanarPoint | None = None
    geographic_point: GeographicPoint | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def has_position(self) -> bool:
        return bool(self.vertices) or self.planar_point is not None or self.geographic_point is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntityRecord:
        """Deserialise a persistence-layer record.

        Recognised keys: ``id``/``key``, ``vertices`` (see
        ``Vertex.from_dict``), ``lambertX``/``lambertY`` (or ``x``/``y``),
        ``longitude``/``latitude``, and ``attributes``/``properties``.
        A point is only present when both of its coordinates are set.

        Raises:
            EntityContractError: If a field has an unexpected type.
        """
        if not isinstance(data, dict):
            msg = f"entity must be a dict, got {type(data).__name__}"
            raise EntityContractError(msg)

        vertices_raw = data.get("vertices") or []
        if not isinstance(vertices_raw, list | tuple):
            msg = f"vertices must be a list, got {type(vertices_raw).__name__}"
            raise EntityContractError(msg)
        vertices = tuple(Vertex.from_dict(v) for v in vertices_raw)

        x = data.get("lambertX", data.get("x"))
        y = data.get("lambertY", data.get("y"))
        planar = None
        if x is not None and y is not None:
            planar = PlanarPoint(_as_float(x, "lambertX"), _as_float(y, "lambertY"))

        lon = data.get("longitude")
        lat = data.get("latitude")
        geographic = None
        if lon is not None and lat is not None:
            geographic = GeographicPoint(_as_float(lon, "longitude"), _as_float(lat, "latitude"))

        attributes_raw = data.get("attributes", data.get("properties")) or {}
        if not isinstance(attributes_raw, dict):
            msg = f"attributes must be a dict, got {type(attributes_raw).__name__}"
            raise EntityContractError(msg)

        return cls(
            key=str(data.get("id", data.get("key", ""))),
            vertices=vertices,
            planar_point=planar,
            geographic_point=geographic,
            attributes=attributes_raw,
        )
