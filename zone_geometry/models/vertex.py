"""Point and vertex models.

A ``Vertex`` is one corner of a stored zone or parcel outline, in the
planar Lambert system, carrying its ``sequence`` index within the ring.
``PlanarPoint`` and ``GeographicPoint`` are the bare coordinate pairs on
either side of the projection.
"""

from __future__ import annotations

from dataclasses import dataclass

from zone_geometry.core.exceptions import EntityContractError


def _pick(data: dict[str, object], *keys: str) -> object:
    """Return the first present, non-``None`` value among *keys*."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _as_float(value: object, field_name: str) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"{field_name} must be numeric, got {value!r}"
        raise EntityContractError(msg) from exc


@dataclass(frozen=True, slots=True)
class PlanarPoint:
    """A projected (easting, northing) pair in metres."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class GeographicPoint:
    """A (longitude, latitude) pair in degrees on WGS 84."""

    longitude: float
    latitude: float

    def to_dict(self) -> dict[str, float]:
        return {"longitude": self.longitude, "latitude": self.latitude}

    @property
    def coordinates(self) -> tuple[float, float]:
        """``(lon, lat)`` in GeoJSON axis order."""
        return (self.longitude, self.latitude)

    def format(self) -> str:
        """Render for display, e.g. ``"33.300000°N, 5.400000°W"``."""
        lat_hemisphere = "N" if self.latitude >= 0 else "S"
        lon_hemisphere = "E" if self.longitude >= 0 else "W"
        return (
            f"{abs(self.latitude):.6f}°{lat_hemisphere}, "
            f"{abs(self.longitude):.6f}°{lon_hemisphere}"
        )


@dataclass(frozen=True, slots=True)
class Vertex:
    """One ordered corner of a ring in planar Lambert coordinates.

    Attributes:
        sequence: Ordering index, unique within its ring.
        x: Planar easting (metres).
        y: Planar northing (metres).
    """

    sequence: int
    x: float
    y: float

    def to_dict(self) -> dict[str, object]:
        return {"sequence": self.sequence, "x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Vertex:
        """Deserialise a vertex record.

        Accepts the canonical keys (``sequence``, ``x``, ``y``) and the
        persistence-layer keys (``seq``, ``lambertX``, ``lambertY``).

        Raises:
            EntityContractError: If a field is missing or not numeric.
        """
        if not isinstance(data, dict):
            msg = f"vertex must be a dict, got {type(data).__name__}"
            raise EntityContractError(msg)

        sequence = _pick(data, "sequence", "seq")
        x = _pick(data, "x", "lambertX")
        y = _pick(data, "y", "lambertY")
        if sequence is None or x is None or y is None:
            msg = f"vertex requires sequence, x and y; got keys {sorted(data)}"
            raise EntityContractError(msg)

        try:
            seq_value = int(sequence)  # type: ignore[call-overload]
        except (TypeError, ValueError) as exc:
            msg = f"sequence must be an integer, got {sequence!r}"
            raise EntityContractError(msg) from exc

        return cls(sequence=seq_value, x=_as_float(x, "x"), y=_as_float(y, "y"))

    @property
    def point(self) -> PlanarPoint:
        return PlanarPoint(self.x, self.y)
