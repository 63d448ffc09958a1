"""Projection parameter models.

``ProjectionParameters`` is the immutable per-country description of a
Lambert Conformal Conic system plus its datum shift to WGS 84. It is
always passed explicitly into each conversion call; nothing in the
package holds a "current" parameter set.

References:
    EPSG:26191 (Merchich / Nord Maroc)
    EPSG:2154  (RGF93 v1 / Lambert-93)
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Ellipsoid:
    """A reference ellipsoid defined by its semi-major axis and inverse flattening."""

    name: str
    semi_major_axis: float
    inverse_flattening: float


@dataclass(frozen=True, slots=True)
class DatumShift:
    """Helmert transformation from the local datum to WGS 84.

    Position-vector convention, as used by PROJ ``+towgs84``.

    Attributes:
        dx, dy, dz: Translations in metres.
        rx, ry, rz: Rotations in arc-seconds.
        ds: Scale difference in parts per million.
    """

    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    rz: float = 0.0
    ds: float = 0.0

    @property
    def is_identity(self) -> bool:
        return not any((self.dx, self.dy, self.dz, self.rx, self.ry, self.rz, self.ds))

    def to_towgs84(self) -> str:
        values = (self.dx, self.dy, self.dz, self.rx, self.ry, self.rz, self.ds)
        return ",".join(f"{v:.15g}" for v in values)


@dataclass(frozen=True, slots=True)
class ProjectionParameters:
    """Immutable Lambert Conformal Conic definition for one country.

    Attributes:
        country_code: ISO 3166-1 alpha-2 code (upper case).
        name: Human-readable system name.
        srid: EPSG code of the planar system (informational).
        central_meridian: Longitude of origin, degrees.
        central_parallel: Latitude of origin, degrees. Also the single
            standard parallel when ``standard_parallels`` is empty.
        false_easting: Metres added to every easting.
        false_northing: Metres added to every northing.
        scale_factor: Scale factor on the standard parallel(s).
        ellipsoid: Local reference ellipsoid.
        datum_shift: Helmert shift from the local datum to WGS 84.
        standard_parallels: Empty for the one-parallel form; two
            latitudes (degrees) for the secant two-parallel form.
        geographic_envelope: Soft validity bounds
            ``(min_lon, min_lat, max_lon, max_lat)`` in WGS 84 degrees.
        planar_envelope: Soft validity bounds
            ``(min_x, min_y, max_x, max_y)`` in metres, or ``None``.
    """

    country_code: str
    name: str
    srid: int
    central_meridian: float
    central_parallel: float
    false_easting: float
    false_northing: float
    scale_factor: float
    ellipsoid: Ellipsoid
    datum_shift: DatumShift = field(default_factory=DatumShift)
    standard_parallels: tuple[float, ...] = ()
    geographic_envelope: tuple[float, float, float, float] = (-180.0, -90.0, 180.0, 90.0)
    planar_envelope: tuple[float, float, float, float] | None = None

    def __post_init__(self) -> None:
        if len(self.standard_parallels) not in (0, 2):
            msg = (
                "standard_parallels must be empty (one-parallel form) or hold two "
                f"latitudes, got {self.standard_parallels!r}"
            )
            raise ValueError(msg)
        if self.scale_factor <= 0:
            msg = f"scale_factor must be > 0, got {self.scale_factor}"
            raise ValueError(msg)

    @property
    def is_two_parallel(self) -> bool:
        return (
            len(self.standard_parallels) == 2
            and self.standard_parallels[0] != self.standard_parallels[1]
        )

    def to_proj4(self) -> str:
        """Return the equivalent PROJ definition string."""
        if self.standard_parallels:
            lat_1, lat_2 = self.standard_parallels
            parallels = f"+lat_1={lat_1:.15g} +lat_2={lat_2:.15g}"
        else:
            parallels = f"+lat_1={self.central_parallel:.15g}"
        return (
            f"+proj=lcc {parallels} +lat_0={self.central_parallel:.15g} "
            f"+lon_0={self.central_meridian:.15g} +k_0={self.scale_factor!r} "
            f"+x_0={self.false_easting:.15g} +y_0={self.false_northing:.15g} "
            f"+a={self.ellipsoid.semi_major_axis!r} +rf={self.ellipsoid.inverse_flattening!r} "
            f"+towgs84={self.datum_shift.to_towgs84()} +units=m +no_defs"
        )
