"""Projection parameters registry: per-country Lambert definitions.

The registry maps an ISO country code to its immutable
``ProjectionParameters``. Lookups never substitute another country:
``get_parameters`` raises ``UnknownCountryError`` and callers that want a
fallback say so explicitly through ``resolve_parameters``.

Usage::

    from zone_geometry.projection.registry import get_parameters

    params = get_parameters("MA")
    point = to_geographic(PlanarPoint(500_000, 300_000), params)
"""

from __future__ import annotations

import logging

from zone_geometry.core.constants import (
    CLARKE_1880_IGN_INVERSE_FLATTENING,
    CLARKE_1880_IGN_SEMI_MAJOR_AXIS,
    GRS80_INVERSE_FLATTENING,
    GRS80_SEMI_MAJOR_AXIS,
)
from zone_geometry.core.exceptions import UnknownCountryError
from zone_geometry.models.projection import DatumShift, Ellipsoid, ProjectionParameters

logger = logging.getLogger("zone_geometry.projection.registry")

# ---------------------------------------------------------------------------
# Built-in parameter sets
# ---------------------------------------------------------------------------

MOROCCO = "MA"
FRANCE = "FR"

CLARKE_1880_IGN = Ellipsoid("clrk80ign", CLARKE_1880_IGN_SEMI_MAJOR_AXIS, CLARKE_1880_IGN_INVERSE_FLATTENING)
GRS80 = Ellipsoid("GRS80", GRS80_SEMI_MAJOR_AXIS, GRS80_INVERSE_FLATTENING)

NORD_MAROC = ProjectionParameters(
    country_code=MOROCCO,
    name="Merchich / Nord Maroc",
    srid=26191,
    central_meridian=-5.4,
    central_parallel=33.3,
    false_easting=500_000.0,
    false_northing=300_000.0,
    scale_factor=0.999625769,
    ellipsoid=CLARKE_1880_IGN,
    datum_shift=DatumShift(dx=31.0, dy=146.0, dz=47.0),
    geographic_envelope=(-13.0, 27.0, -1.0, 36.0),
    planar_envelope=(200_000.0, 100_000.0, 800_000.0, 600_000.0),
)

LAMBERT_93 = ProjectionParameters(
    country_code=FRANCE,
    name="RGF93 / Lambert-93",
    srid=2154,
    central_meridian=3.0,
    central_parallel=46.5,
    false_easting=700_000.0,
    false_northing=6_600_000.0,
    scale_factor=1.0,
    ellipsoid=GRS80,
    standard_parallels=(49.0, 44.0),
    geographic_envelope=(-9.86, 41.15, 10.38, 51.56),
    planar_envelope=(-378_305.81, 6_093_283.21, 1_212_610.74, 7_186_901.68),
)

_REGISTRY: dict[str, ProjectionParameters] = {}


def _register_builtin_parameters() -> None:
    for params in (NORD_MAROC, LAMBERT_93):
        _REGISTRY[params.country_code] = params


def _ensure_registry() -> None:
    """Initialise the registry once (idempotent)."""
    if not _REGISTRY:
        _register_builtin_parameters()


def _normalize(country_code: str) -> str:
    return country_code.strip().upper()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def register_parameters(params: ProjectionParameters) -> None:
    """Register (or replace) the parameter set for ``params.country_code``.

    Intended for startup configuration, not for use while batches run.

    Raises:
        ValueError: If the country code is empty.
    """
    code = _normalize(params.country_code)
    if not code:
        msg = "Country code must be non-empty"
        raise ValueError(msg)
    _ensure_registry()
    _REGISTRY[code] = params
    logger.debug("Registered projection parameters | country=%s | srid=%d", code, params.srid)


def get_parameters(country_code: str) -> ProjectionParameters:
    """Return the projection parameters registered for *country_code*.

    Raises:
        UnknownCountryError: If no entry exists for the code.
    """
    _ensure_registry()
    params = _REGISTRY.get(_normalize(country_code))
    if params is None:
        available = ", ".join(sorted(_REGISTRY))
        msg = f"No projection parameters registered for country {country_code!r}. Available: {available}"
        raise UnknownCountryError(country_code, msg)
    return params


def resolve_parameters(country_code: str, *, fallback: str | None = None) -> ProjectionParameters:
    """Look up *country_code*, falling back to *fallback* when it is unknown.

    The fallback is the caller's explicit policy; the registry itself never
    substitutes. A fallback that is unknown as well still raises.

    Raises:
        UnknownCountryError: If neither code is registered.
    """
    try:
        return get_parameters(country_code)
    except UnknownCountryError:
        if fallback is None:
            raise
        logger.warning(
            "Unknown country, using fallback projection | country=%s | fallback=%s",
            country_code,
            fallback,
        )
        return get_parameters(fallback)


def list_countries() -> list[str]:
    """Return the country codes of all registered parameter sets."""
    _ensure_registry()
    return sorted(_REGISTRY)
