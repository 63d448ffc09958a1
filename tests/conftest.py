"""Shared pytest fixtures for the zone geometry test suite."""

from __future__ import annotations

import pytest

from zone_geometry.models.entity import EntityRecord
from zone_geometry.models.projection import ProjectionParameters
from zone_geometry.models.vertex import GeographicPoint, PlanarPoint, Vertex
from zone_geometry.projection.registry import LAMBERT_93, NORD_MAROC

# ---------------------------------------------------------------------------
# Reference geometry (Lambert Nord Maroc metres)
# ---------------------------------------------------------------------------

# 1 km square just north-east of the false origin (Meknes/Fes region).
SQUARE_1KM = [
    Vertex(sequence=1, x=500_000.0, y=300_000.0),
    Vertex(sequence=2, x=501_000.0, y=300_000.0),
    Vertex(sequence=3, x=501_000.0, y=301_000.0),
    Vertex(sequence=4, x=500_000.0, y=301_000.0),
]
SQUARE_1KM_CENTRE = PlanarPoint(500_500.0, 300_500.0)


# ---------------------------------------------------------------------------
# Parameter fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def morocco_params() -> ProjectionParameters:
    """Lambert Nord Maroc (EPSG:26191) with its Merchich datum shift."""
    return NORD_MAROC


@pytest.fixture()
def france_params() -> ProjectionParameters:
    """RGF93 / Lambert-93 (EPSG:2154), two standard parallels."""
    return LAMBERT_93


# ---------------------------------------------------------------------------
# Entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def square_vertices() -> list[Vertex]:
    """The 1 km square ring, already ordered by sequence."""
    return list(SQUARE_1KM)


@pytest.fixture()
def ring_entity() -> EntityRecord:
    """A zone carrying a ring, a stale planar point and a legacy geographic point."""
    return EntityRecord(
        key="zone-ring",
        vertices=tuple(reversed(SQUARE_1KM)),
        planar_point=PlanarPoint(450_000.0, 250_000.0),
        geographic_point=GeographicPoint(-7.0, 31.0),
        attributes={"name": "Zone Industrielle Ain Johra", "status": "AVAILABLE"},
    )


@pytest.fixture()
def positionless_entity() -> EntityRecord:
    """A zone with no positional data at all."""
    return EntityRecord(key="zone-empty", attributes={"name": "Draft zone"})
