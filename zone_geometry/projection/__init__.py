"""Projection layer.

- registry: per-country ``ProjectionParameters`` lookup
- lambert: Lambert Conformal Conic forward/inverse through PROJ, domain checks
"""

from zone_geometry.projection.lambert import (
    is_within_envelope,
    is_within_planar_envelope,
    to_geographic,
    to_planar,
)
from zone_geometry.projection.registry import (
    get_parameters,
    list_countries,
    register_parameters,
    resolve_parameters,
)

__all__ = [
    "get_parameters",
    "is_within_envelope",
    "is_within_planar_envelope",
    "list_countries",
    "register_parameters",
    "resolve_parameters",
    "to_geographic",
    "to_planar",
]
