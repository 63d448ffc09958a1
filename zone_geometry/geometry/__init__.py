"""Planar geometry algorithms: centroid and RDP simplification."""

from zone_geometry.geometry.centroid import polygon_centroid
from zone_geometry.geometry.simplify import simplify

__all__ = ["polygon_centroid", "simplify"]
