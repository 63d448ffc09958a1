"""Data models and schemas.

Defines the data structures used throughout the pipeline:
- Vertex / PlanarPoint / GeographicPoint: coordinate primitives
- ProjectionParameters: per-country Lambert definition and datum shift
- EntityRecord: zone or parcel input from the API layer
- Feature / FeatureBatch: render-ready output with counters
- FeatureCollectionPayload: validated JSON wire schema (Pydantic)
"""

from zone_geometry.models.collection import FeatureCollectionPayload
from zone_geometry.models.entity import EntityRecord
from zone_geometry.models.feature import Feature, FeatureBatch, close_ring
from zone_geometry.models.projection import DatumShift, Ellipsoid, ProjectionParameters
from zone_geometry.models.vertex import GeographicPoint, PlanarPoint, Vertex

__all__ = [
    "DatumShift",
    "Ellipsoid",
    "EntityRecord",
    "Feature",
    "FeatureBatch",
    "FeatureCollectionPayload",
    "GeographicPoint",
    "PlanarPoint",
    "ProjectionParameters",
    "Vertex",
    "close_ring",
]
