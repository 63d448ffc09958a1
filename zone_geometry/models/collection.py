"""Pydantic wire schema for the feature collection handed to the map API.

``FeatureBatch.to_feature_collection()`` builds a plain dict; this module
validates that dict against a fixed schema and serialises it to JSON for
the HTTP layer. Counter fields use the camelCase names the map front end
reads (``outOfDomain``, ``outOfEnvelope``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from zone_geometry.models.feature import FeatureBatch

SCHEMA_VERSION = "zone-feature-collection-v1"


class GeometryPayload(BaseModel):
    """Point ``[lon, lat]`` or Polygon ``[[lon, lat], ...]`` geometry."""

    type: str
    coordinates: list[float] | list[list[float]]


class FeaturePayload(BaseModel):
    type: str = "Feature"
    id: str
    geometry: GeometryPayload
    properties: dict[str, Any] = Field(default_factory=dict)


class FeatureCollectionPayload(BaseModel):
    """Top-level document returned by the zone and parcel map endpoints.

    Attributes:
        schema_version: Schema identifier, serialised as ``$schema``.
        features: Features in input order.
        filtered: Entities dropped for having no position.
        out_of_domain: Entities dropped because a coordinate could not
            be projected.
        out_of_envelope: Features kept but flagged outside the country's
            validity envelope.
        rejected: Entities dropped for a validation or contract error.
        failed: Entities dropped for an unexpected error.
    """

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    type: str = "FeatureCollection"
    features: list[FeaturePayload] = Field(default_factory=list)
    filtered: int = 0
    out_of_domain: int = Field(default=0, alias="outOfDomain")
    out_of_envelope: int = Field(default=0, alias="outOfEnvelope")
    rejected: int = 0
    failed: int = 0

    model_config = {"populate_by_name": True}

    @classmethod
    def from_batch(cls, batch: FeatureBatch, *, close_rings: bool = False) -> FeatureCollectionPayload:
        """Validate the collection dict of *batch*."""
        return cls.model_validate(batch.to_feature_collection(close_rings=close_rings))

    def to_json(self, *, indent: int | None = None) -> str:
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)  # type: ignore[return-value]
