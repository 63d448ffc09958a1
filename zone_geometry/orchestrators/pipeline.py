"""Geometry pipeline orchestrator.

Turns zone and parcel records into render-ready features:

1. Ring (at least one vertex): order by ``sequence``, project every
   vertex, compute the centroid in planar space and project it, then
   simplify the projected ring. A single vertex renders as a Point.
2. Single planar point: project it.
3. Legacy geographic point: use as-is (domain-checked, not reprojected).
4. Nothing: the entity is silently filtered and counted.

The fallback chain is a strict priority order.

Each entity is isolated: ``OutOfDomainError`` and any other failure are
counted and reported per entity, and the batch continues. Only
``UnknownCountryError`` (raised while resolving parameters, before the
loop) is fatal to a batch.

A batch builds its results locally and publishes them only on
completion. A cancelled batch returns nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from zone_geometry.core.constants import (
    DEFAULT_SIMPLIFY_TOLERANCE_DEG,
    GEOMETRY_POINT,
    GEOMETRY_POLYGON,
    MIN_RING_VERTICES,
    SOURCE_GEOGRAPHIC_POINT,
    SOURCE_PLANAR_POINT,
    SOURCE_RING,
    SQ_METRES_PER_HECTARE,
)
from zone_geometry.core.exceptions import (
    BatchCancelledError,
    OutOfDomainError,
    PipelineError,
    RingValidationError,
)
from zone_geometry.geometry.centroid import polygon_centroid
from zone_geometry.geometry.simplify import simplify
from zone_geometry.models.entity import EntityRecord
from zone_geometry.models.feature import Feature, FeatureBatch
from zone_geometry.projection.lambert import is_within_envelope, to_geographic, validate_geographic
from zone_geometry.projection.registry import resolve_parameters

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterable, Sequence

    from zone_geometry.core.config import GeometryConfig
    from zone_geometry.models.projection import ProjectionParameters
    from zone_geometry.models.vertex import GeographicPoint, Vertex

logger = logging.getLogger("zone_geometry.orchestrators.pipeline")


# ---------------------------------------------------------------------------
# Per-entity steps
# ---------------------------------------------------------------------------


def order_ring(vertices: Sequence[Vertex]) -> list[Vertex]:
    """Return *vertices* sorted by ``sequence``.

    Raises:
        RingValidationError: If two vertices share a sequence number.
    """
    ordered = sorted(vertices, key=lambda v: v.sequence)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.sequence == current.sequence:
            msg = f"Duplicate vertex sequence {current.sequence} in ring"
            raise RingValidationError(msg)
    return ordered


def geodesic_area_ha(coords: Sequence[tuple[float, float]]) -> float:
    """Geodesic area of a WGS 84 ring in hectares (winding-order agnostic)."""
    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    area_m2, _perimeter = geod.polygon_area_perimeter(
        [c[0] for c in coords],
        [c[1] for c in coords],
    )
    return abs(area_m2) / SQ_METRES_PER_HECTARE


def _point_feature(
    entity: EntityRecord,
    point: GeographicPoint,
    params: ProjectionParameters,
    source: str,
) -> Feature:
    return Feature(
        key=entity.key,
        geometry_type=GEOMETRY_POINT,
        coordinates=[point.coordinates],
        centroid=point,
        attributes=entity.attributes,
        source=source,
        in_envelope=is_within_envelope(point, params),
    )


def _ring_feature(
    entity: EntityRecord,
    params: ProjectionParameters,
    tolerance: float,
) -> Feature:
    ring = order_ring(entity.vertices)
    projected = [to_geographic(v, params) for v in ring]

    # Non-empty ring, so the centroid is defined.
    planar_centroid = polygon_centroid(ring)
    centroid = to_geographic(planar_centroid, params)  # type: ignore[arg-type]

    if len(ring) < MIN_RING_VERTICES:
        return _point_feature(entity, centroid, params, SOURCE_RING)

    coords = [p.coordinates for p in projected]
    in_envelope = is_within_envelope(centroid, params) and all(
        is_within_envelope(p, params) for p in projected
    )
    return Feature(
        key=entity.key,
        geometry_type=GEOMETRY_POLYGON,
        coordinates=simplify(coords, tolerance),
        centroid=centroid,
        attributes=entity.attributes,
        source=SOURCE_RING,
        in_envelope=in_envelope,
        area_ha=geodesic_area_ha(coords),
    )


def build_feature(
    entity: EntityRecord,
    params: ProjectionParameters,
    *,
    tolerance: float = DEFAULT_SIMPLIFY_TOLERANCE_DEG,
) -> Feature | None:
    """Build the render feature of one entity, or ``None`` if it has no position.

    Args:
        entity: The zone or parcel record.
        params: Projection parameters of the batch's country.
        tolerance: RDP tolerance in degrees.

    Returns:
        A ``Feature``, or ``None`` when the entity carries no positional data.

    Raises:
        OutOfDomainError: If a coordinate cannot be projected.
        RingValidationError: If the ring has duplicate sequence numbers.
    """
    if entity.vertices:
        return _ring_feature(entity, params, tolerance)
    if entity.planar_point is not None:
        point = to_geographic(entity.planar_point, params)
        return _point_feature(entity, point, params, SOURCE_PLANAR_POINT)
    if entity.geographic_point is not None:
        validate_geographic(entity.geographic_point)
        return _point_feature(entity, entity.geographic_point, params, SOURCE_GEOGRAPHIC_POINT)
    return None


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


def _entity_key(item: object, index: int) -> str:
    if isinstance(item, EntityRecord):
        return item.key
    if isinstance(item, dict) and ("id" in item or "key" in item):
        return str(item.get("id", item.get("key")))
    return f"#{index}"


def _check_cancelled(cancel_event: threading.Event | None, correlation_id: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise BatchCancelledError("Batch cancelled before completion", correlation_id=correlation_id)


def run_batch(
    entities: Iterable[EntityRecord | dict[str, Any]],
    params: ProjectionParameters,
    *,
    tolerance: float = DEFAULT_SIMPLIFY_TOLERANCE_DEG,
    cancel_event: threading.Event | None = None,
    correlation_id: str = "",
) -> FeatureBatch:
    """Process a batch of entities with one parameter set.

    Args:
        entities: ``EntityRecord`` instances or persistence-layer dicts
            (converted with ``EntityRecord.from_dict``).
        params: Projection parameters supplied with the batch.
        tolerance: RDP tolerance in degrees.
        cancel_event: Checked between entities; once set the batch stops.
        correlation_id: Request identifier carried into logs and errors.

    Returns:
        A ``FeatureBatch`` with features in input order and drop counters.

    Raises:
        BatchCancelledError: If *cancel_event* is set before completion.
    """
    features: list[Feature] = []
    errors: list[dict[str, object]] = []
    filtered = out_of_domain = rejected = failed = out_of_envelope = 0

    for index, item in enumerate(entities):
        _check_cancelled(cancel_event, correlation_id)
        key = _entity_key(item, index)
        try:
            entity = item if isinstance(item, EntityRecord) else EntityRecord.from_dict(item)
            feature = build_feature(entity, params, tolerance=tolerance)
        except OutOfDomainError as exc:
            out_of_domain += 1
            exc.correlation_id = exc.correlation_id or correlation_id
            errors.append({"key": key, **exc.to_error_dict()})
            logger.debug("Entity out of domain | key=%s | error=%s", key, exc)
            continue
        except PipelineError as exc:
            rejected += 1
            exc.correlation_id = exc.correlation_id or correlation_id
            errors.append({"key": key, **exc.to_error_dict()})
            logger.debug("Entity rejected | key=%s | code=%s | error=%s", key, exc.code, exc)
            continue
        except Exception as exc:
            failed += 1
            errors.append(
                {
                    "key": key,
                    "category": "unexpected",
                    "code": type(exc).__name__,
                    "stage": "orchestrator",
                    "message": str(exc),
                    "retryable": False,
                    "correlation_id": correlation_id,
                }
            )
            logger.exception("Entity failed | key=%s | correlation_id=%s", key, correlation_id)
            continue

        if feature is None:
            filtered += 1
            continue
        if not feature.in_envelope:
            out_of_envelope += 1
            logger.warning(
                "Feature outside country envelope | key=%s | country=%s | centroid=%s",
                key,
                params.country_code,
                feature.centroid.format() if feature.centroid else "",
            )
        features.append(feature)

    _check_cancelled(cancel_event, correlation_id)

    logger.info(
        "Batch processed | country=%s | features=%d | filtered=%d | out_of_domain=%d | "
        "rejected=%d | failed=%d | out_of_envelope=%d | correlation_id=%s",
        params.country_code,
        len(features),
        filtered,
        out_of_domain,
        rejected,
        failed,
        out_of_envelope,
        correlation_id,
    )

    return FeatureBatch(
        features=features,
        country_code=params.country_code,
        filtered_count=filtered,
        out_of_domain_count=out_of_domain,
        rejected_count=rejected,
        failed_count=failed,
        out_of_envelope_count=out_of_envelope,
        errors=errors,
    )


def process_entities(
    entities: Iterable[EntityRecord | dict[str, Any]],
    country_code: str,
    *,
    config: GeometryConfig | None = None,
    use_default_country: bool = False,
    correlation_id: str = "",
) -> FeatureBatch:
    """Resolve *country_code* and run a batch synchronously.

    Args:
        entities: Records to process.
        country_code: Country whose projection the batch uses.
        config: Pipeline configuration (defaults apply if ``None``).
        use_default_country: Fall back to ``config.default_country`` when
            *country_code* is unknown instead of failing.
        correlation_id: Request identifier carried into logs and errors.

    Raises:
        UnknownCountryError: If the country (and any fallback) is unknown.
    """
    if config is None:
        from zone_geometry.core.config import GeometryConfig

        config = GeometryConfig()
    fallback = config.default_country if use_default_country else None
    params = resolve_parameters(country_code, fallback=fallback)
    return run_batch(
        entities,
        params,
        tolerance=config.simplify_tolerance_deg,
        correlation_id=correlation_id,
    )
