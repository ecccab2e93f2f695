"""Typed parsing of raw GeoJSON into the polygonal models.

Responsibilities:
- Top-level ``FeatureCollection`` structure checks (fatal)
- Per-feature geometry parsing into ``PolygonGeometry`` /
  ``MultiPolygonGeometry`` (lenient: bad features are skipped and recorded,
  malformed holes and MultiPolygon members are dropped)
- Coordinate coercion to ``(float, float)`` positions
"""

from __future__ import annotations

import logging

from worldtile_geo.core.constants import MIN_RING_POSITIONS
from worldtile_geo.core.exceptions import InvalidGeoJSONError, UnsupportedGeometryError
from worldtile_geo.models.geojson import (
    FeatureCollection,
    GeoFeature,
    Geometry,
    MultiPolygonGeometry,
    PolygonGeometry,
    SkippedFeature,
)
from worldtile_geo.models.position import Position, as_position

logger = logging.getLogger("worldtile_geo.open_states")

FEATURE_COLLECTION = "FeatureCollection"

# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------


def parse_ring(raw_ring: object) -> list[Position]:
    """Coerce a raw ``[[lon, lat], ...]`` ring to positions.

    Raises:
        UnsupportedGeometryError: If the ring is not a list, has fewer than
            four positions, or holds a malformed coordinate.
    """
    if not isinstance(raw_ring, list):
        msg = f"ring must be a list, got {type(raw_ring).__name__}"
        raise UnsupportedGeometryError(msg)
    if len(raw_ring) < MIN_RING_POSITIONS:
        msg = f"ring has {len(raw_ring)} position(s), need at least {MIN_RING_POSITIONS}"
        raise UnsupportedGeometryError(msg)

    ring: list[Position] = []
    for idx, raw in enumerate(raw_ring):
        try:
            ring.append(as_position(raw))
        except (TypeError, ValueError) as exc:
            msg = f"malformed coordinate at index {idx}: {exc}"
            raise UnsupportedGeometryError(msg) from exc
    return ring


def _parse_rings(raw_rings: object) -> tuple[list[Position], ...]:
    """Parse one polygon's rings: the outer ring strictly, holes best-effort.

    A malformed hole is dropped with a debug record; it never costs the
    polygon its outer ring.
    """
    if not isinstance(raw_rings, list) or not raw_rings:
        msg = "polygon coordinates must be a non-empty list of rings"
        raise UnsupportedGeometryError(msg)

    rings = [parse_ring(raw_rings[0])]
    for hole_index, raw_hole in enumerate(raw_rings[1:], start=1):
        try:
            rings.append(parse_ring(raw_hole))
        except UnsupportedGeometryError as exc:
            logger.debug("Dropped malformed hole | ring=%d | reason=%s", hole_index, exc.message)
    return tuple(rings)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def parse_geometry(raw: object) -> Geometry:
    """Parse a raw GeoJSON geometry object.

    Only ``Polygon`` and ``MultiPolygon`` are supported.  Only the outer
    ring of a polygon must be well formed; malformed holes are dropped.
    Empty or malformed member polygons of a ``MultiPolygon`` are dropped
    and the remaining members kept.

    Raises:
        UnsupportedGeometryError: If the geometry is missing, of another
            type, or has no usable outer ring.
    """
    if raw is None:
        msg = "geometry is missing"
        raise UnsupportedGeometryError(msg)
    if not isinstance(raw, dict):
        msg = f"geometry must be an object, got {type(raw).__name__}"
        raise UnsupportedGeometryError(msg)

    geometry_type = raw.get("type")
    coordinates = raw.get("coordinates")
    if not isinstance(geometry_type, str):
        msg = "geometry type is missing"
        raise UnsupportedGeometryError(msg)
    if coordinates is None:
        msg = f"{geometry_type} geometry has no coordinates"
        raise UnsupportedGeometryError(msg)

    if geometry_type == PolygonGeometry.type:
        return PolygonGeometry(rings=_parse_rings(coordinates))

    if geometry_type == MultiPolygonGeometry.type:
        if not isinstance(coordinates, list):
            msg = "MultiPolygon coordinates must be a list of polygons"
            raise UnsupportedGeometryError(msg)
        polygons: list[tuple[list[Position], ...]] = []
        for member_index, member in enumerate(coordinates):
            if isinstance(member, list) and not member:
                continue
            try:
                polygons.append(_parse_rings(member))
            except UnsupportedGeometryError as exc:
                logger.warning(
                    "Dropped malformed MultiPolygon member | member=%d | reason=%s",
                    member_index,
                    exc.message,
                )
        if not polygons:
            msg = "MultiPolygon has no usable polygons"
            raise UnsupportedGeometryError(msg)
        return MultiPolygonGeometry(polygons=tuple(polygons))

    msg = f"unsupported geometry type {geometry_type!r}"
    raise UnsupportedGeometryError(msg)


# ---------------------------------------------------------------------------
# FeatureCollection
# ---------------------------------------------------------------------------


def parse_feature_collection(document: object, *, source: str = "") -> FeatureCollection:
    """Parse a raw GeoJSON document into a typed ``FeatureCollection``.

    Structural problems with the document itself are fatal.  A feature
    with a missing or unusable geometry is skipped and recorded in
    ``FeatureCollection.skipped``; the remaining features still parse.

    Args:
        document: Decoded JSON value.
        source: Label for log messages (e.g. the asset file name).

    Raises:
        InvalidGeoJSONError: If *document* is not an object, its ``type``
            is not ``"FeatureCollection"``, or ``features`` is absent or
            not a list.
    """
    if not isinstance(document, dict):
        msg = f"Invalid GeoJSON: expected an object, got {type(document).__name__}"
        raise InvalidGeoJSONError(msg)
    if document.get("type") != FEATURE_COLLECTION:
        msg = f"Invalid GeoJSON: expected FeatureCollection, got type {document.get('type')!r}"
        raise InvalidGeoJSONError(msg)
    raw_features = document.get("features")
    if raw_features is None:
        msg = "Invalid GeoJSON: missing features array"
        raise InvalidGeoJSONError(msg)
    if not isinstance(raw_features, list):
        msg = f"Invalid GeoJSON: features must be an array, got {type(raw_features).__name__}"
        raise InvalidGeoJSONError(msg)

    features: list[GeoFeature] = []
    skipped: list[SkippedFeature] = []
    for index, raw_feature in enumerate(raw_features):
        if not isinstance(raw_feature, dict):
            skipped.append(SkippedFeature(index, "feature is not an object"))
            continue
        try:
            geometry = parse_geometry(raw_feature.get("geometry"))
        except UnsupportedGeometryError as exc:
            skipped.append(SkippedFeature(index, exc.message))
            continue
        properties = raw_feature.get("properties")
        features.append(
            GeoFeature(
                geometry=geometry,
                properties=dict(properties) if isinstance(properties, dict) else {},
                index=index,
            )
        )

    if skipped:
        logger.warning(
            "Skipped %d of %d GeoJSON feature(s) | source=%s | first_reason=%s",
            len(skipped),
            len(raw_features),
            source or "<memory>",
            skipped[0].reason,
        )
        for record in skipped:
            logger.debug("Skipped feature | index=%d | reason=%s", record.index, record.reason)

    return FeatureCollection(features=tuple(features), skipped=tuple(skipped))
