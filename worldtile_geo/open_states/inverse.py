"""Inverse ("locked regions") overlay construction.

The locked overlay is one polygon whose outer ring is the world bounds
and whose holes are the outer rings of every open region:

    load -> extract outer rings -> wrap in the world-bounds polygon

Holes of the *input* polygons are dropped; a hole inside a hole has no
meaning for the overlay.

Winding order is left as found unless ``normalize_winding`` is set, in
which case the outer ring is oriented counter-clockwise and every hole
clockwise (RFC 7946 right-hand rule).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from worldtile_geo.core.config import GeoConfig
from worldtile_geo.core.constants import (
    LOCKED_PROPERTY,
    WORLD_MAX_LATITUDE,
    WORLD_MAX_LONGITUDE,
    WORLD_MIN_LATITUDE,
    WORLD_MIN_LONGITUDE,
)
from worldtile_geo.models.geojson import FeatureCollection
from worldtile_geo.models.position import Position, ring_to_lists
from worldtile_geo.open_states._parsing import parse_feature_collection
from worldtile_geo.open_states.loader import OpenStatesLoader, load_open_states_geojson

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("worldtile_geo.open_states.inverse")


def create_world_bounds_polygon() -> list[list[float]]:
    """Counter-clockwise closed ring covering lon [-180, 180], lat [-85, 85].

    Latitude stops at +/-85 because the web-map projection breaks down
    towards the poles.  A new list is returned on every call.
    """
    return [
        [WORLD_MIN_LONGITUDE, WORLD_MIN_LATITUDE],
        [WORLD_MAX_LONGITUDE, WORLD_MIN_LATITUDE],
        [WORLD_MAX_LONGITUDE, WORLD_MAX_LATITUDE],
        [WORLD_MIN_LONGITUDE, WORLD_MAX_LATITUDE],
        [WORLD_MIN_LONGITUDE, WORLD_MIN_LATITUDE],
    ]


def _as_collection(feature_collection: FeatureCollection | dict[str, object]) -> FeatureCollection:
    if isinstance(feature_collection, FeatureCollection):
        return feature_collection
    return parse_feature_collection(feature_collection)


def extract_outer_rings(
    feature_collection: FeatureCollection | dict[str, object],
) -> list[list[Position]]:
    """Outer ring of every polygon in *feature_collection*.

    ``Polygon`` features contribute ``coordinates[0]``; ``MultiPolygon``
    features contribute ``coordinates[i][0]`` for each member polygon.
    Features without a usable polygonal geometry contribute nothing.

    Args:
        feature_collection: A parsed collection, or a raw GeoJSON dict
            which is parsed first.

    Raises:
        InvalidGeoJSONError: If a raw dict is not a FeatureCollection.
    """
    collection = _as_collection(feature_collection)
    rings: list[list[Position]] = []
    for feature in collection.features:
        rings.extend(feature.outer_rings)
    return rings


def is_counter_clockwise(ring: Sequence[Sequence[float]]) -> bool:
    """Whether *ring* winds counter-clockwise (positive signed area)."""
    from shapely.geometry import LinearRing

    return bool(LinearRing([(p[0], p[1]) for p in ring]).is_ccw)


def orient_ring(ring: list[list[float]], *, counter_clockwise: bool) -> list[list[float]]:
    """Return *ring* reversed if its winding differs from the requested one."""
    if is_counter_clockwise(ring) == counter_clockwise:
        return ring
    return list(reversed(ring))


def build_inverse_geojson(
    feature_collection: FeatureCollection | dict[str, object],
    *,
    normalize_winding: bool = False,
) -> dict[str, object]:
    """Build the locked-regions FeatureCollection.

    Returns a GeoJSON FeatureCollection with exactly one ``Polygon``
    feature: ``coordinates = [world_bounds, *open_region_outer_rings]``
    and ``properties = {"locked": True}``.

    Args:
        feature_collection: Open regions, parsed or raw.
        normalize_winding: Orient the outer ring CCW and holes CW.

    Raises:
        InvalidGeoJSONError: If a raw dict is not a FeatureCollection.
    """
    world_bounds = create_world_bounds_polygon()
    holes = [ring_to_lists(ring) for ring in extract_outer_rings(feature_collection)]

    if normalize_winding:
        world_bounds = orient_ring(world_bounds, counter_clockwise=True)
        holes = [orient_ring(ring, counter_clockwise=False) for ring in holes]

    logger.debug(
        "Inverse polygon built | holes=%d | normalize_winding=%s",
        len(holes),
        normalize_winding,
    )

    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [world_bounds, *holes],
                },
                "properties": {LOCKED_PROPERTY: True},
            }
        ],
    }


def build_locked_overlay(
    config: GeoConfig | None = None,
    *,
    loader: OpenStatesLoader | None = None,
) -> dict[str, object]:
    """Load the open states (cached) and return the locked overlay GeoJSON.

    Args:
        config: Supplies ``normalize_winding``; read from the environment
            when omitted.
        loader: Loader to use; defaults to the process-wide loader.

    Raises:
        OpenStatesLoadError: If the open-states asset cannot be loaded.
    """
    config = config or GeoConfig.from_env()
    collection = load_open_states_geojson(loader)
    overlay = build_inverse_geojson(collection, normalize_winding=config.normalize_winding)
    logger.info(
        "Locked overlay ready | open_regions=%d | skipped=%d",
        len(collection.features),
        collection.skipped_count,
    )
    return overlay
