"""Data models.

Defines the data structures shared across the library:
- Position / Ring: ``(lon, lat)`` primitives
- PolygonGeometry, MultiPolygonGeometry, FeatureCollection: typed GeoJSON
- RectangleModel, AreaIncreaseEvent: drawn land plots (``models.rectangle``)
"""

from worldtile_geo.models.geojson import (
    FeatureCollection,
    GeoFeature,
    Geometry,
    MultiPolygonGeometry,
    PolygonGeometry,
    SkippedFeature,
)
from worldtile_geo.models.position import Position, Ring, as_position, ring_to_lists

__all__ = [
    "FeatureCollection",
    "GeoFeature",
    "Geometry",
    "MultiPolygonGeometry",
    "PolygonGeometry",
    "Position",
    "Ring",
    "SkippedFeature",
    "as_position",
    "ring_to_lists",
]
