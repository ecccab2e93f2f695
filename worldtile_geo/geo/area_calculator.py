"""Plot area calculation.

Two area measures are offered:

- ``calculate_area_in_square_meters`` projects to Web Mercator
  (EPSG:3857), the projection the map renders in, and applies the
  shoelace formula.  This is the figure shown while drawing.
- ``calculate_geodesic_area_m2`` uses ``pyproj.Geod`` on the WGS 84
  ellipsoid and is independent of latitude distortion.

Both are winding-order agnostic (absolute values).
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from typing import TYPE_CHECKING

from worldtile_geo.core.constants import ACRES_PER_SQ_METRE, SQ_FEET_PER_ACRE

WEB_MERCATOR_CRS = "EPSG:3857"
WGS84_CRS = "EPSG:4326"

_MIN_AREA_POINTS = 3

if TYPE_CHECKING:
    from pyproj import Transformer


@lru_cache(maxsize=1)
def _mercator_transformer() -> Transformer:
    """WGS 84 -> Web Mercator transformer, built once per process."""
    from pyproj import Transformer

    return Transformer.from_crs(WGS84_CRS, WEB_MERCATOR_CRS, always_xy=True)


def calculate_area_in_square_meters(ring: Sequence[Sequence[float]]) -> float:
    """Shoelace area of *ring* in Web Mercator square metres.

    Returns ``0.0`` for fewer than three points.  The ring may be open or
    closed; a repeated closing point contributes nothing.
    """
    if len(ring) < _MIN_AREA_POINTS:
        return 0.0

    xs, ys = _mercator_transformer().transform([p[0] for p in ring], [p[1] for p in ring])
    xs = list(xs)
    ys = list(ys)

    total = 0.0
    count = len(xs)
    for i in range(count):
        j = (i + 1) % count
        total += xs[i] * ys[j] - xs[j] * ys[i]
    return abs(total) / 2.0


def calculate_geodesic_area_m2(ring: Sequence[Sequence[float]]) -> float:
    """Ellipsoidal (WGS 84) area of *ring* in square metres."""
    if len(ring) < _MIN_AREA_POINTS:
        return 0.0

    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    area_m2, _perimeter = geod.polygon_area_perimeter(
        [p[0] for p in ring], [p[1] for p in ring]
    )
    return abs(area_m2)


def square_meters_to_acres(square_meters: float) -> float:
    return square_meters * ACRES_PER_SQ_METRE


def calculate_area_in_acres(ring: Sequence[Sequence[float]]) -> float:
    """Web Mercator area of *ring* in acres."""
    return square_meters_to_acres(calculate_area_in_square_meters(ring))


def format_area(acres: float) -> str:
    """Human-readable plot size.

    Below 0.01 acre the size is shown in square feet, below one acre with
    three decimals, otherwise with two.
    """
    if acres < 0.01:
        return f"{acres * SQ_FEET_PER_ACRE:.0f} sq ft"
    if acres < 1:
        return f"{acres:.3f} acres"
    return f"{acres:.2f} acres"


def to_polygon_geometry(ring: Sequence[Sequence[float]]) -> dict[str, object]:
    """GeoJSON ``Polygon`` geometry for storing a closed ring."""
    return {
        "type": "Polygon",
        "coordinates": [[[float(p[0]), float(p[1])] for p in ring]],
    }
