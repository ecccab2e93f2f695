"""Conversions between metres and degrees on a spherical Earth.

All functions are pure.  Positions are ``(lon, lat)`` pairs in decimal
degrees; anything indexable as ``p[0], p[1]`` is accepted and a
``Position`` is returned.

The metre/degree conversions use the local-flatness approximation
``1 deg ~= 111,320 m`` (scaled by ``cos(lat)`` for longitude).  The error
grows with distance from the conversion point, which is irrelevant at
plot scale (sub-kilometre).

Numeric policy:
    NaN and infinity propagate silently.  The longitude conversions raise
    ``PolarLatitudeError`` at ``|latitude| >= 90`` because ``cos(lat)`` is
    zero there and the result carries no meaning.

Rotation direction:
    ``rotate_point_around_center`` uses the standard mathematical
    convention: a positive angle rotates counter-clockwise (east towards
    north), a negative angle clockwise.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from worldtile_geo.core.constants import EARTH_RADIUS_M, METERS_PER_DEGREE
from worldtile_geo.core.exceptions import PolarLatitudeError
from worldtile_geo.models.position import Position

_POLE_LATITUDE = 90.0


def _longitude_scale(latitude: float) -> float:
    """Metres per degree of longitude at *latitude*."""
    if abs(latitude) >= _POLE_LATITUDE:
        msg = f"Longitude conversion undefined at latitude {latitude} (|lat| must be < 90)"
        raise PolarLatitudeError(msg)
    return METERS_PER_DEGREE * math.cos(math.radians(latitude))


def meters_to_latitude_degrees(meters: float) -> float:
    """Convert a north/south distance in metres to degrees of latitude."""
    return meters / METERS_PER_DEGREE


def meters_to_longitude_degrees(meters: float, latitude: float) -> float:
    """Convert an east/west distance in metres to degrees of longitude at *latitude*.

    Raises:
        PolarLatitudeError: If ``|latitude| >= 90``.
    """
    return meters / _longitude_scale(latitude)


def latitude_degrees_to_meters(degrees: float) -> float:
    """Convert degrees of latitude to metres."""
    return degrees * METERS_PER_DEGREE


def longitude_degrees_to_meters(degrees: float, latitude: float) -> float:
    """Convert degrees of longitude at *latitude* to metres.

    Raises:
        PolarLatitudeError: If ``|latitude| >= 90``.
    """
    return degrees * _longitude_scale(latitude)


def distance_in_meters(p1: Sequence[float], p2: Sequence[float]) -> float:
    """Great-circle distance between two ``(lon, lat)`` positions (Haversine).

    Uses ``atan2(sqrt(a), sqrt(1 - a))`` with ``a`` clamped to ``[0, 1]`` so
    rounding past 1.0 for antipodal points cannot produce a domain error.
    """
    lat1 = math.radians(p1[1])
    lat2 = math.radians(p2[1])
    d_lat = math.radians(p2[1] - p1[1])
    d_lon = math.radians(p2[0] - p1[0])

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def add_meters_to_position(
    position: Sequence[float],
    meters_north: float,
    meters_east: float,
) -> Position:
    """Offset *position* by metres north and east (local tangent plane).

    The longitude delta is evaluated at the input latitude, so the two
    offsets are independent of each other.
    """
    lon, lat = position[0], position[1]
    return Position(
        lon + meters_to_longitude_degrees(meters_east, lat),
        lat + meters_to_latitude_degrees(meters_north),
    )


def rotate_point_around_center(
    point: Sequence[float],
    center: Sequence[float],
    angle_degrees: float,
) -> Position:
    """Rotate *point* about *center* by *angle_degrees*, counter-clockwise positive.

    The offset from the centre is converted to metres at the centre's
    latitude, rotated with ``[cos -sin; sin cos]``, and converted back.

    Raises:
        PolarLatitudeError: If the centre lies on a pole.
    """
    center_lon, center_lat = center[0], center[1]
    angle = math.radians(angle_degrees)

    dx = longitude_degrees_to_meters(point[0] - center_lon, center_lat)
    dy = latitude_degrees_to_meters(point[1] - center_lat)

    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    rotated_x = dx * cos_a - dy * sin_a
    rotated_y = dx * sin_a + dy * cos_a

    return Position(
        center_lon + meters_to_longitude_degrees(rotated_x, center_lat),
        center_lat + meters_to_latitude_degrees(rotated_y),
    )
