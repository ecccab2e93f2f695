"""Position and ring primitives.

A ``Position`` is a WGS 84 ``(lon, lat)`` pair in decimal degrees.  It is
a ``NamedTuple`` so it compares equal to, and unpacks like, the plain
tuples used elsewhere; ``to_list`` gives the ``[lon, lat]`` form GeoJSON
expects.  A ``Ring`` is a list of positions whose first and last entries
are equal.
"""

from __future__ import annotations

from typing import NamedTuple


class Position(NamedTuple):
    """Immutable ``(lon, lat)`` coordinate in decimal degrees."""

    lon: float
    lat: float

    def to_list(self) -> list[float]:
        """Return ``[lon, lat]`` for GeoJSON serialisation."""
        return [self.lon, self.lat]


Ring = list[Position]


def as_position(value: object) -> Position:
    """Coerce a ``[lon, lat, ...]`` sequence to a ``Position``.

    Extra ordinates (altitude) are dropped.

    Raises:
        TypeError: If *value* is not a sequence of at least two numbers.
        ValueError: If an ordinate cannot be converted to float.
    """
    if isinstance(value, Position):
        return value
    if not isinstance(value, list | tuple):
        msg = f"coordinate must be a list or tuple, got {type(value).__name__}"
        raise TypeError(msg)
    if len(value) < 2:
        msg = f"coordinate needs at least 2 elements, got {len(value)}"
        raise TypeError(msg)
    if isinstance(value[0], bool) or isinstance(value[1], bool):
        msg = "coordinate ordinates must be numbers, got bool"
        raise TypeError(msg)
    return Position(float(value[0]), float(value[1]))


def ring_to_lists(ring: list[Position]) -> list[list[float]]:
    """Serialise a ring to GeoJSON ``[[lon, lat], ...]``."""
    return [[p[0], p[1]] for p in ring]
