"""Rectangle helpers over closed 5-point rings.

A plot rectangle is four corners ordered bottom-left, bottom-right,
top-right, top-left, closed by repeating the first corner.  Map renderers
rely on that winding, so every helper here preserves it.

Invariant violations (too few positions, a corner index outside 0-3) are
caller bugs and raise ``RectangleError`` instead of being clamped.
"""

from __future__ import annotations

from collections.abc import Sequence

from worldtile_geo.core.constants import ACRE_SIZE_DEGREES, MIN_RING_POSITIONS
from worldtile_geo.core.exceptions import RectangleError
from worldtile_geo.models.position import Position

_HALF_SIZE = ACRE_SIZE_DEGREES / 2
_CORNER_COUNT = 4


def create_default_rectangle(center: Sequence[float]) -> list[Position]:
    """Return a closed square of roughly one acre centred on *center*."""
    lon, lat = center[0], center[1]
    return [
        Position(lon - _HALF_SIZE, lat - _HALF_SIZE),  # bottom-left
        Position(lon + _HALF_SIZE, lat - _HALF_SIZE),  # bottom-right
        Position(lon + _HALF_SIZE, lat + _HALF_SIZE),  # top-right
        Position(lon - _HALF_SIZE, lat + _HALF_SIZE),  # top-left
        Position(lon - _HALF_SIZE, lat - _HALF_SIZE),
    ]


def ensure_closed_polygon(positions: Sequence[Sequence[float]]) -> list[Position]:
    """Return a copy of *positions* whose last entry equals the first.

    Empty input gives an empty list.  Calling it on its own output returns
    an equal list.
    """
    if not positions:
        return []
    ring = [Position(p[0], p[1]) for p in positions]
    if ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def get_center(positions: Sequence[Sequence[float]]) -> Position:
    """Mean of the first four positions.

    The closing point and anything past index 3 are ignored.

    Raises:
        RectangleError: If fewer than four positions are given.
    """
    _require_corners(positions)
    corners = positions[:_CORNER_COUNT]
    return Position(
        sum(p[0] for p in corners) / _CORNER_COUNT,
        sum(p[1] for p in corners) / _CORNER_COUNT,
    )


def translate(
    positions: Sequence[Sequence[float]],
    delta_lon: float,
    delta_lat: float,
) -> list[Position]:
    """Shift every position by the same delta; a closed ring stays closed."""
    return [Position(p[0] + delta_lon, p[1] + delta_lat) for p in positions]


def update_corner(
    positions: Sequence[Sequence[float]],
    corner_index: int,
    new_position: Sequence[float],
) -> list[Position]:
    """Replace one of the four corners and re-close the ring.

    Closure is always recomputed from ``positions[0:4]``; an existing
    fifth point is discarded.  The result always has five points, even
    when the new corner coincides with another one.

    Raises:
        RectangleError: If *corner_index* is outside 0-3 or fewer than
            four positions are given.
    """
    if not 0 <= corner_index < _CORNER_COUNT:
        msg = f"corner_index must be between 0 and 3, got {corner_index}"
        raise RectangleError(msg)
    _require_corners(positions)

    corners = [Position(p[0], p[1]) for p in positions[:_CORNER_COUNT]]
    corners[corner_index] = Position(new_position[0], new_position[1])
    return [*corners, corners[0]]


def _require_corners(positions: Sequence[Sequence[float]]) -> None:
    if len(positions) < MIN_RING_POSITIONS:
        msg = (
            f"Rectangle requires at least {MIN_RING_POSITIONS} coordinates, "
            f"got {len(positions)}"
        )
        raise RectangleError(msg)
