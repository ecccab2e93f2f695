"""Shared constants: single source of truth.

Centralises the spherical-Earth figures, plot sizes, and world-bounds
limits used by the geometry modules and the open-states pipeline.
"""

from __future__ import annotations

from pathlib import Path

# ---------------------------------------------------------------------------
# Spherical Earth
# ---------------------------------------------------------------------------

EARTH_RADIUS_M: float = 6_378_137.0
"""Equatorial radius of the WGS 84 sphere used for Haversine distances."""

METERS_PER_DEGREE: float = 111_320.0
"""Approximate length of one degree of latitude (and of longitude at the equator)."""

# ---------------------------------------------------------------------------
# World bounds (web-map projection degrades beyond +/-85 degrees)
# ---------------------------------------------------------------------------

WORLD_MIN_LONGITUDE: float = -180.0
WORLD_MAX_LONGITUDE: float = 180.0
WORLD_MIN_LATITUDE: float = -85.0
WORLD_MAX_LATITUDE: float = 85.0

# ---------------------------------------------------------------------------
# Land plots
# ---------------------------------------------------------------------------

ACRE_SIZE_DEGREES: float = 0.000571
"""Side of a square covering roughly one acre at the equator."""

SQ_METRES_PER_ACRE: float = 4046.86
"""One acre; also the minimum purchasable plot area."""

ACRES_PER_SQ_METRE: float = 0.000247105

SQ_FEET_PER_ACRE: float = 43_560.0

DEFAULT_PLOT_SIZE_M: float = 20.0
"""Side of the square a new drawn plot starts with."""

MIN_RING_POSITIONS: int = 4
"""Minimum positions in a closed ring (3 distinct + closure); also rectangle corners."""

# ---------------------------------------------------------------------------
# Bundled data
# ---------------------------------------------------------------------------

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"

DEFAULT_OPEN_STATES_PATH: Path = DATA_DIR / "open_states_level1.json"
"""GeoJSON FeatureCollection of open (purchasable) level-1 regions."""

LOCKED_PROPERTY: str = "locked"
"""Property flag carried by the inverse overlay feature."""
