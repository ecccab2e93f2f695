"""Open-states GeoJSON pipeline.

Loads the bundled FeatureCollection of open (purchasable) regions and
turns it into the inverse "locked regions" overlay.

The pipeline is split into focused modules:
- **_parsing**: raw GeoJSON -> typed Polygon / MultiPolygon models
- **loader**: compute-once asset read (single-flight under concurrency)
- **inverse**: outer-ring extraction and world-bounds inversion
- **state_keys**: region name -> backend state key
"""

from __future__ import annotations

from worldtile_geo.open_states._parsing import (
    parse_feature_collection,
    parse_geometry,
    parse_ring,
)
from worldtile_geo.open_states.inverse import (
    build_inverse_geojson,
    build_locked_overlay,
    create_world_bounds_polygon,
    extract_outer_rings,
    is_counter_clockwise,
    orient_ring,
)
from worldtile_geo.open_states.loader import (
    OpenStatesLoader,
    get_default_loader,
    load_open_states_geojson,
)
from worldtile_geo.open_states.state_keys import (
    extract_state_key_from_feature,
    get_state_key,
)

__all__ = [
    "OpenStatesLoader",
    "build_inverse_geojson",
    "build_locked_overlay",
    "create_world_bounds_polygon",
    "extract_outer_rings",
    "extract_state_key_from_feature",
    "get_default_loader",
    "get_state_key",
    "is_counter_clockwise",
    "load_open_states_geojson",
    "orient_ring",
    "parse_feature_collection",
    "parse_geometry",
    "parse_ring",
]
