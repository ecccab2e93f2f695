"""WorldTile geospatial core.

Coordinate conversion, land-plot rectangle geometry, and the open-states
GeoJSON pipeline that produces the "locked regions" map overlay for the
WorldTile virtual-land marketplace.
"""

__version__ = "0.1.0"
