"""Plain-coordinate geometry helpers.

- coordinate_converter: metres <-> degrees, Haversine distance, rotation
- geometry_utils: closed-rectangle ring manipulation
- area_calculator: plot area in square metres / acres
"""
