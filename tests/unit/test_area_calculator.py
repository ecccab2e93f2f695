"""Unit tests for plot area calculation (Web Mercator and geodesic)."""

from __future__ import annotations

import pytest

from worldtile_geo.geo.area_calculator import (
    _mercator_transformer,
    calculate_area_in_acres,
    calculate_area_in_square_meters,
    calculate_geodesic_area_m2,
    format_area,
    square_meters_to_acres,
    to_polygon_geometry,
)
from worldtile_geo.geo.geometry_utils import create_default_rectangle

# 0.001 deg square at the equator: ~111 m x ~111 m
EQUATOR_SQUARE = [(0.0, 0.0), (0.001, 0.0), (0.001, 0.001), (0.0, 0.001), (0.0, 0.0)]

# Same angular size at 60 N: Mercator inflates area by ~1/cos^2(60) = 4
SIXTY_NORTH_SQUARE = [(10.0, 60.0), (10.001, 60.0), (10.001, 60.001), (10.0, 60.001), (10.0, 60.0)]


class TestMercatorArea:
    """Shoelace area in the map's projection."""

    def test_equator_square(self) -> None:
        # R * 0.001 deg in radians, squared
        expected = (6_378_137.0 * 0.001 * 3.141592653589793 / 180) ** 2
        assert calculate_area_in_square_meters(EQUATOR_SQUARE) == pytest.approx(expected, rel=1e-4)

    def test_open_and_closed_rings_agree(self) -> None:
        assert calculate_area_in_square_meters(EQUATOR_SQUARE[:-1]) == pytest.approx(
            calculate_area_in_square_meters(EQUATOR_SQUARE)
        )

    def test_winding_agnostic(self) -> None:
        assert calculate_area_in_square_meters(list(reversed(EQUATOR_SQUARE))) == pytest.approx(
            calculate_area_in_square_meters(EQUATOR_SQUARE)
        )

    @pytest.mark.parametrize("ring", [[], [(0.0, 0.0)], [(0.0, 0.0), (1.0, 1.0)]])
    def test_fewer_than_three_points_is_zero(self, ring: list[tuple[float, float]]) -> None:
        assert calculate_area_in_square_meters(ring) == 0.0

    def test_transformer_reused_across_calls(self) -> None:
        calculate_area_in_square_meters(EQUATOR_SQUARE)
        first = _mercator_transformer()
        calculate_area_in_square_meters(SIXTY_NORTH_SQUARE)
        assert _mercator_transformer() is first
        assert _mercator_transformer.cache_info().currsize == 1

    def test_default_rectangle_is_about_one_acre(self) -> None:
        acres = calculate_area_in_acres(create_default_rectangle((0.0, 0.0)))
        assert 0.95 < acres < 1.05, f"Expected ~1 acre, got {acres:.3f}"


class TestGeodesicArea:
    """Ellipsoidal area via pyproj.Geod."""

    def test_equator_square(self) -> None:
        area = calculate_geodesic_area_m2(EQUATOR_SQUARE)
        assert 12_000 < area < 12_600, f"Expected ~12,300 m2, got {area:.0f}"

    def test_mercator_inflation_at_sixty_north(self) -> None:
        ratio = calculate_area_in_square_meters(SIXTY_NORTH_SQUARE) / calculate_geodesic_area_m2(
            SIXTY_NORTH_SQUARE
        )
        assert 3.8 < ratio < 4.2

    def test_winding_agnostic(self) -> None:
        assert calculate_geodesic_area_m2(list(reversed(EQUATOR_SQUARE))) == pytest.approx(
            calculate_geodesic_area_m2(EQUATOR_SQUARE), rel=1e-9
        )

    def test_degenerate_is_zero(self) -> None:
        assert calculate_geodesic_area_m2([(0.0, 0.0), (1.0, 1.0)]) == 0.0


class TestUnitsAndFormatting:
    """Acre conversion and display strings."""

    def test_one_acre(self) -> None:
        assert square_meters_to_acres(4046.86) == pytest.approx(1.0, rel=1e-4)

    def test_square_feet_below_hundredth_acre(self) -> None:
        assert format_area(0.005) == "218 sq ft"

    def test_three_decimals_below_one_acre(self) -> None:
        assert format_area(0.5) == "0.500 acres"

    def test_two_decimals_from_one_acre(self) -> None:
        assert format_area(1.0) == "1.00 acres"
        assert format_area(2.5) == "2.50 acres"


class TestPolygonGeometry:
    """Storage geometry for a closed ring."""

    def test_shape(self) -> None:
        geometry = to_polygon_geometry(EQUATOR_SQUARE)
        assert geometry["type"] == "Polygon"
        assert geometry["coordinates"] == [[list(p) for p in EQUATOR_SQUARE]]
