"""Unit tests for the drawn-plot model."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from worldtile_geo.core.exceptions import RectangleError
from worldtile_geo.geo.coordinate_converter import distance_in_meters
from worldtile_geo.models.position import Position
from worldtile_geo.models.rectangle import (
    MINIMUM_AREA_M2,
    AreaIncreaseEvent,
    RectangleModel,
    normalize_rotation,
)

CENTER = Position(77.0, 12.0)
WHEN = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)


def _event(previous: float = 400.0, new: float = 5000.0) -> AreaIncreaseEvent:
    return AreaIncreaseEvent(
        timestamp=WHEN, delta_m2=new - previous, previous_area_m2=previous, new_area_m2=new
    )


# ===========================================================================
# Construction
# ===========================================================================


class TestNormalizeRotation:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(0.0, 0.0), (45.0, 45.0), (360.0, 0.0), (370.0, 10.0), (-90.0, 270.0), (-1e-15, 0.0)],
    )
    def test_range(self, raw: float, expected: float) -> None:
        result = normalize_rotation(raw)
        assert 0.0 <= result < 360.0
        assert result == pytest.approx(expected)


class TestConstruction:
    def test_default_at(self) -> None:
        rect = RectangleModel.default_at(CENTER)
        assert rect.width_m == 20.0
        assert rect.height_m == 20.0
        assert rect.rotation_deg == 0.0
        assert rect.area_m2 == 400.0
        assert rect.id

    def test_from_center_normalises_rotation(self) -> None:
        rect = RectangleModel.from_center(CENTER, 30.0, 40.0, -30.0)
        assert rect.rotation_deg == pytest.approx(330.0)

    def test_accepts_plain_tuple(self) -> None:
        assert RectangleModel.from_center((77.0, 12.0), 1.0, 1.0).center == CENTER

    @pytest.mark.parametrize(("width", "height"), [(0.0, 10.0), (10.0, 0.0), (-1.0, 10.0)])
    def test_rejects_non_positive_dimensions(self, width: float, height: float) -> None:
        with pytest.raises(RectangleError):
            RectangleModel.from_center(CENTER, width, height)

    def test_rejects_rotation_out_of_range(self) -> None:
        with pytest.raises(RectangleError, match="Rotation"):
            RectangleModel(id="x", center=CENTER, width_m=1.0, height_m=1.0, rotation_deg=360.0)

    def test_copy_with_validates(self) -> None:
        rect = RectangleModel.default_at(CENTER)
        with pytest.raises(RectangleError):
            rect.copy_with(width_m=0.0)


# ===========================================================================
# Geometry
# ===========================================================================


class TestGeometry:
    def test_corner_order_unrotated(self) -> None:
        bl, br, tr, tl = RectangleModel.default_at(CENTER).corners
        assert bl.lon < CENTER.lon and bl.lat < CENTER.lat
        assert br.lon > CENTER.lon and br.lat < CENTER.lat
        assert tr.lon > CENTER.lon and tr.lat > CENTER.lat
        assert tl.lon < CENTER.lon and tl.lat > CENTER.lat

    def test_side_lengths(self) -> None:
        bl, br, tr, _ = RectangleModel.from_center(CENTER, 30.0, 50.0).corners
        assert distance_in_meters(bl, br) == pytest.approx(30.0, rel=1e-3)
        assert distance_in_meters(br, tr) == pytest.approx(50.0, rel=1e-3)

    def test_rotation_is_counter_clockwise(self) -> None:
        # A quarter turn CCW moves the bottom-left corner to the bottom-right.
        unrotated = RectangleModel.default_at(CENTER).corners
        rotated = RectangleModel.from_center(CENTER, 20.0, 20.0, 90.0).corners
        assert rotated[0].lon == pytest.approx(unrotated[1].lon, abs=1e-9)
        assert rotated[0].lat == pytest.approx(unrotated[1].lat, abs=1e-9)

    def test_coordinates_closed(self) -> None:
        coords = RectangleModel.default_at(CENTER).coordinates
        assert len(coords) == 5
        assert coords[0] == coords[-1]

    def test_area(self) -> None:
        rect = RectangleModel.from_center(CENTER, 100.0, 50.0)
        assert rect.area_m2 == 5000.0
        assert rect.area_acres == pytest.approx(5000.0 * 0.000247105)

    def test_is_valid_area(self) -> None:
        assert not RectangleModel.default_at(CENTER).is_valid_area
        assert RectangleModel.from_center(CENTER, 70.0, 70.0).is_valid_area
        assert MINIMUM_AREA_M2 == pytest.approx(4046.86)

    def test_contains_point(self) -> None:
        rect = RectangleModel.default_at(CENTER)
        assert rect.contains_point(CENTER.lon, CENTER.lat)
        assert not rect.contains_point(CENTER.lon + 0.01, CENTER.lat)


# ===========================================================================
# History
# ===========================================================================


class TestAreaHistory:
    def test_record_returns_new_model(self) -> None:
        rect = RectangleModel.default_at(CENTER)
        updated = rect.record_area_increase(_event())
        assert rect.area_history == ()
        assert updated.area_history == (_event(),)
        assert updated.id == rect.id

    def test_event_dict(self) -> None:
        assert _event().to_dict() == {
            "timestamp": "2025-03-01T09:30:00+00:00",
            "deltaMetersSquared": 4600.0,
            "previousArea": 400.0,
            "newArea": 5000.0,
        }

    def test_event_from_dict(self) -> None:
        assert AreaIncreaseEvent.from_dict(_event().to_dict()) == _event()


# ===========================================================================
# Serialisation
# ===========================================================================


class TestSerialisation:
    def test_geojson_feature(self) -> None:
        rect = RectangleModel.from_center(CENTER, 100.0, 50.0, id="plot-1")
        feature = rect.to_geojson_feature()
        assert feature["geometry"]["type"] == "Polygon"  # type: ignore[index]
        assert len(feature["geometry"]["coordinates"][0]) == 5  # type: ignore[index]
        assert feature["properties"] == {
            "id": "plot-1",
            "area_acres": rect.area_acres,
            "area_meters_squared": 5000.0,
        }

    def test_to_dict_keys(self) -> None:
        data = RectangleModel.from_center(CENTER, 100.0, 50.0, 15.0, created_at=WHEN).to_dict()
        assert data["center"] == {"lng": 77.0, "lat": 12.0}
        assert data["widthMeters"] == 100.0
        assert data["heightMeters"] == 50.0
        assert data["rotationDegrees"] == 15.0
        assert data["areaInMetersSquared"] == 5000.0
        assert data["areaIncreaseHistory"] == []
        assert data["createdAt"] == "2025-03-01T09:30:00+00:00"
        assert "id" not in data

    def test_from_dict_full_record(self) -> None:
        original = RectangleModel.from_center(
            CENTER, 100.0, 50.0, 15.0, stored_id="abc", created_at=WHEN, area_history=[_event()]
        )
        restored = RectangleModel.from_dict(original.to_dict())
        assert restored.stored_id == "abc"
        assert restored.id == "abc"
        assert restored.center == CENTER
        assert restored.rotation_deg == 15.0
        assert restored.created_at == WHEN
        assert restored.area_history == (_event(),)

    def test_from_dict_accepts_mongo_id(self) -> None:
        data = RectangleModel.from_center(CENTER, 10.0, 10.0).to_dict()
        data["_id"] = "65f0c0ffee"
        assert RectangleModel.from_dict(data).stored_id == "65f0c0ffee"

    def test_from_dict_geometry_only(self) -> None:
        data = RectangleModel.from_center(CENTER, 30.0, 50.0).to_dict()
        for key in ("center", "widthMeters", "heightMeters", "rotationDegrees"):
            del data[key]
        restored = RectangleModel.from_dict(data)
        assert restored.center.lon == pytest.approx(CENTER.lon, abs=1e-9)
        assert restored.center.lat == pytest.approx(CENTER.lat, abs=1e-9)
        assert restored.width_m == pytest.approx(30.0, rel=1e-3)
        assert restored.height_m == pytest.approx(50.0, rel=1e-3)
        assert restored.rotation_deg == 0.0

    def test_from_dict_short_geometry(self) -> None:
        data = {"geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1]]]}}
        with pytest.raises(RectangleError, match="at least 4 corners"):
            RectangleModel.from_dict(data)

    def test_from_dict_bad_history(self) -> None:
        data = RectangleModel.from_center(CENTER, 10.0, 10.0).to_dict()
        data["areaIncreaseHistory"] = "none"
        with pytest.raises(TypeError, match="areaIncreaseHistory"):
            RectangleModel.from_dict(data)
