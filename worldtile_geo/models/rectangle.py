"""Data model for a drawn land plot.

A ``RectangleModel`` is described by its centre, width and height in
metres, and a rotation in degrees (counter-clockwise, ``[0, 360)``).
Corner coordinates are derived on demand, so scaling and rotating never
accumulate rounding drift in stored corners.

``AreaIncreaseEvent`` records every growth of the plot while it is being
edited; the history travels with the model when it is stored.

Storage dicts use the camelCase keys of the marketplace backend
(``widthMeters``, ``areaIncreaseHistory`` ...).
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime

from worldtile_geo.core.constants import DEFAULT_PLOT_SIZE_M, SQ_METRES_PER_ACRE
from worldtile_geo.core.exceptions import RectangleError
from worldtile_geo.geo import coordinate_converter as cc
from worldtile_geo.geo.area_calculator import square_meters_to_acres
from worldtile_geo.models.position import Position, as_position, ring_to_lists

MINIMUM_AREA_M2 = SQ_METRES_PER_ACRE
FULL_TURN_DEG = 360.0


def normalize_rotation(degrees: float) -> float:
    """Map any angle into ``[0, 360)``."""
    rotation = degrees % FULL_TURN_DEG
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if rotation >= FULL_TURN_DEG else rotation


def _new_id() -> str:
    """Local identifier: microseconds since the epoch."""
    return str(time.time_ns() // 1000)


def _parse_datetime(raw: object) -> datetime | None:
    if raw is None or raw == "":
        return None
    return datetime.fromisoformat(str(raw))


@dataclass(frozen=True, slots=True)
class AreaIncreaseEvent:
    """One growth step of a plot during editing.

    Attributes:
        timestamp: When the increase happened (UTC).
        delta_m2: Area gained, square metres.
        previous_area_m2: Area before the change.
        new_area_m2: Area after the change.
    """

    timestamp: datetime
    delta_m2: float
    previous_area_m2: float
    new_area_m2: float

    def to_dict(self) -> dict[str, object]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "deltaMetersSquared": self.delta_m2,
            "previousArea": self.previous_area_m2,
            "newArea": self.new_area_m2,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> AreaIncreaseEvent:
        """Deserialise from a stored dict.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If the timestamp is not ISO 8601.
        """
        return cls(
            timestamp=datetime.fromisoformat(str(data["timestamp"])),
            delta_m2=float(data["deltaMetersSquared"]),  # type: ignore[arg-type]
            previous_area_m2=float(data["previousArea"]),  # type: ignore[arg-type]
            new_area_m2=float(data["newArea"]),  # type: ignore[arg-type]
        )


@dataclass(frozen=True, slots=True)
class RectangleModel:
    """A rotatable rectangular plot.

    Attributes:
        id: Local identifier (the stored id once saved).
        center: Plot centre ``(lon, lat)``.
        width_m: East/west extent before rotation, metres (> 0).
        height_m: North/south extent before rotation, metres (> 0).
        rotation_deg: Counter-clockwise rotation, ``[0, 360)``.
        stored_id: Backend identifier once the plot has been saved.
        created_at: Creation time (UTC).
        area_history: Area increases recorded while editing.
    """

    id: str
    center: Position
    width_m: float
    height_m: float
    rotation_deg: float = 0.0
    stored_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    area_history: tuple[AreaIncreaseEvent, ...] = ()

    def __post_init__(self) -> None:
        if not self.width_m > 0:
            msg = f"Width must be positive, got {self.width_m}"
            raise RectangleError(msg)
        if not self.height_m > 0:
            msg = f"Height must be positive, got {self.height_m}"
            raise RectangleError(msg)
        if not 0.0 <= self.rotation_deg < FULL_TURN_DEG:
            msg = f"Rotation must be in [0, 360) degrees, got {self.rotation_deg}"
            raise RectangleError(msg)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_center(
        cls,
        center: Position | tuple[float, float],
        width_m: float,
        height_m: float,
        rotation_deg: float = 0.0,
        *,
        id: str | None = None,  # noqa: A002
        stored_id: str | None = None,
        created_at: datetime | None = None,
        area_history: tuple[AreaIncreaseEvent, ...] | list[AreaIncreaseEvent] = (),
    ) -> RectangleModel:
        """Build a rectangle, normalising the rotation into ``[0, 360)``."""
        return cls(
            id=id or _new_id(),
            center=as_position(center),
            width_m=width_m,
            height_m=height_m,
            rotation_deg=normalize_rotation(rotation_deg),
            stored_id=stored_id,
            created_at=created_at or datetime.now(UTC),
            area_history=tuple(area_history),
        )

    @classmethod
    def default_at(
        cls,
        center: Position | tuple[float, float],
        *,
        size_m: float = DEFAULT_PLOT_SIZE_M,
        id: str | None = None,  # noqa: A002
    ) -> RectangleModel:
        """Square of *size_m* metres, unrotated, centred on *center*."""
        return cls.from_center(center, size_m, size_m, id=id)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> RectangleModel:
        """Deserialise from a stored plot.

        Prefers ``center``/``widthMeters``/``heightMeters``.  Older records
        carry only the polygon geometry; for those the centre is the mean
        of the first four corners, width and height are the corner-to-corner
        distances, and rotation is taken as 0.

        Raises:
            TypeError: If field values have unexpected types.
            RectangleError: If the stored dimensions are not positive or
                the stored geometry has fewer than four corners.
        """
        raw_id = data.get("id", data.get("_id"))
        stored_id = str(raw_id) if raw_id is not None else None

        history_raw = data.get("areaIncreaseHistory") or []
        if not isinstance(history_raw, list):
            msg = f"areaIncreaseHistory must be a list, got {type(history_raw).__name__}"
            raise TypeError(msg)
        history = tuple(AreaIncreaseEvent.from_dict(e) for e in history_raw)

        created_at = _parse_datetime(data.get("createdAt"))

        if "center" in data and "widthMeters" in data and "heightMeters" in data:
            center_raw = data["center"]
            if not isinstance(center_raw, dict):
                msg = f"center must be a dict, got {type(center_raw).__name__}"
                raise TypeError(msg)
            return cls.from_center(
                Position(float(center_raw["lng"]), float(center_raw["lat"])),
                float(data["widthMeters"]),  # type: ignore[arg-type]
                float(data["heightMeters"]),  # type: ignore[arg-type]
                float(data.get("rotationDegrees") or 0.0),  # type: ignore[arg-type]
                id=stored_id,
                stored_id=stored_id,
                created_at=created_at,
                area_history=history,
            )

        geometry = data.get("geometry")
        if not isinstance(geometry, dict):
            msg = f"geometry must be a dict, got {type(geometry).__name__}"
            raise TypeError(msg)
        coords = [as_position(c) for c in geometry["coordinates"][0]]
        if len(coords) < 4:
            msg = f"Stored geometry needs at least 4 corners, got {len(coords)}"
            raise RectangleError(msg)

        center = Position(
            sum(p.lon for p in coords[:4]) / 4,
            sum(p.lat for p in coords[:4]) / 4,
        )
        return cls.from_center(
            center,
            cc.distance_in_meters(coords[0], coords[1]),
            cc.distance_in_meters(coords[1], coords[2]),
            0.0,
            id=stored_id,
            stored_id=stored_id,
            created_at=created_at,
            area_history=history,
        )

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def compute_corners(self) -> list[Position]:
        """Corners ordered bottom-left, bottom-right, top-right, top-left."""
        half_w = self.width_m / 2.0
        half_h = self.height_m / 2.0
        local = [(-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)]

        corners: list[Position] = []
        for east, north in local:
            corner = Position(
                self.center.lon + cc.meters_to_longitude_degrees(east, self.center.lat),
                self.center.lat + cc.meters_to_latitude_degrees(north),
            )
            if self.rotation_deg != 0.0:
                corner = cc.rotate_point_around_center(corner, self.center, self.rotation_deg)
            corners.append(corner)
        return corners

    @property
    def corners(self) -> list[Position]:
        return self.compute_corners()

    @property
    def coordinates(self) -> list[Position]:
        """Closed ring: four corners plus the first corner again."""
        corners = self.compute_corners()
        return [*corners, corners[0]]

    @property
    def area_m2(self) -> float:
        return self.width_m * self.height_m

    @property
    def area_acres(self) -> float:
        return square_meters_to_acres(self.area_m2)

    @property
    def is_valid_area(self) -> bool:
        """Whether the plot meets the one-acre minimum."""
        return self.area_m2 >= MINIMUM_AREA_M2

    def contains_point(self, lon: float, lat: float) -> bool:
        """Whether ``(lon, lat)`` lies strictly inside the plot."""
        from shapely.geometry import Point, Polygon

        return Polygon(self.coordinates).contains(Point(lon, lat))

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def copy_with(self, **changes: object) -> RectangleModel:
        """Return a copy with *changes* applied (validated again)."""
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    def record_area_increase(self, event: AreaIncreaseEvent) -> RectangleModel:
        return self.copy_with(area_history=(*self.area_history, event))

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_geojson_feature(self) -> dict[str, object]:
        """GeoJSON Feature used by the map layer."""
        return {
            "type": "Feature",
            "geometry": {"type": "Polygon", "coordinates": [ring_to_lists(self.coordinates)]},
            "properties": {
                "id": self.id,
                "area_acres": self.area_acres,
                "area_meters_squared": self.area_m2,
            },
        }

    def to_dict(self) -> dict[str, object]:
        """Serialise for the backend plot store."""
        data: dict[str, object] = {
            "center": {"lng": self.center.lon, "lat": self.center.lat},
            "widthMeters": self.width_m,
            "heightMeters": self.height_m,
            "rotationDegrees": self.rotation_deg,
            "geometry": self.to_geojson_feature()["geometry"],
            "areaInAcres": self.area_acres,
            "areaInMetersSquared": self.area_m2,
            "areaIncreaseHistory": [e.to_dict() for e in self.area_history],
            "createdAt": self.created_at.isoformat(),
        }
        if self.stored_id is not None:
            data["id"] = self.stored_id
        return data
