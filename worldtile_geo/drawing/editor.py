"""Rectangle editing session.

Holds the plot the user is drawing and applies drag gestures to it:

- side handles scale the plot uniformly: the new half-diagonal equals
  the distance from the centre to the drag position (scale factor
  floored at 0.01);
- the rotation handle points the plot's x-axis at the drag position
  (``atan2(dlat, dlon)``, normalised to ``[0, 360)``).

An update that would shrink the plot below the minimum area is rejected:
the plot reverts to its state at the start of the drag and
``on_validation_failed`` is called.  Every accepted increase in area is
appended to the plot's ``area_history`` and passed to
``on_area_increased``.

Rendering, handle hit-testing in screen space, and gesture debouncing
belong to the UI layer and are not handled here.
"""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from worldtile_geo.core.constants import DEFAULT_PLOT_SIZE_M
from worldtile_geo.geo.coordinate_converter import distance_in_meters
from worldtile_geo.models.position import Position, as_position
from worldtile_geo.models.rectangle import (
    MINIMUM_AREA_M2,
    AreaIncreaseEvent,
    RectangleModel,
    normalize_rotation,
)

if TYPE_CHECKING:
    from worldtile_geo.core.config import GeoConfig

logger = logging.getLogger("worldtile_geo.drawing.editor")

MIN_SCALE_FACTOR = 0.01


class HandleType(enum.Enum):
    """Drag handles shown on a selected plot."""

    SIDE_TOP = "side_top"
    SIDE_RIGHT = "side_right"
    SIDE_BOTTOM = "side_bottom"
    SIDE_LEFT = "side_left"
    ROTATION = "rotation"

    @property
    def is_side(self) -> bool:
        return self is not HandleType.ROTATION


class RectangleEditor:
    """State of one plot-drawing session."""

    def __init__(
        self,
        *,
        min_area_m2: float = MINIMUM_AREA_M2,
        default_size_m: float = DEFAULT_PLOT_SIZE_M,
        on_validation_failed: Callable[[], None] | None = None,
        on_area_increased: Callable[[AreaIncreaseEvent], None] | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self.min_area_m2 = min_area_m2
        self.default_size_m = default_size_m
        self.on_validation_failed = on_validation_failed
        self.on_area_increased = on_area_increased
        self._clock = clock

        self._rectangle: RectangleModel | None = None
        self._last_valid: RectangleModel | None = None
        self._placement_mode = False
        self._active_handle: HandleType | None = None

    @classmethod
    def from_config(cls, config: GeoConfig, **kwargs: object) -> RectangleEditor:
        """Editor using the configured minimum area and default plot size."""
        return cls(
            min_area_m2=config.min_plot_area_m2,
            default_size_m=config.default_plot_size_m,
            **kwargs,  # type: ignore[arg-type]
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def rectangle(self) -> RectangleModel | None:
        return self._rectangle

    @property
    def is_placement_mode(self) -> bool:
        return self._placement_mode

    @property
    def is_dragging(self) -> bool:
        return self._active_handle is not None

    @property
    def active_handle(self) -> HandleType | None:
        return self._active_handle

    # ------------------------------------------------------------------
    # Creation and selection
    # ------------------------------------------------------------------

    def enter_placement_mode(self) -> None:
        """The next tap creates a plot at the tapped position."""
        self._placement_mode = True

    def create_at_center(self, center: Position | tuple[float, float]) -> RectangleModel:
        """Start a new default-size plot centred on *center*."""
        rectangle = RectangleModel.default_at(center, size_m=self.default_size_m)
        self._rectangle = rectangle
        self._last_valid = rectangle
        self._placement_mode = False
        logger.info(
            "Plot created | center=(%.6f, %.6f) | size=%.1f m",
            rectangle.center.lon,
            rectangle.center.lat,
            self.default_size_m,
        )
        return rectangle

    def handle_tap(self, position: Position | tuple[float, float]) -> bool:
        """Handle a map tap; return whether the editor consumed it.

        In placement mode the tap creates a plot.  Otherwise the tap is
        consumed when it lands inside the current plot.
        """
        position = as_position(position)
        if self._placement_mode:
            self.create_at_center(position)
            return True
        if self._rectangle is not None:
            return self._rectangle.contains_point(position.lon, position.lat)
        return False

    def clear(self) -> None:
        self._rectangle = None
        self._last_valid = None
        self._placement_mode = False
        self._active_handle = None

    def load_from_dict(self, data: dict[str, object]) -> RectangleModel:
        """Resume editing a stored plot."""
        rectangle = RectangleModel.from_dict(data)
        self._rectangle = rectangle
        self._last_valid = rectangle
        return rectangle

    # ------------------------------------------------------------------
    # Dragging
    # ------------------------------------------------------------------

    def start_drag(self, handle: HandleType) -> None:
        """Begin dragging *handle*; the current plot becomes the rollback point."""
        if self._rectangle is None:
            logger.debug("Drag ignored, no plot | handle=%s", handle.value)
            return
        self._active_handle = handle
        self._last_valid = self._rectangle
        logger.debug("Drag started | handle=%s", handle.value)

    def update_drag(self, position: Position | tuple[float, float]) -> RectangleModel | None:
        """Apply the active handle to *position* and return the current plot."""
        if self._rectangle is None or self._active_handle is None:
            return self._rectangle

        position = as_position(position)
        if self._active_handle.is_side:
            updated = self._scaled(self._rectangle, position)
        else:
            updated = self._rotated(self._rectangle, position)
        if updated is None:
            return self._rectangle

        if updated.area_m2 < self.min_area_m2:
            logger.info(
                "Plot below minimum area, reverting | area=%.2f m2 | minimum=%.2f m2",
                updated.area_m2,
                self.min_area_m2,
            )
            self._rectangle = self._last_valid
            if self.on_validation_failed is not None:
                self.on_validation_failed()
            return self._rectangle

        self._rectangle = self._track_area_change(self._rectangle.area_m2, updated)
        return self._rectangle

    def end_drag(self) -> None:
        if self._active_handle is None:
            return
        logger.debug("Drag ended | handle=%s", self._active_handle.value)
        self._active_handle = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _scaled(rectangle: RectangleModel, position: Position) -> RectangleModel | None:
        half_diagonal = math.hypot(rectangle.width_m / 2, rectangle.height_m / 2)
        if half_diagonal == 0:
            return None
        scale = max(MIN_SCALE_FACTOR, distance_in_meters(rectangle.center, position) / half_diagonal)
        return rectangle.copy_with(
            width_m=rectangle.width_m * scale,
            height_m=rectangle.height_m * scale,
        )

    @staticmethod
    def _rotated(rectangle: RectangleModel, position: Position) -> RectangleModel:
        angle = math.degrees(
            math.atan2(position.lat - rectangle.center.lat, position.lon - rectangle.center.lon)
        )
        return rectangle.copy_with(rotation_deg=normalize_rotation(angle))

    def _track_area_change(self, old_area: float, updated: RectangleModel) -> RectangleModel:
        new_area = updated.area_m2
        if new_area <= old_area:
            return updated

        event = AreaIncreaseEvent(
            timestamp=self._clock(),
            delta_m2=new_area - old_area,
            previous_area_m2=old_area,
            new_area_m2=new_area,
        )
        logger.info(
            "Plot area increased | delta=%.2f m2 | %.2f -> %.2f m2",
            event.delta_m2,
            old_area,
            new_area,
        )
        if self.on_area_increased is not None:
            self.on_area_increased(event)
        return updated.record_area_increase(event)
