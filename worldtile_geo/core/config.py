"""Library configuration loaded from environment variables.

Every value has a default that matches the bundled data and the plot
rules of the marketplace, so the library works without any environment.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out of
    its valid range, so bad configuration surfaces at startup rather than
    as a wrong overlay later.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from worldtile_geo.core.constants import (
    DEFAULT_OPEN_STATES_PATH,
    DEFAULT_PLOT_SIZE_M,
    SQ_METRES_PER_ACRE,
)
from worldtile_geo.core.exceptions import GeoError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class ConfigValidationError(GeoError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class GeoConfig:
    """Immutable library configuration.

    Attributes:
        open_states_path: Path of the open-states GeoJSON asset.
        normalize_winding: Orient the locked overlay rings (outer CCW,
            holes CW) before handing them to the renderer.
        min_plot_area_m2: Smallest plot area the drawing editor accepts.
        default_plot_size_m: Side of the square a new plot starts with.
    """

    open_states_path: str = str(DEFAULT_OPEN_STATES_PATH)
    normalize_winding: bool = False
    min_plot_area_m2: float = SQ_METRES_PER_ACRE
    default_plot_size_m: float = DEFAULT_PLOT_SIZE_M

    @classmethod
    def from_env(cls) -> GeoConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a boolean
                flag is not a recognised literal.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``WORLDTILE_MIN_PLOT_AREA_M2=abc``).
        """
        config = cls(
            open_states_path=os.getenv("WORLDTILE_OPEN_STATES_PATH", str(DEFAULT_OPEN_STATES_PATH)),
            normalize_winding=_parse_bool(
                "WORLDTILE_NORMALIZE_WINDING", os.getenv("WORLDTILE_NORMALIZE_WINDING", "false")
            ),
            min_plot_area_m2=float(
                os.getenv("WORLDTILE_MIN_PLOT_AREA_M2", str(SQ_METRES_PER_ACRE))
            ),
            default_plot_size_m=float(
                os.getenv("WORLDTILE_DEFAULT_PLOT_SIZE_M", str(DEFAULT_PLOT_SIZE_M))
            ),
        )
        _validate(config)
        return config


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false, 1/0, yes/no, on/off)")


def _validate(config: GeoConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.open_states_path:
        raise ConfigValidationError(
            "WORLDTILE_OPEN_STATES_PATH",
            config.open_states_path,
            "must not be empty",
        )

    if config.min_plot_area_m2 <= 0:
        raise ConfigValidationError(
            "WORLDTILE_MIN_PLOT_AREA_M2",
            config.min_plot_area_m2,
            "must be > 0 (square metres)",
        )

    if config.default_plot_size_m <= 0:
        raise ConfigValidationError(
            "WORLDTILE_DEFAULT_PLOT_SIZE_M",
            config.default_plot_size_m,
            "must be > 0 (metres)",
        )
