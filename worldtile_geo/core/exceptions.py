"""Unified exception taxonomy.

Every domain exception inherits from ``GeoError`` and carries structured
context fields so callers (the UI layer, scripts, tests) can report
failures consistently.

Taxonomy categories
-------------------
- ``ValidationError``: caller or input violations, never retryable.
- ``PermanentError``: unrecoverable failures such as a malformed asset.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging.
"""

from __future__ import annotations


class GeoError(Exception):
    """Base exception for all worldtile_geo errors.

    Attributes:
        message: Human-readable error description.
        stage: Component where the error occurred
            (e.g. ``"open_states"``, ``"geometry"``).
        code: Machine-readable error code (e.g. ``"OPEN_STATES_LOAD_FAILED"``).
        retryable: Whether repeating the call may succeed.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        return "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(GeoError):
    """Input or invariant violation. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(GeoError):
    """Unrecoverable failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------


class PolarLatitudeError(ValidationError):
    """Raised when a longitude conversion is asked for at |latitude| >= 90."""

    default_stage = "coordinates"
    default_code = "LATITUDE_AT_POLE"


class RectangleError(ValidationError):
    """Raised when a rectangle operation receives an invalid ring or index."""

    default_stage = "geometry"
    default_code = "RECTANGLE_INVALID"


class UnsupportedGeometryError(ValidationError):
    """Raised when a GeoJSON geometry is missing, malformed, or not polygonal."""

    default_stage = "open_states"
    default_code = "GEOMETRY_UNSUPPORTED"


class OpenStatesLoadError(PermanentError):
    """Raised when the open-states asset cannot be read or parsed."""

    default_stage = "open_states"
    default_code = "OPEN_STATES_LOAD_FAILED"


class InvalidGeoJSONError(OpenStatesLoadError):
    """Raised when a document is valid JSON but not a usable FeatureCollection."""

    default_code = "GEOJSON_INVALID"
