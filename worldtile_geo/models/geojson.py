"""Typed GeoJSON models for the open-states pipeline.

Raw GeoJSON is parsed once into these variants (see
``worldtile_geo.open_states._parsing``) so the rest of the pipeline never
handles untyped nested dicts.  Only polygonal geometries are modelled:

- ``PolygonGeometry``: a tuple of rings, ``rings[0]`` the outer boundary.
- ``MultiPolygonGeometry``: a tuple of such ring tuples.

Features the parser could not use are kept as ``SkippedFeature`` records
on the collection so callers can see what was dropped and why.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from worldtile_geo.models.position import Position, ring_to_lists


@dataclass(frozen=True, slots=True)
class PolygonGeometry:
    """GeoJSON ``Polygon``: outer ring followed by holes."""

    type: ClassVar[str] = "Polygon"

    rings: tuple[list[Position], ...]

    @property
    def outer_ring(self) -> list[Position]:
        """The boundary ring (``coordinates[0]``)."""
        return self.rings[0]

    @property
    def holes(self) -> tuple[list[Position], ...]:
        return self.rings[1:]

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "coordinates": [ring_to_lists(ring) for ring in self.rings],
        }


@dataclass(frozen=True, slots=True)
class MultiPolygonGeometry:
    """GeoJSON ``MultiPolygon``: one ring tuple per constituent polygon."""

    type: ClassVar[str] = "MultiPolygon"

    polygons: tuple[tuple[list[Position], ...], ...]

    @property
    def outer_rings(self) -> list[list[Position]]:
        """The boundary ring of every constituent polygon (``coordinates[i][0]``)."""
        return [rings[0] for rings in self.polygons]

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "coordinates": [[ring_to_lists(ring) for ring in rings] for rings in self.polygons],
        }


Geometry = PolygonGeometry | MultiPolygonGeometry


@dataclass(frozen=True, slots=True)
class GeoFeature:
    """A feature whose geometry parsed into one of the polygonal variants.

    Attributes:
        geometry: Parsed polygonal geometry.
        properties: Free-form GeoJSON properties (never validated).
        index: Zero-based position of the feature in the source collection.
    """

    geometry: Geometry
    properties: dict[str, object] = field(default_factory=dict)
    index: int = 0

    @property
    def outer_rings(self) -> list[list[Position]]:
        if isinstance(self.geometry, PolygonGeometry):
            return [self.geometry.outer_ring]
        return self.geometry.outer_rings

    def to_dict(self) -> dict[str, object]:
        return {
            "type": "Feature",
            "geometry": self.geometry.to_dict(),
            "properties": dict(self.properties),
        }


@dataclass(frozen=True, slots=True)
class SkippedFeature:
    """A source feature dropped by the lenient parser.

    Attributes:
        index: Zero-based position of the feature in the source collection.
        reason: Why the feature was dropped.
    """

    index: int
    reason: str


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    """A parsed GeoJSON ``FeatureCollection`` of polygonal features.

    Attributes:
        features: Features with a usable polygonal geometry.
        skipped: Features that were dropped, with reasons.
    """

    features: tuple[GeoFeature, ...] = ()
    skipped: tuple[SkippedFeature, ...] = ()

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def __len__(self) -> int:
        return len(self.features)

    def to_dict(self) -> dict[str, object]:
        """Serialise the usable features back to plain GeoJSON."""
        return {
            "type": "FeatureCollection",
            "features": [feature.to_dict() for feature in self.features],
        }
