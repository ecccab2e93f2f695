"""Open-states asset loader.

Reads the bundled GeoJSON FeatureCollection of open (purchasable)
regions once and caches the parsed result for the life of the loader.

The asset is immutable build-time data, so there is no invalidation or
staleness check.  Concurrent first calls share one in-flight read via
``SingleFlight``: at most one file read happens per loader.

Failures are surfaced, never degraded: a missing overlay would show the
whole world as purchasable.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from worldtile_geo.core.config import GeoConfig
from worldtile_geo.core.constants import DEFAULT_OPEN_STATES_PATH
from worldtile_geo.core.exceptions import InvalidGeoJSONError, OpenStatesLoadError
from worldtile_geo.core.single_flight import SingleFlight
from worldtile_geo.models.geojson import FeatureCollection
from worldtile_geo.open_states._parsing import parse_feature_collection

logger = logging.getLogger("worldtile_geo.open_states.loader")


class OpenStatesLoader:
    """Compute-once loader for one open-states GeoJSON file.

    Attributes:
        path: Location of the GeoJSON asset.
        read_count: Number of times the file has actually been read.
    """

    def __init__(self, path: Path | str = DEFAULT_OPEN_STATES_PATH) -> None:
        self.path = Path(path)
        self.read_count = 0
        self._cell: SingleFlight[FeatureCollection] = SingleFlight()

    def load(self) -> FeatureCollection:
        """Return the parsed FeatureCollection, reading the file on first use.

        Every call returns the same object once loaded.

        Raises:
            InvalidGeoJSONError: If the document is not a FeatureCollection
                or has no ``features`` array.
            OpenStatesLoadError: If the file cannot be read, is not UTF-8, or
                is not JSON.
        """
        if self._cell.is_set:
            logger.debug("Open states cache hit | path=%s", self.path)
        return self._cell.get_or_compute(self._load_uncached)

    @property
    def is_loaded(self) -> bool:
        return self._cell.is_set

    def reset(self) -> None:
        """Forget the cached collection (tests and tooling only)."""
        self._cell.reset()

    def _read_text(self) -> str:
        self.read_count += 1
        return self.path.read_text(encoding="utf-8")

    def _load_uncached(self) -> FeatureCollection:
        logger.info("Loading open states GeoJSON | path=%s", self.path)
        try:
            text = self._read_text()
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to load open states GeoJSON from {self.path}: {exc}"
            raise OpenStatesLoadError(msg) from exc

        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"Failed to load open states GeoJSON from {self.path}: not valid JSON ({exc})"
            raise OpenStatesLoadError(msg) from exc

        try:
            collection = parse_feature_collection(document, source=self.path.name)
        except InvalidGeoJSONError as exc:
            msg = f"Failed to load open states GeoJSON from {self.path}: {exc.message}"
            raise InvalidGeoJSONError(msg) from exc

        logger.info(
            "Open states loaded | features=%d | skipped=%d | path=%s",
            len(collection.features),
            collection.skipped_count,
            self.path,
        )
        return collection


# ---------------------------------------------------------------------------
# Process-wide default loader
# ---------------------------------------------------------------------------

_default_loader: SingleFlight[OpenStatesLoader] = SingleFlight()


def get_default_loader() -> OpenStatesLoader:
    """Return the process-wide loader for the configured asset path.

    The path comes from ``GeoConfig.from_env()`` the first time this is
    called.
    """
    return _default_loader.get_or_compute(
        lambda: OpenStatesLoader(GeoConfig.from_env().open_states_path)
    )


def load_open_states_geojson(loader: OpenStatesLoader | None = None) -> FeatureCollection:
    """Load (once) and return the open-states FeatureCollection.

    Args:
        loader: Loader to use; defaults to the process-wide loader.

    Raises:
        OpenStatesLoadError: See ``OpenStatesLoader.load``.
    """
    return (loader or get_default_loader()).load()
