"""Shared pytest fixtures for the worldtile_geo test suite."""

from pathlib import Path

import pytest

from worldtile_geo.open_states.loader import OpenStatesLoader

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"
EDGE_CASES_DIR = DATA_DIR / "edge_cases"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


@pytest.fixture()
def edge_cases_dir() -> Path:
    """Return the path to the edge-cases test data directory."""
    return EDGE_CASES_DIR


# ---------------------------------------------------------------------------
# Sample GeoJSON file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mixed_states_geojson(data_dir: Path) -> Path:
    """One Polygon, one 3-part MultiPolygon, plus a Point and a geometry-less feature."""
    return data_dir / "01_mixed_open_states.geojson"


@pytest.fixture()
def polygon_with_hole_geojson(data_dir: Path) -> Path:
    """A single Polygon whose outer ring encloses one hole."""
    return data_dir / "02_polygon_with_hole.geojson"


# ---------------------------------------------------------------------------
# Edge-case GeoJSON file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def not_json_geojson(edge_cases_dir: Path) -> Path:
    """Path to a file that is not valid JSON."""
    return edge_cases_dir / "11_malformed_not_json.geojson"


@pytest.fixture()
def single_feature_geojson(edge_cases_dir: Path) -> Path:
    """Path to a document whose top-level type is ``Feature``."""
    return edge_cases_dir / "12_single_feature_not_collection.geojson"


@pytest.fixture()
def missing_features_geojson(edge_cases_dir: Path) -> Path:
    """Path to a FeatureCollection without a ``features`` array."""
    return edge_cases_dir / "13_missing_features.geojson"


@pytest.fixture()
def empty_collection_geojson(edge_cases_dir: Path) -> Path:
    """Path to a FeatureCollection with an empty ``features`` array."""
    return edge_cases_dir / "14_empty_features.geojson"


@pytest.fixture()
def invalid_utf8_geojson(edge_cases_dir: Path) -> Path:
    """Path to a FeatureCollection containing bytes that are not UTF-8."""
    return edge_cases_dir / "15_invalid_utf8.geojson"


# ---------------------------------------------------------------------------
# Loader fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mixed_loader(mixed_states_geojson: Path) -> OpenStatesLoader:
    """A fresh loader over the mixed sample file."""
    return OpenStatesLoader(mixed_states_geojson)
