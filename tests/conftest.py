"""Shared pytest fixtures for the KML measurement test suite."""

from pathlib import Path

import pytest

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
# Sample KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def single_point_kml(data_dir: Path) -> Path:
    """Path to a KML with one Point at (-122.082, 37.422)."""
    return data_dir / "01_single_point.kml"


@pytest.fixture()
def one_degree_line_kml(data_dir: Path) -> Path:
    """Path to a KML with one LineString from (0, 0) to (0, 1)."""
    return data_dir / "02_line_one_degree.kml"


@pytest.fixture()
def multi_track_kml(data_dir: Path) -> Path:
    """Path to a gx:MultiTrack KML with two one-degree tracks."""
    return data_dir / "03_multi_track.kml"


@pytest.fixture()
def mixed_folders_kml(data_dir: Path) -> Path:
    """Path to a KML with nested Folders and every supported geometry."""
    return data_dir / "04_mixed_folders.kml"


# ---------------------------------------------------------------------------
# Edge-case KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def not_xml_kml(edge_cases_dir: Path) -> Path:
    """Path to a file that is not valid XML."""
    return edge_cases_dir / "11_malformed_not_xml.kml"


@pytest.fixture()
def unclosed_tags_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML with an unclosed element."""
    return edge_cases_dir / "12_malformed_unclosed_tags.kml"


@pytest.fixture()
def empty_kml(edge_cases_dir: Path) -> Path:
    """Path to a valid KML with no Placemarks."""
    return edge_cases_dir / "13_empty_no_features.kml"


@pytest.fixture()
def no_geometry_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML with one geometry-less Placemark and one Point."""
    return edge_cases_dir / "14_placemark_without_geometry.kml"


@pytest.fixture()
def invalid_coords_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML with one out-of-range LineString and one valid Point."""
    return edge_cases_dir / "16_invalid_coordinates.kml"


@pytest.fixture()
def not_kml_root(edge_cases_dir: Path) -> Path:
    """Path to well-formed XML whose root is not a KML element."""
    return edge_cases_dir / "17_not_kml_root.xml"
