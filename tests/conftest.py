"""Shared pytest fixtures for the Course Map test suite."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from course_map.importer.pipeline import FeatureImporter
from course_map.simplify.douglas_peucker import DouglasPeuckerSimplifier
from course_map.store.memory import MemoryStore

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


@pytest.fixture()
def demo_course_path(data_dir: Path) -> Path:
    """Boundary polygon (closed 5-point ring) plus one bunker inside it."""
    return data_dir / "demo_course.geojson"


@pytest.fixture()
def full_course_path(data_dir: Path) -> Path:
    """Boundary, green, twin-pond MultiPolygon, cart path LineString, and a tee."""
    return data_dir / "full_course.geojson"


@pytest.fixture()
def demo_course(demo_course_path: Path) -> dict[str, object]:
    return json.loads(demo_course_path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Pipeline fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def importer(memory_store: MemoryStore) -> FeatureImporter:
    return FeatureImporter(
        memory_store,
        simplifier=DouglasPeuckerSimplifier(),
        epsilon_m=2.0,
    )
