"""Tests for the post-import course validator."""

from __future__ import annotations

import pytest

from course_map.importer.pipeline import FeatureImporter
from course_map.importer.validator import CourseValidator
from course_map.store.memory import MemoryStore

COURSE = "demo-course"

BOUNDARY_RING = [
    [-94.5800, 39.0990],
    [-94.5740, 39.0990],
    [-94.5740, 39.1030],
    [-94.5800, 39.1030],
    [-94.5800, 39.0990],
]


def _boundary(name: str | None = "Perimeter") -> dict[str, object]:
    return {
        "type": "Feature",
        "properties": {"featureType": "boundary", "name": name},
        "geometry": {"type": "Polygon", "coordinates": [BOUNDARY_RING]},
    }


def _bunker(name: str, lon: float, lat: float) -> dict[str, object]:
    return {
        "type": "Feature",
        "properties": {"featureType": "bunker", "name": name},
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
    }


def _import(importer: FeatureImporter, *features: dict[str, object]) -> None:
    importer.run({"type": "FeatureCollection", "features": list(features)}, COURSE)


@pytest.fixture()
def validator(memory_store: MemoryStore) -> CourseValidator:
    return CourseValidator(memory_store)


class TestCourseValidator:
    def test_clean_course(
        self, importer: FeatureImporter, validator: CourseValidator, demo_course: dict[str, object]
    ) -> None:
        importer.run(demo_course, COURSE)
        report = validator.validate(COURSE)

        assert report.course_id == COURSE
        assert report.total_features == 2
        assert report.boundary_count == 1
        assert report.violations_count == 0
        assert report.violations == ()
        assert not report.has_violations

    def test_no_boundary(self, importer: FeatureImporter, validator: CourseValidator) -> None:
        _import(importer, _bunker("Lost Bunker", -94.0, 39.0))
        report = validator.validate(COURSE)

        assert report.boundary_count == 0
        assert report.violations_count == 1
        violation = report.violations[0]
        assert violation.code == "BOUNDARY_COUNT"
        assert violation.feature_type == "boundary"
        assert violation.name is None
        assert violation.message == "Expected exactly 1 boundary; found 0."

    def test_two_boundaries_and_outside_feature(
        self, importer: FeatureImporter, validator: CourseValidator
    ) -> None:
        _import(
            importer,
            _boundary("North"),
            _boundary("South"),
            _bunker("Inside", -94.5772, 39.1007),
            _bunker("Outside", -94.5700, 39.1007),
        )
        report = validator.validate(COURSE)

        assert report.total_features == 4
        assert report.boundary_count == 2
        assert [v.code for v in report.violations] == ["BOUNDARY_COUNT", "OUTSIDE_BOUNDARY"]
        assert report.violations[0].name == "North"
        assert report.violations[0].message == "Expected exactly 1 boundary; found 2."
        outside = report.violations[1]
        assert outside.feature_type == "bunker"
        assert outside.name == "Outside"
        assert outside.message == "Feature is not fully contained by boundary."

    def test_outside_features_in_store_order(
        self, importer: FeatureImporter, validator: CourseValidator
    ) -> None:
        _import(
            importer,
            _boundary(),
            _bunker("East", -94.5700, 39.1007),
            _bunker("Inside", -94.5772, 39.1007),
            _bunker("West", -94.5900, 39.1007),
        )
        report = validator.validate(COURSE)

        assert [v.name for v in report.violations] == ["East", "West"]
        assert report.violations_count == 2

    def test_polygon_crossing_boundary_edge(
        self, importer: FeatureImporter, validator: CourseValidator
    ) -> None:
        straddling_green = {
            "type": "Feature",
            "properties": {"featureType": "green", "name": "Green 9"},
            "geometry": {
                "type": "Polygon",
                "coordinates": [
                    [
                        [-94.5745, 39.1010],
                        [-94.5735, 39.1010],
                        [-94.5735, 39.1015],
                        [-94.5745, 39.1015],
                        [-94.5745, 39.1010],
                    ]
                ],
            },
        }
        _import(importer, _boundary(), _bunker("Inside", -94.5772, 39.1007), straddling_green)
        report = validator.validate(COURSE)

        assert report.violations_count == 1
        violation = report.violations[0]
        assert violation.code == "OUTSIDE_BOUNDARY"
        assert violation.feature_type == "green"
        assert violation.name == "Green 9"

    def test_validation_is_read_only(
        self,
        importer: FeatureImporter,
        validator: CourseValidator,
        memory_store: MemoryStore,
        demo_course: dict[str, object],
    ) -> None:
        importer.run(demo_course, COURSE)
        before = memory_store.rows()
        validator.validate(COURSE)
        validator.validate(COURSE)
        assert memory_store.rows() == before

    def test_unknown_course(self, validator: CourseValidator) -> None:
        report = validator.validate("nobody")
        assert report.total_features == 0
        assert [v.code for v in report.violations] == ["BOUNDARY_COUNT"]
