"""Structural validator for an imported course.

Runs after the import has committed, never inside its transaction, and
only reads from the store.

Rules:
- exactly one ``boundary`` row per course (``BOUNDARY_COUNT``);
- when at least one boundary exists, every other feature must be strictly
  contained by the first boundary (``OUTSIDE_BOUNDARY``, one per feature,
  in store order).  With no boundary the containment check is skipped.

Violations are reported, never raised, and nothing is repaired.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from course_map.core.constants import (
    BOUNDARY_FEATURE_TYPE,
    VIOLATION_BOUNDARY_COUNT,
    VIOLATION_OUTSIDE_BOUNDARY,
)
from course_map.models.report import ValidationReport, Violation

if TYPE_CHECKING:
    from course_map.store.base import SpatialStore

logger = logging.getLogger("course_map.importer.validator")


class CourseValidator:
    """Builds a ``ValidationReport`` for a course from the store's contents."""

    def __init__(self, store: SpatialStore) -> None:
        self._store = store

    def validate(self, course_id: str) -> ValidationReport:
        boundaries = self._store.fetch_boundaries(course_id)
        violations: list[Violation] = []

        if len(boundaries) != 1:
            violations.append(
                Violation(
                    code=VIOLATION_BOUNDARY_COUNT,
                    feature_type=BOUNDARY_FEATURE_TYPE,
                    name=boundaries[0].name if boundaries else None,
                    message=f"Expected exactly 1 boundary; found {len(boundaries)}.",
                )
            )

        if boundaries:
            for feature in self._store.find_uncontained(course_id):
                violations.append(
                    Violation(
                        code=VIOLATION_OUTSIDE_BOUNDARY,
                        feature_type=feature.feature_type,
                        name=feature.name,
                        message="Feature is not fully contained by boundary.",
                    )
                )

        report = ValidationReport.build(
            course_id,
            total_features=self._store.count_features(course_id),
            boundary_count=len(boundaries),
            violations=violations,
        )

        logger.info(
            "Validation complete | course=%s | features=%d | boundaries=%d | violations=%d",
            course_id,
            report.total_features,
            report.boundary_count,
            report.violations_count,
        )
        return report
