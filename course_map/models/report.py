"""Pydantic model for the post-import validation report.

The report is the artifact written to ``artifacts/validation_report.json``
after every import run (or on demand).  It is built once, never mutated,
and never merged across runs.

JSON keys are camelCase (``courseId``, ``violationsCount``...); Python
attributes are snake_case.  Both spellings are accepted on input.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, model_validator


class Violation(BaseModel):
    """A single structural problem found by the validator.

    Attributes:
        code: Machine-readable code (``BOUNDARY_COUNT``, ``OUTSIDE_BOUNDARY``).
        feature_type: Feature type of the offending feature.
        name: Feature name, if it has one.
        message: Human-readable description.
    """

    code: str
    feature_type: str = Field(alias="featureType")
    name: str | None = None
    message: str = ""

    model_config = {"populate_by_name": True, "frozen": True}


class ValidationReport(BaseModel):
    """Structural validation report for one course.

    Attributes:
        course_id: The validated course.
        created_at_utc: When the report was built (timezone-aware UTC).
        total_features: Number of stored rows for the course, boundary included.
        boundary_count: Number of stored ``boundary`` rows.
        violations_count: ``len(violations)``.
        violations: Ordered violations; ``BOUNDARY_COUNT`` first.
    """

    course_id: str = Field(alias="courseId")
    created_at_utc: datetime = Field(
        default_factory=lambda: datetime.now(UTC), alias="createdAtUtc"
    )
    total_features: int = Field(default=0, ge=0, alias="totalFeatures")
    boundary_count: int = Field(default=0, ge=0, alias="boundaryCount")
    violations_count: int = Field(default=0, ge=0, alias="violationsCount")
    violations: tuple[Violation, ...] = ()

    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode="after")
    def _check_violations_count(self) -> ValidationReport:
        if self.violations_count != len(self.violations):
            msg = (
                f"violationsCount={self.violations_count} does not match "
                f"{len(self.violations)} listed violation(s)"
            )
            raise ValueError(msg)
        return self

    @classmethod
    def build(
        cls,
        course_id: str,
        *,
        total_features: int,
        boundary_count: int,
        violations: list[Violation],
    ) -> ValidationReport:
        """Construct a report, deriving ``violations_count`` from *violations*."""
        return cls(
            course_id=course_id,
            created_at_utc=datetime.now(UTC),
            total_features=total_features,
            boundary_count=boundary_count,
            violations_count=len(violations),
            violations=tuple(violations),
        )

    @property
    def has_violations(self) -> bool:
        return self.violations_count > 0

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to an indented JSON string with camelCase keys."""
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, object]:
        """Serialise to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)  # type: ignore[return-value]
