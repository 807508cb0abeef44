"""Import & validation pipeline.

- pipeline: FeatureCollection -> staged rows -> one store transaction
- validator: post-commit boundary cardinality and containment checks
- report_writer: validation report artifact
"""

from course_map.importer.pipeline import (
    DocumentError,
    DocumentReadError,
    FeatureImporter,
    MalformedDocumentError,
    UnsupportedDocumentTypeError,
    load_document,
)
from course_map.importer.report_writer import ReportWriteError, report_path, write_report
from course_map.importer.validator import CourseValidator

__all__ = [
    "CourseValidator",
    "DocumentError",
    "DocumentReadError",
    "FeatureImporter",
    "MalformedDocumentError",
    "ReportWriteError",
    "UnsupportedDocumentTypeError",
    "load_document",
    "report_path",
    "write_report",
]
