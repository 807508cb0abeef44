"""Write the validation report artifact.

The report lands at ``<artifacts_dir>/validation_report.json``; a relative
``artifacts_dir`` resolves against the current working directory.  The
write overwrites any previous report, so re-running validation is
idempotent.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from course_map.core.constants import REPORT_FILENAME
from course_map.core.exceptions import PermanentError

if TYPE_CHECKING:
    from course_map.models.report import ValidationReport

logger = logging.getLogger("course_map.importer.report_writer")


class ReportWriteError(PermanentError):
    """Raised when the report artifact cannot be written."""

    default_stage = "write_report"
    default_code = "REPORT_WRITE_FAILED"


def report_path(artifacts_dir: Path | str) -> Path:
    """Return the absolute path the report is written to."""
    return (Path.cwd() / Path(artifacts_dir) / REPORT_FILENAME).resolve()


def write_report(report: ValidationReport, artifacts_dir: Path | str) -> Path:
    """Write *report* as indented JSON and return the file path.

    Raises:
        ReportWriteError: If the directory or file cannot be written.
    """
    path = report_path(artifacts_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report.to_json() + "\n", encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write validation report to {path}: {exc}"
        raise ReportWriteError(msg) from exc

    logger.info(
        "Validation report written | course=%s | path=%s | violations=%d",
        report.course_id,
        path,
        report.violations_count,
    )
    return path
