"""Command-line importer.

Example::

    python -m course_map --file data/demo.geojson --course demo-course --replace true

Exit statuses:
    0  import (and validation, if enabled) completed with no violations
    1  hard failure: bad input, store error, bad configuration, I/O error
    2  import committed but validation found violations
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from course_map.core.config import STORE_BACKENDS, ConfigValidationError, ImporterConfig
from course_map.core.constants import (
    DEFAULT_COURSE_ID,
    EXIT_FAILURE,
    EXIT_OK,
    EXIT_VIOLATIONS,
)
from course_map.core.exceptions import PipelineError
from course_map.importer.pipeline import FeatureImporter, load_document
from course_map.importer.report_writer import write_report
from course_map.importer.validator import CourseValidator
from course_map.store.factory import get_store

if TYPE_CHECKING:
    from course_map.store.base import SpatialStore

logger = logging.getLogger("course_map.cli")

_TRUE = {"true", "1", "yes", "y", "on"}
_FALSE = {"false", "0", "no", "n", "off"}


def parse_bool(text: str) -> bool:
    """Parse a ``true``/``false`` style flag value."""
    value = text.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    msg = f"expected true or false, got {text!r}"
    raise argparse.ArgumentTypeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors with the hard-failure status.

    argparse exits 2 by default, which would read as "violations found".
    """

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="coursemap-import",
        description="Import a GeoJSON FeatureCollection of course features and validate it.",
    )
    parser.add_argument("--file", "-f", required=True, help="Path to GeoJSON FeatureCollection.")
    parser.add_argument(
        "--course",
        "-c",
        default=DEFAULT_COURSE_ID,
        help=f"CourseId to stamp on inserted rows (default: {DEFAULT_COURSE_ID}).",
    )
    parser.add_argument(
        "--replace",
        "-r",
        type=parse_bool,
        nargs="?",
        const=True,
        default=False,
        help="true/false - delete existing rows for the course first (default: false).",
    )
    parser.add_argument(
        "--validate",
        type=parse_bool,
        nargs="?",
        const=True,
        default=True,
        help="true/false - validate the course after import (default: true).",
    )
    parser.add_argument(
        "--init-schema",
        action="store_true",
        help="Create the features table and indexes before importing.",
    )
    parser.add_argument(
        "--store",
        choices=STORE_BACKENDS,
        help="Spatial store adapter (overrides COURSEMAP_STORE).",
    )
    parser.add_argument(
        "--epsilon",
        type=float,
        help="Line simplification tolerance in metres (overrides COURSEMAP_SIMPLIFY_EPSILON_M).",
    )
    parser.add_argument(
        "--simplifier",
        help="Line simplifier name (overrides COURSEMAP_SIMPLIFIER).",
    )
    parser.add_argument(
        "--artifacts-dir",
        help="Directory for validation_report.json (overrides COURSEMAP_ARTIFACTS_DIR).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def resolve_config(args: argparse.Namespace) -> ImporterConfig:
    """Build the configuration from the environment plus command-line overrides.

    Raises:
        ConfigValidationError: If the resulting configuration is invalid.
    """
    overrides: dict[str, object] = {}
    if args.store:
        overrides["store_backend"] = args.store
    if args.epsilon is not None:
        overrides["simplify_epsilon_m"] = args.epsilon
    if args.simplifier:
        overrides["simplifier"] = args.simplifier
    if args.artifacts_dir:
        overrides["artifacts_dir"] = args.artifacts_dir

    try:
        return ImporterConfig.from_env(**overrides)
    except ValueError as exc:
        raise ConfigValidationError("COURSEMAP_SIMPLIFY_EPSILON_M", "", str(exc)) from exc


def run(
    args: argparse.Namespace,
    config: ImporterConfig,
    *,
    store: SpatialStore | None = None,
) -> int:
    """Import, optionally validate, and return the process exit status.

    Raises:
        PipelineError: On any hard failure.
    """
    path = Path(args.file).resolve()
    logger.info("Importing: %s | course=%s | replace=%s", path, args.course, args.replace)

    document = load_document(path)

    if store is None:
        store = get_store(config)
    if args.init_schema:
        store.ensure_schema()

    importer = FeatureImporter.from_config(config, store)
    inserted = importer.run(document, args.course, replace=args.replace)

    status = EXIT_OK
    if args.validate:
        report = CourseValidator(store).validate(args.course)
        report_file = write_report(report, config.artifacts_dir)
        logger.info("Validation report: %s", report_file)
        logger.info("Violations: %d", report.violations_count)
        if report.has_violations:
            status = EXIT_VIOLATIONS

    logger.info("Inserted %d features.", inserted)
    return status


def main(argv: Sequence[str] | None = None, *, store: SpatialStore | None = None) -> int:
    """Entry point for ``coursemap-import`` and ``python -m course_map``."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = resolve_config(args)
        return run(args, config, store=store)
    except PipelineError as exc:
        logger.error("Import failed | %s", exc.to_error_dict())
        return EXIT_FAILURE
