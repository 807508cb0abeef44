"""Tests for the command-line importer: arguments, exit statuses, artifacts."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from course_map.cli import build_parser, main, parse_bool
from course_map.core.constants import EXIT_FAILURE, EXIT_OK, EXIT_VIOLATIONS
from course_map.store.memory import MemoryStore


def _argv(path: Path, artifacts: Path, *extra: str) -> list[str]:
    return [
        "--file",
        str(path),
        "--course",
        "demo-course",
        "--store",
        "memory",
        "--artifacts-dir",
        str(artifacts),
        *extra,
    ]


@pytest.fixture()
def outside_course_path(tmp_path: Path, demo_course: dict[str, object]) -> Path:
    """Demo course plus a bunker east of the boundary."""
    document = json.loads(json.dumps(demo_course))
    document["features"].append(
        {
            "type": "Feature",
            "properties": {"featureType": "bunker", "name": "Stray Bunker"},
            "geometry": {"type": "Point", "coordinates": [-94.5700, 39.1007]},
        }
    )
    path = tmp_path / "outside.geojson"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


class TestParseBool:
    @pytest.mark.parametrize("text", ["true", "True", "1", "yes", "on", " y "])
    def test_true(self, text: str) -> None:
        assert parse_bool(text) is True

    @pytest.mark.parametrize("text", ["false", "FALSE", "0", "no", "off", "n"])
    def test_false(self, text: str) -> None:
        assert parse_bool(text) is False

    def test_invalid(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_bool("maybe")


class TestBuildParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args(["--file", "x.geojson"])
        assert args.course == "demo-course"
        assert args.replace is False
        assert args.validate is True
        assert args.init_schema is False
        assert args.store is None
        assert args.epsilon is None

    def test_bare_replace_flag(self) -> None:
        args = build_parser().parse_args(["-f", "x.geojson", "--replace", "--validate", "false"])
        assert args.replace is True
        assert args.validate is False

    def test_missing_file_exits_with_failure(self) -> None:
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args([])
        assert exc.value.code == EXIT_FAILURE

    def test_bad_bool_exits_with_failure(self) -> None:
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["-f", "x.geojson", "--replace", "sometimes"])
        assert exc.value.code == EXIT_FAILURE


class TestMain:
    def test_clean_import(self, demo_course_path: Path, tmp_path: Path) -> None:
        store = MemoryStore()
        artifacts = tmp_path / "artifacts"

        status = main(_argv(demo_course_path, artifacts, "--replace", "true"), store=store)

        assert status == EXIT_OK
        assert store.count_features("demo-course") == 2
        report = json.loads((artifacts / "validation_report.json").read_text(encoding="utf-8"))
        assert report["violationsCount"] == 0
        assert report["totalFeatures"] == 2
        assert report["boundaryCount"] == 1

    def test_violations_exit_status(self, outside_course_path: Path, tmp_path: Path) -> None:
        store = MemoryStore()
        artifacts = tmp_path / "artifacts"

        status = main(_argv(outside_course_path, artifacts), store=store)

        assert status == EXIT_VIOLATIONS
        assert store.count_features("demo-course") == 3
        report = json.loads((artifacts / "validation_report.json").read_text(encoding="utf-8"))
        assert report["violations"][0]["code"] == "OUTSIDE_BOUNDARY"
        assert report["violations"][0]["name"] == "Stray Bunker"

    def test_validation_disabled(self, outside_course_path: Path, tmp_path: Path) -> None:
        artifacts = tmp_path / "artifacts"
        status = main(
            _argv(outside_course_path, artifacts, "--validate", "false"), store=MemoryStore()
        )
        assert status == EXIT_OK
        assert not artifacts.exists()

    def test_missing_file(self, tmp_path: Path) -> None:
        store = MemoryStore()
        status = main(_argv(tmp_path / "missing.geojson", tmp_path), store=store)
        assert status == EXIT_FAILURE
        assert store.rows() == []

    def test_unsupported_document(self, data_dir: Path, tmp_path: Path) -> None:
        store = MemoryStore()
        artifacts = tmp_path / "artifacts"
        status = main(_argv(data_dir / "not_a_collection.geojson", artifacts), store=store)
        assert status == EXIT_FAILURE
        assert store.rows() == []
        assert not artifacts.exists()

    def test_unknown_simplifier(self, demo_course_path: Path, tmp_path: Path) -> None:
        status = main(
            _argv(demo_course_path, tmp_path, "--simplifier", "nope"), store=MemoryStore()
        )
        assert status == EXIT_FAILURE

    def test_negative_epsilon(self, demo_course_path: Path, tmp_path: Path) -> None:
        status = main(_argv(demo_course_path, tmp_path, "--epsilon", "-1"), store=MemoryStore())
        assert status == EXIT_FAILURE

    def test_init_schema_calls_store(self, demo_course_path: Path, tmp_path: Path) -> None:
        store = MemoryStore()
        with patch.object(store, "ensure_schema") as ensure_schema:
            status = main(_argv(demo_course_path, tmp_path, "--init-schema"), store=store)
        assert status == EXIT_OK
        ensure_schema.assert_called_once_with()

    def test_memory_store_built_from_flag(self, demo_course_path: Path, tmp_path: Path) -> None:
        assert main(_argv(demo_course_path, tmp_path)) == EXIT_OK

    def test_report_idempotent_across_runs(self, demo_course_path: Path, tmp_path: Path) -> None:
        store = MemoryStore()
        artifacts = tmp_path / "artifacts"
        assert main(_argv(demo_course_path, artifacts, "--replace"), store=store) == EXIT_OK
        assert main(_argv(demo_course_path, artifacts, "--replace"), store=store) == EXIT_OK
        assert store.count_features("demo-course") == 2
