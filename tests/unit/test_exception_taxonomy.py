"""Tests for the unified exception taxonomy.

Validates:
- PipelineError hierarchy and structured attributes
- Category classification (validation, transient, permanent, contract)
- ``to_error_dict()`` produces stable payload keys
- Every domain exception is a PipelineError subclass with its own stage
"""

from __future__ import annotations

import pytest

from course_map.core.config import ConfigValidationError
from course_map.core.exceptions import (
    ContractError,
    PermanentError,
    PipelineError,
    StoreConnectionError,
    StoreError,
    TransientError,
    ValidationError,
)
from course_map.geometry.decoder import (
    EmptyGeometryError,
    GeometryDecodeError,
    InsufficientPointsError,
    MalformedCoordinateError,
    UnsupportedGeometryTypeError,
)
from course_map.geometry.wkt import WktParseError
from course_map.importer.pipeline import (
    DocumentReadError,
    MalformedDocumentError,
    UnsupportedDocumentTypeError,
)
from course_map.importer.report_writer import ReportWriteError
from course_map.query.service import QueryParameterError
from course_map.simplify.bridge import CoordinateArityMismatchError


class TestPipelineErrorBase:
    """PipelineError base class behavior."""

    def test_default_attributes(self) -> None:
        err = PipelineError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""

    def test_custom_attributes(self) -> None:
        err = PipelineError(
            "fail",
            stage="store",
            code="STORE_FAILED",
            retryable=True,
            correlation_id="run-1",
        )
        assert err.stage == "store"
        assert err.code == "STORE_FAILED"
        assert err.retryable is True
        assert err.correlation_id == "run-1"

    def test_str_is_message(self) -> None:
        assert str(PipelineError("human-readable error")) == "human-readable error"

    def test_to_error_dict_keys(self) -> None:
        err = PipelineError("x", stage="s", code="C", retryable=True, correlation_id="id")
        d = err.to_error_dict()
        assert set(d) == {"category", "code", "stage", "message", "retryable", "correlation_id"}
        assert d["category"] == "transient"

    def test_base_category_follows_retryable(self) -> None:
        assert PipelineError("x").category == "permanent"
        assert PipelineError("x", retryable=True).category == "transient"


class TestCategoryClasses:
    """Each category base class reports its category and retry default."""

    @pytest.mark.parametrize(
        ("cls", "category", "retryable"),
        [
            (ValidationError, "validation", False),
            (TransientError, "transient", True),
            (PermanentError, "permanent", False),
            (ContractError, "contract", False),
        ],
    )
    def test_category_and_retry_default(
        self, cls: type[PipelineError], category: str, retryable: bool
    ) -> None:
        err = cls("x")
        assert err.category == category
        assert err.retryable is retryable


class TestDomainExceptions:
    """Domain exceptions slot into the taxonomy with stable stage/code."""

    @pytest.mark.parametrize(
        ("cls", "base", "stage", "code"),
        [
            (GeometryDecodeError, ValidationError, "decode_geometry", "GEOMETRY_DECODE_FAILED"),
            (
                UnsupportedGeometryTypeError,
                GeometryDecodeError,
                "decode_geometry",
                "GEOMETRY_UNSUPPORTED_TYPE",
            ),
            (
                MalformedCoordinateError,
                GeometryDecodeError,
                "decode_geometry",
                "GEOMETRY_MALFORMED_COORDINATE",
            ),
            (
                InsufficientPointsError,
                GeometryDecodeError,
                "decode_geometry",
                "GEOMETRY_INSUFFICIENT_POINTS",
            ),
            (EmptyGeometryError, GeometryDecodeError, "decode_geometry", "GEOMETRY_EMPTY"),
            (WktParseError, ValidationError, "wkt", "WKT_PARSE_FAILED"),
            (DocumentReadError, ValidationError, "import_features", "DOCUMENT_READ_FAILED"),
            (
                UnsupportedDocumentTypeError,
                ValidationError,
                "import_features",
                "DOCUMENT_UNSUPPORTED_TYPE",
            ),
            (MalformedDocumentError, ValidationError, "import_features", "DOCUMENT_MALFORMED"),
            (QueryParameterError, ValidationError, "query", "QUERY_PARAMETER_INVALID"),
            (CoordinateArityMismatchError, ContractError, "simplify", "SIMPLIFY_ARITY_MISMATCH"),
            (ReportWriteError, PermanentError, "write_report", "REPORT_WRITE_FAILED"),
            (StoreError, PipelineError, "store", "STORE_FAILED"),
            (StoreConnectionError, TransientError, "store", "STORE_CONNECTION_FAILED"),
        ],
    )
    def test_stage_and_code(
        self, cls: type[PipelineError], base: type[PipelineError], stage: str, code: str
    ) -> None:
        err = cls("x")
        assert isinstance(err, base)
        assert err.stage == stage
        assert err.code == code

    def test_store_error_code_override(self) -> None:
        err = StoreError("down", code="STORE_CONNECTION_FAILED", retryable=True)
        assert err.code == "STORE_CONNECTION_FAILED"
        assert err.category == "transient"

    def test_config_error_is_pipeline_error(self) -> None:
        assert issubclass(ConfigValidationError, PipelineError)
