"""Tests for the exception taxonomy.

Validates:
- PipelineError structured attributes and ``to_error_dict()`` keys
- Category classification (validation, transient, permanent, contract)
- Domain exceptions sit in the expected category
"""

from __future__ import annotations

import pytest

from kml_measure.activities.parse_kml import InvalidCoordinateError, ParseError
from kml_measure.core.config import ConfigValidationError
from kml_measure.core.exceptions import (
    ContractError,
    PermanentError,
    PipelineError,
    TransientError,
    UnsupportedGeometryError,
    ValidationError,
)


class TestPipelineErrorBase:
    """PipelineError base class behaviour."""

    def test_default_attributes(self) -> None:
        err = PipelineError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""

    def test_custom_attributes(self) -> None:
        err = PipelineError(
            "fail", stage="measure", code="X", retryable=True, correlation_id="upload-7"
        )
        assert err.stage == "measure"
        assert err.code == "X"
        assert err.retryable is True
        assert err.correlation_id == "upload-7"

    def test_str_is_message(self) -> None:
        assert str(PipelineError("human-readable error")) == "human-readable error"

    def test_to_error_dict_keys(self) -> None:
        d = PipelineError("x").to_error_dict()
        assert set(d) == {"category", "code", "stage", "message", "retryable", "correlation_id"}

    def test_uncategorised_falls_back_on_retryable(self) -> None:
        assert PipelineError("x", retryable=True).category == "transient"
        assert PipelineError("x").category == "permanent"


class TestCategories:
    """Category base classes."""

    @pytest.mark.parametrize(
        ("cls", "category", "retryable"),
        [
            (ValidationError, "validation", False),
            (TransientError, "transient", True),
            (PermanentError, "permanent", False),
            (ContractError, "contract", False),
        ],
    )
    def test_category_and_retry(self, cls: type[PipelineError], category: str, retryable: bool) -> None:
        err = cls("x")
        assert err.category == category
        assert err.retryable is retryable


class TestDomainExceptions:
    """Concrete exceptions raised by the pipeline."""

    def test_parse_error(self) -> None:
        err = ParseError("bad xml")
        assert isinstance(err, PermanentError)
        assert err.stage == "parse_kml"
        assert err.code == "KML_PARSE_FAILED"
        assert err.category == "permanent"

    def test_unsupported_geometry(self) -> None:
        err = UnsupportedGeometryError("MultiPolygon")
        assert isinstance(err, ValidationError)
        assert err.geometry_type == "MultiPolygon"
        assert err.code == "UNSUPPORTED_GEOMETRY"
        assert "MultiPolygon" in str(err)

    def test_invalid_coordinate(self) -> None:
        err = InvalidCoordinateError("lat 91")
        assert err.category == "validation"
        assert err.code == "KML_COORDINATE_INVALID"

    def test_config_validation(self) -> None:
        err = ConfigValidationError("KEY", 0, "must be > 0")
        assert isinstance(err, PipelineError)
        assert str(err) == "Invalid configuration KEY=0: must be > 0"
