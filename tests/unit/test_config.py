"""Tests for pipeline configuration.

Covers:
- Default values (fold nested lines, skip unknown types, haversine)
- Loading from environment variables (normalised to lower case)
- Fail-fast validation of options and ranges
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from kml_measure.core.config import ConfigValidationError, PipelineConfig
from kml_measure.core.constants import DEFAULT_MAX_DOCUMENT_BYTES


class TestPipelineConfigDefaults:
    """Verify default configuration values."""

    def test_default_nested_lines(self) -> None:
        assert PipelineConfig().nested_lines == "fold"

    def test_default_unsupported_geometry(self) -> None:
        assert PipelineConfig().unsupported_geometry == "skip"

    def test_default_length_method(self) -> None:
        assert PipelineConfig().length_method == "haversine"

    def test_default_max_document_bytes(self) -> None:
        assert PipelineConfig().max_document_bytes == DEFAULT_MAX_DOCUMENT_BYTES == 52_428_800

    def test_frozen(self) -> None:
        cfg = PipelineConfig()
        with pytest.raises(AttributeError):
            cfg.nested_lines = "separate"  # type: ignore[misc]


class TestPipelineConfigFromEnv:
    """Verify loading from environment variables."""

    def test_loads_from_environment(self) -> None:
        env = {
            "KML_MEASURE_NESTED_LINES": "Separate",
            "KML_MEASURE_UNSUPPORTED_GEOMETRY": "reject",
            "KML_MEASURE_LENGTH_METHOD": " geodesic ",
            "KML_MEASURE_MAX_DOCUMENT_BYTES": "1024",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = PipelineConfig.from_env()

        assert cfg.nested_lines == "separate"
        assert cfg.unsupported_geometry == "reject"
        assert cfg.length_method == "geodesic"
        assert cfg.max_document_bytes == 1024

    def test_missing_env_uses_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = PipelineConfig.from_env()

        assert cfg == PipelineConfig()

    def test_non_integer_size_raises_value_error(self) -> None:
        with (
            patch.dict(os.environ, {"KML_MEASURE_MAX_DOCUMENT_BYTES": "lots"}, clear=True),
            pytest.raises(ValueError),
        ):
            PipelineConfig.from_env()


class TestPipelineConfigValidation:
    """Fail-fast validation."""

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("KML_MEASURE_NESTED_LINES", "flatten"),
            ("KML_MEASURE_UNSUPPORTED_GEOMETRY", "ignore"),
            ("KML_MEASURE_LENGTH_METHOD", "vincenty"),
            ("KML_MEASURE_MAX_DOCUMENT_BYTES", "0"),
            ("KML_MEASURE_MAX_DOCUMENT_BYTES", "-5"),
        ],
    )
    def test_invalid_values_rejected(self, key: str, value: str) -> None:
        with (
            patch.dict(os.environ, {key: value}, clear=True),
            pytest.raises(ConfigValidationError) as exc_info,
        ):
            PipelineConfig.from_env()

        assert exc_info.value.key == key
        assert key in str(exc_info.value)

    def test_validate_on_instance(self) -> None:
        with pytest.raises(ConfigValidationError, match="must be one of"):
            PipelineConfig(length_method="flat").validate()

    def test_error_payload(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            PipelineConfig(max_document_bytes=0).validate()

        payload = exc_info.value.to_error_dict()
        assert payload["stage"] == "config"
        assert payload["code"] == "CONFIG_VALIDATION_FAILED"
