"""Pipeline configuration loaded from environment variables.

All values have defaults matching the viewer's summary tables:
nested GeometryCollection lines are folded into the ``LineString``
bucket, unsupported geometry is skipped, and lengths use the
haversine formula.

``from_env()`` raises ``ConfigValidationError`` if any value is out of
its valid range, so bad configuration is caught at startup rather than
on the first uploaded document.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from kml_measure.core.constants import (
    DEFAULT_MAX_DOCUMENT_BYTES,
    LENGTH_METHOD_HAVERSINE,
    LENGTH_METHODS,
    NESTED_LINES_FOLD,
    NESTED_LINES_MODES,
    UNSUPPORTED_GEOMETRY_POLICIES,
    UNSUPPORTED_SKIP,
)
from kml_measure.core.exceptions import PipelineError


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.message = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Immutable pipeline configuration.

    Passed explicitly into each pipeline invocation; nothing is cached at
    module level.

    Attributes:
        nested_lines: ``"fold"`` adds lines nested in a GeometryCollection to
            the ``LineString`` bucket; ``"separate"`` keeps them under
            ``GeometryCollection``.
        unsupported_geometry: ``"skip"`` drops features with unknown geometry
            types; ``"reject"`` raises ``UnsupportedGeometryError``.
        length_method: ``"haversine"`` (sphere, R = 6371 km) or
            ``"geodesic"`` (WGS 84 ellipsoid via pyproj).
        max_document_bytes: Upper bound on the raw document size.
    """

    nested_lines: str = NESTED_LINES_FOLD
    unsupported_geometry: str = UNSUPPORTED_SKIP
    length_method: str = LENGTH_METHOD_HAVERSINE
    max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES

    @classmethod
    def from_env(cls) -> PipelineConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or not one
                of the accepted options.
            ValueError: If ``KML_MEASURE_MAX_DOCUMENT_BYTES`` is not an integer.
        """
        config = cls(
            nested_lines=os.getenv("KML_MEASURE_NESTED_LINES", NESTED_LINES_FOLD).strip().lower(),
            unsupported_geometry=os.getenv(
                "KML_MEASURE_UNSUPPORTED_GEOMETRY", UNSUPPORTED_SKIP
            ).strip().lower(),
            length_method=os.getenv(
                "KML_MEASURE_LENGTH_METHOD", LENGTH_METHOD_HAVERSINE
            ).strip().lower(),
            max_document_bytes=int(
                os.getenv("KML_MEASURE_MAX_DOCUMENT_BYTES", str(DEFAULT_MAX_DOCUMENT_BYTES))
            ),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate option values and ranges.  Raises ``ConfigValidationError``."""
        if self.nested_lines not in NESTED_LINES_MODES:
            raise ConfigValidationError(
                "KML_MEASURE_NESTED_LINES",
                self.nested_lines,
                f"must be one of {sorted(NESTED_LINES_MODES)}",
            )

        if self.unsupported_geometry not in UNSUPPORTED_GEOMETRY_POLICIES:
            raise ConfigValidationError(
                "KML_MEASURE_UNSUPPORTED_GEOMETRY",
                self.unsupported_geometry,
                f"must be one of {sorted(UNSUPPORTED_GEOMETRY_POLICIES)}",
            )

        if self.length_method not in LENGTH_METHODS:
            raise ConfigValidationError(
                "KML_MEASURE_LENGTH_METHOD",
                self.length_method,
                f"must be one of {sorted(LENGTH_METHODS)}",
            )

        if self.max_document_bytes <= 0:
            raise ConfigValidationError(
                "KML_MEASURE_MAX_DOCUMENT_BYTES",
                self.max_document_bytes,
                "must be > 0 (bytes)",
            )
