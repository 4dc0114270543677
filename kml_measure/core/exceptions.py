"""Pipeline exception taxonomy.

Every domain exception raised by the parser, the aggregator, or the
configuration loader inherits from ``PipelineError`` and carries
structured context so the host can decide how to surface it.

Taxonomy categories
-------------------
- ``ValidationError``   — input or model violations (unsupported geometry).
- ``TransientError``    — temporary failures the host may choose to retry;
  raised only by host code wrapping the pipeline, never by the pipeline.
- ``PermanentError``    — unrecoverable document failures (malformed KML).
- ``ContractError``     — translator output that does not match the
  documented GeoJSON-equivalent shape.

The pipeline never retries on its own; ``retryable`` is advisory for the
host. ``to_error_dict()`` gives a stable payload for logging and for the
presentation layer's error banner.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (``"parse_kml"``, ``"measure"``, ``"config"``).
        code: Machine-readable error code (e.g. ``"KML_PARSE_FAILED"``).
        retryable: Whether the host could sensibly retry the operation.
        correlation_id: Caller-supplied identifier for the invocation.
    """

    default_stage: str = ""
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(PipelineError):
    """Temporary failure that may succeed on retry.

    The pipeline itself never raises this; it is the category a host
    uses for its own I/O failures (for example reading the upload from
    storage) so they share one error payload with parse failures.
    """

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PipelineError):
    """Unrecoverable document failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(PipelineError):
    """Translator output does not match the expected shape. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------


class UnsupportedGeometryError(ValidationError):
    """Raised for geometry types outside Point/LineString/MultiLineString/Polygon/GeometryCollection.

    Attributes:
        geometry_type: The offending ``type`` label.
    """

    default_stage = "parse_kml"
    default_code = "UNSUPPORTED_GEOMETRY"

    def __init__(self, geometry_type: str, message: str = "", **kwargs: object) -> None:
        self.geometry_type = geometry_type
        super().__init__(message or f"Unsupported geometry type: {geometry_type!r}", **kwargs)
