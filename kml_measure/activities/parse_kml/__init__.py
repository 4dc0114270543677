"""KML parsing activity: the DocumentParser.

Turns raw KML text into a ``FeatureSet``.  The actual markup-to-geometry
work is done by a translator callable that returns a GeoJSON-shaped
FeatureCollection; the default is the lxml translator in
``_translator``, and any callable with the same contract can be injected.

This module's own job is narrow:
- enforce the document size limit;
- invoke the translator and fold every failure into ``ParseError``;
- convert the translator's features into typed ``Feature`` objects,
  skipping (or rejecting, per configuration) unsupported geometry types.

The parse is pure: no state is kept between calls and nothing is
returned on failure.

The parsing pipeline is split into focused stages:
- **_validation**: size check, XML/KML check, coordinate bounds
- **_normalization**: coordinate text and property extraction
- **_translator**: lxml KML → GeoJSON translator
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kml_measure.activities.parse_kml._constants import (
    GX_NAMESPACE,
    KML_NAMESPACE,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from kml_measure.activities.parse_kml._normalization import (
    extract_extended_data,
    extract_properties,
    parse_coordinates_text,
    parse_gx_coord_text,
)
from kml_measure.activities.parse_kml._translator import translate_kml, translate_kml_tree
from kml_measure.activities.parse_kml._validation import (
    InvalidCoordinateError,
    ParseError,
    validate_coordinates,
    validate_document_size,
    validate_xml,
)
from kml_measure.core.config import PipelineConfig
from kml_measure.core.constants import UNSUPPORTED_REJECT
from kml_measure.core.exceptions import (
    ContractError,
    UnsupportedGeometryError,
)
from kml_measure.models.feature import Feature, FeatureSet

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    Translator = Callable[[str | bytes], Any]

logger = logging.getLogger("kml_measure.activities.parse_kml")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "GX_NAMESPACE",
    "KML_NAMESPACE",
    "MAX_LATITUDE",
    "MAX_LONGITUDE",
    "MIN_LATITUDE",
    "MIN_LONGITUDE",
    "InvalidCoordinateError",
    "ParseError",
    "extract_extended_data",
    "extract_properties",
    "parse_coordinates_text",
    "parse_gx_coord_text",
    "parse_kml",
    "parse_kml_file",
    "translate_kml",
    "translate_kml_tree",
    "validate_coordinates",
    "validate_document_size",
    "validate_xml",
]


def parse_kml(
    raw: str | bytes,
    *,
    source_filename: str = "",
    translator: Translator | None = None,
    config: PipelineConfig | None = None,
) -> FeatureSet:
    """Parse raw KML into a FeatureSet.

    Args:
        raw: Document content as text or bytes.
        source_filename: Name recorded on the FeatureSet and in logs.
        translator: Callable from raw markup to a GeoJSON FeatureCollection
            dict. Defaults to the lxml translator.
        config: Pipeline configuration (defaults to ``PipelineConfig()``).

    Returns:
        FeatureSet with one Feature per translated Placemark, in order.

    Raises:
        ParseError: If the document is empty, too large, not well-formed
            KML, or the translator fails or returns the wrong shape.
        UnsupportedGeometryError: If a feature has an unsupported geometry
            type and ``config.unsupported_geometry`` is ``"reject"``.
    """
    config = config or PipelineConfig()
    translate = translator or translate_kml
    display_name = source_filename or "<document>"

    content = raw.encode("utf-8") if isinstance(raw, str) else raw
    validate_document_size(content, config.max_document_bytes)

    logger.info("Parsing KML document: %s (%d bytes)", display_name, len(content))

    try:
        payload = translate(raw)
    except ParseError:
        raise
    except Exception as exc:
        msg = f"Translator failed for {display_name}: {exc}"
        raise ParseError(msg) from exc

    raw_features = _extract_feature_list(payload, display_name)
    strict = config.unsupported_geometry == UNSUPPORTED_REJECT

    features: list[Feature] = []
    for idx, raw_feature in enumerate(raw_features):
        try:
            features.append(_to_feature(raw_feature, strict=strict))
        except UnsupportedGeometryError as exc:
            if strict:
                raise
            logger.warning("Skipping feature %d in %s: %s", idx, display_name, exc)
        except (ContractError, TypeError) as exc:
            logger.warning("Skipping malformed feature %d in %s: %s", idx, display_name, exc)

    logger.info("Parsed %d feature(s) from %s", len(features), display_name)
    return FeatureSet(features=tuple(features), source_file=source_filename)


def parse_kml_file(
    kml_path: Path | str,
    *,
    source_filename: str = "",
    translator: Translator | None = None,
    config: PipelineConfig | None = None,
) -> FeatureSet:
    """Read a KML file from disk and parse it with :func:`parse_kml`.

    Raises:
        ParseError: If the file cannot be read, or any ``parse_kml`` failure.
    """
    from pathlib import Path

    kml_path = Path(kml_path)
    if not source_filename:
        source_filename = kml_path.name

    try:
        content = kml_path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read KML file: {exc}"
        raise ParseError(msg) from exc

    return parse_kml(
        content,
        source_filename=source_filename,
        translator=translator,
        config=config,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _extract_feature_list(payload: object, display_name: str) -> list[Any]:
    """Return the translator's ``features`` list or raise ``ParseError``."""
    features = payload.get("features") if isinstance(payload, dict) else None
    if not isinstance(features, list):
        msg = (
            f"Translator produced no feature list for {display_name} "
            f"(got {type(payload).__name__})"
        )
        raise ParseError(msg)
    return features


def _to_feature(raw_feature: object, *, strict: bool) -> Feature:
    if not isinstance(raw_feature, dict):
        msg = f"feature must be a dict, got {type(raw_feature).__name__}"
        raise ContractError(msg, stage="parse_kml", code="GEOMETRY_CONTRACT_VIOLATION")
    return Feature.from_dict(raw_feature, strict=strict)
