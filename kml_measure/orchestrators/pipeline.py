"""Per-document pipeline: raw KML → FeatureSet → MeasurementSummary.

Each invocation builds its own FeatureSet and summary and keeps nothing
afterwards, so concurrent invocations (for example on a host's worker
pool) share no state.  A host that wants to abandon a long parse simply
discards the result; there is no cancellation hook.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kml_measure.activities.measure import aggregate
from kml_measure.activities.parse_kml import parse_kml, parse_kml_file
from kml_measure.core.config import PipelineConfig

if TYPE_CHECKING:
    from pathlib import Path

    from kml_measure.activities.parse_kml import Translator
    from kml_measure.models.contracts import PipelineResultPayload
    from kml_measure.models.feature import FeatureSet
    from kml_measure.models.summary import MeasurementSummary

logger = logging.getLogger("kml_measure.orchestrators.pipeline")


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Everything the presentation layer needs for one document.

    Attributes:
        features: Parsed features, for drawing the map.
        summary: Per-type counts and lengths, for the tables.
    """

    features: FeatureSet
    summary: MeasurementSummary

    def to_dict(self) -> PipelineResultPayload:
        """Serialise for transport to the presentation layer."""
        bounds = self.features.bounds()
        return {
            "source_file": self.features.source_file,
            "feature_collection": self.features.to_geojson(),  # type: ignore[typeddict-item]
            "summary": self.summary.to_dict(),  # type: ignore[typeddict-item]
            "bounds": list(bounds) if bounds is not None else None,
        }


def run_pipeline(
    raw: str | bytes,
    *,
    source_filename: str = "",
    config: PipelineConfig | None = None,
    translator: Translator | None = None,
) -> PipelineResult:
    """Parse one KML document and measure it.

    Raises:
        ParseError: If the document cannot be parsed.
        UnsupportedGeometryError: If configured to reject unknown geometry.
    """
    config = config or PipelineConfig()
    started = time.perf_counter()

    features = parse_kml(
        raw,
        source_filename=source_filename,
        translator=translator,
        config=config,
    )
    return _measure(features, config, started)


def process_kml_file(
    kml_path: Path | str,
    *,
    config: PipelineConfig | None = None,
    translator: Translator | None = None,
) -> PipelineResult:
    """Read a KML file from disk, parse it, and measure it.

    Raises:
        ParseError: If the file cannot be read or parsed.
        UnsupportedGeometryError: If configured to reject unknown geometry.
    """
    config = config or PipelineConfig()
    started = time.perf_counter()

    features = parse_kml_file(kml_path, translator=translator, config=config)
    return _measure(features, config, started)


def _measure(features: FeatureSet, config: PipelineConfig, started: float) -> PipelineResult:
    summary = aggregate(
        features,
        nested_lines=config.nested_lines,
        method=config.length_method,
    )
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Measured document | file=%s | features=%d | counts=%s | lengths_km=%s | elapsed=%.1f ms",
        features.source_file or "<document>",
        len(features),
        summary.counts,
        {k: round(v, 3) for k, v in summary.lengths.items()},
        elapsed_ms,
    )
    return PipelineResult(features=features, summary=summary)
