"""Measurement activity: the MeasurementAggregator.

Walks a FeatureSet once and produces:

- ``counts``: number of top-level features per geometry type;
- ``lengths``: total great-circle length in kilometres per type, for
  linear geometry only.

Length rules:
- ``LineString`` → its own length, under ``LineString``.
- ``MultiLineString`` → sum of its parts, under ``MultiLineString``.
- ``GeometryCollection`` → each immediate ``LineString`` child is added
  under ``LineString`` (``nested_lines="fold"``, the default) or under
  ``GeometryCollection`` (``nested_lines="separate"``).  Deeper nesting
  is not inspected.
- ``Point`` and ``Polygon`` are counted only.

Distances use the haversine formula on a sphere of radius 6371 km, which
is a summary-grade approximation (roughly 0.5% worst case against the
WGS 84 ellipsoid).  ``method="geodesic"`` measures on the ellipsoid with
``pyproj.Geod`` instead.

Aggregation never raises for a well-formed FeatureSet: lines with fewer
than two positions, and non-finite intermediate results, measure as 0.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, assert_never

from kml_measure.core.constants import (
    EARTH_RADIUS_KM,
    GEOMETRY_COLLECTION,
    LENGTH_METHOD_GEODESIC,
    LENGTH_METHOD_HAVERSINE,
    LINE_STRING,
    METRES_PER_KILOMETRE,
    MULTI_LINE_STRING,
    NESTED_LINES_FOLD,
    NESTED_LINES_SEPARATE,
)
from kml_measure.core.exceptions import ValidationError
from kml_measure.models.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    Point,
    Polygon,
)
from kml_measure.models.summary import MeasurementSummary

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from kml_measure.models.feature import Feature
    from kml_measure.models.geometry import Coordinate

logger = logging.getLogger("kml_measure.activities.measure")


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------


def haversine_km(start: Coordinate, end: Coordinate) -> float:
    """Great-circle distance between two ``(lon, lat)`` positions in km.

    ``a = sin²(Δlat/2) + cos(lat1)·cos(lat2)·sin²(Δlon/2)``,
    ``d = 2·R·atan2(√a, √(1−a))`` with R = 6371 km.
    """
    lon1, lat1 = start
    lon2, lat2 = end

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push ``a`` a hair outside [0, 1] for antipodal points
    a = min(max(a, 0.0), 1.0)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def line_length_km(coords: Sequence[Coordinate]) -> float:
    """Sum of haversine distances between consecutive positions.

    Returns 0 for fewer than two positions.
    """
    total = 0.0
    for start, end in zip(coords, coords[1:]):
        total += haversine_km(start, end)
    return total if math.isfinite(total) else 0.0


def geodesic_line_length_km(coords: Sequence[Coordinate]) -> float:
    """Length of a line on the WGS 84 ellipsoid, in km.

    Uses ``pyproj.Geod.line_length``.  Returns 0 for fewer than two positions.
    """
    if len(coords) < 2:
        return 0.0

    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    lons = [c[0] for c in coords]
    lats = [c[1] for c in coords]
    length_m = geod.line_length(lons, lats)
    if not math.isfinite(length_m):
        return 0.0
    return length_m / METRES_PER_KILOMETRE


_LENGTH_FUNCTIONS: dict[str, Callable[[Sequence[Coordinate]], float]] = {
    LENGTH_METHOD_HAVERSINE: line_length_km,
    LENGTH_METHOD_GEODESIC: geodesic_line_length_km,
}


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate(
    features: Iterable[Feature],
    *,
    nested_lines: str = NESTED_LINES_FOLD,
    method: str = LENGTH_METHOD_HAVERSINE,
) -> MeasurementSummary:
    """Count features per geometry type and total line lengths per type.

    Args:
        features: A FeatureSet (or any iterable of Features). Not mutated.
        nested_lines: ``"fold"`` or ``"separate"``; where lines nested in
            a GeometryCollection are recorded.
        method: ``"haversine"`` or ``"geodesic"``.

    Returns:
        MeasurementSummary with ``counts`` and ``lengths`` (km).

    Raises:
        ValidationError: If ``nested_lines`` or ``method`` is not a
            recognised option.
    """
    measure = _LENGTH_FUNCTIONS.get(method)
    if measure is None:
        msg = f"Unknown length method {method!r}; expected one of {sorted(_LENGTH_FUNCTIONS)}"
        raise ValidationError(msg, stage="measure", code="MEASURE_OPTION_INVALID")
    if nested_lines == NESTED_LINES_FOLD:
        nested_bucket = LINE_STRING
    elif nested_lines == NESTED_LINES_SEPARATE:
        nested_bucket = GEOMETRY_COLLECTION
    else:
        msg = f"Unknown nested_lines mode {nested_lines!r}; expected 'fold' or 'separate'"
        raise ValidationError(msg, stage="measure", code="MEASURE_OPTION_INVALID")

    counts: dict[str, int] = {}
    lengths: dict[str, float] = {}

    def add_length(label: str, km: float) -> None:
        lengths[label] = lengths.get(label, 0.0) + max(km, 0.0)

    for feature in features:
        geometry = feature.geometry
        counts[geometry.type] = counts.get(geometry.type, 0) + 1

        match geometry:
            case LineString(coordinates=coords):
                add_length(LINE_STRING, measure(coords))
            case MultiLineString(lines=lines):
                add_length(MULTI_LINE_STRING, sum(measure(line.coordinates) for line in lines))
            case GeometryCollection(geometries=children):
                for child in children:
                    if isinstance(child, LineString):
                        add_length(nested_bucket, measure(child.coordinates))
            case Point() | Polygon():
                pass
            case _:
                assert_never(geometry)

    logger.info(
        "Aggregated %d feature(s) | types=%d | total_length=%.3f km | method=%s",
        sum(counts.values()),
        len(counts),
        sum(lengths.values()),
        method,
    )
    return MeasurementSummary(counts=counts, lengths=lengths)
