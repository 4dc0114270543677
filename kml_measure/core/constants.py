"""Shared pipeline constants.

Centralises geometry type labels, measurement constants, and the
option values accepted by the parser and aggregator.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Geometry type labels (GeoJSON ``type`` values)
# ---------------------------------------------------------------------------

POINT: str = "Point"
LINE_STRING: str = "LineString"
MULTI_LINE_STRING: str = "MultiLineString"
POLYGON: str = "Polygon"
GEOMETRY_COLLECTION: str = "GeometryCollection"

SUPPORTED_GEOMETRY_TYPES: frozenset[str] = frozenset(
    {POINT, LINE_STRING, MULTI_LINE_STRING, POLYGON, GEOMETRY_COLLECTION}
)

# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------

EARTH_RADIUS_KM: float = 6371.0
"""Mean Earth radius used by the haversine formula."""

METRES_PER_KILOMETRE: float = 1000.0

# ---------------------------------------------------------------------------
# Option values
# ---------------------------------------------------------------------------

NESTED_LINES_FOLD = "fold"
"""Lines nested in a GeometryCollection are added to the ``LineString`` bucket."""

NESTED_LINES_SEPARATE = "separate"
"""Lines nested in a GeometryCollection are added to the ``GeometryCollection`` bucket."""

NESTED_LINES_MODES: frozenset[str] = frozenset({NESTED_LINES_FOLD, NESTED_LINES_SEPARATE})

UNSUPPORTED_SKIP = "skip"
UNSUPPORTED_REJECT = "reject"
UNSUPPORTED_GEOMETRY_POLICIES: frozenset[str] = frozenset({UNSUPPORTED_SKIP, UNSUPPORTED_REJECT})

LENGTH_METHOD_HAVERSINE = "haversine"
LENGTH_METHOD_GEODESIC = "geodesic"
LENGTH_METHODS: frozenset[str] = frozenset({LENGTH_METHOD_HAVERSINE, LENGTH_METHOD_GEODESIC})

DEFAULT_MAX_DOCUMENT_BYTES: int = 50 * 1024 * 1024
