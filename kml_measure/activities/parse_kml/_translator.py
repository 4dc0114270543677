"""lxml-based KML → GeoJSON translator.

Produces the ``{"type": "FeatureCollection", "features": [...]}`` shape
documented in ``kml_measure.models.contracts``, following the
conventions of the ``togeojson`` library:

- every ``Placemark`` in the document becomes one feature, in document
  order, regardless of Folder/Document nesting;
- ``MultiGeometry`` is flattened, and a Placemark with more than one
  geometry gets a ``GeometryCollection``;
- ``gx:Track`` becomes a ``LineString`` and ``gx:MultiTrack`` a
  ``MultiLineString``.

Placemarks with no geometry, or with coordinates outside WGS 84 bounds,
are logged and skipped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kml_measure.activities.parse_kml._normalization import (
    child_elements,
    extract_properties,
    local_name,
    parse_coordinates_text,
    parse_gx_coord_text,
)
from kml_measure.activities.parse_kml._validation import (
    InvalidCoordinateError,
    validate_coordinates,
    validate_xml,
)
from kml_measure.core.constants import (
    GEOMETRY_COLLECTION,
    LINE_STRING,
    MULTI_LINE_STRING,
    POINT,
    POLYGON,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from lxml.etree import _Element

    from kml_measure.models.contracts import (
        FeatureCollectionPayload,
        FeaturePayload,
        GeometryPayload,
    )

logger = logging.getLogger("kml_measure.activities.parse_kml")


def translate_kml(raw: str | bytes) -> FeatureCollectionPayload:
    """Translate raw KML into a GeoJSON FeatureCollection dict.

    Raises:
        ParseError: If the input is not well-formed XML or not KML.
    """
    if isinstance(raw, str):
        root = validate_xml(raw.encode("utf-8"), encoding="utf-8")
    else:
        root = validate_xml(raw)
    return translate_kml_tree(root)


def translate_kml_tree(root: _Element) -> FeatureCollectionPayload:
    """Translate an already-parsed KML element tree."""
    features: list[FeaturePayload] = []

    for idx, placemark in enumerate(_iter_placemarks(root)):
        properties = extract_properties(placemark)
        display_name = properties.get("name") or f"Feature {idx}"

        geometries: list[GeometryPayload] = []
        _collect_geometries(placemark, geometries)
        if not geometries:
            logger.warning("Skipping Placemark '%s' with no geometry", display_name)
            continue

        try:
            for geometry in geometries:
                validate_coordinates(_iter_positions(geometry), display_name)
        except InvalidCoordinateError as exc:
            logger.warning("Skipping invalid Placemark '%s': %s", display_name, exc)
            continue

        if len(geometries) == 1:
            geometry = geometries[0]
        else:
            geometry = {"type": GEOMETRY_COLLECTION, "geometries": geometries}

        features.append({"type": "Feature", "geometry": geometry, "properties": properties})

    return {"type": "FeatureCollection", "features": features}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _iter_placemarks(root: _Element) -> Iterator[_Element]:
    for elem in root.iter():
        if local_name(elem) == "Placemark":
            yield elem


def _collect_geometries(elem: _Element, out: list[GeometryPayload]) -> None:
    """Append every geometry under ``elem`` to ``out``, flattening MultiGeometry."""
    for child in elem:
        name = local_name(child)
        if name == "MultiGeometry":
            _collect_geometries(child, out)
            continue
        builder = _GEOMETRY_BUILDERS.get(name)
        if builder is None:
            continue
        geometry = builder(child)
        if geometry is not None:
            out.append(geometry)


def _coordinates_of(elem: _Element) -> list[tuple[float, float]]:
    for coords_elem in child_elements(elem, "coordinates"):
        return parse_coordinates_text(coords_elem.text or "")
    return []


def _point(elem: _Element) -> GeometryPayload | None:
    coords = _coordinates_of(elem)
    if not coords:
        return None
    return {"type": POINT, "coordinates": list(coords[0])}


def _line_string(elem: _Element) -> GeometryPayload | None:
    return {"type": LINE_STRING, "coordinates": [list(c) for c in _coordinates_of(elem)]}


def _polygon(elem: _Element) -> GeometryPayload | None:
    """Exterior ring from ``outerBoundaryIs``, then holes; ``None`` without an exterior."""
    exterior = _boundary_rings(elem, "outerBoundaryIs")
    if not exterior:
        return None
    rings = [exterior[0], *_boundary_rings(elem, "innerBoundaryIs")]
    return {"type": POLYGON, "coordinates": rings}


def _boundary_rings(elem: _Element, boundary_tag: str) -> list[list[list[float]]]:
    rings: list[list[list[float]]] = []
    for boundary in child_elements(elem, boundary_tag):
        for ring in child_elements(boundary, "LinearRing"):
            coords = _coordinates_of(ring)
            if coords:
                rings.append([list(c) for c in coords])
    return rings


def _track_coords(elem: _Element) -> list[list[float]]:
    coords: list[list[float]] = []
    for coord_elem in child_elements(elem, "coord"):
        coord = parse_gx_coord_text(coord_elem.text or "")
        if coord is not None:
            coords.append(list(coord))
    return coords


def _track(elem: _Element) -> GeometryPayload | None:
    return {"type": LINE_STRING, "coordinates": _track_coords(elem)}


def _multi_track(elem: _Element) -> GeometryPayload | None:
    lines = [_track_coords(track) for track in child_elements(elem, "Track")]
    if not lines:
        return None
    return {"type": MULTI_LINE_STRING, "coordinates": lines}


_GEOMETRY_BUILDERS: dict[str, Callable[[_Element], GeometryPayload | None]] = {
    "Point": _point,
    "LineString": _line_string,
    "LinearRing": _line_string,
    "Polygon": _polygon,
    "Track": _track,
    "MultiTrack": _multi_track,
}


def _iter_positions(geometry: dict[str, Any]) -> Iterator[tuple[float, float]]:
    geom_type = geometry["type"]
    coords = geometry.get("coordinates", [])
    if geom_type == POINT:
        yield (coords[0], coords[1])
    elif geom_type == LINE_STRING:
        for lon, lat in coords:
            yield (lon, lat)
    elif geom_type in (POLYGON, MULTI_LINE_STRING):
        for part in coords:
            for lon, lat in part:
                yield (lon, lat)
    elif geom_type == GEOMETRY_COLLECTION:
        for child in geometry.get("geometries", []):
            yield from _iter_positions(child)
