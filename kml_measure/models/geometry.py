"""Geometry variants for parsed KML features.

The five supported geometries are modelled as separate frozen
dataclasses joined by the ``Geometry`` union, so the aggregator can
``match`` over them exhaustively.  Coordinates are ``(lon, lat)`` tuples
in WGS 84; altitude is dropped on the way in.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar

from kml_measure.core.constants import (
    GEOMETRY_COLLECTION,
    LINE_STRING,
    MULTI_LINE_STRING,
    POINT,
    POLYGON,
)
from kml_measure.core.exceptions import ContractError, UnsupportedGeometryError

logger = logging.getLogger("kml_measure.models.geometry")

Coordinate = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Point:
    """A single position.

    ``coordinates`` is ``None`` when the source position was unusable;
    the point is still counted.
    """

    coordinates: Coordinate | None
    type: ClassVar[str] = POINT

    def to_dict(self) -> dict[str, Any]:
        coords = list(self.coordinates) if self.coordinates is not None else []
        return {"type": self.type, "coordinates": coords}

    def iter_coordinates(self) -> Iterator[Coordinate]:
        if self.coordinates is not None:
            yield self.coordinates


@dataclass(frozen=True, slots=True)
class LineString:
    """An ordered sequence of positions.

    Fewer than two positions is tolerated here and measures as zero.
    """

    coordinates: tuple[Coordinate, ...] = ()
    type: ClassVar[str] = LINE_STRING

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "coordinates": [list(c) for c in self.coordinates]}

    def iter_coordinates(self) -> Iterator[Coordinate]:
        yield from self.coordinates


@dataclass(frozen=True, slots=True)
class MultiLineString:
    """Several independent lines measured as one feature."""

    lines: tuple[LineString, ...] = ()
    type: ClassVar[str] = MULTI_LINE_STRING

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "coordinates": [[list(c) for c in line.coordinates] for line in self.lines],
        }

    def iter_coordinates(self) -> Iterator[Coordinate]:
        for line in self.lines:
            yield from line.coordinates


@dataclass(frozen=True, slots=True)
class Polygon:
    """Exterior ring first, then any interior rings (holes)."""

    rings: tuple[tuple[Coordinate, ...], ...] = ()
    type: ClassVar[str] = POLYGON

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "coordinates": [[list(c) for c in ring] for ring in self.rings],
        }

    def iter_coordinates(self) -> Iterator[Coordinate]:
        for ring in self.rings:
            yield from ring

    @property
    def has_holes(self) -> bool:
        return len(self.rings) > 1


@dataclass(frozen=True, slots=True)
class GeometryCollection:
    """A group of geometries attached to one Placemark (KML ``MultiGeometry``)."""

    geometries: tuple[Geometry, ...] = ()
    type: ClassVar[str] = GEOMETRY_COLLECTION

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "geometries": [g.to_dict() for g in self.geometries]}

    def iter_coordinates(self) -> Iterator[Coordinate]:
        for geometry in self.geometries:
            yield from geometry.iter_coordinates()


Geometry = Point | LineString | MultiLineString | Polygon | GeometryCollection


# ---------------------------------------------------------------------------
# GeoJSON dict → model
# ---------------------------------------------------------------------------


def geometry_from_dict(data: dict[str, Any], *, strict: bool = True) -> Geometry:
    """Build a geometry variant from a GeoJSON-shaped dict.

    Positions that cannot be read are dropped with a warning rather than
    failing the geometry, so a partly malformed feature keeps its type
    label and simply measures shorter (down to 0).

    Args:
        data: Dict with ``type`` and ``coordinates`` (or ``geometries``).
        strict: When ``False``, unsupported children of a
            GeometryCollection are dropped instead of raising.

    Raises:
        UnsupportedGeometryError: If ``type`` is not one of the five
            supported variants.
        ContractError: If ``data`` is not a dict.
    """
    if not isinstance(data, dict):
        msg = f"geometry must be a dict, got {type(data).__name__}"
        raise ContractError(msg, stage="parse_kml", code="GEOMETRY_CONTRACT_VIOLATION")

    geom_type = str(data.get("type", ""))
    coords = data.get("coordinates", [])

    if geom_type == POINT:
        return Point(coordinates=_lenient_coordinate(coords))
    if geom_type == LINE_STRING:
        return LineString(coordinates=_lenient_coordinates(coords))
    if geom_type == MULTI_LINE_STRING:
        return MultiLineString(
            lines=tuple(LineString(coordinates=_lenient_coordinates(line)) for line in _parts(coords))
        )
    if geom_type == POLYGON:
        return Polygon(rings=tuple(_lenient_coordinates(ring) for ring in _parts(coords)))
    if geom_type == GEOMETRY_COLLECTION:
        children: list[Geometry] = []
        for child in _parts(data.get("geometries", [])):
            try:
                children.append(geometry_from_dict(child, strict=strict))
            except UnsupportedGeometryError as exc:
                if strict:
                    raise
                logger.warning("Dropping unsupported collection member: %s", exc)
            except ContractError as exc:
                logger.warning("Dropping malformed collection member: %s", exc)
        return GeometryCollection(geometries=tuple(children))

    raise UnsupportedGeometryError(geom_type)


def coordinate_from_raw(raw: object, index: int) -> Coordinate:
    """Convert one ``[lon, lat, (alt)]`` array into a ``(lon, lat)`` tuple.

    Raises:
        ContractError: If the element is not a list of at least two finite numbers.
    """
    if not isinstance(raw, list | tuple):
        msg = f"Malformed coordinate at index {index}: expected list/tuple, got {type(raw).__name__}"
        raise ContractError(msg, stage="parse_kml", code="GEOMETRY_CONTRACT_VIOLATION")
    if len(raw) < 2:
        msg = f"Malformed coordinate at index {index}: expected at least 2 elements, got {len(raw)}"
        raise ContractError(msg, stage="parse_kml", code="GEOMETRY_CONTRACT_VIOLATION")
    try:
        lon = float(raw[0])
        lat = float(raw[1])
    except (TypeError, ValueError) as exc:
        msg = (
            f"Malformed coordinate at index {index}: cannot convert to float "
            f"(lon={raw[0]!r}, lat={raw[1]!r})"
        )
        raise ContractError(msg, stage="parse_kml", code="GEOMETRY_CONTRACT_VIOLATION") from exc
    if not (math.isfinite(lon) and math.isfinite(lat)):
        msg = f"Non-finite coordinate at index {index}: ({lon}, {lat})"
        raise ContractError(msg, stage="parse_kml", code="GEOMETRY_CONTRACT_VIOLATION")
    return (lon, lat)


def coordinates_from_raw(raw: object) -> tuple[Coordinate, ...]:
    """Convert a GeoJSON position array into a tuple of ``(lon, lat)`` tuples.

    Raises:
        ContractError: If the array or any position in it is malformed.
    """
    if not isinstance(raw, list | tuple):
        msg = f"Expected a coordinate array, got {type(raw).__name__}"
        raise ContractError(msg, stage="parse_kml", code="GEOMETRY_CONTRACT_VIOLATION")
    return tuple(coordinate_from_raw(c, idx) for idx, c in enumerate(raw))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _lenient_coordinate(raw: object) -> Coordinate | None:
    try:
        return coordinate_from_raw(raw, 0)
    except ContractError as exc:
        logger.warning("Unusable Point position: %s", exc)
        return None


def _lenient_coordinates(raw: object) -> tuple[Coordinate, ...]:
    """Like :func:`coordinates_from_raw` but drops unusable positions."""
    coords: list[Coordinate] = []
    for idx, position in enumerate(_parts(raw)):
        try:
            coords.append(coordinate_from_raw(position, idx))
        except ContractError as exc:
            logger.warning("Dropping position: %s", exc)
    return tuple(coords)


def _parts(raw: object) -> list[Any] | tuple[Any, ...]:
    if isinstance(raw, list | tuple):
        return raw
    if raw is not None:
        logger.warning("Expected a coordinate array, got %s", type(raw).__name__)
    return []
