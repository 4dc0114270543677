"""Coordinate and property normalization helpers for KML parsing.

Responsibilities:
- Parse KML ``<coordinates>`` text and ``<gx:coord>`` text
- Extract Placemark properties (simple fields, time primitives, ExtendedData)
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from kml_measure.activities.parse_kml._constants import SIMPLE_PROPERTY_TAGS

if TYPE_CHECKING:
    from lxml.etree import _Element

_COMMA_SPACING = re.compile(r"\s*,\s*")


def local_name(elem: _Element) -> str:
    """Return the tag name of ``elem`` without its namespace."""
    tag = elem.tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def child_elements(elem: _Element, name: str) -> list[_Element]:
    """Direct children of ``elem`` with local name ``name``, any namespace."""
    return [child for child in elem if local_name(child) == name]


def child_text(elem: _Element, name: str) -> str:
    """Stripped text of the first direct child named ``name``, or ``""``."""
    for child in child_elements(elem, name):
        return (child.text or "").strip()
    return ""


# ---------------------------------------------------------------------------
# KML coordinate text parsing
# ---------------------------------------------------------------------------


def parse_coordinates_text(text: str) -> list[tuple[float, float]]:
    """Parse KML coordinate text (``lon,lat,alt lon,lat,alt ...``) to (lon, lat) tuples.

    Whitespace around commas is tolerated.  Tokens that do not hold two
    finite numbers are dropped.
    """
    coords: list[tuple[float, float]] = []
    for token in _COMMA_SPACING.sub(",", text.strip()).split():
        parts = token.split(",")
        if len(parts) < 2:
            continue
        try:
            lon = float(parts[0])
            lat = float(parts[1])
        except ValueError:
            continue
        if math.isfinite(lon) and math.isfinite(lat):
            coords.append((lon, lat))
    return coords


def parse_gx_coord_text(text: str) -> tuple[float, float] | None:
    """Parse a ``<gx:coord>`` value (``lon lat alt``, space separated)."""
    parts = text.split()
    if len(parts) < 2:
        return None
    try:
        lon = float(parts[0])
        lat = float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None
    return (lon, lat)


# ---------------------------------------------------------------------------
# Property extraction
# ---------------------------------------------------------------------------


def extract_properties(placemark_elem: _Element) -> dict[str, str]:
    """Collect a Placemark's properties into a flat string map.

    Includes the simple fields (``name``, ``description``, ``address``,
    ``styleUrl``, ``visibility``), ``TimeStamp/when`` as ``timestamp``,
    ``TimeSpan`` ``begin``/``end``, and both ExtendedData patterns.
    Empty values are omitted.
    """
    properties: dict[str, str] = {}

    for tag in SIMPLE_PROPERTY_TAGS:
        value = child_text(placemark_elem, tag)
        if value:
            properties[tag] = value

    for stamp in child_elements(placemark_elem, "TimeStamp"):
        when = child_text(stamp, "when")
        if when:
            properties["timestamp"] = when

    for span in child_elements(placemark_elem, "TimeSpan"):
        for bound in ("begin", "end"):
            value = child_text(span, bound)
            if value:
                properties[bound] = value

    properties.update(extract_extended_data(placemark_elem))
    return properties


def extract_extended_data(placemark_elem: _Element) -> dict[str, str]:
    """Extract ExtendedData metadata from a Placemark element.

    Handles both KML metadata patterns:
    - ``ExtendedData/Data/value`` — untyped key-value pairs.
    - ``ExtendedData/SchemaData/SimpleData`` — typed fields defined by a
      ``<Schema>`` element.
    """
    metadata: dict[str, str] = {}

    for extended in child_elements(placemark_elem, "ExtendedData"):
        for data_elem in child_elements(extended, "Data"):
            key = data_elem.get("name", "")
            value = child_text(data_elem, "value")
            if key and value:
                metadata[key] = value

        for schema_data in child_elements(extended, "SchemaData"):
            for simple_data in child_elements(schema_data, "SimpleData"):
                key = simple_data.get("name", "")
                value = (simple_data.text or "").strip()
                if key and value:
                    metadata[key] = value

    return metadata
