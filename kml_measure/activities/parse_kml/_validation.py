"""Validation helpers for KML parsing.

Responsibilities:
- Document size and emptiness checks
- XML well-formedness and KML root element check
- Coordinate bounds checking (WGS 84)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_measure.activities.parse_kml._constants import (
    KML_NAMESPACE,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from kml_measure.core.exceptions import PermanentError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lxml.etree import _Element

logger = logging.getLogger("kml_measure.activities.parse_kml")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class ParseError(PermanentError):
    """Raised when a document cannot be turned into a FeatureSet.

    The underlying cause (XML syntax error, translator failure, I/O
    error) is chained as ``__cause__`` and included in the message.
    """

    default_stage = "parse_kml"
    default_code = "KML_PARSE_FAILED"


class InvalidCoordinateError(ValidationError):
    """Raised when a Placemark has coordinates outside WGS 84 bounds."""

    default_stage = "parse_kml"
    default_code = "KML_COORDINATE_INVALID"


# ---------------------------------------------------------------------------
# Document checks
# ---------------------------------------------------------------------------


def validate_document_size(content: bytes, max_bytes: int) -> None:
    """Reject empty documents and documents larger than ``max_bytes``.

    Raises:
        ParseError: If the document is empty or too large.
    """
    if not content.strip():
        msg = "KML document is empty"
        raise ParseError(msg)
    if len(content) > max_bytes:
        msg = f"KML document is {len(content)} bytes, limit is {max_bytes}"
        raise ParseError(msg)


def validate_xml(content: bytes, *, encoding: str | None = None) -> _Element:
    """Parse ``content`` as XML and check that the root is a KML element.

    Args:
        content: Raw document bytes.
        encoding: Overrides the encoding declared in the document. Used
            when the caller supplied text that has been re-encoded.

    Returns:
        The root element.

    Raises:
        ParseError: If the content is not well-formed XML or not KML.
    """
    from lxml import etree  # type: ignore[attr-defined]

    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
        remove_comments=True,
        encoding=encoding,
    )
    try:
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML: {exc}"
        raise ParseError(msg) from exc

    tag = root.tag
    if not isinstance(tag, str) or (
        f"{{{KML_NAMESPACE}}}" not in tag and "kml" not in tag.lower()
    ):
        msg = f"Not a KML file: root element is <{tag}>"
        raise ParseError(msg)

    return root


# ---------------------------------------------------------------------------
# Coordinate validation
# ---------------------------------------------------------------------------


def validate_coordinates(coords: Iterable[tuple[float, float]], placemark_name: str) -> None:
    """Validate that all coordinates are within WGS 84 bounds.

    Raises:
        InvalidCoordinateError: If any coordinate is out of bounds.
    """
    for lon, lat in coords:
        if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
            msg = (
                f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}] "
                f"in Placemark '{placemark_name}'"
            )
            raise InvalidCoordinateError(msg)
        if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
            msg = (
                f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}] "
                f"in Placemark '{placemark_name}'"
            )
            raise InvalidCoordinateError(msg)
