"""Shared constants for KML parsing."""

from __future__ import annotations

# KML 2.2 and Google extension namespaces
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"
GX_NAMESPACE = "http://www.google.com/kml/ext/2.2"

# WGS 84 coordinate bounds
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# Placemark children copied straight into feature properties
SIMPLE_PROPERTY_TAGS = ("name", "description", "address", "styleUrl", "visibility")
