"""Data models and schemas.

Defines the data structures used throughout the pipeline:
- Geometry variants: Point, LineString, MultiLineString, Polygon, GeometryCollection
- Feature / FeatureSet: parsed Placemarks with their properties
- MeasurementSummary: per-type counts and lengths
"""

from kml_measure.models.feature import Feature, FeatureSet
from kml_measure.models.geometry import (
    Coordinate,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    Point,
    Polygon,
    geometry_from_dict,
)
from kml_measure.models.summary import MeasurementSummary

__all__ = [
    "Coordinate",
    "Feature",
    "FeatureSet",
    "Geometry",
    "GeometryCollection",
    "LineString",
    "MeasurementSummary",
    "MultiLineString",
    "Point",
    "Polygon",
    "geometry_from_dict",
]
