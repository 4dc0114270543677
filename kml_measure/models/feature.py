"""Data model for parsed KML features.

A Feature is one Placemark's geometry plus its open property map
(``name``, ``description``, ExtendedData fields, ...).  A FeatureSet is
the ordered result of parsing one document.  It is owned by the caller
of that parse and never cached by the pipeline.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from kml_measure.core.exceptions import ContractError
from kml_measure.models.geometry import Geometry, geometry_from_dict


@dataclass(frozen=True, slots=True)
class Feature:
    """A single geometry extracted from a KML Placemark.

    Attributes:
        geometry: One of the supported geometry variants.
        properties: String-keyed metadata copied through from the
            translator without validation. JSON-native values (strings,
            numbers, booleans, lists, dicts) keep their type.
    """

    geometry: Geometry
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def geometry_type(self) -> str:
        """Top-level geometry label (``"Point"``, ``"LineString"``, ...)."""
        return self.geometry.type

    @property
    def name(self) -> str:
        """Placemark name, or ``""`` when the Placemark had none."""
        name = self.properties.get("name")
        return "" if name is None else str(name)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a GeoJSON Feature dict for the presentation layer."""
        return {
            "type": "Feature",
            "geometry": self.geometry.to_dict(),
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, strict: bool = True) -> Feature:
        """Deserialise from a GeoJSON Feature dict.

        ``None`` property values are dropped. JSON-native values are kept
        as they are; anything else is kept as its string form.

        Raises:
            UnsupportedGeometryError: If the geometry type is not supported.
            ContractError: If the geometry is missing or not a dict.
            TypeError: If ``properties`` is not a dict.
        """
        geometry_raw = data.get("geometry")
        if geometry_raw is None:
            msg = "Feature has no geometry"
            raise ContractError(msg, stage="parse_kml", code="GEOMETRY_CONTRACT_VIOLATION")

        properties_raw = data.get("properties") or {}
        if not isinstance(properties_raw, dict):
            msg = f"properties must be a dict, got {type(properties_raw).__name__}"
            raise TypeError(msg)

        return cls(
            geometry=geometry_from_dict(geometry_raw, strict=strict),
            properties={
                str(k): _property_value(v) for k, v in properties_raw.items() if v is not None
            },
        )


@dataclass(frozen=True, slots=True)
class FeatureSet:
    """Ordered features produced by one parse.

    Attributes:
        features: Features in document order.
        source_file: Name of the document they were parsed from.
    """

    features: tuple[Feature, ...] = ()
    source_file: str = ""

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __getitem__(self, index: int) -> Feature:
        return self.features[index]

    def to_geojson(self) -> dict[str, Any]:
        """Return the set as a GeoJSON FeatureCollection dict."""
        return {
            "type": "FeatureCollection",
            "features": [f.to_dict() for f in self.features],
        }

    def bounds(self) -> tuple[float, float, float, float] | None:
        """Bounding box of every coordinate in the set.

        Returns:
            ``(min_lon, min_lat, max_lon, max_lat)``, or ``None`` when the
            set holds no coordinates.
        """
        from shapely.geometry import MultiPoint

        points = [c for f in self.features for c in f.geometry.iter_coordinates()]
        if not points:
            return None
        return tuple(MultiPoint(points).bounds)  # type: ignore[return-value]

    def center(self) -> tuple[float, float] | None:
        """Centre of :meth:`bounds` as ``(lon, lat)`` for initial map placement."""
        bounds = self.bounds()
        if bounds is None:
            return None
        min_lon, min_lat, max_lon, max_lat = bounds
        return ((min_lon + max_lon) / 2, (min_lat + max_lat) / 2)


def _property_value(value: object) -> Any:
    """Keep JSON-native property values, stringify anything else."""
    if isinstance(value, str | bool | int | float):
        return value
    if isinstance(value, list | tuple):
        return [_property_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _property_value(v) for k, v in value.items()}
    return str(value)
