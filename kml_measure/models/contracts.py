"""Typed contracts for the translator output and pipeline payloads.

The KML translator returns plain GeoJSON-shaped dicts; these
``TypedDict`` definitions document that shape without adding a
conversion step.  ``geometry_from_dict`` and ``Feature.from_dict`` turn
them into the typed models.
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict


class GeometryPayload(TypedDict):
    """A GeoJSON geometry object.

    ``coordinates`` is present for every type except
    ``GeometryCollection``, which carries ``geometries`` instead.
    """

    type: str
    coordinates: NotRequired[Any]
    geometries: NotRequired[list[GeometryPayload]]


class FeaturePayload(TypedDict):
    """A GeoJSON Feature: one geometry plus an open property map."""

    type: str
    geometry: GeometryPayload | None
    properties: dict[str, Any]


class FeatureCollectionPayload(TypedDict):
    """Translator result: ``{"type": "FeatureCollection", "features": [...]}``."""

    type: str
    features: list[FeaturePayload]


class SummaryPayload(TypedDict):
    """Aggregation result handed to the presentation layer."""

    counts: dict[str, int]
    lengths_km: dict[str, float]


class PipelineResultPayload(TypedDict):
    """Full pipeline output: feature collection for the map plus the summary."""

    source_file: str
    feature_collection: FeatureCollectionPayload
    summary: SummaryPayload
    bounds: list[float] | None
