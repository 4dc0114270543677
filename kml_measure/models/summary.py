"""Aggregation result: per-type counts and per-type line lengths.

``counts`` has one key per distinct top-level geometry type seen.
``lengths`` is populated only for types that carry linear geometry and
is always in kilometres.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class MeasurementSummary:
    """Per-type totals for one FeatureSet.

    Attributes:
        counts: Geometry type label → number of top-level features.
        lengths: Geometry type label → total great-circle length in km.
    """

    counts: dict[str, int] = field(default_factory=dict)
    lengths: dict[str, float] = field(default_factory=dict)

    @property
    def total_features(self) -> int:
        return sum(self.counts.values())

    @property
    def total_length_km(self) -> float:
        return sum(self.lengths.values())

    def rows(self) -> list[tuple[str, int]]:
        """``(type, count)`` rows for the summary table, in first-seen order."""
        return list(self.counts.items())

    def length_rows(self, *, ndigits: int = 2) -> list[tuple[str, float]]:
        """``(type, km)`` rows for the detailed table, rounded for display."""
        return [(label, round(km, ndigits)) for label, km in self.lengths.items()]

    def to_dict(self) -> dict[str, object]:
        """Serialise for the presentation layer."""
        return {
            "counts": dict(self.counts),
            "lengths_km": dict(self.lengths),
        }
